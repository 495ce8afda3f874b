"""Filter configuration shared by the extraction prompt and the catalog view."""

from dataclasses import dataclass
from typing import Any

from ..config import CATEGORY_ALL
from ..utils import parse_sales


def _to_number(value: str) -> float | None:
    """Parse a filter bound; blank or garbage means no constraint."""
    try:
        return float(value.strip()) if value and value.strip() else None
    except ValueError:
        return None


@dataclass(frozen=True)
class FilterConfig:
    """Four independent constraints. Blank string = no constraint."""

    category: str = CATEGORY_ALL
    min_price: str = ""
    max_price: str = ""
    min_sales: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "FilterConfig":
        """Build from camelCase (minPrice) or snake_case (min_price) keys."""
        data = data or {}

        def pick(camel: str, snake: str) -> str:
            value = data.get(camel, data.get(snake))
            return "" if value is None else str(value)

        return cls(
            category=pick("category", "category") or CATEGORY_ALL,
            min_price=pick("minPrice", "min_price"),
            max_price=pick("maxPrice", "max_price"),
            min_sales=pick("minSales", "min_sales"),
        )

    @property
    def category_constraint(self) -> str | None:
        category = self.category.strip()
        if not category or category == CATEGORY_ALL:
            return None
        return category

    @property
    def min_price_value(self) -> float | None:
        return _to_number(self.min_price)

    @property
    def max_price_value(self) -> float | None:
        return _to_number(self.max_price)

    @property
    def min_sales_value(self) -> float | None:
        # sales bounds accept the same k/w/m suffixes as sales text
        return parse_sales(self.min_sales) if self.min_sales.strip() else None

    def is_blank(self) -> bool:
        """True when no field constrains anything."""
        return not self.constraint_clauses()

    def constraint_clauses(self) -> list[str]:
        """Constraint lines for the extraction prompt, in fixed order."""
        clauses = []
        if self.category_constraint:
            clauses.append(f"商品类目必须属于: {self.category_constraint}")
        if self.min_price.strip():
            clauses.append(f"价格最低: ${self.min_price.strip()}")
        if self.max_price.strip():
            clauses.append(f"价格最高: ${self.max_price.strip()}")
        if self.min_sales.strip():
            clauses.append(f"销量至少: {self.min_sales.strip()}")
        return clauses

    def to_dict(self) -> dict[str, str]:
        return {
            "category": self.category,
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
            "minSales": self.min_sales,
        }
