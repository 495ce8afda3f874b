import math
import re
from datetime import datetime, timezone

_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")
_SALES = re.compile(r"(\d+(?:\.\d*)?|\.\d+)\s*([kwm])?")

# Magnitude suffixes seen in sales text: thousand / ten-thousand (wan) / million
SALES_MULTIPLIERS = {"k": 1_000, "w": 10_000, "m": 1_000_000}


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def parse_price(text) -> float:
    """Parse free-form price text into a number.

    Everything except digits and dots is stripped, then the leading number
    is read. Returns 0.0 when nothing parses.

    Example: "$15.99" -> 15.99, "US $3.50" -> 3.5, "面议" -> 0.0
    """
    if not isinstance(text, str):
        return 0.0
    stripped = re.sub(r"[^0-9.]", "", text)
    match = _NUMBER.match(stripped)
    if not match:
        return 0.0
    return _finite(float(match.group(0)))


def parse_sales(text) -> float | None:
    """Parse free-form sales text, applying a k/w/m magnitude suffix.

    Commas are ignored and the suffix is case-insensitive. Returns None when
    the text is missing or has no number in it. The suffix only counts when
    it directly follows the first number, so a stray letter elsewhere
    ("5000+ items") does not scale the value.

    Example: "10.2k" -> 10200.0, "1.5W" -> 15000.0, "已售 5000+" -> 5000.0
    """
    if not isinstance(text, str):
        return None
    match = _SALES.search(text.lower().replace(",", ""))
    if not match:
        return None
    value = float(match.group(1))
    suffix = match.group(2)
    if suffix:
        value *= SALES_MULTIPLIERS[suffix]
    return _finite(value)


def estimate_revenue(price, sales_volume) -> float:
    """Heuristic revenue: numeric price times numeric sales (sales defaults to 1)."""
    sales = parse_sales(sales_volume)
    if sales is None:
        sales = 1.0
    revenue = parse_price(price) * sales
    if not math.isfinite(revenue) or revenue < 0:
        return 0.0
    return revenue


def export_timestamp(now: datetime | None = None) -> str:
    """Return the filename-safe UTC timestamp used for export files.

    Example: 2026-10-19T08:30:00.123+00:00 -> "2026-10-19T08-30-00"
    """
    now = now or datetime.now(timezone.utc)
    return re.sub(r"[:.]", "-", now.astimezone(timezone.utc).isoformat())[:19]
