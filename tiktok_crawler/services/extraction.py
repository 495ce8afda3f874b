"""Extraction service - builds the structured-generation request and parses the reply."""

import json
import logging
from enum import Enum
from pathlib import Path

from google.genai import types

from ..clients.gemini import GeminiClient
from ..config import (
    TEXT_MODE_TEMPERATURE,
    TEXT_PROVENANCE,
    URL_MODE_TEMPERATURE,
    URL_PROVENANCE_PREFIX,
)
from ..models.filters import FilterConfig
from ..models.product import ProductRecord, RawProductRecord
from .normalizer import RecordNormalizer

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"

DEFAULT_CONTEXT_HINT = "通用电商"


class ExtractionMode(Enum):
    TEXT = "text"
    URL = "url"


# User-facing failure message per mode
ERROR_MESSAGES = {
    ExtractionMode.TEXT: "AI 数据采集服务连接失败，请检查网络或 API Key。",
    ExtractionMode.URL: "云端爬虫节点响应超时，请重试。",
}

PROMPT_FILES = {
    ExtractionMode.TEXT: "text_extraction.txt",
    ExtractionMode.URL: "url_simulation.txt",
}

TEMPERATURES = {
    ExtractionMode.TEXT: TEXT_MODE_TEMPERATURE,
    ExtractionMode.URL: URL_MODE_TEMPERATURE,
}


class EmptyInputError(Exception):
    """Blank source submitted; rejected before any request."""
    pass


class ExtractionServiceError(Exception):
    """Service call failed or returned something other than a JSON array."""
    def __init__(self, message: str, mode: ExtractionMode):
        self.mode = mode
        super().__init__(message)


def _string_field(description: str) -> types.Schema:
    return types.Schema(type=types.Type.STRING, description=description)


PRODUCT_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "productName": _string_field("商品名称/标题"),
            "price": _string_field("商品价格 (保留货币符号, 如 $15.99, ¥29.9)"),
            "salesVolume": _string_field("销量数据 (如 10k+, 500)"),
            "productLink": _string_field("商品详情页链接 URL"),
            "shopName": _string_field("店铺/商家名称"),
            "shopLink": _string_field("店铺主页链接 URL"),
            "rawContent": _string_field("原始文本片段或来源标记"),
            "category": _string_field("推断的商品类目"),
        },
        required=["productName", "price", "shopName", "rawContent"],
    ),
)


class ExtractionService:
    """Extract (text mode) or fabricate (URL mode) product records via Gemini."""

    def __init__(self, gemini: GeminiClient, normalizer: RecordNormalizer | None = None):
        self.gemini = gemini
        self.normalizer = normalizer or RecordNormalizer()

    def extract_from_text(
        self,
        text: str,
        category_context: str = "",
        filters: FilterConfig | None = None,
    ) -> list[ProductRecord]:
        """
        Extract products from pasted text. The text is treated as ground truth.

        Raises:
            EmptyInputError: text is blank (no request is made)
            ExtractionServiceError: service failure or non-JSON reply
        """
        raw = self.request_raw(ExtractionMode.TEXT, text, category_context, filters)
        return self.normalizer.normalize(raw, TEXT_PROVENANCE)

    def simulate_url_extraction(
        self,
        url: str,
        filters: FilterConfig | None = None,
        context_hint: str = "",
    ) -> list[ProductRecord]:
        """
        Simulate crawling a URL: the model invents 3-6 plausible products.

        Raises:
            EmptyInputError: url is blank (no request is made)
            ExtractionServiceError: service failure or non-JSON reply
        """
        if not context_hint and filters:
            context_hint = filters.category_constraint or ""
        raw = self.request_raw(ExtractionMode.URL, url, context_hint, filters)
        return self.normalizer.normalize(raw, f"{URL_PROVENANCE_PREFIX}{url.strip()}")

    def request_raw(
        self,
        mode: ExtractionMode,
        source: str,
        context_hint: str = "",
        filters: FilterConfig | None = None,
    ) -> list[RawProductRecord]:
        """Issue exactly one structured-generation call and return the parsed array."""
        if not source or not source.strip():
            raise EmptyInputError("Source text or URL is empty")

        prompt = self.build_prompt(mode, source, context_hint, filters)

        try:
            response = self.gemini.generate_json(prompt, PRODUCT_SCHEMA, TEMPERATURES[mode])
        except Exception as e:
            logger.error(f"Gemini {mode.value} extraction failed: {e}")
            raise ExtractionServiceError(ERROR_MESSAGES[mode], mode) from e

        return self._parse_response(response, mode)

    def build_prompt(
        self,
        mode: ExtractionMode,
        source: str,
        context_hint: str = "",
        filters: FilterConfig | None = None,
    ) -> str:
        """Compose the instruction: task, verbatim source, optional hard constraints."""
        template = self._load_prompt(PROMPT_FILES[mode])
        return template.format(
            source=source.strip() if mode == ExtractionMode.URL else source,
            context_hint=context_hint.strip() or DEFAULT_CONTEXT_HINT,
            filter_instruction=self._build_filter_instruction(filters),
        )

    def _build_filter_instruction(self, filters: FilterConfig | None) -> str:
        if not filters:
            return ""
        clauses = filters.constraint_clauses()
        if not clauses:
            return ""
        lines = ["", "用户设置了严格的筛选条件，请只输出符合以下条件的数据:"]
        lines.extend(clauses)
        lines.append("")
        return "\n".join(lines)

    def _load_prompt(self, filename: str) -> str:
        """Load a prompt template."""
        path = PROMPTS_DIR / filename
        if not path.exists():
            raise FileNotFoundError(f"Prompt file not found: {path}")
        return path.read_text(encoding="utf-8").strip()

    def _parse_response(self, response: str, mode: ExtractionMode) -> list[RawProductRecord]:
        """Parse JSON reply; anything other than an array is a service error."""
        try:
            data = json.loads(response or "[]")
        except json.JSONDecodeError as e:
            logger.error(f"Gemini {mode.value} reply is not JSON: {e}")
            raise ExtractionServiceError(ERROR_MESSAGES[mode], mode) from e

        if not isinstance(data, list):
            logger.error(f"Gemini {mode.value} reply is {type(data).__name__}, expected array")
            raise ExtractionServiceError(ERROR_MESSAGES[mode], mode)

        logger.info(f"Gemini {mode.value} extraction returned {len(data)} raw records")
        return data
