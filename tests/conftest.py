"""
Pytest configuration and fixtures for the crawler test suite.
"""

import json
import uuid
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from tiktok_crawler.clients.gemini import GeminiClient
from tiktok_crawler.models import ProductRecord
from tiktok_crawler.utils import estimate_revenue

FIXED_TIME = datetime(2026, 10, 19, 8, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_record():
    """Factory for canonical records with sensible defaults."""
    def _make(**overrides) -> ProductRecord:
        fields = {
            "id": str(uuid.uuid4()),
            "product_name": "碎花连衣裙",
            "price": "$15.99",
            "sales_volume": "10.2k",
            "shop_name": "FashionNova",
            "raw_content": "文本导入",
            "timestamp": FIXED_TIME,
            "product_link": None,
            "shop_link": None,
            "category": None,
        }
        fields.update(overrides)
        fields.setdefault("revenue", estimate_revenue(fields["price"], fields["sales_volume"]))
        return ProductRecord(**fields)
    return _make


@pytest.fixture
def gemini():
    """GeminiClient stand-in; set gemini.generate_json.return_value per test."""
    client = MagicMock(spec=GeminiClient)
    client.generate_json.return_value = "[]"
    return client


@pytest.fixture
def gemini_returning(gemini):
    """Configure the fake client to return the given raw records as JSON."""
    def _returning(raw_records):
        gemini.generate_json.return_value = json.dumps(raw_records, ensure_ascii=False)
        return gemini
    return _returning


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME
