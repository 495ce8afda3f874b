"""
Tests for RecordNormalizer.
"""

import pytest

from tiktok_crawler.services.normalizer import RecordNormalizer

FULL_RAW = {
    "productName": "夏季爆款连衣裙",
    "price": "$15.99",
    "salesVolume": "10.2k",
    "productLink": "https://tiktok.com/product/12345",
    "shopName": "FashionNova",
    "shopLink": "https://tiktok.com/@fashionnova",
    "rawContent": "夏季爆款连衣裙 $15.99 销量10.2k 店铺: FashionNova",
    "category": "女装服饰",
}


@pytest.fixture
def normalizer(fixed_clock):
    return RecordNormalizer(clock=fixed_clock)


class TestRecordNormalizer:
    """Tests for RecordNormalizer.normalize."""

    def test_maps_all_fields(self, normalizer, fixed_clock):
        """Should map camelCase raw fields onto the record."""
        [record] = normalizer.normalize([FULL_RAW], "文本导入")

        assert record.product_name == "夏季爆款连衣裙"
        assert record.price == "$15.99"
        assert record.sales_volume == "10.2k"
        assert record.product_link == "https://tiktok.com/product/12345"
        assert record.shop_name == "FashionNova"
        assert record.shop_link == "https://tiktok.com/@fashionnova"
        assert record.category == "女装服饰"
        assert record.raw_content == FULL_RAW["rawContent"]
        assert record.timestamp == fixed_clock()

    def test_revenue_from_price_and_suffixed_sales(self, normalizer):
        """$15.99 x 10.2k ~= 163098."""
        [record] = normalizer.normalize([FULL_RAW], "文本导入")
        assert record.revenue == pytest.approx(15.99 * 10_200)

    def test_revenue_without_sales_is_price(self, normalizer):
        raw = {"productName": "抹布", "price": "$3.50", "shopName": "家居好物", "rawContent": "x"}
        [record] = normalizer.normalize([raw], "文本导入")
        assert record.revenue == pytest.approx(3.5)
        assert record.sales_volume == ""

    def test_ten_k_at_two_dollars(self, normalizer):
        raw = {"productName": "A", "price": "$2", "salesVolume": "10k", "shopName": "S", "rawContent": "r"}
        [record] = normalizer.normalize([raw], "文本导入")
        assert record.revenue == 20_000

    def test_blank_raw_content_uses_provenance(self, normalizer):
        """Should fall back to the provenance label."""
        raw = {"productName": "A", "price": "$1", "shopName": "S", "rawContent": "  "}
        [record] = normalizer.normalize([raw], "爬取自: https://tiktok.com/@shop")
        assert record.raw_content == "爬取自: https://tiktok.com/@shop"

    def test_missing_fields_default(self, normalizer):
        """Missing text becomes empty; links and category become None."""
        [record] = normalizer.normalize([{}], "文本导入")

        assert record.product_name == ""
        assert record.price == ""
        assert record.shop_name == ""
        assert record.product_link is None
        assert record.shop_link is None
        assert record.category is None
        assert record.revenue == 0

    def test_blank_category_is_uncategorized(self, normalizer):
        [record] = normalizer.normalize([{"category": ""}], "文本导入")
        assert record.category is None

    def test_wrong_types_are_coerced(self, normalizer):
        """Numbers are kept as text rather than rejected."""
        raw = {"productName": 123, "price": 9.5, "salesVolume": 200, "shopName": None}
        [record] = normalizer.normalize([raw], "文本导入")

        assert record.product_name == "123"
        assert record.price == "9.5"
        assert record.sales_volume == "200"
        assert record.shop_name == ""
        assert record.revenue == pytest.approx(1900)

    def test_never_drops_elements(self, normalizer):
        """Output length equals input length, even for junk elements."""
        raw_records = [FULL_RAW, {}, None, "not an object", 42, [1, 2]]
        records = normalizer.normalize(raw_records, "文本导入")
        assert len(records) == len(raw_records)

    def test_preserves_order(self, normalizer):
        raw_records = [{"productName": name} for name in ("a", "b", "c")]
        records = normalizer.normalize(raw_records, "文本导入")
        assert [r.product_name for r in records] == ["a", "b", "c"]

    def test_duplicate_inputs_get_distinct_ids(self, normalizer):
        records = normalizer.normalize([FULL_RAW] * 5, "文本导入")
        assert len({r.id for r in records}) == 5

    def test_empty_batch(self, normalizer):
        assert normalizer.normalize([], "文本导入") == []

    def test_default_clock_is_utc(self):
        [record] = RecordNormalizer().normalize([FULL_RAW], "文本导入")
        assert record.timestamp.tzinfo is not None
        assert record.timestamp.utcoffset().total_seconds() == 0
