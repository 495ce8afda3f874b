"""
Tests for the catalog store and filter.
"""

import threading

import pytest

from tiktok_crawler.models import FilterConfig
from tiktok_crawler.services.catalog import Catalog, filter_records


@pytest.fixture
def records(make_record):
    return [
        make_record(product_name="碎花连衣裙", price="$15", sales_volume="10.2k",
                    shop_name="FashionNova", category="女装服饰"),
        make_record(product_name="Nice, Dress", price="$25", sales_volume="500",
                    shop_name="Dress Hub", category="女装服饰"),
        make_record(product_name="懒人抹布", price="US $3.50", sales_volume="5000+",
                    shop_name="家居好物严选", category="家居百货"),
        make_record(product_name="Mystery Box", price="¥120", sales_volume="",
                    shop_name="Random Shop", category=None),
    ]


class TestFilterRecords:
    """Tests for filter_records."""

    def test_no_filters_returns_everything(self, records):
        assert filter_records(records) == records

    def test_search_matches_product_name_case_insensitive(self, records):
        result = filter_records(records, search="DRESS")
        assert [r.product_name for r in result] == ["Nice, Dress"]

    def test_search_matches_shop_name(self, records):
        result = filter_records(records, search="fashionnova")
        assert [r.shop_name for r in result] == ["FashionNova"]

    def test_blank_search_matches_all(self, records):
        assert len(filter_records(records, search="   ")) == len(records)

    def test_category_exact_match(self, records):
        result = filter_records(records, FilterConfig(category="家居百货"))
        assert [r.product_name for r in result] == ["懒人抹布"]

    def test_uncategorized_excluded_by_specific_category(self, make_record):
        record = make_record(category=None)
        assert filter_records([record], FilterConfig(category="女装服饰")) == []

    def test_uncategorized_included_by_all_sentinel(self, make_record):
        record = make_record(category=None)
        assert filter_records([record], FilterConfig(category="所有类目")) == [record]

    def test_min_price(self, make_record):
        cheap = make_record(price="$15")
        pricey = make_record(price="$25")
        assert filter_records([cheap, pricey], FilterConfig(min_price="20")) == [pricey]

    def test_max_price_inclusive(self, records):
        result = filter_records(records, FilterConfig(max_price="25"))
        assert [r.price for r in result] == ["$15", "$25", "US $3.50"]

    def test_price_range(self, records):
        result = filter_records(records, FilterConfig(min_price="10", max_price="100"))
        assert [r.price for r in result] == ["$15", "$25"]

    def test_min_sales_applies_suffix(self, records):
        result = filter_records(records, FilterConfig(min_sales="5000"))
        assert [r.product_name for r in result] == ["碎花连衣裙", "懒人抹布"]

    def test_missing_sales_fails_min_sales(self, records):
        result = filter_records(records, FilterConfig(min_sales="1"))
        assert "Mystery Box" not in [r.product_name for r in result]

    def test_garbage_bound_is_ignored(self, records):
        assert len(filter_records(records, FilterConfig(min_price="abc"))) == len(records)

    def test_all_constraints_combined(self, records):
        filters = FilterConfig(category="女装服饰", min_price="10", max_price="30", min_sales="1000")
        result = filter_records(records, filters, search="裙")
        assert [r.product_name for r in result] == ["碎花连衣裙"]

    def test_idempotent(self, records):
        filters = FilterConfig(category="女装服饰", min_price="10")
        once = filter_records(records, filters, "dress")
        twice = filter_records(once, filters, "dress")
        assert once == twice == filter_records(records, filters, "dress")

    def test_does_not_mutate_input(self, records):
        snapshot = list(records)
        filter_records(records, FilterConfig(min_price="20"))
        assert records == snapshot


class TestCatalog:
    """Tests for the Catalog store."""

    def test_starts_empty(self):
        catalog = Catalog()
        assert len(catalog) == 0
        assert catalog.records == ()

    def test_append_batch_prepends_newest_first(self, make_record):
        catalog = Catalog()
        first = [make_record(product_name="a1"), make_record(product_name="a2")]
        second = [make_record(product_name="b1")]

        catalog.append_batch(first)
        size = catalog.append_batch(second)

        assert size == 3
        assert [r.product_name for r in catalog.records] == ["b1", "a1", "a2"]

    def test_empty_batch_is_valid(self, make_record):
        catalog = Catalog()
        catalog.append_batch([make_record()])
        assert catalog.append_batch([]) == 1

    def test_clear_removes_everything(self, make_record):
        catalog = Catalog()
        catalog.append_batch([make_record(), make_record()])

        assert catalog.clear() == 2
        assert len(catalog) == 0

    def test_records_is_a_snapshot(self, make_record):
        catalog = Catalog()
        catalog.append_batch([make_record()])
        snapshot = catalog.records

        catalog.clear()

        assert len(snapshot) == 1

    def test_filter_delegates(self, records):
        catalog = Catalog()
        catalog.append_batch(records)
        assert [r.price for r in catalog.filter(FilterConfig(min_price="20"))] == ["$25", "¥120"]

    def test_concurrent_appends_are_not_lost(self, make_record):
        catalog = Catalog()
        batch = [make_record() for _ in range(10)]

        threads = [threading.Thread(target=catalog.append_batch, args=(batch,)) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(catalog) == 200
