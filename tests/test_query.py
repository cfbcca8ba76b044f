"""Tests for parts_api/data/query.py — filter, sort, paginate."""
from __future__ import annotations

import math

import pytest

from parts_api.data import query
from parts_api.data.normalize import normalize_row
from parts_api.data.query import (
    compare_values, filter_records, lookup_serial, paginate, parse_int_param,
    resolve_sort, run_query, sort_records,
)
from parts_api.data.schemas import PartsFilter
from parts_api.data.store import build_snapshot
from parts_api.errors import QueryError


def _names(records):
    return [r.fields["name"] for r in records]


class TestParseIntParam:
    @pytest.mark.parametrize("value, expected", [
        (None, 30),
        ("", 30),
        ("abc", 30),
        ("0", 30),
        ("5", 5),
        ("2abc", 2),
        (" 7", 7),
        ("-3", -3),
        (12, 12),
    ])
    def test_lenient_parsing(self, value, expected):
        assert parse_int_param(value, 30) == expected


class TestFilterRecords:
    def test_no_filter_returns_everything_in_order(self, catalog_snapshot):
        assert _names(filter_records(catalog_snapshot, PartsFilter())) == [
            "Piston A", "Piston B", "Oil Filter", "Gasket", "Piston Ring", "Spark Plug",
        ]

    def test_name_is_case_insensitive_substring(self, catalog_snapshot):
        assert _names(filter_records(catalog_snapshot, PartsFilter(name="PISTON"))) == [
            "Piston A", "Piston B", "Piston Ring",
        ]

    def test_search_matches_name_or_serial(self, catalog_snapshot):
        got = _names(filter_records(catalog_snapshot, PartsFilter(search="xyz")))
        assert got == ["Gasket"]
        got = _names(filter_records(catalog_snapshot, PartsFilter(search="filter")))
        assert got == ["Oil Filter"]

    def test_criteria_are_anded(self, catalog_snapshot):
        got = filter_records(catalog_snapshot, PartsFilter(name="piston", sn="abc-1"))
        assert _names(got) == ["Piston A", "Piston Ring"]

    def test_empty_strings_are_ignored(self, catalog_snapshot):
        got = filter_records(catalog_snapshot, PartsFilter(name="", sn="", search=""))
        assert len(got) == 6

    def test_filter_is_idempotent(self, catalog_snapshot):
        f = PartsFilter(search="piston")
        once = filter_records(catalog_snapshot, f)
        twice = filter_records(build_snapshot(once), f)
        assert once == twice


class TestSerialFastPath:
    """Exact index hit is case-sensitive; the scan filter is case-insensitive substring."""

    def test_exact_key_returns_only_indexed_records(self, catalog_snapshot):
        got = filter_records(catalog_snapshot, PartsFilter(sn="ABC-1"))
        # ABC-10 and abc-1 would match the substring scan but not the index
        assert _names(got) == ["Piston A", "Spark Plug"]

    def test_other_case_falls_back_to_substring_scan(self, catalog_snapshot):
        got = filter_records(catalog_snapshot, PartsFilter(sn="Abc-1"))
        assert _names(got) == ["Piston A", "Oil Filter", "Piston Ring", "Spark Plug"]

    def test_fast_path_is_subset_of_scan(self, catalog_snapshot):
        fast = filter_records(catalog_snapshot, PartsFilter(sn="ABC-1"))
        scan = [r for r in catalog_snapshot.records if "abc-1" in r.serial.lower()]
        assert set(map(id, fast)) < set(map(id, scan))

    def test_fast_path_skipped_when_other_criteria_present(self, catalog_snapshot):
        got = filter_records(catalog_snapshot, PartsFilter(sn="ABC-1", search="a"))
        assert _names(got) == ["Piston A", "Oil Filter", "Piston Ring", "Spark Plug"]

    def test_fast_path_does_not_scan(self, catalog_snapshot, monkeypatch):
        monkeypatch.setattr(query, "_matches", lambda *a: pytest.fail("scanned"))
        assert len(filter_records(catalog_snapshot, PartsFilter(sn="XYZ-7"))) == 1

    def test_unknown_serial_scans(self, catalog_snapshot):
        assert filter_records(catalog_snapshot, PartsFilter(sn="nope")) == []


class TestLookupSerial:
    def test_exact_hit(self, catalog_snapshot):
        assert _names(lookup_serial(catalog_snapshot, "ABC-1")) == ["Piston A", "Spark Plug"]

    def test_falls_back_to_contains(self, catalog_snapshot):
        assert _names(lookup_serial(catalog_snapshot, "xyz")) == ["Gasket"]

    def test_no_match(self, catalog_snapshot):
        assert lookup_serial(catalog_snapshot, "QQQ") == []


class TestSorting:
    def test_resolve_sort_keys(self):
        assert resolve_sort("price") == ("_price", False)
        assert resolve_sort("-sn") == ("_sn", True)
        assert resolve_sort("serial") == ("_sn", False)
        assert resolve_sort("name") == ("name", False)
        assert resolve_sort("brand") == ("brand", False)

    def test_compare_values(self):
        assert compare_values(9.0, 12.5) < 0
        assert compare_values("b", "A") > 0
        assert compare_values(None, "a") < 0
        assert compare_values(None, 9.0) < 0
        assert compare_values("x", "X") == 0

    def test_price_numeric_not_lexicographic(self, catalog_snapshot):
        got = sort_records(catalog_snapshot.records, "price")
        assert _names(got) == ["Gasket", "Spark Plug", "Piston Ring", "Piston B", "Piston A", "Oil Filter"]

    def test_price_desc_reverses_distinct_prices(self, catalog_snapshot):
        priced = [r for r in catalog_snapshot.records if r.price is not None]
        asc = sort_records(priced, "price")
        desc = sort_records(priced, "-price")
        assert desc == list(reversed(asc))

    def test_null_price_sorts_as_empty_string(self, catalog_snapshot):
        asc = sort_records(catalog_snapshot.records, "price")
        desc = sort_records(catalog_snapshot.records, "-price")
        assert asc[0].price is None
        assert desc[-1].price is None

    def test_name_sort_ignores_case(self):
        snap = build_snapshot([normalize_row({"name": n}) for n in ["beta", "Alpha", "gamma"]])
        assert _names(sort_records(snap.records, "name")) == ["Alpha", "beta", "gamma"]

    def test_unknown_key_used_verbatim(self, catalog_snapshot):
        got = sort_records(catalog_snapshot.records, "brand")
        assert [r.fields["brand"] for r in got] == ["Acme", "Acme", "acme", "bosch", "Champion", "Delta"]

    def test_missing_field_sorts_first(self, catalog_snapshot):
        got = sort_records(catalog_snapshot.records, "colour")
        assert got == list(catalog_snapshot.records)

    def test_equal_keys_keep_order_both_directions(self, catalog_snapshot):
        asc = sort_records(catalog_snapshot.records, "sn")
        desc = sort_records(catalog_snapshot.records, "-sn")
        assert _names(asc)[:3] == ["Piston A", "Piston Ring", "Spark Plug"]
        assert _names(desc)[-3:] == ["Piston A", "Piston Ring", "Spark Plug"]

    def test_no_sort_keeps_order(self, catalog_snapshot):
        assert sort_records(catalog_snapshot.records, None) == list(catalog_snapshot.records)


class TestPaginate:
    @pytest.mark.parametrize("total, size", [(0, 1), (0, 30), (1, 1), (5, 2), (6, 3), (7, 30), (31, 30)])
    def test_total_pages(self, total, size):
        rows = [normalize_row({"sn": str(i)}) for i in range(total)]
        assert paginate(rows, 1, size).total_pages == max(1, math.ceil(total / size))

    def test_pages_cover_every_record_once(self, catalog_snapshot):
        ordered = sort_records(catalog_snapshot.records, "-price")
        first = paginate(ordered, 1, 4)
        pages = [paginate(ordered, p, 4) for p in range(1, first.total_pages + 1)]
        assert all(len(p.data) <= 4 for p in pages)
        assert [r for p in pages for r in p.data] == ordered

    def test_page_clamped_high_and_low(self, catalog_snapshot):
        rows = list(catalog_snapshot.records)
        high = paginate(rows, 99, 4)
        assert high.page == 2
        assert _names(high.data) == ["Piston Ring", "Spark Plug"]
        assert paginate(rows, -2, 4).page == 1

    def test_empty_result(self):
        page = paginate([], 3, 10)
        assert (page.page, page.total, page.total_pages, page.data) == (1, 0, 1, [])

    def test_bad_page_size_uses_default(self, catalog_snapshot):
        assert paginate(list(catalog_snapshot.records), 1, 0).page_size == 30


class TestRunQuery:
    def test_filter_sort_then_paginate(self, catalog_snapshot):
        page = run_query(catalog_snapshot, PartsFilter(name="piston"), sort="-price", page=2, page_size=2)
        assert page.total == 3
        assert page.total_pages == 2
        assert _names(page.data) == ["Piston Ring"]

    def test_sort_applies_before_pagination(self, catalog_snapshot):
        page = run_query(catalog_snapshot, sort="-price", page=1, page_size=1)
        assert _names(page.data) == ["Oil Filter"]

    def test_to_dict(self, catalog_snapshot):
        out = run_query(catalog_snapshot, PartsFilter(sn="XYZ-7")).to_dict()
        assert out["page"] == 1
        assert out["page_size"] == 30
        assert out["total"] == 1
        assert out["total_pages"] == 1
        assert out["data"][0]["_sn"] == "XYZ-7"

    def test_unexpected_failure_becomes_query_error(self, catalog_snapshot, monkeypatch):
        def boom(records, sort):
            raise RuntimeError("bad comparator")

        monkeypatch.setattr(query, "sort_records", boom)
        with pytest.raises(QueryError):
            run_query(catalog_snapshot, sort="price")
