"""
Unit tests for the page-1 / page-2 layout estimation.
"""
from __future__ import annotations

import random

import pytest

from apps.worker.lib.layout import (
    CAPACITY_FLOOR,
    FIXED_PAGE1_SLOTS,
    LINE_WIDTH,
    OTHERS_CATEGORY,
    compute_available_lines,
    estimate_lines,
    group_by_category,
    normalize_category,
    pair_treatments,
    split_across_pages,
    split_groups,
)
from packages.shared.models import InvestigationEntry
from tests.fixtures.discharge_fixture import make_discharge_data, make_investigations, make_treatments


def _entry(entry_id: str, category: str) -> InvestigationEntry:
    return InvestigationEntry(id=entry_id, category=category, name=entry_id)


def _ids(groups) -> dict[str, list[str]]:
    return {cat: [e.id for e in items] for cat, items in groups.items()}


# ── Line estimator ────────────────────────────────────────────────────────


class TestEstimateLines:
    def test_empty_and_none_take_one_line(self):
        assert estimate_lines("") == 1
        assert estimate_lines(None) == 1

    def test_wrap_boundary(self):
        assert estimate_lines("a" * LINE_WIDTH) == 1
        assert estimate_lines("a" * (LINE_WIDTH + 1)) == 2
        assert estimate_lines("a" * 180) == 2
        assert estimate_lines("a" * 181) == 3

    def test_explicit_newlines_each_count(self):
        assert estimate_lines("Fever\nCough\nBreathlessness") == 3

    def test_blank_segments_still_count(self):
        # Two empty segments either side of the newline.
        assert estimate_lines("\n") == 2
        assert estimate_lines("a\n\nb") == 3

    def test_mixed_wrap_and_newlines(self):
        assert estimate_lines("a" * 100 + "\n" + "b") == 3

    def test_custom_line_width(self):
        assert estimate_lines("a" * 50, line_width=40) == 2


# ── Grouper ───────────────────────────────────────────────────────────────


class TestGroupByCategory:
    def test_case_insensitive_and_trimmed(self):
        groups = group_by_category([_entry("a", "Radiology"), _entry("b", "RADIOLOGY ")])
        assert list(groups) == ["RADIOLOGY"]
        assert [e.id for e in groups["RADIOLOGY"]] == ["a", "b"]

    def test_empty_category_goes_to_others(self):
        groups = group_by_category([_entry("a", ""), _entry("b", "   ")])
        assert _ids(groups) == {OTHERS_CATEGORY: ["a", "b"]}

    def test_first_seen_order_and_item_order(self):
        entries = [
            _entry("1", "labs"),
            _entry("2", "Radiology"),
            _entry("3", "LABS"),
            _entry("4", ""),
            _entry("5", "radiology"),
        ]
        groups = group_by_category(entries)
        assert list(groups) == ["LABS", "RADIOLOGY", OTHERS_CATEGORY]
        assert _ids(groups) == {"LABS": ["1", "3"], "RADIOLOGY": ["2", "5"], OTHERS_CATEGORY: ["4"]}

    def test_no_entries(self):
        assert group_by_category([]) == {}

    def test_normalize_category(self):
        assert normalize_category("  Ecg ") == "ECG"
        assert normalize_category(None) == OTHERS_CATEGORY


# ── Capacity allocator ────────────────────────────────────────────────────


class TestComputeAvailableLines:
    def test_single_line_narratives(self):
        assert compute_available_lines("COPD", "Breathlessness") == FIXED_PAGE1_SLOTS - 2

    def test_empty_narratives_still_reserve_a_line_each(self):
        assert compute_available_lines("", "") == FIXED_PAGE1_SLOTS - 2

    def test_multiline_narratives(self):
        assert compute_available_lines("a\nb\nc", "d") == FIXED_PAGE1_SLOTS - 4

    def test_floor(self):
        very_long = "x" * 5000
        assert compute_available_lines(very_long, very_long) == CAPACITY_FLOOR
        assert compute_available_lines("x" * 900, "x" * 900) == CAPACITY_FLOOR

    def test_overrides(self):
        assert compute_available_lines("", "", fixed_slots=30) == 28
        assert compute_available_lines("x" * 5000, "", floor=2) == 2


# ── Splitter ──────────────────────────────────────────────────────────────


class TestSplitGroups:
    def test_single_category_split_at_capacity(self):
        grouped = group_by_category(make_investigations("LABS", 30))
        page1, page2 = split_groups(grouped, 22)
        # 1 header + 21 rows fill the 22 slots.
        assert len(page1["LABS"]) == 21
        assert len(page2["LABS"]) == 9
        assert [e.id for e in page1["LABS"] + page2["LABS"]] == [e.id for e in grouped["LABS"]]

    def test_header_that_does_not_fit_sends_whole_category(self):
        grouped = {
            "A": [_entry(f"a{i}", "A") for i in range(4)],
            "B": [_entry(f"b{i}", "B") for i in range(3)],
        }
        page1, page2 = split_groups(grouped, 5)
        assert _ids(page1) == {"A": ["a0", "a1", "a2", "a3"]}
        assert _ids(page2) == {"B": ["b0", "b1", "b2"]}

    def test_header_only_fit_defers_all_items(self):
        grouped = {
            "A": [_entry(f"a{i}", "A") for i in range(3)],
            "B": [_entry(f"b{i}", "B") for i in range(2)],
        }
        page1, page2 = split_groups(grouped, 5)
        # B's header used the last slot, but no B row fits so B is not keyed on page 1.
        assert list(page1) == ["A"]
        assert _ids(page2) == {"B": ["b0", "b1"]}

    def test_fullness_is_monotonic(self):
        grouped = {
            "A": [_entry(f"a{i}", "A") for i in range(6)],
            "B": [_entry("b0", "B")],
            "C": [_entry("c0", "C")],
        }
        page1, page2 = split_groups(grouped, 5)
        assert _ids(page1) == {"A": ["a0", "a1", "a2", "a3"]}
        assert _ids(page2) == {"A": ["a4", "a5"], "B": ["b0"], "C": ["c0"]}

    def test_everything_fits(self):
        grouped = {"A": [_entry("a0", "A")], "B": [_entry("b0", "B")]}
        page1, page2 = split_groups(grouped, 20)
        assert _ids(page1) == {"A": ["a0"], "B": ["b0"]}
        assert page2 == {}

    def test_input_groups_not_mutated(self):
        grouped = {"A": [_entry(f"a{i}", "A") for i in range(10)]}
        before = _ids(grouped)
        split_groups(grouped, 5)
        assert _ids(grouped) == before

    @pytest.mark.parametrize("seed", range(25))
    def test_random_inputs_hold_invariants(self, seed):
        rnd = random.Random(seed)
        cats = ["Labs", "labs ", "Radiology", "", "ECG", "Culture"]
        entries = [_entry(f"e{i}", rnd.choice(cats)) for i in range(rnd.randint(0, 40))]
        grouped = group_by_category(entries)
        available = rnd.randint(CAPACITY_FLOOR, FIXED_PAGE1_SLOTS)
        page1, page2 = split_groups(grouped, available)

        # Conservation
        assert sum(map(len, page1.values())) + sum(map(len, page2.values())) == len(entries)

        # Category order: page-1 keys, then keys only on page 2, match the grouping order
        order = list(page1) + [c for c in page2 if c not in page1]
        assert order == [c for c in grouped if c in page1 or c in page2]

        # Per-category item order
        for cat, items in grouped.items():
            assert page1.get(cat, []) + page2.get(cat, []) == items

        # Monotonic: flattening page 1 then page 2 reproduces the grouped walk
        flat = [e for items in grouped.values() for e in items]
        placed = [e for items in page1.values() for e in items] + [e for items in page2.values() for e in items]
        assert placed == flat

        # Page 1 never exceeds its slots (headers included)
        assert sum(len(items) + 1 for items in page1.values()) <= available


# ── Convenience entry point ───────────────────────────────────────────────


class TestSplitAcrossPages:
    def test_thirty_labs_with_empty_narratives(self):
        data = make_discharge_data(investigations=make_investigations("LABS", 30))
        split = split_across_pages(data)
        assert split.available_lines == 20
        assert [e.id for e in split.page1_groups["LABS"]] == [f"hb-{i:02d}" for i in range(1, 20)]
        assert [e.id for e in split.page2_groups["LABS"]] == [f"hb-{i:02d}" for i in range(20, 31)]
        assert split.page1_count == 19
        assert split.page2_count == 11

    def test_no_investigations(self):
        split = split_across_pages(make_discharge_data())
        assert split.page1_groups == {}
        assert split.page2_groups == {}
        assert not split.has_investigations

    def test_long_narrative_pushes_rows_to_page_two(self):
        data = make_discharge_data(
            final_diagnosis="x" * 2000,
            investigations=make_investigations("LABS", 10),
        )
        split = split_across_pages(data)
        assert split.available_lines == CAPACITY_FLOOR
        assert split.page1_count == CAPACITY_FLOOR - 1
        assert split.page2_count == 10 - (CAPACITY_FLOOR - 1)

    def test_same_input_same_split(self):
        data = make_discharge_data(
            investigations=make_investigations("LABS", 12) + make_investigations("X-Ray", 12, prefix="XR"),
        )
        first = split_across_pages(data)
        second = split_across_pages(data)
        assert first.summary() == second.summary()

    def test_unparseable_dates_do_not_matter(self):
        entries = [
            InvestigationEntry(id="a", date="", category="Labs"),
            InvestigationEntry(id="b", date="not-a-date", category="Labs"),
        ]
        split = split_across_pages(make_discharge_data(investigations=entries))
        assert _ids(split.page1_groups) == {"LABS": ["a", "b"]}

    def test_summary_payload(self):
        data = make_discharge_data(investigations=make_investigations("LABS", 2))
        assert split_across_pages(data).summary() == {
            "available_lines": 20,
            "page1": {"LABS": ["hb-01", "hb-02"]},
            "page2": {},
            "page1_count": 2,
            "page2_count": 0,
        }


# ── Treatment pairer ──────────────────────────────────────────────────────


class TestPairTreatments:
    def test_odd_length(self):
        a, b, c = make_treatments("A", "B", "C")
        assert pair_treatments([a, b, c]) == [(a, b), (c, None)]

    def test_even_length(self):
        a, b, c, d = make_treatments("A", "B", "C", "D")
        assert pair_treatments([a, b, c, d]) == [(a, b), (c, d)]

    def test_empty(self):
        assert pair_treatments([]) == []

    def test_single(self):
        (a,) = make_treatments("A")
        assert pair_treatments([a]) == [(a, None)]
