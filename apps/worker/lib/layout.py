"""
Page-1 / page-2 layout estimation for discharge summaries.

Decides which investigation rows fit on the first page before anything is
rendered, so the PDF preview and the DOCX export break in the same place.
All functions are pure; the same input always yields the same split.
"""
from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from packages.shared.models import (
    CategoryGroups,
    DischargeData,
    InvestigationEntry,
    LayoutSplit,
    TreatmentEntry,
    TreatmentPair,
)

# Heuristics tuned against the A4 template; not derived from font metrics.
LINE_WIDTH = 90  # characters per rendered line of a full-width text block
FIXED_PAGE1_SLOTS = 22  # slots between the patient-info block and the page break
CAPACITY_FLOOR = 5  # investigation slots page 1 always keeps
OTHERS_CATEGORY = "OTHERS"


def estimate_lines(text: Optional[str], line_width: int = LINE_WIDTH) -> int:
    """
    Estimate rendered line count of a narrative block.

    Each explicit line wraps every ``line_width`` characters and occupies at
    least one line, blank ones included. Empty text still takes one line.
    """
    if not text:
        return 1
    return sum(max(1, math.ceil(len(segment) / line_width)) for segment in text.split("\n"))


def normalize_category(category: Optional[str]) -> str:
    return (category or "").strip().upper() or OTHERS_CATEGORY


def group_by_category(entries: Iterable[InvestigationEntry]) -> CategoryGroups:
    """Bucket entries by normalized category, keeping first-seen order."""
    groups: CategoryGroups = {}
    for entry in entries:
        groups.setdefault(normalize_category(entry.category), []).append(entry)
    return groups


def compute_available_lines(
    final_diagnosis: Optional[str],
    clinical_presentation: Optional[str],
    *,
    fixed_slots: int = FIXED_PAGE1_SLOTS,
    floor: int = CAPACITY_FLOOR,
    line_width: int = LINE_WIDTH,
) -> int:
    used = estimate_lines(final_diagnosis, line_width) + estimate_lines(clinical_presentation, line_width)
    return max(floor, fixed_slots - used)


def split_groups(grouped: CategoryGroups, available_lines: int) -> tuple[CategoryGroups, CategoryGroups]:
    """
    Greedily fill page 1 with category headers and rows.

    - A category header costs one slot; if it does not fit, the whole
      category goes to page 2.
    - Rows are placed until the first one that does not fit; that row and
      everything after it go to page 2.
    - A category split across the break is keyed the same on both pages so
      the continuation is labelled.
    """
    page1: CategoryGroups = {}
    page2: CategoryGroups = {}
    used_lines = 0
    page1_full = False

    for category, items in grouped.items():
        if page1_full:
            page2[category] = list(items)
            continue

        if used_lines + 1 > available_lines:
            page1_full = True
            page2[category] = list(items)
            continue

        used_lines += 1  # header

        page1_items: list[InvestigationEntry] = []
        page2_items: list[InvestigationEntry] = []
        for item in items:
            if page1_full:
                page2_items.append(item)
            elif used_lines + 1 <= available_lines:
                page1_items.append(item)
                used_lines += 1
            else:
                page1_full = True
                page2_items.append(item)

        if page1_items:
            page1[category] = page1_items
        if page2_items:
            page2[category] = page2_items

    return page1, page2


def split_across_pages(
    data: DischargeData,
    *,
    fixed_slots: int = FIXED_PAGE1_SLOTS,
    floor: int = CAPACITY_FLOOR,
    line_width: int = LINE_WIDTH,
) -> LayoutSplit:
    """Group, size and split a summary's investigations in one call."""
    grouped = group_by_category(data.investigations)
    available = compute_available_lines(
        data.final_diagnosis,
        data.clinical_presentation,
        fixed_slots=fixed_slots,
        floor=floor,
        line_width=line_width,
    )
    page1, page2 = split_groups(grouped, available)
    return LayoutSplit(page1_groups=page1, page2_groups=page2, grouped=grouped, available_lines=available)


def pair_treatments(entries: Sequence[TreatmentEntry]) -> list[TreatmentPair]:
    """Chunk treatments into two-column rows; an odd tail pairs with None."""
    return [
        (entries[i], entries[i + 1] if i + 1 < len(entries) else None)
        for i in range(0, len(entries), 2)
    ]
