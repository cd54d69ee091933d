from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .domain import InvestigationEntry, TreatmentEntry

# Normalized category -> entries, in first-seen category order.
CategoryGroups = dict[str, list[InvestigationEntry]]
TreatmentPair = tuple[TreatmentEntry, Optional[TreatmentEntry]]


@dataclass(frozen=True)
class LayoutSplit:
    page1_groups: CategoryGroups = field(default_factory=dict)
    page2_groups: CategoryGroups = field(default_factory=dict)
    grouped: CategoryGroups = field(default_factory=dict)
    available_lines: int = 0

    @property
    def page1_count(self) -> int:
        return sum(len(items) for items in self.page1_groups.values())

    @property
    def page2_count(self) -> int:
        return sum(len(items) for items in self.page2_groups.values())

    @property
    def has_investigations(self) -> bool:
        return bool(self.page1_groups or self.page2_groups)

    def summary(self) -> dict:
        """Entry ids per category, as served by the layout endpoint."""
        return {
            "available_lines": self.available_lines,
            "page1": {cat: [e.id for e in items] for cat, items in self.page1_groups.items()},
            "page2": {cat: [e.id for e in items] for cat, items in self.page2_groups.items()},
            "page1_count": self.page1_count,
            "page2_count": self.page2_count,
        }
