"""
Edit operations on a discharge summary draft.

``DischargeData`` is frozen; every operation returns a new instance and
leaves its input untouched.
"""
from __future__ import annotations

import uuid
from typing import Optional

from packages.shared.models import (
    DischargeData,
    FieldUpdate,
    InvestigationEntry,
    InvestigationUpdate,
    TreatmentEntry,
    TreatmentUpdate,
    today_iso,
)


def _new_id() -> str:
    return uuid.uuid4().hex


def reset_data() -> DischargeData:
    return DischargeData()


def apply_update(data: DischargeData, update: FieldUpdate) -> DischargeData:
    return data.model_copy(update={update.field: update.value})


def add_investigation(data: DischargeData, on_date: Optional[str] = None) -> tuple[DischargeData, InvestigationEntry]:
    """Append a blank investigation row dated today (or ``on_date``)."""
    entry = InvestigationEntry(id=_new_id(), date=on_date if on_date is not None else today_iso())
    return data.model_copy(update={"investigations": [*data.investigations, entry]}), entry


def update_investigation(data: DischargeData, update: InvestigationUpdate) -> DischargeData:
    rows = list(data.investigations)
    for idx, row in enumerate(rows):
        if row.id == update.id:
            rows[idx] = row.model_copy(update={update.field.value: update.value})
            return data.model_copy(update={"investigations": rows})
    raise KeyError(update.id)


def remove_investigation(data: DischargeData, entry_id: str) -> DischargeData:
    rows = [row for row in data.investigations if row.id != entry_id]
    if len(rows) == len(data.investigations):
        raise KeyError(entry_id)
    return data.model_copy(update={"investigations": rows})


def add_treatment(data: DischargeData) -> tuple[DischargeData, TreatmentEntry]:
    entry = TreatmentEntry(id=_new_id())
    return data.model_copy(update={"treatment_given": [*data.treatment_given, entry]}), entry


def update_treatment(data: DischargeData, update: TreatmentUpdate) -> DischargeData:
    rows = list(data.treatment_given)
    for idx, row in enumerate(rows):
        if row.id == update.id:
            rows[idx] = row.model_copy(update={update.field.value: update.value})
            return data.model_copy(update={"treatment_given": rows})
    raise KeyError(update.id)


def remove_treatment(data: DischargeData, entry_id: str) -> DischargeData:
    rows = [row for row in data.treatment_given if row.id != entry_id]
    if len(rows) == len(data.treatment_given):
        raise KeyError(entry_id)
    return data.model_copy(update={"treatment_given": rows})
