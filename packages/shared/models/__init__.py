from .common import CamelModel, today_iso
from .domain import DEFAULT_HOSPITAL_NAME, DischargeData, InvestigationEntry, TreatmentEntry
from .enums import EntryField, Gender, TreatmentField
from .layout import CategoryGroups, LayoutSplit, TreatmentPair
from .updates import (
    AmaFlagUpdate,
    FieldUpdate,
    FieldUpdateRequest,
    GenderUpdate,
    InvestigationUpdate,
    LogoUpdate,
    TextFieldUpdate,
    TreatmentUpdate,
)

__all__ = [
    "AmaFlagUpdate",
    "CamelModel",
    "CategoryGroups",
    "DEFAULT_HOSPITAL_NAME",
    "DischargeData",
    "EntryField",
    "FieldUpdate",
    "FieldUpdateRequest",
    "Gender",
    "GenderUpdate",
    "InvestigationEntry",
    "InvestigationUpdate",
    "LayoutSplit",
    "LogoUpdate",
    "TextFieldUpdate",
    "TreatmentEntry",
    "TreatmentField",
    "TreatmentPair",
    "TreatmentUpdate",
    "today_iso",
]
