"""
Discriminated field updates issued by the editor.

Every editable field of ``DischargeData`` maps to exactly one update model,
keyed on ``field``, so a value can never be written with the wrong type.
"""
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, Discriminator, RootModel
from pydantic.alias_generators import to_camel

from .domain import DischargeData
from .enums import EntryField, Gender, TreatmentField

# camelCase draft keys (as stored and posted) -> model field names
CAMEL_TO_FIELD = {to_camel(name): name for name in DischargeData.model_fields}


class TextFieldUpdate(BaseModel):
    field: Literal[
        "hospital_name",
        "patient_name",
        "age",
        "ip_no",
        "admission_date",
        "discharge_date",
        "final_diagnosis",
        "clinical_presentation",
        "hospital_course",
        "discharge_advice",
        "follow_up",
    ]
    value: str


class GenderUpdate(BaseModel):
    field: Literal["gender"]
    value: Gender


class LogoUpdate(BaseModel):
    field: Literal["logo_base64"]
    value: Optional[str] = None


class AmaFlagUpdate(BaseModel):
    field: Literal["discharge_against_medical_advice"]
    value: bool


def _field_name(value: Any) -> Any:
    """Accept ``patientName`` as well as ``patient_name``."""
    if isinstance(value, dict) and value.get("field") in CAMEL_TO_FIELD:
        return {**value, "field": CAMEL_TO_FIELD[value["field"]]}
    return value


FieldUpdate = Annotated[
    Union[TextFieldUpdate, GenderUpdate, LogoUpdate, AmaFlagUpdate],
    Discriminator("field"),
    BeforeValidator(_field_name),
]


class InvestigationUpdate(BaseModel):
    id: str
    field: EntryField
    value: str


class TreatmentUpdate(BaseModel):
    id: str
    field: TreatmentField
    value: str


class FieldUpdateRequest(RootModel[FieldUpdate]):
    """Request body wrapper so a bare field update can be posted as JSON."""
