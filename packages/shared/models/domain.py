from typing import Optional

from pydantic import Field, model_validator

from .common import CamelModel, today_iso
from .enums import Gender

DEFAULT_HOSPITAL_NAME = "ATHARVA CHEST HOSPITAL"


class InvestigationEntry(CamelModel):
    id: str
    date: str = ""  # ISO date as typed on the form; may be empty or unparseable
    category: str = ""
    name: str = ""
    result: str = ""


class TreatmentEntry(CamelModel):
    id: str
    name: str = ""
    dosage: str = ""


class DischargeData(CamelModel):
    """Everything printed on a discharge summary."""
    hospital_name: str = DEFAULT_HOSPITAL_NAME
    logo_base64: Optional[str] = None
    patient_name: str = ""
    age: str = ""
    gender: Gender = Gender.UNSET
    ip_no: str = ""
    admission_date: str = Field(default_factory=today_iso)
    discharge_date: str = Field(default_factory=today_iso)
    final_diagnosis: str = ""
    clinical_presentation: str = ""
    investigations: list[InvestigationEntry] = Field(default_factory=list)
    treatment_given: list[TreatmentEntry] = Field(default_factory=list)
    hospital_course: str = ""
    discharge_advice: str = ""
    follow_up: str = ""
    discharge_against_medical_advice: bool = False

    @model_validator(mode="after")
    def _check_unique_ids(self) -> "DischargeData":
        for label, entries in (("investigation", self.investigations), ("treatment", self.treatment_given)):
            seen: set[str] = set()
            for entry in entries:
                if entry.id in seen:
                    raise ValueError(f"duplicate {label} id: {entry.id}")
                seen.add(entry.id)
        return self
