from enum import Enum


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"
    UNSET = ""  # Not yet selected on the form


class EntryField(str, Enum):
    """Editable columns of an investigation row."""
    DATE = "date"
    CATEGORY = "category"
    NAME = "name"
    RESULT = "result"


class TreatmentField(str, Enum):
    NAME = "name"
    DOSAGE = "dosage"
