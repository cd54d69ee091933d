from datetime import date

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for payloads persisted/exchanged with camelCase keys.

    Both ``patient_name`` and ``patientName`` are accepted on input.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


def today_iso() -> str:
    return date.today().isoformat()
