from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal

from app.models.presence_event import PresenceEvent


class ScanRequest(BaseModel):
    # "enrollment_number" es el nombre del campo que envían los lectores antiguos
    identifier: str = Field(validation_alias=AliasChoices("identifier", "enrollment_number"))

    @field_validator("identifier")
    @classmethod
    def strip_scanner_whitespace(cls, value: str) -> str:
        # los lectores de código agregan espacios o saltos de línea
        return value.strip()


class ScanResponse(BaseModel):
    event: PresenceEvent
    name: str
    status: Literal["IN", "OUT"]


class StudentInside(BaseModel):
    name: str
    dept: str
    batch: str
    semester: int


class RosterResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_inside: int = Field(alias="totalInside")
    students_inside: List[StudentInside] = Field(default_factory=list, alias="studentsInside")
