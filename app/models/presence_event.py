from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict

from app.models.student import StudentAttributes

STATUS_IN = "IN"
STATUS_OUT = "OUT"


class PresenceEvent(BaseModel):
    """
    Evento de presencia en el punto de control.

    Los eventos son inmutables y sólo se agregan al registro:
    status=True significa que el estudiante entró, False que salió.
    sequence es el número de orden del evento dentro del día del estudiante
    (1 para el primero), por lo que status == (sequence impar).
    """
    model_config = ConfigDict(frozen=True)

    event_id: str
    entity_ref: str
    occurred_at: datetime
    status: bool
    sequence: int

    @property
    def label(self) -> str:
        return STATUS_IN if self.status else STATUS_OUT

    @property
    def sort_key(self):
        return (self.occurred_at, self.sequence)


class RosterMember(BaseModel):
    entity_ref: str
    attributes: StudentAttributes


class Roster(BaseModel):
    """Estudiantes dentro del recinto en el día actual"""
    members: List[RosterMember] = []

    @property
    def total_inside(self) -> int:
        return len(self.members)
