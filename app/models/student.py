from pydantic import BaseModel
from typing import Optional


class StudentAttributes(BaseModel):
    """Atributos de un estudiante que se muestran en el listado de presentes"""
    name: str
    department: str
    batch: str
    semester: int


class Student(BaseModel):
    enrollment_number: str  # normalizado, sin ceros a la izquierda
    name: str
    department: str
    batch: str
    semester: int = 1
    mor_shift: bool = True  # turno de mañana
    section: Optional[str] = None
    phone_no: Optional[str] = None
    address: Optional[str] = None

    def attributes(self) -> StudentAttributes:
        return StudentAttributes(
            name=self.name,
            department=self.department,
            batch=self.batch,
            semester=self.semester,
        )
