import json
import logging
import os
from typing import Dict, Iterable, Optional

from app.models.student import Student, StudentAttributes
from app.services.exceptions import CollaboratorUnavailable
from app.utils.normalizers import normalize_identifier

logger = logging.getLogger(__name__)


class EntityDirectory:
    """Consulta de sólo lectura de estudiantes por matrícula normalizada"""

    def lookup(self, normalized_id: str) -> Optional[Student]:
        raise NotImplementedError

    def attributes_of(self, normalized_id: str) -> Optional[StudentAttributes]:
        student = self.lookup(normalized_id)
        return student.attributes() if student else None


class InMemoryDirectory(EntityDirectory):
    def __init__(self, students: Iterable[Student] = ()):
        self._students: Dict[str, Student] = {}
        for student in students:
            self.add(student)

    def add(self, student: Student) -> None:
        key = normalize_identifier(student.enrollment_number)
        self._students[key] = student.model_copy(update={"enrollment_number": key})

    def remove(self, normalized_id: str) -> None:
        self._students.pop(normalized_id, None)

    def lookup(self, normalized_id: str) -> Optional[Student]:
        return self._students.get(normalized_id)

    def __len__(self) -> int:
        return len(self._students)


def load_students_file(students_file: str) -> InMemoryDirectory:
    """Carga el directorio de estudiantes desde un archivo JSON si existe"""
    directory = InMemoryDirectory()
    if not os.path.exists(students_file):
        logger.warning(f"Archivo de estudiantes no encontrado: {students_file}")
        return directory

    with open(students_file, 'r', encoding='utf-8') as f:
        file_content = f.read().strip()
    if not file_content:
        logger.warning(f"Archivo de estudiantes vacío: {students_file}")
        return directory

    for record in json.loads(file_content):
        directory.add(Student(**record))
    logger.info(f"Se cargaron {len(directory)} estudiantes desde {students_file}")
    return directory


class FirestoreDirectory(EntityDirectory):
    def __init__(self, db, collection_name: str = "students"):
        self.collection = db.collection(collection_name)

    def lookup(self, normalized_id: str) -> Optional[Student]:
        try:
            docs = self.collection.where('enrollment_number', '==', normalized_id).limit(1).get()
        except Exception as e:
            logger.error(f"Error consultando el directorio para {normalized_id}: {e}")
            raise CollaboratorUnavailable("directorio", e, entity_ref=normalized_id) from e

        for doc in docs:
            return Student(**doc.to_dict())
        return None
