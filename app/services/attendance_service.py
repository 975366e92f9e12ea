import logging
import threading
from typing import Optional

from app.config import settings
from app.models.schemas import RosterResponse, ScanResponse, StudentInside
from app.services.directory_service import EntityDirectory, FirestoreDirectory, load_students_file
from app.services.event_store import FirestoreEventStore, InMemoryEventStore
from app.services.exceptions import UnknownEntity
from app.services.presence_aggregator import PresenceAggregator
from app.services.presence_ledger import PresenceLedger
from app.utils.executor import create_store_executor, run_blocking
from app.utils.normalizers import normalize_identifier

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(self, directory: EntityDirectory, ledger: PresenceLedger, aggregator: PresenceAggregator):
        self.directory = directory
        self.ledger = ledger
        self.aggregator = aggregator

    async def record_entry(self, raw_identifier: str) -> ScanResponse:
        """Registra la entrada o salida de un estudiante a partir de su matrícula escaneada"""
        entity_ref = normalize_identifier(raw_identifier)

        student = await run_blocking(self.ledger.executor, self.directory.lookup, entity_ref)
        if student is None:
            logger.info(f"Escaneo rechazado, matrícula desconocida: {entity_ref}")
            raise UnknownEntity(entity_ref)

        event = await self.ledger.record_scan(entity_ref)
        return ScanResponse(event=event, name=student.name, status=event.label)

    async def roster(self) -> RosterResponse:
        """Obtiene el listado de estudiantes dentro y su total"""
        roster = await self.aggregator.currently_inside()
        students = [
            StudentInside(
                name=member.attributes.name,
                dept=member.attributes.department,
                batch=member.attributes.batch,
                semester=member.attributes.semester,
            )
            for member in roster.members
        ]
        return RosterResponse(total_inside=roster.total_inside, students_inside=students)

    def close(self) -> None:
        self.ledger.executor.shutdown(wait=True)


def build_attendance_service(backend: str = None) -> AttendanceService:
    """Construye el servicio con el backend configurado ("firestore" o "memory")"""
    backend = backend or settings.PRESENCE_BACKEND
    executor = create_store_executor()

    if backend == "memory":
        store = InMemoryEventStore()
        directory = load_students_file(settings.STUDENTS_FILE)
    elif backend == "firestore":
        from app.config.firebase import get_db

        db = get_db()
        store = FirestoreEventStore(db, settings.EVENTS_COLLECTION, settings.HEADS_COLLECTION)
        directory = FirestoreDirectory(db, settings.STUDENTS_COLLECTION)
    else:
        raise ValueError(f"Backend de presencia desconocido: {backend}")

    logger.info(f"Servicio de asistencia iniciado con backend '{backend}'")
    ledger = PresenceLedger(store, executor=executor)
    aggregator = PresenceAggregator(store, directory, executor=executor)
    return AttendanceService(directory, ledger, aggregator)


# Instancia global del servicio, creada en la primera petición
_attendance_service: Optional[AttendanceService] = None
_attendance_service_lock = threading.Lock()


def get_attendance_service() -> AttendanceService:
    global _attendance_service

    # FastAPI resuelve esta dependencia en su threadpool: una sola instancia por proceso
    if _attendance_service is None:
        with _attendance_service_lock:
            if _attendance_service is None:
                _attendance_service = build_attendance_service()
    return _attendance_service


def shutdown_attendance_service() -> None:
    """Libera el pool de la instancia global al apagar la aplicación"""
    global _attendance_service

    with _attendance_service_lock:
        if _attendance_service is not None:
            _attendance_service.close()
            _attendance_service = None
