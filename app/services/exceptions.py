from typing import Optional

from app.utils.day_window import DayWindow


class PresenceError(Exception):
    """Error base del registro de presencia, con el contexto del estudiante y la ventana del día"""

    def __init__(self, message: str, entity_ref: Optional[str] = None, window: Optional[DayWindow] = None):
        super().__init__(message)
        self.entity_ref = entity_ref
        self.window = window


class UnknownEntity(PresenceError):
    """El identificador escaneado no existe en el directorio de estudiantes"""

    def __init__(self, entity_ref: str):
        super().__init__(f"No existe un estudiante con la matrícula {entity_ref}", entity_ref=entity_ref)


class TransientConflict(PresenceError):
    """Escrituras concurrentes para el mismo estudiante; la petición puede reintentarse"""

    def __init__(self, entity_ref: str, window: DayWindow, attempts: int):
        super().__init__(
            f"Conflicto de escritura para {entity_ref} en la ventana {window} tras {attempts} intentos",
            entity_ref=entity_ref,
            window=window,
        )
        self.attempts = attempts


class CollaboratorUnavailable(PresenceError):
    """Falla del almacenamiento o del directorio, ajena a la lógica de presencia"""

    def __init__(self, collaborator: str, cause: Exception, entity_ref: Optional[str] = None,
                 window: Optional[DayWindow] = None):
        super().__init__(f"{collaborator} no disponible: {cause}", entity_ref=entity_ref, window=window)
        self.collaborator = collaborator
        self.cause = cause
