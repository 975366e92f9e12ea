import asyncio
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Dict, Optional

from app.config import settings
from app.models.presence_event import PresenceEvent
from app.services.event_store import EventStore
from app.services.exceptions import TransientConflict
from app.utils.day_window import DayWindow, current_window, local_now, truncate_to_millisecond
from app.utils.executor import run_blocking

logger = logging.getLogger(__name__)


class PresenceLedger:
    """
    Registro de eventos de entrada/salida.

    Cada escaneo alterna el estado del estudiante dentro del día: el primer
    evento del día es una entrada y los siguientes alternan. La lectura del
    último evento y el agregado del nuevo se serializan por estudiante con un
    candado propio, y el almacén rechaza el agregado si otro proceso escribió
    entre medio (en ese caso se vuelve a leer y recalcular).
    """

    def __init__(self, store: EventStore, executor: ThreadPoolExecutor,
                 clock: Callable[[], datetime] = local_now, max_attempts: int = None):
        self.store = store
        self.clock = clock
        self.max_attempts = max_attempts or settings.SCAN_MAX_ATTEMPTS
        self.executor = executor
        self._locks: Dict[str, asyncio.Lock] = {}
        self._waiters: Dict[str, int] = {}

    @asynccontextmanager
    async def _entity_scope(self, entity_ref: str):
        """Candado por estudiante; se descarta cuando nadie lo espera"""
        lock = self._locks.get(entity_ref)
        if lock is None:
            lock = self._locks[entity_ref] = asyncio.Lock()
        self._waiters[entity_ref] = self._waiters.get(entity_ref, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[entity_ref] -= 1
            if not self._waiters[entity_ref]:
                del self._waiters[entity_ref]
                del self._locks[entity_ref]

    async def record_scan(self, entity_ref: str) -> PresenceEvent:
        """Registra un escaneo y devuelve el evento creado (entrada o salida)"""
        async with self._entity_scope(entity_ref):
            window = None
            for attempt in range(1, self.max_attempts + 1):
                now = truncate_to_millisecond(self.clock())
                window = current_window(now)
                latest = await run_blocking(self.executor, self.store.latest_for, entity_ref, window)
                event = self._next_event(entity_ref, latest, now)

                if await run_blocking(self.executor, self.store.append_if_latest, event, latest, window):
                    logger.info(f"Escaneo registrado: {entity_ref} -> {event.label} (#{event.sequence} del {window.day_key})")
                    return event

                logger.warning(f"Conflicto de escritura para {entity_ref} (intento {attempt}/{self.max_attempts})")

            logger.error(f"Se agotaron los reintentos para {entity_ref} en la ventana {window}")
            raise TransientConflict(entity_ref, window, self.max_attempts)

    async def latest_for(self, entity_ref: str, window: Optional[DayWindow] = None) -> Optional[PresenceEvent]:
        """Último evento del estudiante en la ventana (por defecto, hoy)"""
        window = window or current_window(self.clock())
        return await run_blocking(self.executor, self.store.latest_for, entity_ref, window)

    @staticmethod
    def _next_event(entity_ref: str, latest: Optional[PresenceEvent], now: datetime) -> PresenceEvent:
        if latest is None:
            return PresenceEvent(
                event_id=uuid.uuid4().hex,
                entity_ref=entity_ref,
                occurred_at=now,
                status=True,
                sequence=1,
            )

        return PresenceEvent(
            event_id=uuid.uuid4().hex,
            entity_ref=entity_ref,
            # el reloj puede retroceder; el orden de inserción manda
            occurred_at=max(now, latest.occurred_at),
            status=not latest.status,
            sequence=latest.sequence + 1,
        )
