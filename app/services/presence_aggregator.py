import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Dict, Iterable

from app.models.presence_event import PresenceEvent, Roster, RosterMember
from app.services.directory_service import EntityDirectory
from app.services.event_store import EventStore
from app.services.exceptions import CollaboratorUnavailable
from app.utils.day_window import current_window, local_now
from app.utils.executor import run_blocking

logger = logging.getLogger(__name__)


def latest_per_entity(events: Iterable[PresenceEvent]) -> Dict[str, PresenceEvent]:
    """Reduce los eventos al último de cada estudiante, por (occurred_at, sequence)"""
    latest: Dict[str, PresenceEvent] = {}
    for event in events:
        current = latest.get(event.entity_ref)
        if current is None or event.sort_key > current.sort_key:
            latest[event.entity_ref] = event
    return latest


class PresenceAggregator:
    def __init__(self, store: EventStore, directory: EntityDirectory, executor: ThreadPoolExecutor,
                 clock: Callable[[], datetime] = local_now):
        self.store = store
        self.directory = directory
        self.clock = clock
        self.executor = executor

    async def currently_inside(self) -> Roster:
        """Obtiene los estudiantes que están actualmente dentro del recinto"""
        window = current_window(self.clock())
        events = await run_blocking(self.executor, self.store.events_between, window)

        inside_refs = sorted(ref for ref, event in latest_per_entity(events).items() if event.status)

        members = []
        try:
            for entity_ref in inside_refs:
                attributes = await run_blocking(self.executor, self.directory.attributes_of, entity_ref)
                if attributes is None:
                    # el directorio manda: un estudiante eliminado no aparece
                    logger.debug(f"{entity_ref} ya no existe en el directorio, se omite")
                    continue
                members.append(RosterMember(entity_ref=entity_ref, attributes=attributes))
        except CollaboratorUnavailable as e:
            if e.window is None:
                e.window = window
            raise

        logger.debug(f"Estudiantes dentro el {window.day_key}: {len(members)}")
        return Roster(members=members)
