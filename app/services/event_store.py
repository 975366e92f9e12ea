import logging
import threading
from typing import Dict, List, Optional, Tuple

from firebase_admin import firestore

from app.models.presence_event import PresenceEvent
from app.services.exceptions import CollaboratorUnavailable
from app.utils.day_window import DayWindow

logger = logging.getLogger(__name__)


class EventStore:
    """
    Almacenamiento de sólo agregado para eventos de presencia.

    append_if_latest es un "compare-and-append": sólo guarda el evento si el
    último evento del estudiante en ese día sigue siendo `expected`
    (None = ningún evento en el día). Devuelve False si otro escritor se adelantó.
    """

    def latest_for(self, entity_ref: str, window: DayWindow) -> Optional[PresenceEvent]:
        raise NotImplementedError

    def append_if_latest(self, event: PresenceEvent, expected: Optional[PresenceEvent], window: DayWindow) -> bool:
        raise NotImplementedError

    def events_between(self, window: DayWindow) -> List[PresenceEvent]:
        raise NotImplementedError


class InMemoryEventStore(EventStore):
    def __init__(self):
        self._events: List[PresenceEvent] = []
        self._heads: Dict[Tuple[str, str], str] = {}  # (entity_ref, día) -> event_id
        self._lock = threading.Lock()

    def latest_for(self, entity_ref: str, window: DayWindow) -> Optional[PresenceEvent]:
        with self._lock:
            candidates = [
                event for event in self._events
                if event.entity_ref == entity_ref and window.contains(event.occurred_at)
            ]
        return max(candidates, key=lambda event: event.sort_key, default=None)

    def append_if_latest(self, event: PresenceEvent, expected: Optional[PresenceEvent], window: DayWindow) -> bool:
        key = (event.entity_ref, window.day_key)
        expected_id = expected.event_id if expected else None
        with self._lock:
            if self._heads.get(key) != expected_id:
                return False
            self._events.append(event)
            self._heads[key] = event.event_id
        return True

    def events_between(self, window: DayWindow) -> List[PresenceEvent]:
        with self._lock:
            return [event for event in self._events if window.contains(event.occurred_at)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)


def _to_document(event: PresenceEvent) -> dict:
    return {
        'event_id': event.event_id,
        'entity_ref': event.entity_ref,
        'occurred_at': event.occurred_at,
        'status': event.status,
        'sequence': event.sequence,
    }


class FirestoreEventStore(EventStore):
    """
    Eventos en la colección `presence_events`; la colección `presence_heads`
    guarda un documento por (estudiante, día) con el último evento, que actúa
    como token de concurrencia optimista dentro de una transacción.
    """

    def __init__(self, db, events_collection: str = "presence_events", heads_collection: str = "presence_heads"):
        self.db = db
        self.events = db.collection(events_collection)
        self.heads = db.collection(heads_collection)

    def latest_for(self, entity_ref: str, window: DayWindow) -> Optional[PresenceEvent]:
        try:
            docs = (
                self.events.where('entity_ref', '==', entity_ref)
                .where('occurred_at', '>=', window.start)
                .where('occurred_at', '<=', window.end)
                .order_by('occurred_at', direction=firestore.Query.DESCENDING)
                .order_by('sequence', direction=firestore.Query.DESCENDING)
                .limit(1)
                .get()
            )
        except Exception as e:
            logger.error(f"Error leyendo el último evento de {entity_ref}: {e}")
            raise CollaboratorUnavailable("almacén de eventos", e, entity_ref=entity_ref, window=window) from e

        for doc in docs:
            return PresenceEvent(**doc.to_dict())
        return None

    def append_if_latest(self, event: PresenceEvent, expected: Optional[PresenceEvent], window: DayWindow) -> bool:
        head_ref = self.heads.document(f"{event.entity_ref}_{window.day_key}")
        event_ref = self.events.document(event.event_id)
        expected_id = expected.event_id if expected else None

        @firestore.transactional
        def append_in_transaction(transaction) -> bool:
            snapshot = head_ref.get(transaction=transaction)
            current_id = snapshot.to_dict().get('event_id') if snapshot.exists else None
            if current_id != expected_id:
                return False
            transaction.set(event_ref, _to_document(event))
            transaction.set(head_ref, {
                'entity_ref': event.entity_ref,
                'day': window.day_key,
                'event_id': event.event_id,
                'sequence': event.sequence,
                'status': event.status,
            })
            return True

        try:
            return append_in_transaction(self.db.transaction())
        except Exception as e:
            logger.error(f"Error guardando el evento de {event.entity_ref}: {e}")
            raise CollaboratorUnavailable("almacén de eventos", e, entity_ref=event.entity_ref, window=window) from e

    def events_between(self, window: DayWindow) -> List[PresenceEvent]:
        try:
            docs = (
                self.events.where('occurred_at', '>=', window.start)
                .where('occurred_at', '<=', window.end)
                .order_by('occurred_at')
                .stream()
            )
            return [PresenceEvent(**doc.to_dict()) for doc in docs]
        except Exception as e:
            logger.error(f"Error leyendo los eventos del día {window.day_key}: {e}")
            raise CollaboratorUnavailable("almacén de eventos", e, window=window) from e
