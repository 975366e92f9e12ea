"""Tests for the roster aggregation."""

import asyncio
from datetime import timedelta

import pytest

from app.models.presence_event import PresenceEvent
from app.services.directory_service import EntityDirectory
from app.services.exceptions import CollaboratorUnavailable
from app.services.presence_aggregator import PresenceAggregator, latest_per_entity
from app.utils.day_window import current_window


def scan(ledger, entity_ref):
    return asyncio.run(ledger.record_scan(entity_ref))


def inside(aggregator):
    return asyncio.run(aggregator.currently_inside())


class TestLatestPerEntity:
    def test_picks_latest_event(self, clock):
        now = clock()
        events = [
            PresenceEvent(event_id="a", entity_ref="42", occurred_at=now, status=True, sequence=1),
            PresenceEvent(event_id="b", entity_ref="42", occurred_at=now + timedelta(minutes=1), status=False, sequence=2),
            PresenceEvent(event_id="c", entity_ref="7", occurred_at=now, status=True, sequence=1),
        ]

        latest = latest_per_entity(events)

        assert latest["42"].event_id == "b"
        assert latest["7"].event_id == "c"

    def test_ties_broken_by_sequence(self, clock):
        now = clock()
        events = [
            PresenceEvent(event_id="b", entity_ref="42", occurred_at=now, status=False, sequence=2),
            PresenceEvent(event_id="a", entity_ref="42", occurred_at=now, status=True, sequence=1),
        ]

        assert latest_per_entity(events)["42"].event_id == "b"
        assert latest_per_entity(reversed(events))["42"].event_id == "b"


class TestCurrentlyInside:
    def test_empty_without_events(self, aggregator):
        roster = inside(aggregator)

        assert roster.total_inside == 0
        assert roster.members == []

    def test_lists_only_entities_inside(self, ledger, aggregator, clock):
        scan(ledger, "42")
        scan(ledger, "7")
        clock.advance(minutes=10)
        scan(ledger, "7")

        roster = inside(aggregator)

        assert [m.entity_ref for m in roster.members] == ["42"]
        assert roster.members[0].attributes.name == "Ada"
        assert roster.members[0].attributes.department == "CS"
        assert roster.total_inside == 1

    def test_ordered_by_identifier(self, ledger, aggregator):
        for ref in ["7", "42", "100"]:
            scan(ledger, ref)

        roster = inside(aggregator)

        assert [m.entity_ref for m in roster.members] == ["100", "42", "7"]

    def test_yesterday_events_are_ignored(self, ledger, aggregator, clock):
        scan(ledger, "42")
        clock.advance(days=1)

        assert inside(aggregator).total_inside == 0

    def test_idempotent_without_new_scans(self, ledger, aggregator):
        scan(ledger, "42")
        scan(ledger, "100")

        assert inside(aggregator) == inside(aggregator)

    def test_removed_student_is_excluded(self, ledger, aggregator, directory):
        scan(ledger, "42")
        scan(ledger, "100")
        directory.remove("100")

        roster = inside(aggregator)

        assert [m.entity_ref for m in roster.members] == ["42"]
        assert roster.total_inside == 1

    def test_does_not_modify_ledger(self, ledger, aggregator, store):
        scan(ledger, "42")

        inside(aggregator)

        assert len(store) == 1


class BrokenDirectory(EntityDirectory):
    def lookup(self, normalized_id):
        raise CollaboratorUnavailable("directorio", ConnectionError("timeout"), entity_ref=normalized_id)


def test_directory_outage_propagates_with_window(ledger, store, clock, executor):
    scan(ledger, "42")
    aggregator = PresenceAggregator(store, BrokenDirectory(), clock=clock, executor=executor)

    with pytest.raises(CollaboratorUnavailable) as excinfo:
        inside(aggregator)

    assert excinfo.value.window == current_window(clock())
    assert excinfo.value.collaborator == "directorio"
