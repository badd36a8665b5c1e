"""Tests for sub-orchestration correlation."""

from core.domain.entities import ChildOrchestrationRecord, HistoryEvent
from core.domain.enums import HistoryEventType
from core.domain.services import correlate_sub_orchestrations
from tests.mocks.history_factory import at


def _sub_event(name: str, scheduled_ms: int, failed: bool = False) -> HistoryEvent:
    event_type = (
        HistoryEventType.SUB_ORCHESTRATION_FAILED if failed
        else HistoryEventType.SUB_ORCHESTRATION_COMPLETED
    )
    return HistoryEvent(
        event_type=event_type.value,
        timestamp=at(scheduled_ms + 1000),
        name=name,
        scheduled_time=at(scheduled_ms),
    )


def _record(name: str, created_ms: int, instance_id: str) -> ChildOrchestrationRecord:
    return ChildOrchestrationRecord(name=name, creation_time=at(created_ms), instance_id=instance_id)


def test_matches_on_name_and_scheduled_time():
    """Test a child record is attached to the event with the same name and time."""
    history = [_sub_event("Child", 100), _sub_event("Other", 100), _sub_event("Child", 200)]
    records = [_record("Child", 200, "child-b"), _record("Child", 100, "child-a")]

    correlate_sub_orchestrations(history, records)

    assert [e.sub_orchestration_id for e in history] == ["child-a", None, "child-b"]


def test_failed_sub_orchestrations_are_candidates():
    """Test SubOrchestrationInstanceFailed events are correlated too."""
    history = [_sub_event("Child", 100, failed=True)]

    correlate_sub_orchestrations(history, [_record("Child", 100, "child-a")])

    assert history[0].sub_orchestration_id == "child-a"


def test_duplicate_pairs_match_in_encounter_order_and_once_each():
    """Test identical (name, time) pairs are consumed one by one, in order."""
    history = [_sub_event("Child", 100), _sub_event("Child", 100), _sub_event("Child", 100)]
    records = [_record("Child", 100, "first"), _record("Child", 100, "second")]

    correlate_sub_orchestrations(history, records)

    assert [e.sub_orchestration_id for e in history] == ["first", "second", None]


def test_created_events_are_not_candidates():
    """Test only completion events receive child ids."""
    created = HistoryEvent(
        event_type=HistoryEventType.SUB_ORCHESTRATION_CREATED.value,
        timestamp=at(100),
        name="Child",
        scheduled_time=at(100),
    )

    correlate_sub_orchestrations([created], [_record("Child", 100, "child-a")])

    assert created.sub_orchestration_id is None


def test_unmatched_records_are_ignored():
    """Test records without a matching event change nothing."""
    history = [_sub_event("Child", 100)]

    correlate_sub_orchestrations(history, [_record("Child", 999, "child-x")])

    assert history[0].sub_orchestration_id is None


def test_missing_child_records_is_a_noop():
    """Test absent child records leave history untouched."""
    history = [_sub_event("Child", 100)]

    assert correlate_sub_orchestrations(history, None) is history
    assert history[0].sub_orchestration_id is None
