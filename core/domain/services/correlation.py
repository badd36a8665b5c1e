"""
Sub-orchestration correlation.

The runtime's history of a parent instance does not carry the instance ids
of the children it spawned. They are recovered by matching each
"SubOrchestrationInstanceCreated" row from raw storage against completion
events with the same function name and scheduled time.

Best effort: duplicate (name, time) pairs match in encounter order.
"""
from typing import Iterable, List, Optional

from core.domain.clock import ensure_utc
from core.domain.entities.orchestration_status import ChildOrchestrationRecord, HistoryEvent
from core.domain.enums.runtime_status import HistoryEventType


SUB_ORCHESTRATION_EVENT_TYPES = frozenset({
    HistoryEventType.SUB_ORCHESTRATION_COMPLETED.value,
    HistoryEventType.SUB_ORCHESTRATION_FAILED.value,
})


def _is_match(event: HistoryEvent, record: ChildOrchestrationRecord) -> bool:
    if event.name != record.name or event.scheduled_time is None:
        return False
    return ensure_utc(event.scheduled_time) == ensure_utc(record.creation_time)


def correlate_sub_orchestrations(
    history: Optional[List[HistoryEvent]],
    child_records: Optional[Iterable[ChildOrchestrationRecord]],
) -> Optional[List[HistoryEvent]]:
    """
    Attach child instance ids to matching sub-orchestration events, in place.

    Args:
        history: History events in runtime order
        child_records: Child creation records (None when unavailable)

    Returns:
        The same list
    """
    if not history or child_records is None:
        return history

    candidates = [e for e in history if e.event_type in SUB_ORCHESTRATION_EVENT_TYPES]
    if not candidates:
        return history

    for record in sorted(child_records, key=lambda r: ensure_utc(r.creation_time)):
        index = next((i for i, e in enumerate(candidates) if _is_match(e, record)), None)
        if index is None:
            continue

        # Each candidate and each record is used once
        matching = candidates.pop(index)
        matching.sub_orchestration_id = record.instance_id

    return history
