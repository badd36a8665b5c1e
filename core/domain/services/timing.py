"""
Timing annotation for history events.

Two values end up in HistoryEvent.duration_in_ms:
- dispatch latency: timestamp - scheduled_time, for events that carry one
- whole orchestration duration: timestamp - ExecutionStarted timestamp,
  for ExecutionCompleted events (this one wins)
"""
from datetime import datetime, timedelta
from typing import List, Optional

from core.domain.clock import ensure_utc
from core.domain.entities.orchestration_status import HistoryEvent
from core.domain.enums.runtime_status import HistoryEventType


_ONE_MS = timedelta(milliseconds=1)


def _duration_in_ms(start: datetime, end: datetime) -> float:
    # Negative values (clock skew) are passed through.
    return (end - start) / _ONE_MS


def annotate_timing(history: Optional[List[HistoryEvent]]) -> Optional[List[HistoryEvent]]:
    """
    Stamp computed durations onto history events, in place.

    Args:
        history: History events in runtime order

    Returns:
        The same list
    """
    if not history:
        return history

    started_event = next(
        (e for e in history if e.event_type == HistoryEventType.EXECUTION_STARTED.value),
        None,
    )
    started_at = ensure_utc(started_event.timestamp) if started_event else None

    for event in history:
        timestamp = ensure_utc(event.timestamp)

        if event.scheduled_time is not None:
            scheduled_time = ensure_utc(event.scheduled_time)
            event.scheduled_time = scheduled_time
            event.duration_in_ms = _duration_in_ms(scheduled_time, timestamp)

        if event.event_type == HistoryEventType.EXECUTION_COMPLETED.value and started_at is not None:
            event.duration_in_ms = _duration_in_ms(started_at, timestamp)

    return history
