"""Domain entities."""

from .orchestration_status import (
    ChildOrchestrationRecord,
    HistoryEvent,
    InstanceRecord,
    OrchestrationStatus,
)

__all__ = [
    "ChildOrchestrationRecord",
    "HistoryEvent",
    "InstanceRecord",
    "OrchestrationStatus",
]
