"""Domain enums."""

from .runtime_status import OrchestrationRuntimeStatus, HistoryEventType, EntityType
from .process_mode import ProcessMode
from .orchestration_action import OrchestrationAction

__all__ = [
    "OrchestrationRuntimeStatus",
    "HistoryEventType",
    "EntityType",
    "ProcessMode",
    "OrchestrationAction",
]
