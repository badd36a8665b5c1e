"""Domain layer - pure domain models and services."""

from .entities import ChildOrchestrationRecord, HistoryEvent, InstanceRecord, OrchestrationStatus
from .value_objects import EntityAddress, PlainAddress, classify_instance_id

__all__ = [
    "ChildOrchestrationRecord",
    "EntityAddress",
    "HistoryEvent",
    "InstanceRecord",
    "OrchestrationStatus",
    "PlainAddress",
    "classify_instance_id",
]
