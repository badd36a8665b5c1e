"""
Orchestration status entities.

Snapshot of one orchestration instance as reported by the runtime,
plus the records used to enrich its history.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..enums.runtime_status import EntityType, OrchestrationRuntimeStatus
from ..value_objects.instance_address import (
    EntityAddress,
    InstanceAddress,
    classify_instance_id,
)


@dataclass
class HistoryEvent:
    """One recorded step of an instance's execution timeline."""
    event_type: str
    timestamp: datetime
    event_id: Optional[int] = None
    name: Optional[str] = None
    scheduled_time: Optional[datetime] = None
    result: Any = None
    reason: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    # Filled in by enrichment
    duration_in_ms: Optional[float] = None
    sub_orchestration_id: Optional[str] = None


@dataclass(frozen=True)
class ChildOrchestrationRecord:
    """A "sub-orchestration created" row read from raw history storage."""
    name: str
    creation_time: datetime
    instance_id: str


@dataclass
class OrchestrationStatus:
    """
    Orchestration instance status with execution history.

    Built fresh per request. Only the timing and correlation passes
    mutate it (and only its history events).
    """
    instance_id: str
    name: str
    runtime_status: OrchestrationRuntimeStatus
    created_time: datetime
    last_updated_time: datetime
    input: Any = None
    output: Any = None
    custom_status: Any = None
    history: Optional[List[HistoryEvent]] = None
    address: InstanceAddress = field(init=False)

    def __post_init__(self):
        self.address = classify_instance_id(self.instance_id)

    @property
    def entity_type(self) -> EntityType:
        return self.address.entity_type

    @property
    def entity_type_name(self) -> str:
        """Entity name for entities, orchestration name otherwise."""
        if isinstance(self.address, EntityAddress):
            return self.address.entity_name
        return self.name


@dataclass
class InstanceRecord:
    """
    Raw instance row, as read from storage.

    custom_status holds the serialized JSON text (or None when absent).
    """
    task_hub: str
    instance_id: str
    name: str
    runtime_status: str
    created_time: datetime
    last_updated_time: datetime
    input: Optional[str] = None
    output: Optional[str] = None
    custom_status: Optional[str] = None
