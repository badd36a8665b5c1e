"""Application DTOs for orchestration detail views."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel, to_pascal

from core.domain.entities import HistoryEvent, OrchestrationStatus
from core.domain.enums import EntityType, OrchestrationRuntimeStatus
from core.domain.services import HistoryPage
from core.domain.value_objects import EntityAddress


class HistoryEventDTO(BaseModel):
    """DTO for one history event (PascalCase on the wire, like the runtime)."""

    event_type: str = Field(..., description="Event type")
    event_id: Optional[int] = Field(None, description="Runtime event id")
    timestamp: datetime = Field(..., description="When the event was recorded (UTC)")
    name: Optional[str] = Field(None, alias="FunctionName", description="Function or activity name")
    scheduled_time: Optional[datetime] = Field(None, description="When the work was dispatched (UTC)")
    duration_in_ms: Optional[float] = Field(None, description="Computed duration")
    sub_orchestration_id: Optional[str] = Field(None, description="Correlated child instance id")
    result: Any = Field(None, description="Event result")
    reason: Optional[str] = Field(None, description="Failure or termination reason")
    details: Dict[str, Any] = Field(default_factory=dict, description="Other runtime fields")

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, frozen=True)

    @classmethod
    def from_event(cls, event: HistoryEvent) -> "HistoryEventDTO":
        return cls(
            event_type=event.event_type,
            event_id=event.event_id,
            timestamp=event.timestamp,
            name=event.name,
            scheduled_time=event.scheduled_time,
            duration_in_ms=event.duration_in_ms,
            sub_orchestration_id=event.sub_orchestration_id,
            result=event.result,
            reason=event.reason,
            details=event.details,
        )


class EntityIdDTO(BaseModel):
    """DTO for a durable entity id."""

    name: str
    key: str

    model_config = ConfigDict(frozen=True)


class OrchestrationStatusDTO(BaseModel):
    """Response DTO for orchestration instance details."""

    instance_id: str = Field(..., description="Instance ID")
    name: str = Field(..., description="Orchestration name")
    runtime_status: OrchestrationRuntimeStatus = Field(..., description="Runtime status")
    created_time: datetime = Field(..., description="Creation time (UTC)")
    last_updated_time: datetime = Field(..., description="Last update time (UTC)")
    input: Any = Field(None, description="Instance input")
    output: Any = Field(None, description="Instance output")
    custom_status: Any = Field(None, description="Custom status")
    entity_type: EntityType = Field(..., description="Orchestration or DurableEntity")
    entity_id: Optional[EntityIdDTO] = Field(None, description="Entity id, for entities only")
    tab_template_names: List[str] = Field(default_factory=list, description="Custom tabs available")
    history: Optional[List[HistoryEventDTO]] = Field(None, description="Enriched history")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @classmethod
    def from_status(
        cls,
        status: OrchestrationStatus,
        tab_template_names: Optional[List[str]] = None,
    ) -> "OrchestrationStatusDTO":
        entity_id = None
        if isinstance(status.address, EntityAddress):
            entity_id = EntityIdDTO(name=status.address.entity_name, key=status.address.entity_key)

        history = None
        if status.history is not None:
            history = [HistoryEventDTO.from_event(e) for e in status.history]

        return cls(
            instance_id=status.instance_id,
            name=status.name,
            runtime_status=status.runtime_status,
            created_time=status.created_time,
            last_updated_time=status.last_updated_time,
            input=status.input,
            output=status.output,
            custom_status=status.custom_status,
            entity_type=status.entity_type,
            entity_id=entity_id,
            tab_template_names=tab_template_names or [],
            history=history,
        )


class HistoryPageDTO(BaseModel):
    """Response DTO for one page of history."""

    total_count: int = Field(..., ge=0, description="Unpaged history length")
    history: List[HistoryEventDTO] = Field(default_factory=list, description="Page of events")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @classmethod
    def from_page(cls, page: HistoryPage) -> "HistoryPageDTO":
        return cls(
            total_count=page.total_count,
            history=[HistoryEventDTO.from_event(e) for e in page.items],
        )
