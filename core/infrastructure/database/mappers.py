"""Static mappers for task hub rows ↔ domain entities."""

import json
from typing import Any, Optional

from core.domain.clock import ensure_utc
from core.domain.entities import (
    ChildOrchestrationRecord,
    HistoryEvent,
    InstanceRecord,
    OrchestrationStatus,
)
from core.domain.enums import OrchestrationRuntimeStatus

from .models import HistoryModel, InstanceModel


def load_json_text(text: Optional[str]) -> Any:
    """Deserialize a JSON column. Text that isn't JSON is returned as-is."""
    if text is None or text == "":
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


class InstanceMapper:
    """Static mapper for InstanceModel ↔ InstanceRecord / OrchestrationStatus."""

    @staticmethod
    def to_record(model: InstanceModel) -> InstanceRecord:
        """Convert ORM model to the raw instance record.

        Args:
            model: InstanceModel instance

        Returns:
            InstanceRecord (JSON columns stay serialized)
        """
        return InstanceRecord(
            task_hub=model.task_hub,
            instance_id=model.instance_id,
            name=model.name,
            runtime_status=model.runtime_status,
            created_time=ensure_utc(model.created_time),
            last_updated_time=ensure_utc(model.last_updated_time),
            input=model.input,
            output=model.output,
            custom_status=model.custom_status,
        )

    @staticmethod
    def apply_record(model: InstanceModel, record: InstanceRecord) -> None:
        """Copy every record field onto an existing ORM model."""
        model.name = record.name
        model.runtime_status = record.runtime_status
        model.created_time = record.created_time
        model.last_updated_time = record.last_updated_time
        model.input = record.input
        model.output = record.output
        model.custom_status = record.custom_status

    @staticmethod
    def to_status(model: InstanceModel, show_input: bool = True) -> OrchestrationStatus:
        """Convert ORM model to a status snapshot (history is attached separately)."""
        return OrchestrationStatus(
            instance_id=model.instance_id,
            name=model.name,
            runtime_status=OrchestrationRuntimeStatus.parse(model.runtime_status),
            created_time=ensure_utc(model.created_time),
            last_updated_time=ensure_utc(model.last_updated_time),
            input=load_json_text(model.input) if show_input else None,
            output=load_json_text(model.output),
            custom_status=load_json_text(model.custom_status),
        )


class HistoryMapper:
    """Static mapper for HistoryModel ↔ HistoryEvent / ChildOrchestrationRecord."""

    @staticmethod
    def to_event(model: HistoryModel, show_output: bool = True) -> HistoryEvent:
        details = dict(model.details or {})
        if model.child_instance_id:
            details.setdefault("InstanceId", model.child_instance_id)

        return HistoryEvent(
            event_type=model.event_type,
            timestamp=ensure_utc(model.timestamp),
            event_id=model.event_id,
            name=model.name,
            scheduled_time=ensure_utc(model.scheduled_time),
            result=load_json_text(model.result) if show_output else None,
            reason=model.reason,
            details=details,
        )

    @staticmethod
    def to_child_record(model: HistoryModel) -> ChildOrchestrationRecord:
        return ChildOrchestrationRecord(
            name=model.name,
            creation_time=ensure_utc(model.timestamp),
            instance_id=model.child_instance_id,
        )
