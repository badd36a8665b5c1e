"""
SQLAlchemy ORM Models.

Task hub tables as written by the workflow runtime.
Every table is partitioned by task hub name, then by instance id.
"""
from sqlalchemy import (
    Column, String, DateTime, Integer, Text, Index, JSON, PrimaryKeyConstraint
)
from sqlalchemy.orm import declarative_base

from core.domain.clock import utc_now


Base = declarative_base()


# =============================================================================
# INSTANCE MODEL
# =============================================================================

class InstanceModel(Base):
    """
    Instance database model.

    One row per orchestration (or entity) instance, holding its current status.
    input / output / custom_status are serialized JSON text.
    """

    __tablename__ = "instances"

    task_hub = Column(String(255), nullable=False)
    instance_id = Column(String(255), nullable=False)

    name = Column(String(255), nullable=False)
    runtime_status = Column(String(50), nullable=False, default="Pending", index=True)
    execution_id = Column(String(255), nullable=True)

    input = Column(Text, nullable=True)
    output = Column(Text, nullable=True)
    custom_status = Column(Text, nullable=True)

    created_time = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    last_updated_time = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    __table_args__ = (
        PrimaryKeyConstraint("task_hub", "instance_id", name="pk_instances"),
        Index("ix_instances_task_hub_created_time", "task_hub", "created_time"),
    )

    def __repr__(self):
        return f"<InstanceModel(task_hub={self.task_hub}, instance_id={self.instance_id}, status={self.runtime_status})>"


# =============================================================================
# HISTORY MODEL
# =============================================================================

class HistoryModel(Base):
    """
    History database model.

    One row per history event. For "SubOrchestrationInstanceCreated" rows,
    child_instance_id holds the spawned instance id and timestamp is the
    creation time the completion event later reports as its scheduled time.
    """

    __tablename__ = "history"

    id = Column(Integer, primary_key=True, autoincrement=True)

    task_hub = Column(String(255), nullable=False)
    instance_id = Column(String(255), nullable=False)
    sequence_number = Column(Integer, nullable=False)

    event_type = Column(String(100), nullable=False, index=True)
    event_id = Column(Integer, nullable=True)
    name = Column(String(255), nullable=True)

    timestamp = Column(DateTime(timezone=True), nullable=False)
    scheduled_time = Column(DateTime(timezone=True), nullable=True)

    child_instance_id = Column(String(255), nullable=True)
    result = Column(Text, nullable=True)
    reason = Column(Text, nullable=True)
    details = Column(JSON, nullable=True)

    __table_args__ = (
        Index("ix_history_partition", "task_hub", "instance_id", "sequence_number", unique=True),
        Index("ix_history_partition_event_type", "task_hub", "instance_id", "event_type"),
    )

    def __repr__(self):
        return f"<HistoryModel(instance_id={self.instance_id}, seq={self.sequence_number}, type={self.event_type})>"


# =============================================================================
# CONTROL MESSAGE MODEL
# =============================================================================

class ControlMessageModel(Base):
    """
    Control message database model.

    Requests for the runtime worker (terminate, rewind, raise event,
    signal entity, restart). The monitor only enqueues them.
    """

    __tablename__ = "control_messages"

    id = Column(Integer, primary_key=True, autoincrement=True)

    task_hub = Column(String(255), nullable=False)
    instance_id = Column(String(255), nullable=False, index=True)
    message_type = Column(String(100), nullable=False)
    payload = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_control_messages_task_hub_created_at", "task_hub", "created_at"),
    )

    def __repr__(self):
        return f"<ControlMessageModel(instance_id={self.instance_id}, type={self.message_type})>"
