"""
Runtime Status Enums.

Values reported by the workflow runtime for instances and history events.
"""
from enum import Enum


class OrchestrationRuntimeStatus(str, Enum):
    """Runtime status of an orchestration instance."""

    RUNNING = "Running"
    COMPLETED = "Completed"
    CONTINUED_AS_NEW = "ContinuedAsNew"
    FAILED = "Failed"
    CANCELED = "Canceled"
    TERMINATED = "Terminated"
    PENDING = "Pending"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str) -> "OrchestrationRuntimeStatus":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class HistoryEventType(str, Enum):
    """Well-known history event types.

    History events keep their type as plain text, so types the runtime adds
    later still flow through untouched.
    """

    EXECUTION_STARTED = "ExecutionStarted"
    EXECUTION_COMPLETED = "ExecutionCompleted"
    EXECUTION_TERMINATED = "ExecutionTerminated"
    TASK_SCHEDULED = "TaskScheduled"
    TASK_COMPLETED = "TaskCompleted"
    TASK_FAILED = "TaskFailed"
    SUB_ORCHESTRATION_CREATED = "SubOrchestrationInstanceCreated"
    SUB_ORCHESTRATION_COMPLETED = "SubOrchestrationInstanceCompleted"
    SUB_ORCHESTRATION_FAILED = "SubOrchestrationInstanceFailed"
    TIMER_CREATED = "TimerCreated"
    TIMER_FIRED = "TimerFired"
    EVENT_RAISED = "EventRaised"
    EVENT_SENT = "EventSent"
    ORCHESTRATOR_STARTED = "OrchestratorStarted"
    ORCHESTRATOR_COMPLETED = "OrchestratorCompleted"
    GENERIC_EVENT = "GenericEvent"


class EntityType(str, Enum):
    """What kind of instance an instance id addresses."""

    ORCHESTRATION = "Orchestration"
    DURABLE_ENTITY = "DurableEntity"
