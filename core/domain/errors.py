"""
Monitor errors.

Every failure the detail/action engine can report to its caller.
The HTTP layer maps each category to a status code.
"""
from typing import Optional


class MonitorError(Exception):
    """Base class for all engine errors."""
    pass


class UnauthorizedError(MonitorError):
    """Identity check failed."""
    pass


class ForbiddenError(MonitorError):
    """Mutating action attempted while the process is read-only."""
    pass


class NotFoundError(MonitorError):
    """Something the request refers to does not exist."""
    pass


class InstanceNotFoundError(NotFoundError):
    """Orchestration instance does not exist."""

    def __init__(self, instance_id: str):
        self.instance_id = instance_id
        super().__init__(f"Instance {instance_id} doesn't exist")


class UnknownActionError(NotFoundError):
    """Action tag is not one of the supported actions."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Unknown action: {action}")


class TemplateNotFoundError(NotFoundError):
    """No custom tab template registered under this name."""

    def __init__(self, entity_type_name: str, template_name: str):
        self.entity_type_name = entity_type_name
        self.template_name = template_name
        super().__init__("The specified template doesn't exist")


class InvalidRequestError(MonitorError):
    """Malformed request body or query parameter."""
    pass


class RenderError(MonitorError):
    """Template failed to parse or evaluate."""
    pass


class DurableRuntimeError(MonitorError):
    """Workflow runtime client failed."""
    pass


class StorageError(MonitorError):
    """Raw storage accessor failed."""
    pass


class ActionFailedError(MonitorError):
    """A mutating action reached its collaborator and the collaborator failed."""

    def __init__(self, action: str, instance_id: str, message: Optional[str] = None):
        self.action = action
        self.instance_id = instance_id
        self.message = message or ""
        super().__init__(f"Failed to {action} {instance_id}: {self.message}")
