"""Mutating actions that can be posted against an instance."""
from enum import Enum


class OrchestrationAction(str, Enum):
    """Action tags accepted by the action endpoint."""

    PURGE = "purge"
    REWIND = "rewind"
    TERMINATE = "terminate"
    RAISE_EVENT = "raise-event"
    SET_CUSTOM_STATUS = "set-custom-status"
    RESTART = "restart"
