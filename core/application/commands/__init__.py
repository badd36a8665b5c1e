"""Application commands."""

from .orchestration_commands import ActionResult, OrchestrationActionCommand, RequestIdentity

__all__ = ["ActionResult", "OrchestrationActionCommand", "RequestIdentity"]
