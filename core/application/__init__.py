"""Application layer - services, commands, interfaces, and DTOs."""

from .commands import ActionResult, OrchestrationActionCommand, RequestIdentity
from .dtos import HistoryEventDTO, HistoryPageDTO, OrchestrationStatusDTO
from .interfaces import IDurableClient, IHistoryStorage, IIdentityValidator, ITemplateRegistry
from .services import ActionDispatcher, RenderedTab, StatusAggregator, TemplateRenderer

__all__ = [
    # Commands
    "ActionResult",
    "OrchestrationActionCommand",
    "RequestIdentity",
    # DTOs
    "HistoryEventDTO",
    "HistoryPageDTO",
    "OrchestrationStatusDTO",
    # Interfaces
    "IDurableClient",
    "IHistoryStorage",
    "IIdentityValidator",
    "ITemplateRegistry",
    # Services
    "ActionDispatcher",
    "RenderedTab",
    "StatusAggregator",
    "TemplateRenderer",
]
