"""Application DTOs."""

from .orchestration_dto import (
    EntityIdDTO,
    HistoryEventDTO,
    HistoryPageDTO,
    OrchestrationStatusDTO,
)

__all__ = [
    "EntityIdDTO",
    "HistoryEventDTO",
    "HistoryPageDTO",
    "OrchestrationStatusDTO",
]
