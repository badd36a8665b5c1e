"""Application services."""
from .action_dispatcher import ActionDispatcher
from .status_aggregator import StatusAggregator
from .template_renderer import RenderedTab, TemplateRenderer

__all__ = ["ActionDispatcher", "StatusAggregator", "RenderedTab", "TemplateRenderer"]
