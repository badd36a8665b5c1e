"""
Template Renderer.

Renders custom tab templates (Jinja2) against an orchestration status.

Templates run in a sandbox whose only capability is reading fields by
name. Field lookup goes through a registry of accessors, one per value
type. Anything without an accessor is undefined in the template.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from jinja2.runtime import LoopContext
from jinja2.sandbox import SandboxedEnvironment

from core.application.interfaces import ITemplateRegistry
from core.application.services.status_aggregator import StatusAggregator
from core.domain.entities import HistoryEvent, OrchestrationStatus
from core.domain.errors import RenderError, TemplateNotFoundError


logger = logging.getLogger(__name__)


_MISSING = object()

FieldAccessor = Callable[[Any, Any], Any]


# =============================================================================
# FIELD ACCESSORS
# =============================================================================

STATUS_FIELDS: Dict[str, Callable[[OrchestrationStatus], Any]] = {
    "instance_id": lambda s: s.instance_id,
    "name": lambda s: s.name,
    "runtime_status": lambda s: s.runtime_status,
    "created_time": lambda s: s.created_time,
    "last_updated_time": lambda s: s.last_updated_time,
    "input": lambda s: s.input,
    "output": lambda s: s.output,
    "custom_status": lambda s: s.custom_status,
    "entity_type": lambda s: s.entity_type,
    "entity_type_name": lambda s: s.entity_type_name,
    "history": lambda s: s.history,
}

HISTORY_EVENT_FIELDS: Dict[str, Callable[[HistoryEvent], Any]] = {
    "event_type": lambda e: e.event_type,
    "event_id": lambda e: e.event_id,
    "timestamp": lambda e: e.timestamp,
    "name": lambda e: e.name,
    "scheduled_time": lambda e: e.scheduled_time,
    "duration_in_ms": lambda e: e.duration_in_ms,
    "sub_orchestration_id": lambda e: e.sub_orchestration_id,
    "result": lambda e: e.result,
    "reason": lambda e: e.reason,
    "details": lambda e: e.details,
}

LOOP_FIELDS = ("index", "index0", "revindex", "revindex0", "first", "last", "length")


def _named_field(fields: Dict[str, Callable[[Any], Any]]) -> FieldAccessor:
    def accessor(obj: Any, name: Any) -> Any:
        getter = fields.get(name) if isinstance(name, str) else None
        return getter(obj) if getter else _MISSING
    return accessor


def _loop_field(obj: LoopContext, name: Any) -> Any:
    return getattr(obj, name) if name in LOOP_FIELDS else _MISSING


def _mapping_field(obj: dict, name: Any) -> Any:
    return obj.get(name, _MISSING)


def _sequence_field(obj: Any, index: Any) -> Any:
    if isinstance(index, bool) or not isinstance(index, int):
        return _MISSING
    if -len(obj) <= index < len(obj):
        return obj[index]
    return _MISSING


FIELD_ACCESSORS: List[Tuple[type, FieldAccessor]] = [
    (OrchestrationStatus, _named_field(STATUS_FIELDS)),
    (HistoryEvent, _named_field(HISTORY_EVENT_FIELDS)),
    (dict, _mapping_field),
    (list, _sequence_field),
    (tuple, _sequence_field),
    (LoopContext, _loop_field),
]


def to_template_value(value: Any) -> Any:
    """Coerce a looked-up value to something templates handle natively."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def lookup_field(obj: Any, name: Any) -> Any:
    """
    Look up a field by name via the registered accessors.

    Returns:
        The coerced value, or the module's missing marker
    """
    for value_type, accessor in FIELD_ACCESSORS:
        if isinstance(obj, value_type):
            value = accessor(obj, name)
            return value if value is _MISSING else to_template_value(value)
    return _MISSING


def build_template_context(status: OrchestrationStatus) -> Dict[str, Any]:
    """Top-level template variables for a status."""
    return {name: to_template_value(getter(status)) for name, getter in STATUS_FIELDS.items()}


class FieldAccessSandbox(SandboxedEnvironment):
    """Jinja2 sandbox where `a.b` and `a[b]` only go through FIELD_ACCESSORS."""

    def getattr(self, obj: Any, attribute: str) -> Any:
        value = lookup_field(obj, attribute)
        if value is _MISSING:
            return self.undefined(obj=obj, name=attribute)
        return value

    def getitem(self, obj: Any, argument: Any) -> Any:
        value = lookup_field(obj, argument)
        if value is _MISSING:
            return self.undefined(obj=obj, name=argument)
        return value


# =============================================================================
# RENDERER
# =============================================================================

@dataclass
class RenderedTab:
    """Render outcome. On failure, content holds the error message."""
    content: str
    error: Optional[RenderError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class TemplateRenderer:
    """Renders custom tab templates for orchestration instances."""

    def __init__(
        self,
        template_registry: ITemplateRegistry,
        status_aggregator: Optional[StatusAggregator] = None,
    ):
        """
        Initialize renderer.

        Args:
            template_registry: Where template source comes from
            status_aggregator: Used by render_for_instance to load the status
        """
        self._registry = template_registry
        self._aggregator = status_aggregator
        self._environment = FieldAccessSandbox(autoescape=True)

    async def render_for_instance(self, instance_id: str, template_name: str) -> RenderedTab:
        """Load an instance's enriched status, then render a template against it."""
        if self._aggregator is None:
            raise RuntimeError("TemplateRenderer was created without a StatusAggregator")

        status = await self._aggregator.get_detail(instance_id)
        return await self.render(status, template_name)

    async def render(self, status: OrchestrationStatus, template_name: str) -> RenderedTab:
        """
        Render a template against a status.

        Args:
            status: Orchestration status
            template_name: Template name, looked up for the status' entity type

        Returns:
            RenderedTab (failed renders carry the error message as content)

        Raises:
            TemplateNotFoundError: If no such template is registered
        """
        entity_type_name = status.entity_type_name

        template_code = await self._registry.get_template(entity_type_name, template_name)
        if template_code is None:
            raise TemplateNotFoundError(entity_type_name, template_name)

        try:
            template = self._environment.from_string(template_code)
            html = template.render(build_template_context(status))
        except Exception as e:
            logger.warning(
                f"Failed to render template {template_name} for {status.instance_id}: {e}"
            )
            return RenderedTab(content=str(e), error=RenderError(str(e)))

        return RenderedTab(content=html)
