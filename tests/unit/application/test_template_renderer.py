"""Tests for TemplateRenderer."""

import pytest
import pytest_asyncio

from core.application.services import StatusAggregator, TemplateRenderer
from core.domain.errors import RenderError, TemplateNotFoundError
from tests.mocks.fake_task_hub import FakeTemplateRegistry


def _renderer(template_code: str, entity_type_name: str = "Parent") -> TemplateRenderer:
    return TemplateRenderer(FakeTemplateRegistry({(entity_type_name, "Tab"): template_code}))


@pytest_asyncio.fixture
async def status(durable_client, history_storage):
    return await StatusAggregator(durable_client, history_storage).get_detail("parent-1")


@pytest.mark.asyncio
async def test_renders_status_fields(status):
    """Test top-level status fields are available by name."""
    renderer = _renderer("{{ instance_id }}|{{ name }}|{{ runtime_status }}|{{ input.city }}")

    rendered = await renderer.render(status, "Tab")

    assert rendered.succeeded
    assert rendered.content == "parent-1|Parent|Completed|Seattle"


@pytest.mark.asyncio
async def test_renders_history_loop(status):
    """Test history events and loop variables are readable."""
    renderer = _renderer(
        "{% for e in history %}{{ loop.index }}:{{ e.event_type }}:{{ e.sub_orchestration_id }};{% endfor %}"
    )

    rendered = await renderer.render(status, "Tab")

    assert rendered.content == (
        "1:ExecutionStarted:None;"
        "2:TaskCompleted:None;"
        "3:SubOrchestrationInstanceCompleted:child-1;"
        "4:ExecutionCompleted:None;"
    )


@pytest.mark.asyncio
async def test_datetimes_render_as_iso_text(status):
    """Test datetime fields are handed to templates as ISO 8601 text."""
    rendered = await _renderer("{{ history[0].timestamp }}").render(status, "Tab")

    assert rendered.content == "2024-05-01T12:00:00+00:00"


@pytest.mark.asyncio
async def test_output_is_escaped(status):
    """Test instance data can't inject markup."""
    status.input = {"city": "<script>alert(1)</script>"}

    rendered = await _renderer("{{ input.city }}").render(status, "Tab")

    assert rendered.content == "&lt;script&gt;alert(1)&lt;/script&gt;"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "template_code",
    [
        "[{{ instance_id.__class__ }}]",
        "[{{ history.__len__ }}]",
        "[{{ history[0].__dict__ }}]",
        "[{{ history[0].timestamp.year }}]",
        "[{{ no_such_field }}]",
    ],
)
async def test_only_registered_fields_resolve(template_code, status):
    """Test anything outside the accessor registry renders as undefined."""
    rendered = await _renderer(template_code).render(status, "Tab")

    assert rendered.succeeded
    assert rendered.content == "[]"


@pytest.mark.asyncio
@pytest.mark.parametrize("template_code", ["{% for %}", "{{ 1 / 0 }}", "{{ input | no_such_filter }}"])
async def test_render_failures_are_returned_as_content(template_code, status):
    """Test parse and evaluation errors come back as a failed RenderedTab."""
    rendered = await _renderer(template_code).render(status, "Tab")

    assert not rendered.succeeded
    assert isinstance(rendered.error, RenderError)
    assert rendered.content == str(rendered.error)
    assert rendered.content


@pytest.mark.asyncio
async def test_unknown_template(status):
    """Test unregistered template names raise TemplateNotFoundError."""
    with pytest.raises(TemplateNotFoundError):
        await _renderer("x").render(status, "Nope")


@pytest.mark.asyncio
async def test_entity_templates_are_keyed_by_entity_name(hub, durable_client, history_storage):
    """Test entities look their templates up by entity name."""
    hub.add_instance("@counter@abc", name="@counter@abc", custom_status={"total": 7})
    aggregator = StatusAggregator(durable_client, history_storage)
    renderer = TemplateRenderer(
        FakeTemplateRegistry({("counter", "Tab"): "{{ entity_type }}={{ custom_status.total }}"}),
        aggregator,
    )

    rendered = await renderer.render_for_instance("@counter@abc", "Tab")

    assert rendered.content == "DurableEntity=7"
