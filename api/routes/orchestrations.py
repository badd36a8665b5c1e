"""
Orchestration instance endpoints.

Detail view, paged history, custom tabs and mutating actions
for a single orchestration instance.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import HTMLResponse, PlainTextResponse

from core.application.commands import OrchestrationActionCommand, RequestIdentity
from core.application.dtos import HistoryPageDTO, OrchestrationStatusDTO
from core.application.interfaces import ITemplateRegistry
from core.application.services import ActionDispatcher, StatusAggregator, TemplateRenderer
from core.domain.services import parse_paging_clause

from api.dependencies import (
    get_action_dispatcher,
    get_request_identity,
    get_status_aggregator,
    get_template_registry,
    get_template_renderer,
    require_identity,
)


router = APIRouter(prefix="/task-hubs/{task_hub}/orchestrations", tags=["orchestrations"])


@router.get(
    "/{instance_id}",
    response_model=OrchestrationStatusDTO,
    status_code=status.HTTP_200_OK,
    summary="Get orchestration details",
)
async def get_orchestration(
    instance_id: str,
    identity: RequestIdentity = Depends(require_identity),
    aggregator: StatusAggregator = Depends(get_status_aggregator),
    registry: ITemplateRegistry = Depends(get_template_registry),
) -> OrchestrationStatusDTO:
    """
    Get instance status with enriched, unpaged history.

    Args:
        instance_id: Instance ID

    Returns:
        OrchestrationStatusDTO
    """
    orchestration = await aggregator.get_detail(instance_id)
    tab_template_names = await registry.list_template_names(orchestration.entity_type_name)
    return OrchestrationStatusDTO.from_status(orchestration, tab_template_names)


@router.get(
    "/{instance_id}/history",
    response_model=HistoryPageDTO,
    status_code=status.HTTP_200_OK,
    summary="Get orchestration history page",
)
async def get_orchestration_history(
    instance_id: str,
    skip: Optional[str] = Query(None, alias="$skip", description="Events to skip"),
    top: Optional[str] = Query(None, alias="$top", description="Maximum events to return"),
    identity: RequestIdentity = Depends(require_identity),
    aggregator: StatusAggregator = Depends(get_status_aggregator),
) -> HistoryPageDTO:
    """
    Get one page of enriched history.

    Args:
        instance_id: Instance ID
        skip: Raw $skip value
        top: Raw $top value

    Returns:
        HistoryPageDTO with the unpaged total count
    """
    skip_count = parse_paging_clause("$skip", skip)
    top_count = parse_paging_clause("$top", top)

    page = await aggregator.get_history_page(instance_id, skip=skip_count, top=top_count)
    return HistoryPageDTO.from_page(page)


# POST, so the markup can't be opened by navigating to it directly
@router.post(
    "/{instance_id}/custom-tab-markup/{template_name}",
    response_class=HTMLResponse,
    summary="Render a custom tab",
)
async def render_custom_tab(
    instance_id: str,
    template_name: str,
    identity: RequestIdentity = Depends(require_identity),
    renderer: TemplateRenderer = Depends(get_template_renderer),
) -> Response:
    """
    Render a custom tab template against the instance.

    Returns:
        text/html on success, 400 with the error message otherwise
    """
    rendered = await renderer.render_for_instance(instance_id, template_name)

    if not rendered.succeeded:
        return PlainTextResponse(rendered.content, status_code=status.HTTP_400_BAD_REQUEST)

    return HTMLResponse(rendered.content, media_type="text/html; charset=UTF-8")


@router.post(
    "/{instance_id}/{action}",
    status_code=status.HTTP_200_OK,
    summary="Run an action against an orchestration",
    description="""
    Supported actions: purge, rewind, terminate, raise-event,
    set-custom-status, restart.
    """,
)
async def post_orchestration_action(
    instance_id: str,
    action: str,
    request: Request,
    identity: RequestIdentity = Depends(get_request_identity),
    dispatcher: ActionDispatcher = Depends(get_action_dispatcher),
) -> Response:
    """
    Run one mutating action. Identity and mode are checked by the dispatcher.

    Returns:
        Empty 200 on success
    """
    body = await request.body()

    await dispatcher.dispatch(
        OrchestrationActionCommand(
            instance_id=instance_id,
            action=action,
            body=body,
            identity=identity,
        )
    )

    return Response(status_code=status.HTTP_200_OK)
