"""
FastAPI Dependencies.

Provides dependency injection for the detail/action engine.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, Request

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from core.application.commands import RequestIdentity
from core.application.interfaces import (
    IDurableClient,
    IHistoryStorage,
    IIdentityValidator,
    ITemplateRegistry,
)
from core.application.services import ActionDispatcher, StatusAggregator, TemplateRenderer
from core.domain.enums import ProcessMode
from core.domain.errors import UnauthorizedError
from core.infrastructure.adapters.durable import SqlTaskHubClient
from core.infrastructure.adapters.identity import SettingsIdentityValidator
from core.infrastructure.adapters.templates import FolderTemplateRegistry
from core.infrastructure.database.config import get_session_factory
from core.infrastructure.database.history_storage import SqlHistoryStorage
from core.settings import get_app_settings

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

_history_storage: Optional[IHistoryStorage] = None
_identity_validator: Optional[IIdentityValidator] = None
_template_registry: Optional[ITemplateRegistry] = None


# =============================================================================
# COLLABORATORS
# =============================================================================

def get_process_mode() -> ProcessMode:
    """Process mode, as configured at startup."""
    return get_app_settings().monitor.mode


def get_durable_client(task_hub: str) -> IDurableClient:
    """Runtime client bound to the task hub named in the route."""
    return SqlTaskHubClient(get_session_factory(), task_hub)


def get_history_storage() -> IHistoryStorage:
    global _history_storage
    if _history_storage is None:
        _history_storage = SqlHistoryStorage(get_session_factory())
        logger.info("Created SqlHistoryStorage instance")
    return _history_storage


def get_identity_validator() -> IIdentityValidator:
    global _identity_validator
    if _identity_validator is None:
        _identity_validator = SettingsIdentityValidator(get_app_settings().monitor)
        logger.info("Created SettingsIdentityValidator instance")
    return _identity_validator


def get_template_registry() -> ITemplateRegistry:
    global _template_registry
    if _template_registry is None:
        folder = Path(get_app_settings().monitor.templates_folder)
        _template_registry = FolderTemplateRegistry(folder)
        logger.info(f"Created FolderTemplateRegistry instance ({folder})")
    return _template_registry


# =============================================================================
# IDENTITY
# =============================================================================

def get_request_identity(request: Request) -> RequestIdentity:
    return RequestIdentity(principal=None, headers=dict(request.headers))


async def require_identity(
    task_hub: str,
    identity: RequestIdentity = Depends(get_request_identity),
    validator: IIdentityValidator = Depends(get_identity_validator),
) -> RequestIdentity:
    """Validate the caller before any read endpoint does its work."""
    try:
        await validator.validate(identity.principal, identity.headers, task_hub)
    except UnauthorizedError as e:
        logger.error(f"Failed to authenticate request: {e}")
        raise
    except Exception as e:
        logger.error(f"Failed to authenticate request: {e}")
        raise UnauthorizedError(str(e)) from e
    return identity


# =============================================================================
# SERVICES
# =============================================================================

def get_status_aggregator(
    client: IDurableClient = Depends(get_durable_client),
    storage: IHistoryStorage = Depends(get_history_storage),
) -> StatusAggregator:
    return StatusAggregator(client, storage)


def get_template_renderer(
    registry: ITemplateRegistry = Depends(get_template_registry),
    aggregator: StatusAggregator = Depends(get_status_aggregator),
) -> TemplateRenderer:
    return TemplateRenderer(registry, aggregator)


def get_action_dispatcher(
    client: IDurableClient = Depends(get_durable_client),
    storage: IHistoryStorage = Depends(get_history_storage),
    validator: IIdentityValidator = Depends(get_identity_validator),
    mode: ProcessMode = Depends(get_process_mode),
) -> ActionDispatcher:
    return ActionDispatcher(client, storage, validator, mode)


# =============================================================================
# RESET (for testing)
# =============================================================================

def reset_dependencies():
    global _history_storage, _identity_validator, _template_registry

    _history_storage = None
    _identity_validator = None
    _template_registry = None

    logger.info("Dependencies reset")
