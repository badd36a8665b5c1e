"""
Action Dispatcher.

Runs mutating actions against an orchestration instance.

Every command goes through, in order:
1. identity validation   -> UnauthorizedError
2. process mode gate     -> ForbiddenError
3. dispatch on action    -> UnknownActionError / InvalidRequestError / ActionFailedError
No collaborator is touched before both gates pass. Nothing is retried.
"""
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from core.application.commands import ActionResult, OrchestrationActionCommand
from core.application.interfaces import IDurableClient, IHistoryStorage, IIdentityValidator
from core.domain.enums import OrchestrationAction, ProcessMode
from core.domain.errors import (
    ActionFailedError,
    ForbiddenError,
    InstanceNotFoundError,
    InvalidRequestError,
    NotFoundError,
    UnauthorizedError,
    UnknownActionError,
)
from core.domain.value_objects import EntityAddress, classify_instance_id


logger = logging.getLogger(__name__)


ActionHandler = Callable[[str, str], Awaitable[Optional[str]]]


def _decode_body(body: Union[str, bytes, None], action: str) -> str:
    """Request body as text. Bytes must be UTF-8."""
    if not body:
        return ""
    if isinstance(body, str):
        return body
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidRequestError(f"{action}: request body is not valid UTF-8 (byte {e.start})")


def _parse_json_object(body: str, action: str) -> Dict[str, Any]:
    """Parse a request body that must be a JSON object."""
    try:
        parsed = json.loads(body)
    except (TypeError, ValueError) as e:
        raise InvalidRequestError(f"{action}: request body is not valid JSON: {e}")

    if not isinstance(parsed, dict):
        raise InvalidRequestError(f"{action}: request body must be a JSON object")

    return parsed


class ActionDispatcher:
    """
    Dispatches mutating actions.

    Usage:
        dispatcher = ActionDispatcher(client, storage, validator, ProcessMode.NORMAL)
        await dispatcher.dispatch(OrchestrationActionCommand(
            instance_id="abc", action="terminate", body="stuck",
        ))
    """

    def __init__(
        self,
        durable_client: IDurableClient,
        history_storage: IHistoryStorage,
        identity_validator: IIdentityValidator,
        mode: ProcessMode,
    ):
        """
        Initialize dispatcher.

        Args:
            durable_client: Runtime client bound to a task hub
            history_storage: Raw storage accessor (custom status edits)
            identity_validator: Identity validator
            mode: Process mode, fixed at startup
        """
        self._client = durable_client
        self._storage = history_storage
        self._identity_validator = identity_validator
        self._mode = mode

        self._handlers: Dict[OrchestrationAction, ActionHandler] = {
            OrchestrationAction.PURGE: self._purge,
            OrchestrationAction.REWIND: self._rewind,
            OrchestrationAction.TERMINATE: self._terminate,
            OrchestrationAction.RAISE_EVENT: self._raise_event,
            OrchestrationAction.SET_CUSTOM_STATUS: self._set_custom_status,
            OrchestrationAction.RESTART: self._restart,
        }

    async def dispatch(self, command: OrchestrationActionCommand) -> ActionResult:
        """
        Validate and run one action.

        Args:
            command: Action command

        Returns:
            ActionResult

        Raises:
            UnauthorizedError: Identity check failed
            ForbiddenError: Process is read-only
            UnknownActionError: Unsupported action tag
            InvalidRequestError: Malformed or non-UTF-8 body
            InstanceNotFoundError: Instance record missing (set-custom-status)
            ActionFailedError: Runtime client or storage failed
        """
        task_hub = self._client.task_hub_name

        try:
            await self._identity_validator.validate(
                command.identity.principal, command.identity.headers, task_hub
            )
        except Exception as e:
            logger.error(f"Failed to authenticate request: {e}")
            if isinstance(e, UnauthorizedError):
                raise
            raise UnauthorizedError(str(e)) from e

        if not self._mode.allows_mutation:
            logger.error(f"Endpoint is in {self._mode.value} mode, refusing {command.action}")
            raise ForbiddenError(f"Endpoint is in {self._mode.value} mode")

        try:
            action = OrchestrationAction(command.action)
        except ValueError:
            raise UnknownActionError(command.action)

        body = _decode_body(command.body, action.value)
        handler = self._handlers[action]

        logger.info(f"Dispatching {action.value} for {command.instance_id} (task hub: {task_hub})")

        try:
            new_instance_id = await handler(command.instance_id, body)
        except (InvalidRequestError, NotFoundError):
            raise
        except Exception as e:
            logger.error(f"Failed to {action.value} {command.instance_id}: {e}", exc_info=True)
            raise ActionFailedError(action.value, command.instance_id, str(e)) from e

        logger.info(f"✅ {action.value} succeeded for {command.instance_id}")

        return ActionResult(
            instance_id=command.instance_id,
            action=action.value,
            new_instance_id=new_instance_id,
        )

    # =========================================================================
    # HANDLERS
    # =========================================================================

    async def _purge(self, instance_id: str, body: str) -> None:
        await self._client.purge_instance_history(instance_id)

    async def _rewind(self, instance_id: str, body: str) -> None:
        await self._client.rewind(instance_id, body)

    async def _terminate(self, instance_id: str, body: str) -> None:
        await self._client.terminate(instance_id, body)

    async def _raise_event(self, instance_id: str, body: str) -> None:
        payload = _parse_json_object(body, OrchestrationAction.RAISE_EVENT.value)

        event_name = payload.get("name")
        if not isinstance(event_name, str) or not event_name:
            raise InvalidRequestError("raise-event: 'name' must be a non-empty string")
        event_data = payload.get("data")

        address = classify_instance_id(instance_id)
        if isinstance(address, EntityAddress):
            await self._client.signal_entity(
                address.entity_name, address.entity_key, event_name, event_data
            )
        else:
            await self._client.raise_event(instance_id, event_name, event_data)

    async def _set_custom_status(self, instance_id: str, body: str) -> None:
        # No runtime primitive for this, so the instance row is edited directly.
        # Not safe against concurrent writers: last write wins.
        custom_status = None
        if body.strip():
            parsed = _parse_json_object(body, OrchestrationAction.SET_CUSTOM_STATUS.value)
            custom_status = json.dumps(parsed)

        record = await self._storage.read_instance_record(self._client.task_hub_name, instance_id)
        if record is None:
            raise InstanceNotFoundError(instance_id)

        record.custom_status = custom_status

        await self._storage.replace_instance_record(record)

    async def _restart(self, instance_id: str, body: str) -> str:
        restart_with_new_instance_id = False
        if body.strip():
            payload = _parse_json_object(body, OrchestrationAction.RESTART.value)
            flag = payload.get("restartWithNewInstanceId", False)
            if not isinstance(flag, bool):
                raise InvalidRequestError("restart: 'restartWithNewInstanceId' must be a boolean")
            restart_with_new_instance_id = flag

        return await self._client.restart(instance_id, restart_with_new_instance_id)
