"""
SQL Task Hub Client.

Runtime client over the task hub tables.

The monitor never runs orchestrations. Reads and purges go straight to
the tables; every other primitive is enqueued as a control message for
the runtime worker to pick up.
"""
import logging
import uuid
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.application.interfaces import IDurableClient
from core.domain.entities import OrchestrationStatus
from core.domain.errors import DurableRuntimeError, InstanceNotFoundError
from core.infrastructure.database.mappers import HistoryMapper, InstanceMapper, load_json_text
from core.infrastructure.database.models import ControlMessageModel, HistoryModel, InstanceModel


logger = logging.getLogger(__name__)


class ControlMessageType(str, Enum):
    """Message types understood by the runtime worker."""

    EXECUTION_STARTED = "ExecutionStarted"
    EXECUTION_TERMINATED = "ExecutionTerminated"
    EXECUTION_REWOUND = "ExecutionRewound"
    EVENT_RAISED = "EventRaised"
    ENTITY_OPERATION_SIGNALED = "EntityOperationSignaled"


def entity_instance_id(entity_name: str, entity_key: str) -> str:
    """Runtime instance id of a durable entity."""
    return f"@{entity_name.lower()}@{entity_key}"


class SqlTaskHubClient(IDurableClient):
    """
    Runtime client bound to one task hub.

    Usage:
        client = SqlTaskHubClient(get_session_factory(), "MyTaskHub")
        status = await client.get_status("abc", show_history=True)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], task_hub_name: str):
        """
        Initialize client.

        Args:
            session_factory: SQLAlchemy async session factory
            task_hub_name: Task hub this client is bound to
        """
        self._session_factory = session_factory
        self._task_hub_name = task_hub_name

    @property
    def task_hub_name(self) -> str:
        return self._task_hub_name

    async def get_status(
        self,
        instance_id: str,
        show_history: bool = False,
        show_history_output: bool = False,
        show_input: bool = True,
    ) -> Optional[OrchestrationStatus]:
        try:
            async with self._session_factory() as session:
                model = await session.get(InstanceModel, (self._task_hub_name, instance_id))
                if model is None:
                    return None

                status = InstanceMapper.to_status(model, show_input=show_input)

                if show_history:
                    query = (
                        select(HistoryModel)
                        .where(
                            HistoryModel.task_hub == self._task_hub_name,
                            HistoryModel.instance_id == instance_id,
                        )
                        .order_by(HistoryModel.sequence_number)
                    )
                    result = await session.execute(query)
                    status.history = [
                        HistoryMapper.to_event(m, show_output=show_history_output)
                        for m in result.scalars().all()
                    ]
        except SQLAlchemyError as e:
            raise DurableRuntimeError(f"Failed to get status of {instance_id}: {e}") from e

        return status

    async def purge_instance_history(self, instance_id: str) -> int:
        try:
            async with self._session_factory() as session:
                await session.execute(
                    delete(HistoryModel).where(
                        HistoryModel.task_hub == self._task_hub_name,
                        HistoryModel.instance_id == instance_id,
                    )
                )
                result = await session.execute(
                    delete(InstanceModel).where(
                        InstanceModel.task_hub == self._task_hub_name,
                        InstanceModel.instance_id == instance_id,
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise DurableRuntimeError(f"Failed to purge {instance_id}: {e}") from e

        logger.info(f"✅ Purged {instance_id} (task hub: {self._task_hub_name})")

        return result.rowcount or 0

    async def rewind(self, instance_id: str, reason: str) -> None:
        await self._enqueue(instance_id, ControlMessageType.EXECUTION_REWOUND, {"reason": reason})

    async def terminate(self, instance_id: str, reason: str) -> None:
        await self._enqueue(instance_id, ControlMessageType.EXECUTION_TERMINATED, {"reason": reason})

    async def raise_event(self, instance_id: str, event_name: str, event_data: Any = None) -> None:
        await self._enqueue(
            instance_id,
            ControlMessageType.EVENT_RAISED,
            {"name": event_name, "input": event_data},
        )

    async def signal_entity(
        self,
        entity_name: str,
        entity_key: str,
        operation_name: str,
        operation_input: Any = None,
    ) -> None:
        await self._enqueue(
            entity_instance_id(entity_name, entity_key),
            ControlMessageType.ENTITY_OPERATION_SIGNALED,
            {"operation": operation_name, "input": operation_input},
        )

    async def restart(self, instance_id: str, restart_with_new_instance_id: bool = True) -> str:
        try:
            async with self._session_factory() as session:
                model = await session.get(InstanceModel, (self._task_hub_name, instance_id))
        except SQLAlchemyError as e:
            raise DurableRuntimeError(f"Failed to read {instance_id}: {e}") from e

        if model is None:
            raise InstanceNotFoundError(instance_id)

        new_instance_id = uuid.uuid4().hex if restart_with_new_instance_id else instance_id

        await self._enqueue(
            new_instance_id,
            ControlMessageType.EXECUTION_STARTED,
            {
                "name": model.name,
                "input": load_json_text(model.input),
                "restartedFrom": instance_id,
            },
        )

        return new_instance_id

    async def _enqueue(
        self,
        instance_id: str,
        message_type: ControlMessageType,
        payload: Dict[str, Any],
    ) -> None:
        """Write one control message for the runtime worker."""
        message = ControlMessageModel(
            task_hub=self._task_hub_name,
            instance_id=instance_id,
            message_type=message_type.value,
            payload=payload,
        )

        try:
            async with self._session_factory() as session:
                session.add(message)
                await session.commit()
        except SQLAlchemyError as e:
            raise DurableRuntimeError(
                f"Failed to send {message_type.value} to {instance_id}: {e}"
            ) from e

        logger.info(
            f"Enqueued {message_type.value} for {instance_id} (task hub: {self._task_hub_name})"
        )
