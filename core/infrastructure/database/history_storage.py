"""
History Storage Implementation.

Raw access to task hub tables, for what the runtime client can't do:
- listing the "sub-orchestration created" rows of a parent instance
- read-modify-write of an instance row (custom status edits)
"""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.application.interfaces import IHistoryStorage
from core.domain.entities import ChildOrchestrationRecord, InstanceRecord
from core.domain.enums import HistoryEventType
from core.domain.errors import StorageError
from core.infrastructure.database.mappers import HistoryMapper, InstanceMapper
from core.infrastructure.database.models import HistoryModel, InstanceModel


logger = logging.getLogger(__name__)


class SqlHistoryStorage(IHistoryStorage):
    """
    SQLAlchemy-backed raw storage accessor.

    Every call opens its own session, so calls can run concurrently
    with runtime client calls.

    Usage:
        storage = SqlHistoryStorage(get_session_factory())
        records = await storage.query_child_creation_records("hub", "parent-id")
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """
        Initialize storage.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session_factory = session_factory

    async def query_child_creation_records(
        self, task_hub: str, parent_instance_id: str
    ) -> List[ChildOrchestrationRecord]:
        """
        Get "sub-orchestration created" rows of a parent instance.

        Args:
            task_hub: Task hub name
            parent_instance_id: Parent instance ID (history partition)

        Returns:
            Child records ordered by creation time
        """
        query = (
            select(HistoryModel)
            .where(
                HistoryModel.task_hub == task_hub,
                HistoryModel.instance_id == parent_instance_id,
                HistoryModel.event_type == HistoryEventType.SUB_ORCHESTRATION_CREATED.value,
            )
            .order_by(HistoryModel.timestamp, HistoryModel.sequence_number)
        )

        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                models = result.scalars().all()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to query sub-orchestrations of {parent_instance_id}: {e}") from e

        records = [HistoryMapper.to_child_record(m) for m in models if m.child_instance_id]

        logger.debug(f"Loaded {len(records)} sub-orchestration record(s) for {parent_instance_id}")

        return records

    async def read_instance_record(self, task_hub: str, instance_id: str) -> Optional[InstanceRecord]:
        """
        Read the raw instance row.

        Returns:
            InstanceRecord if found, None otherwise
        """
        try:
            async with self._session_factory() as session:
                model = await session.get(InstanceModel, (task_hub, instance_id))
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read instance {instance_id}: {e}") from e

        return InstanceMapper.to_record(model) if model else None

    async def replace_instance_record(self, record: InstanceRecord) -> None:
        """
        Overwrite the raw instance row.

        Raises:
            StorageError: If the row no longer exists or the write fails
        """
        try:
            async with self._session_factory() as session:
                model = await session.get(InstanceModel, (record.task_hub, record.instance_id))
                if model is None:
                    raise StorageError(f"Instance {record.instance_id} no longer exists")

                InstanceMapper.apply_record(model, record)
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to replace instance {record.instance_id}: {e}") from e

        logger.info(f"✅ Instance record replaced: {record.instance_id} (task hub: {record.task_hub})")
