"""
Status Aggregator.

Builds the enriched detail view of one orchestration instance:
- primary fetch: status + history from the runtime client
- secondary fetch: child creation records from raw storage (best effort)
Both run concurrently; the secondary one never fails the request.
"""
import asyncio
import logging
from typing import List, Optional

from core.application.interfaces import IDurableClient, IHistoryStorage
from core.domain.entities import ChildOrchestrationRecord, OrchestrationStatus
from core.domain.errors import DurableRuntimeError, InstanceNotFoundError, MonitorError
from core.domain.services import (
    HistoryPage,
    annotate_timing,
    correlate_sub_orchestrations,
    page_history,
)


logger = logging.getLogger(__name__)


class StatusAggregator:
    """
    Aggregates instance status, history and correlation data.

    Usage:
        aggregator = StatusAggregator(durable_client, history_storage)
        status = await aggregator.get_detail("my-instance")
    """

    def __init__(self, durable_client: IDurableClient, history_storage: IHistoryStorage):
        """
        Initialize aggregator.

        Args:
            durable_client: Runtime client bound to a task hub
            history_storage: Raw storage accessor for the same task hub
        """
        self._client = durable_client
        self._storage = history_storage

    async def get_detail(self, instance_id: str) -> OrchestrationStatus:
        """
        Get instance status with enriched history.

        Args:
            instance_id: Instance ID

        Returns:
            OrchestrationStatus with correlated and timed history

        Raises:
            InstanceNotFoundError: If the runtime does not know the instance
            DurableRuntimeError: If the runtime client fails
        """
        child_records_task = asyncio.create_task(self._try_load_child_records(instance_id))

        try:
            status = await self._load_status(instance_id)
        except BaseException:
            child_records_task.cancel()
            raise

        if status is None:
            child_records_task.cancel()
            raise InstanceNotFoundError(instance_id)

        child_records = await child_records_task

        if status.history:
            correlate_sub_orchestrations(status.history, child_records)
            annotate_timing(status.history)

        return status

    async def get_history_page(
        self,
        instance_id: str,
        skip: Optional[int] = None,
        top: Optional[int] = None,
    ) -> HistoryPage:
        """
        Get one page of enriched history.

        Args:
            instance_id: Instance ID
            skip: Events to skip
            top: Maximum events to return

        Returns:
            HistoryPage (total_count is the unpaged length)
        """
        status = await self.get_detail(instance_id)
        return page_history(status.history, skip=skip, top=top)

    async def _load_status(self, instance_id: str) -> Optional[OrchestrationStatus]:
        """Primary fetch. Runtime failures are fatal for the request."""
        try:
            return await self._client.get_status(
                instance_id,
                show_history=True,
                show_history_output=True,
                show_input=True,
            )
        except MonitorError:
            raise
        except Exception as e:
            logger.error(f"Failed to get status of {instance_id}: {e}")
            raise DurableRuntimeError(f"Failed to get status of {instance_id}: {e}") from e

    async def _try_load_child_records(self, instance_id: str) -> Optional[List[ChildOrchestrationRecord]]:
        """
        Secondary fetch.

        Returns:
            Child records, or None if they could not be loaded
        """
        try:
            return await self._storage.query_child_creation_records(
                self._client.task_hub_name, instance_id
            )
        except Exception as e:
            logger.warning(
                f"Unable to load sub-orchestrations of {instance_id}, "
                f"showing history without them: {e}",
                exc_info=True,
            )
            return None
