"""Application layer interfaces."""
from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from core.domain.entities import ChildOrchestrationRecord, InstanceRecord, OrchestrationStatus


class IDurableClient(ABC):
    """
    Interface for the workflow runtime client.

    A client is bound to one task hub. It owns status/history retrieval
    and the runtime's control primitives.
    """

    @property
    @abstractmethod
    def task_hub_name(self) -> str:
        """Name of the task hub this client talks to."""
        pass

    @abstractmethod
    async def get_status(
        self,
        instance_id: str,
        show_history: bool = False,
        show_history_output: bool = False,
        show_input: bool = True,
    ) -> Optional[OrchestrationStatus]:
        """
        Get instance status.

        Args:
            instance_id: Instance ID
            show_history: Include execution history
            show_history_output: Include event results in history
            show_input: Include instance input

        Returns:
            OrchestrationStatus if the instance exists, None otherwise
        """
        pass

    @abstractmethod
    async def purge_instance_history(self, instance_id: str) -> int:
        """
        Delete all execution history of an instance.

        Returns:
            Number of purged instances
        """
        pass

    @abstractmethod
    async def rewind(self, instance_id: str, reason: str) -> None:
        """Replay a failed instance from its start."""
        pass

    @abstractmethod
    async def terminate(self, instance_id: str, reason: str) -> None:
        """Forcibly end an instance."""
        pass

    @abstractmethod
    async def raise_event(self, instance_id: str, event_name: str, event_data: Any = None) -> None:
        """Send an external event to an orchestration."""
        pass

    @abstractmethod
    async def signal_entity(
        self,
        entity_name: str,
        entity_key: str,
        operation_name: str,
        operation_input: Any = None,
    ) -> None:
        """Send a one-way operation to a durable entity."""
        pass

    @abstractmethod
    async def restart(self, instance_id: str, restart_with_new_instance_id: bool = True) -> str:
        """
        Restart an instance with its original input.

        Returns:
            ID of the restarted instance
        """
        pass


class IHistoryStorage(ABC):
    """
    Interface for raw task hub storage.

    Used only where the runtime client has no equivalent operation.
    """

    @abstractmethod
    async def query_child_creation_records(
        self, task_hub: str, parent_instance_id: str
    ) -> List[ChildOrchestrationRecord]:
        """
        Get "sub-orchestration created" rows of a parent instance.

        Returns:
            Records ordered by creation time
        """
        pass

    @abstractmethod
    async def read_instance_record(self, task_hub: str, instance_id: str) -> Optional[InstanceRecord]:
        """Read the raw instance row, None if absent."""
        pass

    @abstractmethod
    async def replace_instance_record(self, record: InstanceRecord) -> None:
        """Overwrite the raw instance row."""
        pass


class IIdentityValidator(ABC):
    """Interface for request identity validation."""

    @abstractmethod
    async def validate(
        self,
        principal: Optional[str],
        headers: Mapping[str, str],
        task_hub: str,
    ) -> None:
        """
        Validate that the caller may access the task hub.

        Raises:
            UnauthorizedError: If validation fails
        """
        pass


class ITemplateRegistry(ABC):
    """Interface for custom tab template lookup."""

    @abstractmethod
    async def get_template(self, entity_type_name: str, template_name: str) -> Optional[str]:
        """Get template source text, None if not registered."""
        pass

    @abstractmethod
    async def list_template_names(self, entity_type_name: str) -> List[str]:
        """Get names of all templates registered for an entity type."""
        pass


__all__ = ["IDurableClient", "IHistoryStorage", "IIdentityValidator", "ITemplateRegistry"]
