from .sql_task_hub_client import ControlMessageType, SqlTaskHubClient

__all__ = ["ControlMessageType", "SqlTaskHubClient"]
