from __future__ import annotations

from pydantic import Field

from core.settings.base import MonitorBaseSettings


class DatabaseSettings(MonitorBaseSettings):
    """
    Task hub storage settings.
    Loaded from .env with exact variable name matching.
    """

    database_url: str = Field(
        default="sqlite+aiosqlite:///durable_monitor.db", alias="DFM_DATABASE_URL"
    )
    echo_sql: bool = Field(default=False, alias="DFM_ECHO_SQL")
