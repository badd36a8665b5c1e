# Settings modules
from .app_settings import AppSettings, get_app_settings
from .database_settings import DatabaseSettings
from .monitor_settings import MonitorSettings

__all__ = [
    "AppSettings",
    "get_app_settings",
    "DatabaseSettings",
    "MonitorSettings",
]
