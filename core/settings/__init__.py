# Settings package
from core.settings.modules import AppSettings, DatabaseSettings, MonitorSettings, get_app_settings

__all__ = ["get_app_settings", "AppSettings", "DatabaseSettings", "MonitorSettings"]
