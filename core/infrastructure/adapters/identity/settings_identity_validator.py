"""
Settings-based identity validator.

Checks the caller's principal name and the requested task hub against
allow-lists from settings. Token validation is done upstream; this only
looks at the principal the hosting boundary already resolved.
"""
import logging
from typing import Mapping, Optional

from core.application.interfaces import IIdentityValidator
from core.domain.errors import UnauthorizedError
from core.settings import MonitorSettings


logger = logging.getLogger(__name__)


class SettingsIdentityValidator(IIdentityValidator):
    """Allow-list validator driven by MonitorSettings."""

    def __init__(self, settings: MonitorSettings):
        """
        Initialize validator.

        Args:
            settings: Monitor settings (auth switch and allow-lists)
        """
        self._settings = settings

    async def validate(
        self,
        principal: Optional[str],
        headers: Mapping[str, str],
        task_hub: str,
    ) -> None:
        allowed_task_hubs = [h.lower() for h in self._settings.allowed_task_hubs]
        if allowed_task_hubs and task_hub.lower() not in allowed_task_hubs:
            raise UnauthorizedError(f"Task hub {task_hub} is not allowed")

        if not self._settings.auth_enabled:
            return

        user_name = principal or self._header(headers, self._settings.principal_header)
        if not user_name:
            raise UnauthorizedError("No principal found in the request")

        allowed_user_names = [u.lower() for u in self._settings.allowed_user_names]
        if allowed_user_names and user_name.lower() not in allowed_user_names:
            raise UnauthorizedError(f"User {user_name} is not allowed")

    @staticmethod
    def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
        # Header names are case-insensitive
        for key, value in headers.items():
            if key.lower() == name.lower():
                return value
        return None
