from __future__ import annotations

from typing import List

from pydantic import Field

from core.domain.enums import ProcessMode
from core.settings.base import MonitorBaseSettings


def _split_names(raw: str) -> List[str]:
    return [name.strip() for name in raw.split(",") if name.strip()]


class MonitorSettings(MonitorBaseSettings):
    """
    Monitor endpoint settings.
    Loaded from .env with exact variable name matching.
    """

    mode: ProcessMode = Field(default=ProcessMode.NORMAL, alias="DFM_MODE")
    auth_enabled: bool = Field(default=True, alias="DFM_AUTH_ENABLED")
    principal_header: str = Field(default="X-MS-CLIENT-PRINCIPAL-NAME", alias="DFM_PRINCIPAL_HEADER")
    allowed_user_names_raw: str = Field(default="", alias="DFM_ALLOWED_USER_NAMES")
    allowed_task_hubs_raw: str = Field(default="", alias="DFM_ALLOWED_TASK_HUBS")
    templates_folder: str = Field(default="dfm-templates", alias="DFM_TEMPLATES_FOLDER")
    log_level: str = Field(default="INFO", alias="DFM_LOG_LEVEL")

    @property
    def allowed_user_names(self) -> List[str]:
        return _split_names(self.allowed_user_names_raw)

    @property
    def allowed_task_hubs(self) -> List[str]:
        return _split_names(self.allowed_task_hubs_raw)
