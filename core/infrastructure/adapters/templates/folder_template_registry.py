"""
Folder template registry.

Custom tab templates live on disk as:
    <root>/tabs/<EntityTypeName>/<TemplateName>.html
Templates that exist are read once and cached by file path. Misses are
not cached, so a template added later is picked up on the next request.
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional

from core.application.interfaces import ITemplateRegistry


logger = logging.getLogger(__name__)


TEMPLATE_SUFFIX = ".html"


class FolderTemplateRegistry(ITemplateRegistry):
    """ITemplateRegistry backed by a folder of template files."""

    def __init__(self, root: Path):
        """
        Initialize registry.

        Args:
            root: Templates folder (the one containing "tabs")
        """
        self._tabs_folder = Path(root) / "tabs"
        self._cache: Dict[Path, str] = {}

    async def get_template(self, entity_type_name: str, template_name: str) -> Optional[str]:
        path = self._template_path(entity_type_name, template_name)
        if path is None:
            return None

        if path not in self._cache:
            template_code = self._read(path)
            if template_code is None:
                return None
            self._cache[path] = template_code
        return self._cache[path]

    async def list_template_names(self, entity_type_name: str) -> List[str]:
        folder = self._entity_folder(entity_type_name)
        if folder is None:
            return []
        return sorted(p.stem for p in folder.glob(f"*{TEMPLATE_SUFFIX}") if p.is_file())

    def _entity_folder(self, entity_type_name: str) -> Optional[Path]:
        if not entity_type_name or not self._tabs_folder.is_dir():
            return None

        folder = self._tabs_folder / entity_type_name
        # Names come from instance data and request paths; stay inside tabs/
        if folder.resolve().parent != self._tabs_folder.resolve() or not folder.is_dir():
            return None
        return folder

    def _template_path(self, entity_type_name: str, template_name: str) -> Optional[Path]:
        folder = self._entity_folder(entity_type_name)
        if folder is None or not template_name:
            return None

        # Resolved, so aliases like "./Summary" share one cache entry
        path = (folder / f"{template_name}{TEMPLATE_SUFFIX}").resolve()
        if path.parent != folder.resolve() or not path.is_file():
            return None
        return path

    def _read(self, path: Path) -> Optional[str]:
        logger.info(f"Loading custom tab template: {path}")
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Failed to read template {path}: {e}")
            return None
