from .folder_template_registry import FolderTemplateRegistry

__all__ = ["FolderTemplateRegistry"]
