from __future__ import annotations

from .CatalogSynchronizer import apply_catalog_changes, backup_file_name, merge_changes, save_changes

__all__ = ['apply_catalog_changes', 'backup_file_name', 'merge_changes', 'save_changes']
