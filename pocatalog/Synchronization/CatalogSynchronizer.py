"""
Apply edits coming back from a catalog editor and persist them to disk
"""
from __future__ import annotations

import logging
import os
import shutil
import tempfile
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ..Http.Schemas.CatalogSchemas import UpdatedCatalog, UpdatedTranslation
from ..IO.PoFileWriter import PoFileWriter
from ..Localization.Catalog import Catalog
from ..Localization.Exceptions import SaveChangesError
from ..Localization.Translation import Translation

logger = logging.getLogger(__name__)

BACKUP_TIMESTAMP_FORMAT = '%Y-%m-%d-%H%M%S'

_SCALAR_FIELDS = ('context', 'singular', 'plural', 'extracted_comments', 'translator_comments')
_LIST_FIELDS = ('translations', 'flags', 'references')


def _sync_list(current: List[str], changed: Optional[List[str]]) -> bool:
    if changed is None:
        return False
    
    modified = False
    for index, value in enumerate(changed[:len(current)]):
        if current[index] != value:
            current[index] = value
            modified = True
    return modified


def _sync_entry(entry: Translation, change: UpdatedTranslation) -> bool:
    provided = change.model_fields_set
    modified = False
    
    for field in _SCALAR_FIELDS:
        if field not in provided:
            continue
        value = getattr(change, field)
        if field in ('extracted_comments', 'translator_comments', 'singular'):
            value = value or ''
        if getattr(entry, field) != value:
            setattr(entry, field, value)
            modified = True
    
    for field in _LIST_FIELDS:
        if field in provided:
            modified = _sync_list(getattr(entry, field), getattr(change, field)) or modified
    
    return modified


def merge_changes(changes: Sequence[UpdatedTranslation], originals: Sequence[Translation]) -> bool:
    """
    Copy edited fields onto the original entries at the same positions.
    
    Both sequences must have the same length and the same keys in the same
    order, otherwise nothing is modified. List fields are copied item by
    item up to the shorter list. Scalar fields are only compared when the
    editor sent them, so a partial payload never blanks an entry.
    
    Returns:
        True when at least one entry changed
    """
    if len(changes) != len(originals):
        return False
    
    for change, entry in zip(changes, originals):
        if change.key != entry.key:
            logger.debug(f"Edited key {change.key!r} does not match {entry.key!r}")
            return False
    
    modified = False
    for change, entry in zip(changes, originals):
        if _sync_entry(entry, change):
            modified = True
    
    return modified


def apply_catalog_changes(catalog: Catalog, updated: UpdatedCatalog) -> bool:
    """Merge an edited catalog payload into ``catalog`` and re-key its entries"""
    modified = merge_changes(updated.items, list(catalog.entries.values()))
    
    if 'header_comments' in updated.model_fields_set:
        header_comments = updated.header_comments or ''
        if header_comments != catalog.header_comments:
            catalog.header_comments = header_comments
            modified = True
    
    if modified:
        rekeyed: Dict[str, Translation] = {}
        for entry in catalog.entries.values():
            key = entry.key
            if key is not None and key not in rekeyed:
                rekeyed[key] = entry
        catalog.entries = rekeyed
    
    return modified


def backup_file_name(file_name: str, timestamp: Optional[datetime] = None) -> str:
    stamp = (timestamp or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
    return f"{file_name}.{stamp}.bak"


def save_changes(catalog: Catalog, backup: bool = False, wrap_references: bool = False) -> Optional[str]:
    """
    Write ``catalog`` back to its file.
    
    The catalog is written to a temporary file next to the destination and
    moved over it with ``os.replace``, so readers never see a partial file.
    
    Args:
        catalog: Catalog with a ``file_name``
        backup: Keep a timestamped ``.bak`` copy of the previous file
        wrap_references: Wrap long ``#:`` reference lines
    
    Returns:
        Path of the backup file, or None when no backup was made
    
    Raises:
        SaveChangesError: the catalog has no file name or the write failed
    """
    if not catalog.file_name:
        raise SaveChangesError(None, 'catalog has no file name')
    
    target = os.path.abspath(catalog.file_name)
    directory = os.path.dirname(target)
    backup_path: Optional[str] = None
    
    try:
        fd, temp_path = tempfile.mkstemp(
            prefix=f".{os.path.basename(target)}.", suffix='.tmp', dir=directory
        )
    except OSError as e:
        raise SaveChangesError(target, str(e)) from e
    os.close(fd)
    
    try:
        PoFileWriter(catalog, wrap_references).save_changes(temp_path)
        
        if backup and os.path.exists(target):
            backup_path = backup_file_name(target)
            shutil.copy2(target, backup_path)
        
        if os.path.exists(target):
            shutil.copymode(target, temp_path)
        
        os.replace(temp_path, target)
    except (OSError, UnicodeError) as e:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise SaveChangesError(target, str(e)) from e
    
    catalog.last_access_time = datetime.now()
    logger.info(f"Saved {len(catalog)} entries to {target}")
    return backup_path
