"""
gettext PO catalogs: reading, writing, plural forms and runtime lookup
"""
from __future__ import annotations

from .IO import PoFileWriter, TranslationFileWatcher, export, read, read_all
from .Localization import (
    Catalog,
    CatalogSet,
    PoCatalogError,
    Translation,
    TranslationManager,
    Translator,
)
from .Localization.Plurals import PluralFormsEvaluator

__version__ = '1.0.0'

__all__ = [
    'PoFileWriter',
    'TranslationFileWatcher',
    'export',
    'read',
    'read_all',
    'Catalog',
    'CatalogSet',
    'PoCatalogError',
    'Translation',
    'TranslationManager',
    'Translator',
    'PluralFormsEvaluator',
]
