from __future__ import annotations

from .CatalogSchemas import UpdatedCatalog, UpdatedTranslation

__all__ = ['UpdatedCatalog', 'UpdatedTranslation']
