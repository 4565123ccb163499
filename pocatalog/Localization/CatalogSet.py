"""
Catalogs grouped by culture, with message lookup across them
"""
from __future__ import annotations

import threading
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from babel import Locale

from .Catalog import Catalog
from .Translation import Translation


def find_entry(catalogs: Iterable[Catalog], key: Optional[str]) -> Optional[Translation]:
    """First entry for ``key`` in a sequence of catalogs"""
    if not key:
        return None
    
    for catalog in catalogs:
        entry = catalog.entries.get(key)
        if entry is not None:
            return entry
    return None


def _same_file(left: Optional[str], right: Optional[str]) -> bool:
    return bool(left) and bool(right) and left.lower() == right.lower()  # type: ignore[union-attr]


class CatalogSet:
    """
    Thread-safe mapping of culture name to the catalogs loaded for it
    
    Culture names compare case-insensitively. Every mutation builds a new
    list and swaps it in, so readers iterating a group never observe a
    half-updated list.
    """
    
    def __init__(self) -> None:
        self._groups: Dict[str, Tuple[str, List[Catalog]]] = {}
        self._lock = threading.RLock()
    
    @classmethod
    def group_by_culture(cls, catalogs: Iterable[Catalog]) -> CatalogSet:
        """Group catalogs by the canonical name of their culture"""
        catalog_set = cls()
        for catalog in catalogs:
            catalog_set.add_catalog(catalog.culture_name, catalog)
        return catalog_set
    
    def get(self, culture: str) -> List[Catalog]:
        group = self._groups.get(culture.lower())
        return group[1] if group else []
    
    def __getitem__(self, culture: str) -> List[Catalog]:
        group = self._groups.get(culture.lower())
        if group is None:
            raise KeyError(culture)
        return group[1]
    
    def __contains__(self, culture: object) -> bool:
        return isinstance(culture, str) and culture.lower() in self._groups
    
    def __iter__(self) -> Iterator[str]:
        return iter([name for name, _ in list(self._groups.values())])
    
    def __len__(self) -> int:
        return len(self._groups)
    
    def cultures(self) -> List[str]:
        return list(self)
    
    def items(self) -> List[Tuple[str, List[Catalog]]]:
        return list(self._groups.values())
    
    def set_catalogs(self, culture: str, catalogs: List[Catalog]) -> None:
        with self._lock:
            self._groups[culture.lower()] = (culture, list(catalogs))
    
    def add_catalog(self, culture: str, catalog: Catalog) -> None:
        with self._lock:
            name, current = self._groups.get(culture.lower(), (culture, []))
            self._groups[culture.lower()] = (name, current + [catalog])
    
    def find_catalog(self, file_name: str) -> Optional[Catalog]:
        """Catalog read from ``file_name`` (case-insensitive path match)"""
        for catalog in self.get_catalogs():
            if _same_file(catalog.file_name, file_name):
                return catalog
        return None
    
    def remove_catalog(self, catalog: Catalog) -> bool:
        """Remove a catalog, matched by file name when it has one"""
        with self._lock:
            for lowered, (name, catalogs) in list(self._groups.items()):
                for index, current in enumerate(catalogs):
                    if catalog.file_name:
                        matched = _same_file(current.file_name, catalog.file_name)
                    else:
                        matched = current is catalog
                    
                    if matched:
                        self._groups[lowered] = (name, catalogs[:index] + catalogs[index + 1:])
                        return True
        return False
    
    def replace_catalog(self, old: Optional[Catalog], new: Catalog, culture: Optional[str] = None) -> None:
        """
        Swap ``old`` for ``new`` in one step, or add ``new`` when ``old`` is absent.
        """
        with self._lock:
            if old is not None:
                for lowered, (name, catalogs) in self._groups.items():
                    for index, current in enumerate(catalogs):
                        if current is old:
                            updated = list(catalogs)
                            updated[index] = new
                            self._groups[lowered] = (name, updated)
                            return
            
            self.add_catalog(culture or new.culture_name, new)
    
    def get_catalogs(self, culture: Optional[str] = None) -> List[Catalog]:
        """All catalogs, or those whose culture name matches ``culture``"""
        result: List[Catalog] = []
        for _, catalogs in self.items():
            for catalog in catalogs:
                if not culture or catalog.culture_name.lower() == culture.lower():
                    result.append(catalog)
        return result
    
    def find_by_id(self, file_id: str) -> Optional[Catalog]:
        for catalog in self.get_catalogs():
            if catalog.file_id == file_id:
                return catalog
        return None
    
    def find(self, culture: str, key: Optional[str]) -> Optional[Translation]:
        """Entry for ``key`` in the catalogs of ``culture``"""
        return find_entry(self.get(culture), key)
    
    def find_closest(self, culture: Locale, key: Optional[str]) -> Optional[Translation]:
        """
        Entry for ``key`` in any regional variant of the culture's language
        (``fr-CA`` catalogs when ``fr-FR`` has none).
        """
        language = culture.language.lower()
        
        for name, catalogs in self.items():
            lowered = name.lower()
            if len(lowered) > len(language) and lowered.startswith(language) and lowered[len(language)] in '-_.':
                entry = find_entry(catalogs, key)
                if entry is not None:
                    return entry
        return None
    
    def clear(self) -> None:
        with self._lock:
            self._groups.clear()
    
    def __repr__(self) -> str:
        return f"CatalogSet({ {name: len(catalogs) for name, catalogs in self.items()} })"
