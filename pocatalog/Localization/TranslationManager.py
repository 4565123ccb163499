"""
Translation manager: a caller-owned registry of PO catalogs
Loads catalogs per culture and resolves singular and plural lookups
"""
from __future__ import annotations

import asyncio
import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Set, Tuple

import yaml  # type: ignore[import-untyped]
from babel import Locale

from .Catalog import Catalog
from .CatalogSet import CatalogSet
from .Exceptions import CatalogsNotInitializedError, PoCatalogError
from .LocaleManager import culture_name, get_culture_info, is_region_code2
from .Plurals import get_plural_index
from .Translation import Translation, make_key

if TYPE_CHECKING:
    from ..IO.TranslationFileWatcher import TranslationFileWatcher

logger = logging.getLogger(__name__)


class CatalogLoader(ABC):
    """Strategy supplying the catalogs of a culture"""
    
    @abstractmethod
    def load(self, locale: str) -> Optional[List[Catalog]]:
        """
        Load catalogs for a culture.
        
        Returns None to let the manager fall back to its directory scan.
        """
        pass


class StaticCatalogLoader(CatalogLoader):
    """Serves catalogs that were parsed elsewhere"""
    
    def __init__(self, catalogs: Iterable[Catalog]) -> None:
        self.catalogs = list(catalogs)
    
    def load(self, locale: str) -> Optional[List[Catalog]]:
        return list(self.catalogs)


class DirectoryCatalogLoader(CatalogLoader):
    """Reads ``*<culture>.po`` files from a directory"""
    
    def __init__(
        self,
        directory: str,
        skip_comments: bool = False,
        include_subdirectories: bool = False,
        include_region_code2: bool = True,
        skip_invalid: bool = False
    ) -> None:
        self.directory = directory
        self.skip_comments = skip_comments
        self.include_subdirectories = include_subdirectories
        self.include_region_code2 = include_region_code2
        self.skip_invalid = skip_invalid
    
    def load(self, locale: str) -> Optional[List[Catalog]]:
        from ..IO.PoFileReader import read_all
        
        return read_all(
            self.directory,
            locale,
            skip_comments=self.skip_comments,
            include_subdirectories=self.include_subdirectories,
            include_region_code2=self.include_region_code2,
            skip_invalid=self.skip_invalid,
        )


class ManifestCatalogLoader(CatalogLoader):
    """
    Reads the PO files listed for a culture in a YAML or JSON manifest
    
    Manifest format::
    
        fr-FR:
          - admin-fr_FR.po
          - messages-fr-FR.po
    
    Relative paths are resolved against the manifest's directory.
    """
    
    def __init__(self, manifest_path: str, skip_comments: bool = False) -> None:
        self.manifest_path = Path(manifest_path)
        self.skip_comments = skip_comments
    
    def _load_manifest(self) -> Dict[str, List[str]]:
        try:
            with open(self.manifest_path, 'r', encoding='utf-8') as f:
                if self.manifest_path.suffix.lower() in ['.yaml', '.yml']:
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError, IOError) as e:
            raise PoCatalogError(f"Failed to load catalog manifest {self.manifest_path}: {e}") from e
        
        if not isinstance(data, dict):
            raise PoCatalogError(f"Catalog manifest {self.manifest_path} must map cultures to file lists")
        
        return {str(name).lower(): [str(f) for f in (files or [])] for name, files in data.items()}
    
    def load(self, locale: str) -> Optional[List[Catalog]]:
        from ..IO.PoFileReader import read
        
        manifest = self._load_manifest()
        info = get_culture_info(locale)
        names = [culture_name(info).lower(), locale.lower()]
        if not is_region_code2(info):
            names.append(info.language.lower())
        
        catalogs: List[Catalog] = []
        seen: Set[str] = set()
        for name in names:
            for file in manifest.get(name, []):
                path = (self.manifest_path.parent / file).resolve()
                if str(path) in seen:
                    continue
                seen.add(str(path))
                catalogs.append(read(str(path), name, self.skip_comments))
        
        return catalogs


class TranslationManager:
    """
    Registry of catalogs with cached message lookup
    
    Catalogs for a culture are loaded on first use, from the loader when
    one is configured and it returns catalogs, else from ``po_directory``.
    """
    
    def __init__(
        self,
        po_directory: Optional[str] = None,
        loader: Optional[CatalogLoader] = None,
        skip_comments: bool = False,
        include_subdirectories: bool = False,
        include_region_code2: bool = True,
        caching_disabled: bool = False,
        skip_invalid: bool = False
    ) -> None:
        self.po_directory = po_directory
        self.loader = loader
        self.skip_comments = skip_comments
        self.include_subdirectories = include_subdirectories
        self.include_region_code2 = include_region_code2
        self.caching_disabled = caching_disabled
        self.skip_invalid = skip_invalid
        self.current_culture: Optional[str] = None
        self.catalogs = CatalogSet()
        self.file_watcher: Optional[TranslationFileWatcher] = None
        
        self._cache: Dict[Tuple[str, str], Translation] = {}
        self._cultures: Dict[str, Locale] = {}
        self._loaded_cultures: Set[str] = set()
        self._lock = threading.RLock()
    
    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None, loader: Optional[CatalogLoader] = None) -> TranslationManager:
        """
        Build a manager from the ``config.localization`` settings
        
        The file watcher is started when ``watch_files`` is enabled.
        """
        if config is None:
            from config.localization import get_localization_config
            config = get_localization_config()
        
        manager = cls(
            config.get('po_path'),
            loader=loader,
            skip_comments=bool(config.get('skip_comments', False)),
            include_subdirectories=bool(config.get('include_subdirectories', False)),
            include_region_code2=bool(config.get('include_region_code2', True)),
            caching_disabled=not config.get('cache_translations', True),
        )
        
        if config.get('watch_files') and manager.po_directory:
            manager.start_watching(
                poll_interval=config.get('poll_interval'),
                debounce_seconds=config.get('change_debounce'),
                queue_size=config.get('reload_queue_size'),
            )
        return manager
    
    def translate(self, culture: Optional[str], singular: str, *args: Any, context: Optional[str] = None) -> str:
        """
        Translate a message, returning ``singular`` when no catalog has it.
        
        Positional ``args`` are applied with ``str.format``.
        """
        entry = self.find_entry(culture, make_key(singular, context))
        outcome = entry.get_singular() if entry is not None else singular
        
        if args:
            outcome = outcome.format(*args)
        return outcome
    
    def translate_plural(
        self,
        culture: Optional[str],
        singular: str,
        plural: str,
        count: int,
        *args: Any,
        context: Optional[str] = None
    ) -> str:
        """
        Translate a message with plural forms for ``count``.
        
        Without a catalog entry the culture's plural rule picks between
        ``singular`` and ``plural``.
        """
        culture = self._resolve_culture_name(culture)
        info = self.get_culture(culture)
        entry = self.find_entry(culture, make_key(singular, context))
        
        if entry is not None:
            outcome = entry.get_plural(count, info)
        else:
            index, _ = get_plural_index(info, count)
            outcome = singular if index == 0 else plural
        
        if args:
            outcome = outcome.format(*args)
        return outcome
    
    def find_entry(self, culture: Optional[str], key: Optional[str]) -> Optional[Translation]:
        """
        Entry for ``key``: cache, then the culture's catalogs, then the catalogs
        of its bare language (``fr`` for ``fr-FR``).
        """
        if not key:
            return None
        
        culture = self._resolve_culture_name(culture)
        self.ensure_loaded(culture)
        
        info = self.get_culture(culture)
        name = culture_name(info)
        cache_key = (name.lower(), key)
        use_cache = not self.caching_disabled
        
        if use_cache:
            cached = self._cache.get(cache_key)
            if cached is not None:
                return cached
        
        entry = self.catalogs.find(name, key)
        
        if entry is None and not is_region_code2(info):
            entry = self.catalogs.find(info.language, key)
        
        if entry is not None and use_cache:
            self._cache[cache_key] = entry
        
        return entry
    
    def has(self, culture: Optional[str], singular: str, context: Optional[str] = None) -> bool:
        return self.find_entry(culture, make_key(singular, context)) is not None
    
    def ensure_loaded(self, culture: str) -> None:
        """Load the catalogs of a culture once."""
        info = self.get_culture(culture)
        name = culture_name(info)
        
        if name.lower() in self._loaded_cultures:
            return
        
        with self._lock:
            if name.lower() in self._loaded_cultures:
                return
            
            catalogs = self.loader.load(name) if self.loader is not None else None
            
            if catalogs is None and self.po_directory:
                catalogs = DirectoryCatalogLoader(
                    self.po_directory,
                    skip_comments=self.skip_comments,
                    include_subdirectories=self.include_subdirectories,
                    include_region_code2=self.include_region_code2,
                    skip_invalid=self.skip_invalid,
                ).load(name)
            
            if catalogs is not None:
                self.add_catalogs(catalogs)
            elif not len(self.catalogs):
                raise CatalogsNotInitializedError()
            
            if self.current_culture is None:
                self.current_culture = name
            self._loaded_cultures.add(name.lower())
            logger.debug("Translations loaded for %s", name)
    
    async def load_translations_async(self, culture: str) -> None:
        """Load a culture's catalogs in a worker thread"""
        await asyncio.to_thread(self.ensure_loaded, culture)
    
    def add_catalogs(self, catalogs: Iterable[Catalog]) -> None:
        """Register catalogs, replacing the groups of their cultures"""
        grouped = CatalogSet.group_by_culture(catalogs)
        
        with self._lock:
            for name, group in grouped.items():
                self.catalogs.set_catalogs(name, group)
            self._cache.clear()
    
    def get_culture(self, culture: str) -> Locale:
        info = self._cultures.get(culture)
        if info is None:
            info = get_culture_info(culture)
            self._cultures[culture] = info
        return info
    
    def get_available_cultures(self) -> List[str]:
        return self.catalogs.cultures()
    
    def reset_translations(self) -> None:
        """Drop every catalog, cached lookup and loaded culture"""
        with self._lock:
            self.catalogs.clear()
            self._cache.clear()
            self._cultures.clear()
            self._loaded_cultures.clear()
    
    def clear_cache(self) -> None:
        self._cache.clear()
    
    def reload(self, culture: Optional[str] = None) -> None:
        """Reset and load a culture again (the current one by default)"""
        culture = culture or self.current_culture
        self.reset_translations()
        if culture:
            self.ensure_loaded(culture)
    
    def start_watching(
        self,
        poll_interval: Optional[float] = None,
        debounce_seconds: Optional[float] = None,
        queue_size: Optional[int] = None
    ) -> TranslationFileWatcher:
        """Start reloading changed PO files of ``po_directory`` in the background"""
        from ..IO.TranslationFileWatcher import TranslationFileWatcher
        
        if not self.po_directory:
            raise CatalogsNotInitializedError()
        
        if self.file_watcher is None:
            kwargs: Dict[str, Any] = {}
            if poll_interval is not None:
                kwargs['poll_interval'] = poll_interval
            if debounce_seconds is not None:
                kwargs['debounce_seconds'] = debounce_seconds
            if queue_size is not None:
                kwargs['queue_size'] = queue_size
            
            self.file_watcher = TranslationFileWatcher(
                self.catalogs,
                self.po_directory,
                skip_comments=self.skip_comments,
                include_subdirectories=self.include_subdirectories,
                current_culture=lambda: self.current_culture,
                **kwargs,
            )
            self.file_watcher.on_synchronized(lambda catalogs: self.clear_cache())
        
        self.file_watcher.start()
        return self.file_watcher
    
    def stop_watching(self) -> None:
        if self.file_watcher is not None:
            self.file_watcher.stop()
    
    def close(self) -> None:
        self.stop_watching()
        self.reset_translations()
    
    def __enter__(self) -> TranslationManager:
        return self
    
    def __exit__(self, *exc_info: Any) -> None:
        self.close()
    
    def _resolve_culture_name(self, culture: Optional[str]) -> str:
        if not culture:
            if not self.current_culture:
                raise CatalogsNotInitializedError()
            return self.current_culture
        
        if self.current_culture is None:
            self.current_culture = culture_name(self.get_culture(culture))
        return culture
