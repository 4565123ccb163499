"""
Background reload of PO catalogs when their files change
"""
from __future__ import annotations

import logging
import os
import queue
import re
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..Localization.Catalog import Catalog
from ..Localization.CatalogSet import CatalogSet
from ..Localization.Exceptions import PoCatalogError
from ..Localization.LocaleManager import DASH, DOT, UNDERSCORE
from .PoFileReader import read

PO_SUFFIX = '.po'

SynchronizedCallback = Callable[[List[Catalog]], None]


class ChangeKind(Enum):
    CREATED = 'created'
    MODIFIED = 'modified'
    DELETED = 'deleted'
    POLLED = 'polled'


@dataclass(frozen=True)
class FileChange:
    """A PO file that needs to be re-read or dropped"""
    path: str
    kind: ChangeKind


class PoFileEventHandler(FileSystemEventHandler):
    """Forwards watchdog events for ``*.po`` files to the watcher queue"""
    
    def __init__(self, watcher: TranslationFileWatcher) -> None:
        self.watcher = watcher
    
    def _forward(self, path: Union[str, bytes], kind: ChangeKind) -> None:
        path = os.fsdecode(path)
        if path.lower().endswith(PO_SUFFIX):
            self.watcher.notify(FileChange(path, kind))
    
    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward(event.src_path, ChangeKind.CREATED)
    
    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward(event.src_path, ChangeKind.MODIFIED)
    
    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward(event.src_path, ChangeKind.DELETED)
    
    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward(event.src_path, ChangeKind.DELETED)
            self._forward(event.dest_path, ChangeKind.CREATED)


class TranslationFileWatcher:
    """
    Keeps a CatalogSet in sync with the PO files of a directory.
    
    A watchdog observer and a polling thread (for changes the observer
    misses) both feed a bounded queue. A single worker thread drains it,
    re-reads changed files and swaps the new catalog in place of the old one.
    """
    
    def __init__(
        self,
        catalogs: CatalogSet,
        directory: str,
        skip_comments: bool = False,
        include_subdirectories: bool = True,
        poll_interval: float = 600.0,
        debounce_seconds: float = 5.0,
        queue_size: int = 100,
        current_culture: Union[str, Callable[[], Optional[str]], None] = None
    ) -> None:
        self.catalogs = catalogs
        self.directory = directory
        self.skip_comments = skip_comments
        self.include_subdirectories = include_subdirectories
        self.poll_interval = poll_interval
        self.debounce_seconds = debounce_seconds
        self.queue: queue.Queue[Optional[FileChange]] = queue.Queue(maxsize=queue_size)
        self.logger = logging.getLogger(self.__class__.__name__)
        
        self._current_culture = current_culture
        self._callbacks: List[SynchronizedCallback] = []
        self._observer: Optional[Any] = None
        self._worker: Optional[threading.Thread] = None
        self._poller: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
    
    @property
    def is_running(self) -> bool:
        return self._worker is not None and self._worker.is_alive()
    
    @property
    def current_culture(self) -> Optional[str]:
        if callable(self._current_culture):
            return self._current_culture()
        return self._current_culture
    
    def on_synchronized(self, callback: SynchronizedCallback) -> None:
        """Register a callback receiving the catalogs reloaded or removed by each change"""
        self._callbacks.append(callback)
    
    def start(self, use_observer: bool = True, use_polling: bool = True) -> None:
        """Start the reload worker and the change producers"""
        with self._lock:
            if self.is_running:
                return
            
            self._stop_event.clear()
            self._worker = threading.Thread(target=self._run_worker, name='po-reload-worker', daemon=True)
            self._worker.start()
            
            if use_observer:
                self._observer = Observer()
                self._observer.schedule(
                    PoFileEventHandler(self), self.directory, recursive=self.include_subdirectories
                )
                self._observer.start()
            
            if use_polling and self.poll_interval > 0:
                self._poller = threading.Thread(target=self._run_poller, name='po-poller', daemon=True)
                self._poller.start()
            
            self.logger.info("Watching PO files in %s", self.directory)
    
    def stop(self, timeout: float = 5.0) -> None:
        """Stop producers and the worker; pending changes are discarded"""
        with self._lock:
            if self._worker is None:
                return
            
            self._stop_event.set()
            
            if self._observer is not None:
                self._observer.stop()
                self._observer.join(timeout)
                self._observer = None
            
            if self._poller is not None:
                self._poller.join(timeout)
                self._poller = None
            
            self._drain()
            self.queue.put(None)
            self._worker.join(timeout)
            self._worker = None
            
            self.logger.info("Stopped watching PO files in %s", self.directory)
    
    def notify(self, change: FileChange) -> bool:
        """Queue a change; returns False when the queue is full and the change is dropped"""
        try:
            self.queue.put_nowait(change)
            return True
        except queue.Full:
            self.logger.warning("Reload queue full, dropping %s event for %s", change.kind.value, change.path)
            return False
    
    def wait_until_idle(self) -> None:
        """Block until every queued change has been processed"""
        self.queue.join()
    
    def poll(self) -> int:
        """Queue every catalog whose file is newer than its last read, or gone"""
        queued = 0
        
        for catalog in self.catalogs.get_catalogs():
            file_name = catalog.file_name
            if not file_name:
                continue
            
            if not os.path.exists(file_name):
                queued += self.notify(FileChange(file_name, ChangeKind.DELETED))
                continue
            
            last_access = catalog.last_access_time.timestamp() if catalog.last_access_time else 0.0
            if os.path.getmtime(file_name) > last_access:
                queued += self.notify(FileChange(file_name, ChangeKind.POLLED))
        
        return queued
    
    def process(self, change: FileChange) -> List[Catalog]:
        """
        Apply one change to the catalog set.
        
        Returns the catalogs that were reloaded or removed.
        """
        catalog = self.catalogs.find_catalog(change.path)
        
        if catalog is not None and change.kind is not ChangeKind.POLLED and catalog.last_access_time:
            # one save raises several events, skip files that were just read
            elapsed = (datetime.now() - catalog.last_access_time).total_seconds()
            if elapsed < self.debounce_seconds:
                return []
        
        if change.kind is ChangeKind.DELETED:
            if catalog is None or os.path.exists(change.path):
                return []
            self.catalogs.remove_catalog(catalog)
            self.logger.info("Removed catalog %s", change.path)
            return [catalog]
        
        culture = catalog.culture_name if catalog is not None else self.culture_for(change.path)
        if not culture:
            self.logger.debug("Ignoring %s, no loaded culture matches its name", change.path)
            return []
        
        updated = read(change.path, culture, self.skip_comments)
        self.catalogs.replace_catalog(catalog, updated, culture)
        self.logger.info("Reloaded catalog %s (%d entries)", change.path, len(updated.entries))
        return [updated]
    
    def culture_for(self, path: str) -> Optional[str]:
        """Loaded culture whose name (``fr-FR``, ``fr_FR`` or ``fr.FR``) ends the file name"""
        stem = Path(path).name[:-len(PO_SUFFIX)].lower()
        
        candidates = set(self.catalogs.cultures())
        if self.current_culture:
            candidates.add(self.current_culture)
        
        for name in sorted(candidates, key=len, reverse=True):
            for variant in {name, name.replace(DASH, UNDERSCORE), name.replace(DASH, DOT)}:
                if re.search(r'(^|[^a-z0-9])' + re.escape(variant.lower()) + '$', stem):
                    return name
        return None
    
    def _notify_synchronized(self, catalogs: List[Catalog]) -> None:
        for callback in list(self._callbacks):
            callback(catalogs)
    
    def _run_worker(self) -> None:
        while True:
            change = self.queue.get()
            try:
                if change is None:
                    return
                changed = self.process(change)
                if changed:
                    self._notify_synchronized(changed)
            except (PoCatalogError, OSError, UnicodeDecodeError) as e:
                self.logger.warning("Failed to reload %s: %s", change.path if change else None, e)
            finally:
                self.queue.task_done()
    
    def _run_poller(self) -> None:
        while not self._stop_event.wait(self.poll_interval):
            queued = self.poll()
            if queued:
                self.logger.debug("Polling queued %d changed catalog(s)", queued)
    
    def _drain(self) -> None:
        while True:
            try:
                self.queue.get_nowait()
            except queue.Empty:
                return
            self.queue.task_done()
    
    def __enter__(self) -> TranslationFileWatcher:
        self.start()
        return self
    
    def __exit__(self, *exc_info: Any) -> None:
        self.stop()
