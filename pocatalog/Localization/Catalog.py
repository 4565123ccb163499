"""
In-memory representation of one PO file
"""
from __future__ import annotations

import codecs
import hashlib
import logging
import re
import threading
from datetime import datetime
from typing import Any, Dict, Iterator, MutableMapping, Optional, Tuple

from babel import Locale

from .LocaleManager import culture_name, get_culture_info
from .Plurals import PluralFormsEvaluator, language_plural_rules
from .Translation import Translation

logger = logging.getLogger(__name__)

CHARSET_PATTERN = re.compile(r'charset\s*=\s*([\w-]+)', re.IGNORECASE)


def file_id_for(file_name: str) -> str:
    """Stable identifier of a catalog file: SHA-256 of its path"""
    return hashlib.sha256(file_name.encode('utf-8')).hexdigest()


class HeaderDict(MutableMapping[str, str]):
    """Ordered header mapping with case-insensitive keys"""
    
    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self._store: Dict[str, Tuple[str, str]] = {}
        if data:
            self.update(data)
    
    def __setitem__(self, key: str, value: str) -> None:
        lowered = key.lower()
        if lowered in self._store:
            # Keep the original spelling and position
            key = self._store[lowered][0]
        self._store[lowered] = (key, value)
    
    def __getitem__(self, key: str) -> str:
        return self._store[key.lower()][1]
    
    def __delitem__(self, key: str) -> None:
        del self._store[key.lower()]
    
    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._store.values())
    
    def __len__(self) -> int:
        return len(self._store)
    
    def __repr__(self) -> str:
        return f"HeaderDict({dict(self.items())!r})"


class Catalog:
    """
    Headers, entries and plural metadata of a PO file
    
    Entries are keyed by ``Translation.key`` in file order.
    """
    
    def __init__(self, culture: Optional[Locale] = None, file_name: Optional[str] = None) -> None:
        self.headers: HeaderDict = HeaderDict()
        self.header_comments: str = ''
        self.entries: Dict[str, Translation] = {}
        self.culture = culture
        self.last_access_time: Optional[datetime] = None
        self.plural_count: int = 2
        self._file_name: Optional[str] = None
        self._file_id: Optional[str] = None
        self._plural_evaluator: Optional[PluralFormsEvaluator] = None
        self._lock = threading.Lock()
        
        if file_name:
            self.file_name = file_name
    
    @property
    def file_name(self) -> Optional[str]:
        return self._file_name
    
    @file_name.setter
    def file_name(self, value: Optional[str]) -> None:
        self._file_name = value
        self._file_id = file_id_for(value) if value else None
    
    @property
    def file_id(self) -> Optional[str]:
        return self._file_id
    
    @property
    def culture_name(self) -> str:
        return culture_name(self.culture)
    
    def set_culture(self, culture: Any, enforce: bool = True) -> None:
        self.culture = get_culture_info(culture, enforce)
    
    @property
    def plural_evaluator(self) -> PluralFormsEvaluator:
        """
        Evaluator from the Plural-Forms header, or the built-in rule for the culture.
        """
        if self._plural_evaluator is None:
            with self._lock:
                if self._plural_evaluator is None:
                    rule = language_plural_rules.get_rule(self.culture)
                    self.plural_count = rule.plural_count
                    self._plural_evaluator = PluralFormsEvaluator.from_selector(
                        rule.get_plural_index, rule.plural_count
                    )
        return self._plural_evaluator
    
    @plural_evaluator.setter
    def plural_evaluator(self, evaluator: Optional[PluralFormsEvaluator]) -> None:
        self._plural_evaluator = evaluator
    
    @property
    def has_plural_forms(self) -> bool:
        """True when an explicit Plural-Forms expression drives plural lookups"""
        return self._plural_evaluator is not None and self._plural_evaluator.expression is not None
    
    def set_plural_forms(self, plural_count: int, expression: str) -> None:
        self.plural_count = plural_count
        self._plural_evaluator = PluralFormsEvaluator.from_expression(expression, plural_count)
    
    def get_header(self, name: str) -> Optional[str]:
        return self.headers.get(name)
    
    def get_charset(self) -> Optional[str]:
        """Charset declared by the Content-Type header"""
        content_type = self.get_header('Content-Type')
        if not content_type:
            return None
        
        match = CHARSET_PATTERN.search(content_type)
        return match.group(1) if match else None
    
    def get_encoding(self) -> Optional[codecs.CodecInfo]:
        """Codec for the declared charset, None when undetermined or unknown"""
        charset = self.get_charset()
        if not charset:
            return None
        
        try:
            return codecs.lookup(charset)
        except LookupError:
            logger.debug("Unknown charset %r in catalog %s", charset, self.file_name)
            return None
    
    def add(self, entry: Translation) -> bool:
        """Add an entry unless its key is empty or already present"""
        key = entry.key
        if not key or not key.strip() or key in self.entries:
            return False
        
        entry.catalog = self
        self.entries[key] = entry
        return True
    
    def find(self, key: Optional[str]) -> Optional[Translation]:
        return self.entries.get(key) if key else None
    
    def merge_with(self, other: Catalog) -> int:
        """
        Bring entries of a reference catalog (usually a POT template) into this one.
        
        Missing entries are added; existing ones get their comments, flags and
        references refreshed while their translations are kept.
        
        Returns:
            Number of entries added
        """
        count = 0
        
        for key, entry in other.entries.items():
            existing = self.entries.get(key)
            
            if existing is None:
                self.entries[key] = entry.copy(catalog=self)
                count += 1
            else:
                existing.merge_with(entry)
        
        return count
    
    def __len__(self) -> int:
        return len(self.entries)
    
    def __contains__(self, key: object) -> bool:
        return key in self.entries
    
    def __iter__(self) -> Iterator[Translation]:
        return iter(self.entries.values())
    
    def __repr__(self) -> str:
        return (
            f"Catalog(culture={self.culture_name!r}, file_name={self.file_name!r}, "
            f"entries={len(self.entries)})"
        )
