from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

from .Exceptions import PluralIndexError
from .Plurals import PluralFormsEvaluator, get_plural_index

if TYPE_CHECKING:
    from .Catalog import Catalog

CONTEXT_SEPARATOR = '\x04'

_default_evaluator = PluralFormsEvaluator()


def normalize_newlines(value: str) -> str:
    return value.replace('\r\n', '\n').replace('\r', '\n')


def make_key(singular: Optional[str], context: Optional[str] = None) -> Optional[str]:
    """
    Lookup key of a message: ``context + EOT + singular`` or the singular alone.
    
    Returns None for an empty singular (the header pseudo-entry).
    """
    if not singular:
        return None
    
    key = f"{context}{CONTEXT_SEPARATOR}{singular}" if context else singular
    return normalize_newlines(key)


class Translation:
    """
    A single PO entry: msgctxt, msgid, msgid_plural, msgstr forms and comments.
    """
    
    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        singular: str = '',
        plural: Optional[str] = None,
        context: Optional[str] = None,
        translations: Optional[List[str]] = None,
        translator_comments: str = '',
        extracted_comments: str = '',
        references: Optional[List[str]] = None,
        flags: Optional[List[str]] = None
    ) -> None:
        self.catalog = catalog
        self.singular = singular
        self.plural = plural
        self.context = context
        self.translations: List[str] = list(translations) if translations else []
        self.translator_comments = translator_comments
        self.extracted_comments = extracted_comments
        self.references: List[str] = list(references) if references else []
        self.flags: List[str] = list(flags) if flags else []
    
    @property
    def key(self) -> Optional[str]:
        return make_key(self.singular, self.context)
    
    @property
    def is_plural(self) -> bool:
        return len(self.translations) > 1
    
    @property
    def is_fuzzy(self) -> bool:
        return 'fuzzy' in self.flags
    
    def get_singular(self) -> str:
        """Translated singular form, or the msgid when untranslated"""
        if self.translations and self.translations[0]:
            return self.translations[0]
        return self.singular
    
    def get_plural(self, count: int, fallback_culture: Any = None) -> str:
        """
        Translated form for ``count``.
        
        The owning catalog's plural evaluator picks the form; without a
        catalog the built-in rule of ``fallback_culture`` is used.
        
        Raises:
            PluralIndexError: the selected form is missing from translations
        """
        if len(self.translations) == 1:
            return self.get_singular()
        
        index = self._plural_index(count, fallback_culture)
        
        if not self.translations:
            return self.singular if index == 0 else (self.plural or self.singular)
        
        if index < 0 or index >= len(self.translations):
            raise PluralIndexError(index, len(self.translations), self.key)
        
        value = self.translations[index]
        if value:
            return value
        return self.singular if index == 0 else (self.plural or self.singular)
    
    def _plural_index(self, count: int, fallback_culture: Any) -> int:
        if self.catalog is not None:
            return self.catalog.plural_evaluator.evaluate(count)
        if fallback_culture is not None:
            return get_plural_index(fallback_culture, count)[0]
        return _default_evaluator.evaluate(count)
    
    def merge_with(self, other: Translation) -> None:
        """Refresh comments, flags and references from ``other``; translations stay."""
        self.extracted_comments = other.extracted_comments
        self.translator_comments = other.translator_comments
        self.flags[:] = other.flags
        self.references[:] = other.references
    
    def copy(self, catalog: Optional[Catalog] = None) -> Translation:
        return Translation(
            catalog=catalog if catalog is not None else self.catalog,
            singular=self.singular,
            plural=self.plural,
            context=self.context,
            translations=self.translations,
            translator_comments=self.translator_comments,
            extracted_comments=self.extracted_comments,
            references=self.references,
            flags=self.flags,
        )
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Translation):
            return NotImplemented
        return (
            self.key == other.key
            and self.plural == other.plural
            and self.translations == other.translations
            and self.flags == other.flags
            and self.references == other.references
        )
    
    __hash__ = None  # type: ignore[assignment]
    
    def __repr__(self) -> str:
        return f"Translation(key={self.key!r}, translations={self.translations!r})"
