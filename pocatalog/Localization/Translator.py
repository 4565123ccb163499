"""
Culture-bound translator and gettext-style helper functions
"""
from __future__ import annotations

from contextvars import ContextVar, Token
from typing import Any, Optional

from .TranslationManager import TranslationManager


class Translator:
    """Translator bound to a TranslationManager and a default locale"""
    
    def __init__(
        self,
        manager: TranslationManager,
        locale: Optional[str] = None,
        fallback_locale: Optional[str] = None
    ) -> None:
        self.manager = manager
        self.locale = locale
        self.fallback_locale = fallback_locale
    
    def get(self, message: str, *args: Any, context: Optional[str] = None, locale: Optional[str] = None) -> str:
        """
        Translate a message
        
        Args:
            message: Source text (msgid)
            args: Values for ``str.format`` placeholders
            context: Message context (msgctxt)
            locale: Target locale (uses the current locale if None)
        """
        locale = self._lookup_locale(message, context, locale)
        return self.manager.translate(locale, message, *args, context=context)
    
    def choice(
        self,
        singular: str,
        plural: str,
        count: int,
        *args: Any,
        context: Optional[str] = None,
        locale: Optional[str] = None
    ) -> str:
        """Translate a message with plural forms, picking the form for ``count``"""
        locale = self._lookup_locale(singular, context, locale)
        return self.manager.translate_plural(locale, singular, plural, count, *args, context=context)
    
    def has(self, message: str, context: Optional[str] = None, locale: Optional[str] = None) -> bool:
        """Check if a translation exists"""
        return self.manager.has(locale or self.get_current_locale(), message, context)
    
    def trans(self, message: str, *args: Any, context: Optional[str] = None, locale: Optional[str] = None) -> str:
        """Alias for get() method"""
        return self.get(message, *args, context=context, locale=locale)
    
    def trans_choice(
        self,
        singular: str,
        plural: str,
        count: int,
        *args: Any,
        context: Optional[str] = None,
        locale: Optional[str] = None
    ) -> str:
        """Alias for choice() method"""
        return self.choice(singular, plural, count, *args, context=context, locale=locale)
    
    def get_current_locale(self) -> Optional[str]:
        return current_locale.get() or self.locale or self.manager.current_culture
    
    def set_locale(self, locale: str) -> None:
        current_locale.set(locale)
    
    def _lookup_locale(self, message: str, context: Optional[str], locale: Optional[str]) -> Optional[str]:
        locale = locale or self.get_current_locale()
        fallback = self.fallback_locale
        
        if fallback and locale != fallback and not self.manager.has(locale, message, context):
            if self.manager.has(fallback, message, context):
                return fallback
        return locale
    
    def __repr__(self) -> str:
        return f"Translator(locale={self.locale!r}, fallback_locale={self.fallback_locale!r})"


# Context variables for the current request or task
current_locale: ContextVar[Optional[str]] = ContextVar('current_locale', default=None)
current_translator: ContextVar[Optional[Translator]] = ContextVar('current_translator', default=None)


def use_translator(translator: Optional[Translator]) -> Token[Optional[Translator]]:
    """Bind a translator to the current context"""
    return current_translator.set(translator)


def get_translator() -> Optional[Translator]:
    return current_translator.get()


def _format(message: str, args: Any) -> str:
    return message.format(*args) if args else message


def __(message: str, *args: Any, context: Optional[str] = None) -> str:
    """Translate with the bound translator; untranslated text is only formatted"""
    translator = current_translator.get()
    if translator is None:
        return _format(message, args)
    return translator.get(message, *args, context=context)


def _n(singular: str, plural: str, count: int, *args: Any, context: Optional[str] = None) -> str:
    """Plural-aware ``__`` using the ``n != 1`` rule when no translator is bound"""
    translator = current_translator.get()
    if translator is None:
        return _format(singular if count == 1 else plural, args)
    return translator.choice(singular, plural, count, *args, context=context)


def trans(message: str, *args: Any, context: Optional[str] = None) -> str:
    return __(message, *args, context=context)


def trans_choice(singular: str, plural: str, count: int, *args: Any, context: Optional[str] = None) -> str:
    return _n(singular, plural, count, *args, context=context)


def app_locale() -> Optional[str]:
    """Get current application locale"""
    translator = current_translator.get()
    if translator is not None:
        return translator.get_current_locale()
    return current_locale.get()


def set_app_locale(locale: str) -> None:
    """Set current application locale"""
    current_locale.set(locale)
