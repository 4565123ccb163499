"""
Static facade over the translator bound to the current context
"""
from __future__ import annotations

from typing import Any, List, Optional

from .Exceptions import CatalogsNotInitializedError
from .Translator import Translator, __, _n, app_locale, current_translator, set_app_locale


class TranslationFacade:
    """Translation facade"""
    
    @staticmethod
    def translator() -> Translator:
        """Bound translator, raising when none was set for this context"""
        translator = current_translator.get()
        if translator is None:
            raise CatalogsNotInitializedError()
        return translator
    
    @staticmethod
    def get(message: str, *args: Any, context: Optional[str] = None) -> str:
        return __(message, *args, context=context)
    
    @staticmethod
    def choice(singular: str, plural: str, count: int, *args: Any, context: Optional[str] = None) -> str:
        return _n(singular, plural, count, *args, context=context)
    
    @staticmethod
    def has(message: str, context: Optional[str] = None) -> bool:
        translator = current_translator.get()
        return translator is not None and translator.has(message, context)
    
    @staticmethod
    def get_locale() -> Optional[str]:
        return app_locale()
    
    @staticmethod
    def set_locale(locale: str) -> None:
        set_app_locale(locale)
    
    @staticmethod
    def get_available_locales() -> List[str]:
        return TranslationFacade.translator().manager.get_available_cultures()


Lang = TranslationFacade
