"""
Locale middleware: detect the request locale and bind a translator to it
"""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ...Localization.LocaleManager import LocaleManager
from ...Localization.TranslationManager import TranslationManager
from ...Localization.Translator import Translator, current_locale, current_translator


class LocaleMiddleware(BaseHTTPMiddleware):
    """
    Middleware for automatic locale detection
    
    The detected locale is stored on ``request.state`` and, with a
    TranslationManager, a Translator is bound to the request context so the
    ``__`` and ``_n`` helpers translate into it.
    """
    
    def __init__(
        self,
        app: Any,
        locale_manager: LocaleManager,
        translation_manager: Optional[TranslationManager] = None,
        detection_methods: Optional[List[str]] = None,
        cookie_max_age: Optional[int] = None,
        set_cookie: bool = True
    ) -> None:
        super().__init__(app)
        if cookie_max_age is None:
            from config.localization import get_localization_config
            cookie_max_age = get_localization_config()['cookie']['max_age']
        
        self.locale_manager = locale_manager
        self.translation_manager = translation_manager
        self.detection_methods = detection_methods
        self.cookie_max_age = cookie_max_age
        self.set_cookie = set_cookie
        self.logger = logging.getLogger(self.__class__.__name__)
    
    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Process request and set locale"""
        locale = self.locale_manager.detect_locale(request, self.detection_methods)
        
        locale_token = current_locale.set(locale)
        self.locale_manager.set_current_locale(locale)
        
        translator: Optional[Translator] = None
        if self.translation_manager is not None:
            translator = Translator(
                self.translation_manager,
                locale=locale,
                fallback_locale=self.locale_manager.fallback_locale,
            )
        translator_token = current_translator.set(translator)
        
        request.state.locale = locale
        request.state.translator = translator
        request.state.is_rtl = self.locale_manager.is_rtl_locale(locale)
        
        try:
            response = await call_next(request)
        finally:
            current_translator.reset(translator_token)
            current_locale.reset(locale_token)
        
        cookie_name = self.locale_manager.detector.cookie_name
        if self.set_cookie and request.cookies.get(cookie_name) != locale:
            response.set_cookie(
                key=cookie_name,
                value=locale,
                max_age=self.cookie_max_age,
                httponly=True,
                samesite="lax",
                secure=request.url.scheme == "https"
            )
        
        response.headers["Content-Language"] = locale
        response.headers["X-Text-Direction"] = self.locale_manager.get_text_direction(locale)
        
        self.logger.debug(f"Request locale set to {locale}")
        return response
