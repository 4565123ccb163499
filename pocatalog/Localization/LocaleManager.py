"""
Locale handling for PO catalogs
Resolves culture names to babel locales and detects the request locale
"""
from __future__ import annotations

import re
from contextvars import ContextVar
from typing import Any, Dict, List, Optional, Tuple

from babel import Locale, UnknownLocaleError

from .Exceptions import CultureNotFoundError

DASH = '-'
UNDERSCORE = '_'
DOT = '.'

_culture_cache: Dict[str, Locale] = {}


def normalize_culture(culture: Optional[str]) -> Optional[str]:
    """
    Normalize ``xx_YY`` and ``xx.YY`` culture names to ``xx-YY``.
    
    Only five character names are rewritten, anything else is returned as is.
    """
    if culture is not None and len(culture) == 5:
        if UNDERSCORE in culture:
            culture = culture.replace(UNDERSCORE, DASH)
        elif DOT in culture:
            culture = culture.replace(DOT, DASH)
    return culture


def get_culture_info(culture: Any, enforce: bool = True) -> Optional[Locale]:
    """
    Resolve a culture name to a babel ``Locale``.
    
    Args:
        culture: Culture name (``fr-FR``, ``fr_FR``, ``fr``) or a Locale
        enforce: Raise CultureNotFoundError instead of returning None
        
    Returns:
        The parsed locale, or None for blank/unknown names when not enforcing
    """
    if isinstance(culture, Locale):
        return culture
    
    name = normalize_culture(culture.strip()) if isinstance(culture, str) else None
    
    if not name:
        if enforce:
            raise CultureNotFoundError(culture)
        return None
    
    cached = _culture_cache.get(name.lower())
    if cached is not None:
        return cached
    
    try:
        locale = Locale.parse(name.replace(UNDERSCORE, DASH), sep=DASH)
    except (UnknownLocaleError, ValueError, TypeError) as e:
        if enforce:
            raise CultureNotFoundError(culture) from e
        return None
    
    _culture_cache[name.lower()] = locale
    return locale


def culture_name(culture: Optional[Locale]) -> str:
    """Canonical ``lang[-Script][-TERRITORY]`` name of a locale."""
    if culture is None:
        return ''
    return DASH.join(part for part in (culture.language, culture.script, culture.territory) if part)


def is_region_code2(culture: Locale) -> bool:
    """True when the locale is a bare language (``fr`` rather than ``fr-FR``)."""
    return culture_name(culture).lower() == culture.language.lower()


def two_letter_name(culture: Locale) -> str:
    """ISO language code of the locale."""
    return culture.language


class LocaleDetector:
    """Detects locale from request sources"""
    
    def __init__(self, param_name: str = 'locale', cookie_name: str = 'app_locale') -> None:
        self.param_name = param_name
        self.cookie_name = cookie_name
        self.detection_order = [
            'url_parameter',
            'cookie',
            'accept_language_header',
        ]
    
    def detect_from_url_parameter(self, request: Any) -> Optional[str]:
        """Detect locale from URL parameter"""
        if hasattr(request, 'query_params'):
            param_value = request.query_params.get(self.param_name)
            return str(param_value) if param_value else None
        return None
    
    def detect_from_cookie(self, request: Any) -> Optional[str]:
        """Detect locale from cookie"""
        if hasattr(request, 'cookies'):
            cookie_value = request.cookies.get(self.cookie_name)
            return str(cookie_value) if cookie_value else None
        return None
    
    def detect_from_accept_language(self, request: Any, supported_locales: List[str]) -> Optional[str]:
        """Detect locale from Accept-Language header"""
        if not hasattr(request, 'headers'):
            return None
        
        accept_language = request.headers.get('Accept-Language')
        if not accept_language:
            return None
        
        return self.parse_accept_language(accept_language, supported_locales)
    
    def parse_accept_language(self, accept_language: str, supported_locales: List[str]) -> Optional[str]:
        """
        Parse an Accept-Language header
        
        Returns the best supported tag, trying the full tag (``fr-CA``)
        before its language code (``fr``).
        """
        languages: List[Tuple[str, float]] = []
        
        for lang_item in accept_language.split(','):
            lang_item = lang_item.strip()
            if not lang_item:
                continue
            
            if ';' in lang_item:
                lang, params = lang_item.split(';', 1)
                match = re.search(r'q\s*=\s*([0-9.]+)', params)
                try:
                    quality = float(match.group(1)) if match else 1.0
                except ValueError:
                    quality = 0.0
            else:
                lang = lang_item
                quality = 1.0
            
            languages.append((lang.strip(), quality))
        
        # Stable sort keeps header order for equal weights
        languages.sort(key=lambda x: x[1], reverse=True)
        supported = {normalize_locale_code(s).lower(): s for s in supported_locales}
        
        for lang, quality in languages:
            if quality <= 0:
                continue
            normalized = normalize_locale_code(lang).lower()
            if normalized in supported:
                return supported[normalized]
            language = normalized.split(DASH)[0]
            if language in supported:
                return supported[language]
        
        return None


def normalize_locale_code(locale: str) -> str:
    """Normalize a locale code to ``xx-YY`` casing"""
    if not locale:
        return locale
    
    parts = locale.replace(UNDERSCORE, DASH).replace(DOT, DASH).split(DASH)
    parts[0] = parts[0].lower()
    
    if len(parts) > 1 and len(parts[1]) == 2:
        parts[1] = parts[1].upper()
    
    return DASH.join(parts)


class LocaleManager:
    """
    Request locale management
    Keeps the supported locale list and the context-local current locale
    """
    
    def __init__(
        self,
        default_locale: str = 'en',
        fallback_locale: str = 'en',
        supported_locales: Optional[List[str]] = None
    ):
        self.default_locale = default_locale
        self.fallback_locale = fallback_locale
        self.supported_locales = [normalize_locale_code(s) for s in (supported_locales or [default_locale])]
        self.detector = LocaleDetector()
        self.current_locale_var: ContextVar[str] = ContextVar('current_locale', default=default_locale)
    
    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> LocaleManager:
        """Build a locale manager from the ``config.localization`` settings"""
        if config is None:
            from config.localization import get_localization_config
            config = get_localization_config()
        
        manager = cls(
            default_locale=config.get('locale', 'en'),
            fallback_locale=config.get('fallback_locale', 'en'),
            supported_locales=config.get('supported_locales'),
        )
        cookie = config.get('cookie', {})
        manager.detector = LocaleDetector(
            param_name=config.get('url_parameter', 'locale'),
            cookie_name=cookie.get('name', 'app_locale'),
        )
        return manager
    
    def detect_locale(self, request: Any, methods: Optional[List[str]] = None) -> str:
        """
        Detect locale from request using specified methods
        
        Args:
            request: Starlette/FastAPI request object
            methods: Detection methods to try (uses the detector order if None)
            
        Returns:
            Detected locale code
        """
        methods = methods or self.detector.detection_order
        
        for method in methods:
            detected_locale = None
            
            if method == 'url_parameter':
                detected_locale = self.detector.detect_from_url_parameter(request)
            elif method == 'cookie':
                detected_locale = self.detector.detect_from_cookie(request)
            elif method == 'accept_language_header':
                detected_locale = self.detector.detect_from_accept_language(request, self.supported_locales)
            
            if detected_locale and self.is_supported_locale(detected_locale):
                return normalize_locale_code(detected_locale)
        
        return self.default_locale
    
    def is_supported_locale(self, locale: str) -> bool:
        """Check if locale or its language is supported"""
        if not locale:
            return False
        
        normalized = normalize_locale_code(locale)
        if normalized in self.supported_locales:
            return True
        
        return normalized.split(DASH)[0] in self.supported_locales
    
    def get_current_locale(self) -> str:
        """Get current locale from context"""
        return self.current_locale_var.get()
    
    def set_current_locale(self, locale: str) -> None:
        """Set current locale in context"""
        if self.is_supported_locale(locale):
            self.current_locale_var.set(normalize_locale_code(locale))
        else:
            self.current_locale_var.set(self.default_locale)
    
    def get_fallback_locale(self, locale: str) -> str:
        """Get appropriate fallback locale for given locale"""
        if self.is_supported_locale(locale):
            return locale
        return self.fallback_locale
    
    def get_locale_name(self, locale: str) -> str:
        """Human-readable English name for the locale"""
        info = get_culture_info(locale, enforce=False)
        if info is None:
            return locale.upper()
        return info.get_display_name('en') or locale
    
    def get_text_direction(self, locale: str) -> str:
        """Get text direction (ltr/rtl) for locale"""
        info = get_culture_info(locale, enforce=False)
        return info.text_direction if info is not None else 'ltr'
    
    def is_rtl_locale(self, locale: str) -> bool:
        """Check if locale uses right-to-left text direction"""
        return self.get_text_direction(locale) == 'rtl'
    
    def add_supported_locale(self, locale: str) -> None:
        """Add a new supported locale"""
        normalized = normalize_locale_code(locale)
        if normalized not in self.supported_locales:
            self.supported_locales.append(normalized)
    
    def get_supported_locales(self) -> List[str]:
        """Get list of supported locales"""
        return self.supported_locales.copy()
