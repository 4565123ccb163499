from __future__ import annotations

"""
Localization configuration for PO catalogs
"""
import os
from typing import Any, Dict


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


LOCALIZATION_CONFIG: Dict[str, Any] = {
    # Default locale
    'locale': os.getenv('APP_LOCALE', 'en'),
    
    # Fallback locale when translations are missing
    'fallback_locale': os.getenv('APP_FALLBACK_LOCALE', 'en'),
    
    # Directory holding the *.po files
    'po_path': os.getenv('PO_PATH', 'resources/lang'),
    
    # Supported locales
    'supported_locales': [
        locale.strip()
        for locale in os.getenv('APP_SUPPORTED_LOCALES', 'en,fr,de,es,ru,ar').split(',')
        if locale.strip()
    ],
    
    # Reader options
    'skip_comments': _env_flag('PO_SKIP_COMMENTS', False),
    'include_subdirectories': _env_flag('PO_INCLUDE_SUBDIRECTORIES', False),
    'include_region_code2': True,
    
    # Cache resolved entries in memory
    'cache_translations': _env_flag('PO_CACHE_TRANSLATIONS', True),
    
    # Reload changed files in the background
    'watch_files': _env_flag('PO_WATCH_FILES', False),
    'poll_interval': float(os.getenv('PO_POLL_INTERVAL', '600')),
    'change_debounce': float(os.getenv('PO_CHANGE_DEBOUNCE', '5')),
    'reload_queue_size': int(os.getenv('PO_RELOAD_QUEUE_SIZE', '100')),
    
    # Request locale detection
    'url_parameter': 'locale',
    'cookie': {
        'name': 'app_locale',
        'max_age': int(os.getenv('APP_LOCALE_COOKIE_MAX_AGE', str(60 * 60 * 24 * 365))),  # 1 year
    },
}


def get_localization_config() -> Dict[str, Any]:
    """Get localization configuration"""
    return LOCALIZATION_CONFIG.copy()

