from __future__ import annotations

import os
from typing import Any, Dict

# Default log channel
default = os.getenv('LOG_CHANNEL', 'stderr')

# Default logging level
level = os.getenv('LOG_LEVEL', 'info')

channels: Dict[str, Dict[str, Any]] = {
    'stack': {
        'driver': 'stack',
        'channels': ['stderr', 'single'],
        'level': level,
    },
    
    'single': {
        'driver': 'single',
        'path': 'storage/logs/pocatalog.log',
        'level': level,
    },
    
    'daily': {
        'driver': 'daily',
        'path': 'storage/logs/pocatalog.log',
        'level': level,
        'days': 14,
    },
    
    'stderr': {
        'driver': 'stderr',
        'level': level,
        'formatter': 'laravel',
    },
    
    'json': {
        'driver': 'stderr',
        'level': level,
        'formatter': 'json',
    },
}


def get_logging_config() -> Dict[str, Any]:
    """Configuration consumed by LogManager"""
    return {'default': default, 'channels': channels}
