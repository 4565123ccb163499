from __future__ import annotations

from .LogManager import (
    JsonFormatter,
    LaravelFormatter,
    LogChannel,
    LogLevel,
    LogManager,
    get_log_manager,
    logger,
    resolve_level,
)

__all__ = [
    'JsonFormatter',
    'LaravelFormatter',
    'LogChannel',
    'LogLevel',
    'LogManager',
    'get_log_manager',
    'logger',
    'resolve_level',
]
