from __future__ import annotations

import json
import logging
import logging.handlers
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

PACKAGE_LOGGER = 'pocatalog'


class LogLevel(Enum):
    """Log levels enum."""
    DEBUG = 'debug'
    INFO = 'info'
    WARNING = 'warning'
    ERROR = 'error'
    CRITICAL = 'critical'


def resolve_level(level: Union[str, int, LogLevel, None], default: int = logging.INFO) -> int:
    """Numeric logging level for a config value such as ``'debug'``."""
    if level is None:
        return default
    if isinstance(level, LogLevel):
        level = level.value
    if isinstance(level, int):
        return level
    
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else default


class LogChannel:
    """Named log channel wrapping a stdlib logger."""
    
    def __init__(self, name: str, handlers: List[logging.Handler], level: Union[str, int] = logging.INFO) -> None:
        self.name = name
        self.handlers = handlers
        self.logger = logging.getLogger(f"{PACKAGE_LOGGER}.channel.{name}")
        self.logger.setLevel(resolve_level(level))
        for handler in handlers:
            self.logger.addHandler(handler)
        self.logger.propagate = False
    
    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, context)
    
    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, context)
    
    def warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, context)
    
    def error(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.ERROR, message, context)
    
    def log(self, level: Union[str, int], message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log message at specified level."""
        self._log(resolve_level(level), message, context)
    
    def close(self) -> None:
        for handler in self.handlers:
            self.logger.removeHandler(handler)
            handler.close()
    
    def _log(self, level: int, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        extra = {'context': context} if context else {}
        self.logger.log(level, message, extra=extra)


class LaravelFormatter(logging.Formatter):
    """``[timestamp] channel.LEVEL: message {context}`` formatter."""
    
    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        log_line = f"[{timestamp}] {record.name}.{record.levelname}: {record.getMessage()}"
        
        context = getattr(record, 'context', None)
        if context:
            log_line += f" {json.dumps(context, default=str)}"
        
        if record.exc_info:
            log_line += f"\n{self.formatException(record.exc_info)}"
        
        return log_line


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""
    
    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'channel': record.name,
            'message': record.getMessage(),
            'context': getattr(record, 'context', {}),
        }
        
        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)
        
        return json.dumps(log_entry, default=str)


class LogManager:
    """
    Channel-based log manager
    
    Channels are built from a ``{'default': ..., 'channels': {...}}`` config
    with the ``single``, ``daily``, ``stderr`` and ``stack`` drivers. The
    module loggers of the library are routed to a channel with ``route()``.
    """
    
    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        self._config: Dict[str, Any] = config or {}
        self._channels: Dict[str, LogChannel] = {}
        self._default_channel: str = self._config.get('default', 'stderr')
    
    def channel(self, name: Optional[str] = None) -> LogChannel:
        """Get a log channel, building it on first use."""
        if name is None:
            name = self._default_channel
        
        if name not in self._channels:
            self._channels[name] = self._create_channel(name)
        
        return self._channels[name]
    
    def route(self, logger_name: str = PACKAGE_LOGGER, channel: Optional[str] = None) -> logging.Logger:
        """Send the records of a stdlib logger tree to a channel's handlers."""
        target = self.channel(channel)
        route_logger = logging.getLogger(logger_name)
        
        for handler in target.handlers:
            if handler not in route_logger.handlers:
                route_logger.addHandler(handler)
        route_logger.setLevel(target.logger.level)
        return route_logger
    
    def _create_channel(self, name: str) -> LogChannel:
        config = self._config.get('channels', {}).get(name, {'driver': name})
        driver = config.get('driver', 'stderr')
        level = config.get('level', logging.INFO)
        
        if driver == 'stack':
            handlers: List[logging.Handler] = []
            for channel_name in config.get('channels', []):
                handlers.extend(self.channel(channel_name).handlers)
            return LogChannel(name, handlers, level)
        
        if driver == 'single':
            path = self._prepare_path(config.get('path', f'storage/logs/{name}.log'))
            handler: logging.Handler = logging.FileHandler(path, encoding='utf-8')
        elif driver == 'daily':
            path = self._prepare_path(config.get('path', f'storage/logs/{name}.log'))
            handler = logging.handlers.TimedRotatingFileHandler(
                path, when='midnight', interval=1, backupCount=config.get('days', 14), encoding='utf-8'
            )
        else:
            handler = logging.StreamHandler(sys.stderr)
        
        handler.setFormatter(self._get_formatter(config))
        return LogChannel(name, [handler], level)
    
    def _prepare_path(self, path: str) -> str:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        return path
    
    def _get_formatter(self, config: Dict[str, Any]) -> logging.Formatter:
        if config.get('formatter', 'laravel') == 'json':
            return JsonFormatter()
        return LaravelFormatter()
    
    def get_default_driver(self) -> str:
        return self._default_channel
    
    def set_default_driver(self, name: str) -> None:
        self._default_channel = name
    
    def get_channels(self) -> Dict[str, LogChannel]:
        return self._channels
    
    def forget_channel(self, name: str) -> None:
        """Close and remove a channel."""
        channel = self._channels.pop(name, None)
        if channel is not None:
            channel.close()
    
    # Proxy methods to default channel
    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().debug(message, context)
    
    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().info(message, context)
    
    def warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().warning(message, context)
    
    def error(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().error(message, context)


# Global log manager instance
log_manager_instance: Optional[LogManager] = None


def get_log_manager() -> LogManager:
    """Get the global log manager, configured from ``config.logging``."""
    global log_manager_instance
    if log_manager_instance is None:
        from config.logging import get_logging_config
        log_manager_instance = LogManager(get_logging_config())
    return log_manager_instance


def logger(channel: Optional[str] = None) -> LogChannel:
    """Get a log channel."""
    return get_log_manager().channel(channel)
