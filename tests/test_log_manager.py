from __future__ import annotations

import json
import logging
from pathlib import Path

from pocatalog.Log import LogManager
from pocatalog.Log.LogManager import JsonFormatter, LaravelFormatter, LogLevel, resolve_level


def _record(message: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord('pocatalog.IO', logging.WARNING, __file__, 1, message, None, None)
    for name, value in extra.items():
        setattr(record, name, value)
    return record


class TestLogManager:
    
    def test_resolve_level(self) -> None:
        assert resolve_level('debug') == logging.DEBUG
        assert resolve_level(LogLevel.ERROR) == logging.ERROR
        assert resolve_level('nonsense') == logging.INFO
        assert resolve_level(None, logging.WARNING) == logging.WARNING
    
    def test_single_channel_writes_file(self, tmp_path: Path) -> None:
        path = tmp_path / 'logs' / 'pocatalog.log'
        manager = LogManager({
            'default': 'single',
            'channels': {'single': {'driver': 'single', 'path': str(path), 'level': 'debug'}},
        })
        
        manager.info('Catalog loaded', {'entries': 7})
        manager.forget_channel('single')
        
        content = path.read_text(encoding='utf-8')
        assert 'pocatalog.channel.single.INFO: Catalog loaded {"entries": 7}' in content
    
    def test_stack_channel_shares_handlers(self, tmp_path: Path) -> None:
        manager = LogManager({
            'channels': {
                'stack': {'driver': 'stack', 'channels': ['a', 'b']},
                'a': {'driver': 'single', 'path': str(tmp_path / 'a.log')},
                'b': {'driver': 'single', 'path': str(tmp_path / 'b.log')},
            },
        })
        
        stack = manager.channel('stack')
        
        assert len(stack.handlers) == 2
        assert set(manager.get_channels()) == {'stack', 'a', 'b'}
        for name in ('stack', 'a', 'b'):
            manager.forget_channel(name)
    
    def test_route_attaches_channel_handlers(self, tmp_path: Path) -> None:
        path = tmp_path / 'routed.log'
        manager = LogManager({'channels': {'file': {'driver': 'single', 'path': str(path)}}})
        
        routed = manager.route('pocatalog.tests.routed', 'file')
        try:
            logging.getLogger('pocatalog.tests.routed.child').warning('Reload queue full')
        finally:
            for handler in manager.channel('file').handlers:
                routed.removeHandler(handler)
            manager.forget_channel('file')
        
        assert 'Reload queue full' in path.read_text(encoding='utf-8')
    
    def test_default_driver(self) -> None:
        manager = LogManager({'default': 'json'})
        manager.set_default_driver('stderr')
        
        assert manager.get_default_driver() == 'stderr'


class TestFormatters:
    
    def test_laravel_formatter(self) -> None:
        line = LaravelFormatter().format(_record('Invalid header', context={'file': 'fr.po'}))
        
        assert line.endswith('pocatalog.IO.WARNING: Invalid header {"file": "fr.po"}')
    
    def test_json_formatter(self) -> None:
        data = json.loads(JsonFormatter().format(_record('Invalid header')))
        
        assert data['level'] == 'WARNING'
        assert data['channel'] == 'pocatalog.IO'
        assert data['message'] == 'Invalid header'
        assert data['context'] == {}
