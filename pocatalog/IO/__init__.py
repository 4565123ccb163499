from __future__ import annotations

from .PoFileReader import (
    PoParser,
    get_file_encoding,
    merge,
    parse,
    parse_plural_forms,
    read,
    read_all,
    read_header,
    read_stream,
    unpoify,
)
from .PoFileWriter import PoFileWriter, export, poify, wordwrap
from .TranslationFileWatcher import ChangeKind, FileChange, TranslationFileWatcher

__all__ = [
    'PoParser',
    'get_file_encoding',
    'merge',
    'parse',
    'parse_plural_forms',
    'read',
    'read_all',
    'read_header',
    'read_stream',
    'unpoify',
    'PoFileWriter',
    'export',
    'poify',
    'wordwrap',
    'ChangeKind',
    'FileChange',
    'TranslationFileWatcher',
]
