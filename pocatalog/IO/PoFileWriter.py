"""
PO file writer

Renders a Catalog back to gettext PO text that PoFileReader reads back
to the same entries.
"""
from __future__ import annotations

import codecs
import io
import logging
import os
import tempfile
import textwrap
from typing import IO, Any, List, Optional, Union

from ..Localization.Catalog import Catalog
from ..Localization.Translation import Translation

logger = logging.getLogger(__name__)

QUOTE = '"'
QUOTES_EMPTY = '""'
NEWLINE = '\n'
PO_MAX_LINE_LEN = 75

EncodingLike = Union[str, codecs.CodecInfo, None]


def poify(value: str) -> str:
    """
    Quote and escape a string as a PO value.
    
    Multi-line values start with an empty ``""`` line and get one quoted
    line per physical line.
    """
    escaped = value.replace('\\', '\\\\').replace(QUOTE, '\\"').replace('\t', '\\t')
    po = QUOTE + f'\\n{QUOTE}{NEWLINE}{QUOTE}'.join(escaped.split(NEWLINE)) + QUOTE
    
    # add empty string on first line for readability
    if NEWLINE in po and (po.count(NEWLINE) > 1 or not po.endswith(NEWLINE)):
        po = f"{QUOTES_EMPTY}{NEWLINE}{po}"
    
    # remove empty strings
    return po.replace(f"{NEWLINE}{QUOTES_EMPTY}", '')


def match_begin_and_end_newlines(translation: str, original: Optional[str]) -> str:
    """Make a translation start and end with a newline exactly when the original does"""
    if not translation:
        return translation
    
    original = original or ''
    
    if original.startswith(NEWLINE):
        if not translation.startswith(NEWLINE):
            translation = NEWLINE + translation
    elif translation.startswith(NEWLINE):
        translation = translation.lstrip(NEWLINE)
    
    if original.endswith(NEWLINE):
        if not translation.endswith(NEWLINE):
            translation += NEWLINE
    elif translation.endswith(NEWLINE):
        translation = translation.rstrip(NEWLINE)
    
    return translation


def prepend_each_line(value: str, prefix: str) -> str:
    lines = value.split(NEWLINE)
    append = ''
    
    # a terminating newline is restored after prefixing
    if value.endswith(NEWLINE) and lines[-1] == '':
        lines.pop()
        append = NEWLINE
    
    return NEWLINE.join(prefix + line for line in lines) + append


def wordwrap(text: str, width: int = PO_MAX_LINE_LEN) -> str:
    """Wrap each line of ``text`` at word boundaries; long words are not cut."""
    if width < 1:
        return text
    
    wrapped: List[str] = []
    for line in text.split(NEWLINE):
        if len(line) <= width:
            wrapped.append(line)
            continue
        wrapped.append(textwrap.fill(
            line,
            width=width,
            break_long_words=False,
            break_on_hyphens=False,
        ))
    return NEWLINE.join(wrapped)


def _encoding_name(encoding: EncodingLike) -> Optional[str]:
    if encoding is None:
        return None
    if isinstance(encoding, codecs.CodecInfo):
        return encoding.name
    return codecs.lookup(encoding).name


class PoFileWriter:
    """
    Serializer for a Catalog
    
    Args:
        catalog: Catalog to render
        wrap_references: Word-wrap ``#:`` reference comments like the other comments
    """
    
    max_line_length = PO_MAX_LINE_LEN + 3
    
    def __init__(self, catalog: Catalog, wrap_references: bool = False) -> None:
        if catalog is None:
            raise ValueError('catalog is required')
        
        self.catalog = catalog
        self.wrap_references = wrap_references
        self._catalog_encoding = _encoding_name(catalog.get_encoding())
    
    def export(self, exclude_headers: bool = False) -> str:
        """Render the whole catalog as PO text"""
        output = []
        
        if not exclude_headers:
            output.append(self.export_headers())
            output.append(NEWLINE * 2)
        
        output.append(self.export_entries())
        return ''.join(output)
    
    def export_headers(self) -> str:
        header_lines = ''.join(f"{name}: {value}{NEWLINE}" for name, value in self.catalog.headers.items())
        poified = poify(header_lines)
        before_headers = ''
        
        if self.catalog.header_comments:
            before_headers = prepend_each_line(self.catalog.header_comments.rstrip() + NEWLINE, '# ')
        
        return f"{before_headers}msgid {QUOTES_EMPTY}{NEWLINE}msgstr {poified}".rstrip()
    
    def export_entries(self) -> str:
        blocks = []
        for entry in self.catalog.entries.values():
            block = self.export_entry(entry)
            if block is not None:
                blocks.append(block)
        
        return (NEWLINE * 2).join(blocks).rstrip() + NEWLINE
    
    def export_entry(self, entry: Translation) -> Optional[str]:
        """Render one entry, None for an entry without msgid"""
        if not entry.singular:
            return None
        
        lines: List[str] = []
        
        if entry.translator_comments:
            lines.append(self.comment_block(entry.translator_comments))
        if entry.extracted_comments:
            lines.append(self.comment_block(entry.extracted_comments, '.'))
        if entry.references:
            lines.append(self.comment_block(' '.join(entry.references), ':'))
        if entry.flags:
            lines.append(self.comment_block(', '.join(entry.flags), ','))
        if entry.context:
            lines.append('msgctxt ' + poify(entry.context))
        
        lines.append('msgid ' + poify(entry.singular))
        
        if entry.plural is None and not entry.is_plural:
            if entry.translations:
                translation = match_begin_and_end_newlines(entry.translations[0], entry.singular)
                lines.append('msgstr ' + poify(translation))
            else:
                lines.append(f"msgstr {QUOTES_EMPTY}")
        else:
            plural = entry.plural or ''
            lines.append('msgid_plural ' + poify(plural))
            
            translations = entry.translations or [''] * self.catalog.plural_count
            for index, value in enumerate(translations):
                original = entry.singular if index == 0 else plural
                translation = match_begin_and_end_newlines(value, original)
                lines.append(f"msgstr[{index}] " + poify(translation))
        
        return NEWLINE.join(lines)
    
    def comment_block(self, text: str, comment_type: str = '') -> str:
        # references are only wrapped on request
        if comment_type != ':' or self.wrap_references:
            text = wordwrap(text, self.max_line_length - 3).rstrip(NEWLINE)
        
        return prepend_each_line(text, f"#{comment_type} ")
    
    def save_changes(
        self,
        target: Union[str, 'os.PathLike[str]', IO[Any], None] = None,
        exclude_headers: bool = False,
        encoding: EncodingLike = None
    ) -> Optional[str]:
        """
        Write the catalog to a path, a binary stream or a text writer.
        
        Without a target the catalog goes to a new temporary file whose
        path is returned.
        
        Raises:
            ValueError: the stream is not writable
            LookupError: no encoding for a binary stream
        """
        if target is None:
            fd, temp_path = tempfile.mkstemp(suffix='.po')
            os.close(fd)
            self.save_changes(temp_path, exclude_headers, encoding)
            return temp_path
        
        if isinstance(target, (str, os.PathLike)):
            path = os.fspath(target)
            enc = _encoding_name(encoding) or self._catalog_encoding or 'utf-8'
            with open(path, 'w', encoding=enc, newline=NEWLINE) as f:
                self.write(f, exclude_headers)
            logger.debug("Saved %d entries to %s", len(self.catalog.entries), path)
            return path
        
        if isinstance(target, io.TextIOBase):
            self.write(target, exclude_headers)
            return None
        
        if not getattr(target, 'writable', lambda: True)():
            raise ValueError('Cannot save changes to a non-writable stream.')
        
        enc = _encoding_name(encoding) or self._catalog_encoding
        if enc is None:
            raise LookupError('Cannot resolve to the appropriate encoding.')
        
        target.write(self.export(exclude_headers).encode(enc))
        target.flush()
        return None
    
    def write(self, writer: IO[str], exclude_headers: bool = False) -> None:
        """Write the catalog to a text writer"""
        if not exclude_headers:
            writer.write(self.export_headers())
            writer.write(NEWLINE * 2)
        
        writer.write(self.export_entries())
        writer.flush()


def export(catalog: Catalog, exclude_headers: bool = False, wrap_references: bool = False) -> str:
    """Render a catalog as PO text"""
    return PoFileWriter(catalog, wrap_references).export(exclude_headers)
