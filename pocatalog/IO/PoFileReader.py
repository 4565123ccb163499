"""
PO file reader

Single-pass, line-oriented parser turning gettext PO text into a Catalog.
"""
from __future__ import annotations

import codecs
import io
import logging
import os
import re
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Dict, Iterable, List, Optional, Set, Tuple, Union

from babel import Locale

from ..Localization.Catalog import Catalog
from ..Localization.Exceptions import PoFormatError, PluralFormsSyntaxError
from ..Localization.LocaleManager import (
    DASH,
    DOT,
    UNDERSCORE,
    culture_name,
    get_culture_info,
    is_region_code2,
)
from ..Localization.Plurals import DEFAULT_EXPRESSION, DEFAULT_PLURAL_COUNT
from ..Localization.Translation import Translation

logger = logging.getLogger(__name__)

PathLike = Union[str, 'os.PathLike[str]']

MSGCTXT = 'msgctxt'
MSGID = 'msgid'
MSGID_PLURAL = 'msgid_plural'
MSGSTR = 'msgstr'
MSGSTR_PLURAL = 'msgstr_plural'
PLURAL_FORMS = 'Plural-Forms'

RX_MSGCTXT = re.compile(r'^msgctxt\s+(".*")')
RX_MSGID = re.compile(r'^msgid\s+(".*")')
RX_MSGID_PLURAL = re.compile(r'^msgid_plural\s+(".*")')
RX_MSGSTR = re.compile(r'^msgstr\s+(".*")')
RX_MSGSTR_PLURAL = re.compile(r'^msgstr\[(\d+)\]\s+(".*")')
RX_LINE = re.compile(r'^".*"$')
RX_NPLURALS_EXPR = re.compile(r'^\s*nplurals\s*=\s*(\d+)\s*;\s*plural\s*=\s*(.+)$')

ESCAPES: Dict[str, str] = {
    't': '\t',
    'n': '\n',
    'r': '\r',
    '\\': '\\',
}

DEFAULT_ENCODING = 'utf-8'

# Longest marks first: the UTF-32 LE mark starts with the UTF-16 LE one.
BYTE_ORDER_MARKS: List[Tuple[bytes, str]] = [
    (codecs.BOM_UTF32_BE, 'utf-32'),
    (codecs.BOM_UTF32_LE, 'utf-32'),
    (codecs.BOM_UTF8, 'utf-8-sig'),
    (b'+/v', 'utf-7'),
    (codecs.BOM_UTF16_BE, 'utf-16'),
    (codecs.BOM_UTF16_LE, 'utf-16'),
]


def unpoify(value: str) -> str:
    """
    Unescape a PO string value.
    
    Each physical line is trimmed and loses one layer of surrounding quotes
    before ``\\t \\n \\r \\\\`` escapes are resolved; other escaped characters
    are kept without the backslash.
    """
    result: List[str] = []
    previous_is_backslash = False
    
    for line in value.split('\n'):
        line = line.strip()
        if line.startswith('"'):
            line = line[1:]
        if line.endswith('"'):
            line = line[:-1]
        
        for char in line:
            if previous_is_backslash:
                previous_is_backslash = False
                result.append(ESCAPES.get(char, char))
            elif char == '\\':
                previous_is_backslash = True
            else:
                result.append(char)
    
    # PO files should not contain \r, standardise imported content
    return ''.join(result).replace('\r\n', '\n').replace('\r', '\n')


def parse_plural_forms(header: str) -> Tuple[int, str]:
    """Split a Plural-Forms header into ``(nplurals, expression)``"""
    match = RX_NPLURALS_EXPR.match(header)
    if match:
        return int(match.group(1)), match.group(2).strip()
    return DEFAULT_PLURAL_COUNT, DEFAULT_EXPRESSION.replace(' ', '')


def make_headers(translation: str) -> Dict[str, str]:
    """Parse ``Name: value`` lines of the header pseudo-entry"""
    headers: Dict[str, str] = {}
    # sometimes literal \n are used instead of real new lines
    for line in translation.replace('\\n', '\n').split('\n'):
        name, separator, value = line.partition(':')
        if separator:
            headers[name.strip()] = value.strip()
    return headers


class PoParser:
    """
    State machine for one read.
    
    ``context`` names the keyword whose value continuation lines extend.
    """
    
    def __init__(
        self,
        culture: Any = None,
        skip_comments: bool = False,
        header_only: bool = False,
        enforce_culture: bool = True
    ) -> None:
        if header_only:
            enforce_culture = False
        
        self.skip_comments = skip_comments
        self.header_only = header_only
        self.enforce_culture = enforce_culture
        self.catalog = Catalog(culture=self._resolve_culture(culture))
        self.context = ''
        self.plural_index = 0
        self.entry = Translation(self.catalog)
        self.line_number = 0
        self.line = ''
    
    def _resolve_culture(self, culture: Any) -> Optional[Locale]:
        if culture is None or (isinstance(culture, str) and not culture.strip()):
            return None
        return get_culture_info(culture, self.enforce_culture)
    
    def parse(self, lines: Iterable[str]) -> Catalog:
        for line in lines:
            self.line_number += 1
            self.line = line.rstrip('\r\n')
            
            if self.feed(self.line):
                break
        else:
            self.finish_entry()
        
        self.catalog.last_access_time = datetime.now()
        return self.catalog
    
    def feed(self, line: str) -> bool:
        """Process one line; returns True when a header-only read is complete."""
        if line.startswith('#'):
            # comments have to be at the beginning of an entry
            if self.context:
                self.invalid('comment after entry keywords')
            if not self.skip_comments:
                self.add_comment(line)
            return False
        
        match = RX_MSGCTXT.match(line)
        if match:
            if self.context:
                self.invalid('msgctxt must start an entry')
            self.context = MSGCTXT
            self.entry.context = unpoify(match.group(1))
            return False
        
        match = RX_MSGID.match(line)
        if match:
            if self.context not in ('', MSGCTXT):
                self.invalid('unexpected msgid')
            self.context = MSGID
            self.entry.singular = unpoify(match.group(1))
            return False
        
        match = RX_MSGID_PLURAL.match(line)
        if match:
            if self.context != MSGID:
                self.invalid('msgid_plural must follow msgid')
            self.context = MSGID_PLURAL
            self.entry.plural = unpoify(match.group(1))
            return False
        
        match = RX_MSGSTR.match(line)
        if match:
            if self.context != MSGID:
                self.invalid('msgstr must follow msgid')
            self.context = MSGSTR
            self.entry.translations.append(unpoify(match.group(1)))
            return False
        
        match = RX_MSGSTR_PLURAL.match(line)
        if match:
            if self.context not in (MSGID_PLURAL, MSGSTR_PLURAL):
                self.invalid('msgstr[N] must follow msgid_plural')
            self.context = MSGSTR_PLURAL
            self.set_plural_translation(int(match.group(1)), unpoify(match.group(2)))
            return False
        
        if RX_LINE.match(line):
            self.append_continuation(unpoify(line))
            return False
        
        if not line.strip():
            return self.finish_entry()
        
        self.invalid()
        return False
    
    def add_comment(self, line: str) -> None:
        entry = self.entry
        first_two = line[:2]
        
        if first_two == '#:':
            entry.references.extend(token for token in re.split(r'\s+', line[2:].strip()) if token)
        elif first_two == '#.':
            entry.extracted_comments = f"{entry.extracted_comments}\n{line[2:].strip()}".strip()
        elif first_two == '#,':
            entry.flags.extend(flag for flag in re.split(r',\s*', line[2:].strip()) if flag)
        else:
            entry.translator_comments = f"{entry.translator_comments}\n{line[1:].strip()}".strip()
    
    def set_plural_translation(self, index: int, value: str) -> None:
        translations = self.entry.translations
        
        if index > len(translations):
            self.invalid(f"plural index {index} skips msgstr[{len(translations)}]")
        
        if index == len(translations):
            translations.append(value)
        else:
            translations[index] = value
        self.plural_index = index
    
    def append_continuation(self, value: str) -> None:
        entry = self.entry
        
        if self.context == MSGID:
            entry.singular += value
        elif self.context == MSGCTXT:
            entry.context = (entry.context or '') + value
        elif self.context == MSGID_PLURAL:
            entry.plural = (entry.plural or '') + value
        elif self.context == MSGSTR:
            entry.translations[0] += value
        elif self.context == MSGSTR_PLURAL:
            entry.translations[self.plural_index] += value
        else:
            self.invalid('continuation line outside of a string value')
    
    def finish_entry(self) -> bool:
        entry = self.entry
        done = False
        
        if not entry.singular:
            if entry.translations and self.context:
                self.apply_header(entry)
                done = self.header_only
        else:
            if not entry.translations:
                count = self.catalog.plural_count if entry.plural is not None else 1
                entry.translations = [''] * count
            self.catalog.add(entry)
            done = self.header_only
        
        self.context = ''
        self.plural_index = 0
        self.entry = Translation(self.catalog)
        return done
    
    def apply_header(self, entry: Translation) -> None:
        catalog = self.catalog
        
        for name, value in make_headers(entry.translations[0]).items():
            catalog.headers[name] = value
        
        catalog.header_comments = entry.translator_comments
        
        plural_forms = catalog.get_header(PLURAL_FORMS)
        if plural_forms is not None:
            plural_count, expression = parse_plural_forms(plural_forms)
            try:
                catalog.set_plural_forms(plural_count, expression)
            except PluralFormsSyntaxError as e:
                logger.warning("Invalid Plural-Forms header %r, using default rule: %s", plural_forms, e)
                catalog.set_plural_forms(DEFAULT_PLURAL_COUNT, DEFAULT_EXPRESSION)
        
        language = catalog.get_header('Language')
        if catalog.culture is None and language:
            catalog.culture = get_culture_info(language, self.enforce_culture)
    
    def invalid(self, reason: Optional[str] = None) -> None:
        raise PoFormatError(self.line_number, self.line, reason)


def _split_lines(content: str) -> List[str]:
    return content.replace('\r\n', '\n').replace('\r', '\n').split('\n')


def parse(
    content: str,
    culture: Any = None,
    skip_comments: bool = False,
    enforce_culture: bool = True
) -> Catalog:
    """Parse PO text into a Catalog."""
    parser = PoParser(culture, skip_comments, header_only=False, enforce_culture=enforce_culture)
    return parser.parse(_split_lines(content))


def read_stream(
    stream: IO[str],
    culture: Any = None,
    skip_comments: bool = False,
    header_only: bool = False,
    enforce_culture: bool = True
) -> Catalog:
    """Parse PO text from an open text stream."""
    parser = PoParser(culture, skip_comments, header_only=header_only, enforce_culture=enforce_culture)
    return parser.parse(stream)


def get_file_encoding(path: PathLike) -> str:
    """
    Encoding announced by the file's byte order mark, utf-8 when there is none.
    """
    with open(path, 'rb') as f:
        head = f.read(4)
    
    for mark, encoding in BYTE_ORDER_MARKS:
        if head.startswith(mark):
            return encoding
    
    return DEFAULT_ENCODING


def read_header(path: PathLike) -> Catalog:
    """Read only the header block of a PO file."""
    encoding = get_file_encoding(path)
    
    with open(path, 'r', encoding=encoding, errors='replace', newline=None) as f:
        return read_stream(f, culture=None, skip_comments=True, header_only=True)


def _resolve_encoding(path: PathLike) -> str:
    sniffed = get_file_encoding(path)
    
    # a byte order mark overrides the declared charset
    if sniffed != DEFAULT_ENCODING:
        return sniffed
    
    try:
        charset = read_header(path).get_charset()
    except PoFormatError as e:
        logger.warning("Cannot read header of %s: %s", path, e)
        charset = None
    
    if charset:
        try:
            name = codecs.lookup(charset).name
        except LookupError:
            logger.warning("Unknown charset %r in %s, using %s", charset, path, sniffed)
            return sniffed
        # a UTF-8 header does not rule out a byte order mark
        return 'utf-8-sig' if name == 'utf-8' else name
    
    return sniffed


def read(
    source: Union[PathLike, IO[Any]],
    culture: Any = None,
    skip_comments: bool = False,
    encoding: Optional[str] = None,
    enforce_culture: bool = True
) -> Catalog:
    """
    Read a PO file into a Catalog.
    
    Args:
        source: Path to a PO file, or an open text or binary stream
        culture: Culture of the catalog; the Language header is used when None
        skip_comments: Do not collect comments
        encoding: Forced encoding; otherwise the header charset or the byte order mark decides
        enforce_culture: Raise CultureNotFoundError for unknown culture names
    """
    if hasattr(source, 'read'):
        stream: IO[Any] = source  # type: ignore[assignment]
        if isinstance(stream, io.TextIOBase):
            return read_stream(stream, culture, skip_comments, enforce_culture=enforce_culture)
        text = io.TextIOWrapper(stream, encoding=encoding or DEFAULT_ENCODING, newline=None)
        try:
            return read_stream(text, culture, skip_comments, enforce_culture=enforce_culture)
        finally:
            text.detach()
    
    path = os.fspath(source)  # type: ignore[arg-type]
    if encoding is None:
        encoding = _resolve_encoding(path)
    
    with open(path, 'r', encoding=encoding, newline=None) as f:
        catalog = read_stream(f, culture, skip_comments, enforce_culture=enforce_culture)
    
    catalog.file_name = path
    logger.debug("Read %d entries from %s", len(catalog.entries), path)
    return catalog


def read_all(
    directory: PathLike,
    culture: Any,
    skip_comments: bool = False,
    include_subdirectories: bool = False,
    include_region_code2: bool = False,
    skip_invalid: bool = False
) -> List[Catalog]:
    """
    Read every ``*<culture>.po`` file of a directory.
    
    ``fr-FR`` also matches ``fr_FR`` and ``fr.FR`` file names; with
    ``include_region_code2`` the bare language (``*fr.po``) is read too.
    A file is never read twice.
    """
    info = get_culture_info(culture)
    catalogs: List[Catalog] = []
    files_read: Set[str] = set()
    
    _read_files(
        Path(directory), info, catalogs, files_read,
        skip_comments, include_subdirectories, include_region_code2, skip_invalid
    )
    
    logger.info("Loaded %d catalog(s) for %s from %s", len(catalogs), culture_name(info), directory)
    return catalogs


def _read_files(
    directory: Path,
    culture: Locale,
    catalogs: List[Catalog],
    files_read: Set[str],
    skip_comments: bool,
    include_subdirectories: bool,
    include_region_code2: bool,
    skip_invalid: bool
) -> None:
    lang = culture_name(culture)
    locales = [lang]
    
    if not is_region_code2(culture):
        # some programs use 'en_US', others 'de.DE'
        locales.append(lang.replace(DASH, UNDERSCORE))
        locales.append(lang.replace(DASH, DOT))
    
    for locale in locales:
        pattern = f"*{locale}.po"
        files = directory.rglob(pattern) if include_subdirectories else directory.glob(pattern)
        
        for file in sorted(files):
            resolved = os.path.realpath(file)
            if resolved in files_read:
                continue
            files_read.add(resolved)
            
            try:
                catalogs.append(read(str(file), locale, skip_comments))
            except (PoFormatError, UnicodeDecodeError) as e:
                if not skip_invalid:
                    raise
                logger.warning("Skipping invalid catalog %s: %s", file, e)
    
    if include_region_code2 and not is_region_code2(culture):
        _read_files(
            directory, get_culture_info(culture.language), catalogs, files_read,
            skip_comments, include_subdirectories, False, skip_invalid
        )


def merge(po_path: PathLike, pot_path: PathLike, culture: Any = None) -> Catalog:
    """
    Read a translated PO file and refresh it from a POT template.
    
    New template strings are added, existing translations are kept.
    """
    po = read(po_path, culture, enforce_culture=False)
    pot = read(pot_path, culture, enforce_culture=False)
    
    added = po.merge_with(pot)
    logger.info("Merged %d new entries from %s into %s", added, pot_path, po_path)
    return po
