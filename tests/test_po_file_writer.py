from __future__ import annotations

import io
from pathlib import Path

import pytest

from pocatalog.IO.PoFileReader import parse, read
from pocatalog.IO.PoFileWriter import (
    PoFileWriter,
    export,
    match_begin_and_end_newlines,
    poify,
    prepend_each_line,
    wordwrap,
)
from pocatalog.Localization.Catalog import Catalog
from pocatalog.Localization.Translation import Translation


def _snapshot(catalog: Catalog) -> dict:
    return {
        entry.key: (
            entry.singular,
            entry.plural,
            entry.translations,
            sorted(entry.flags),
            sorted(entry.references),
        )
        for entry in catalog
    }


class TestPoify:
    """Quoting and escaping of PO values."""
    
    def test_single_line(self) -> None:
        assert poify('Save') == '"Save"'
    
    def test_escapes(self) -> None:
        assert poify('a "b"\tc \\ d') == '"a \\"b\\"\\tc \\\\ d"'
    
    def test_multiline_gets_leading_empty_string(self) -> None:
        assert poify('first\nsecond') == '""\n"first\\n"\n"second"'
    
    def test_trailing_newline(self) -> None:
        assert poify('line\n') == '""\n"line\\n"'
    
    def test_empty(self) -> None:
        assert poify('') == '""'


class TestHelpers:
    
    def test_match_begin_and_end_newlines(self) -> None:
        assert match_begin_and_end_newlines('texte', '\ntext\n') == '\ntexte\n'
        assert match_begin_and_end_newlines('\ntexte\n', 'text') == 'texte'
        assert match_begin_and_end_newlines('', '\ntext') == ''
    
    def test_prepend_each_line(self) -> None:
        assert prepend_each_line('a\nb\n', '# ') == '# a\n# b\n'
        assert prepend_each_line('a', '#. ') == '#. a'
    
    def test_wordwrap(self) -> None:
        text = ' '.join(['word'] * 40)
        wrapped = wordwrap(text, 20)
        
        assert all(len(line) <= 20 for line in wrapped.split('\n'))
        assert wrapped.replace('\n', ' ') == text
    
    def test_wordwrap_keeps_long_words(self) -> None:
        word = 'x' * 100
        
        assert wordwrap(word, 20) == word


class TestPoFileWriter:
    """Rendering catalogs back to PO text."""
    
    def test_round_trip(self, french_catalog: Catalog) -> None:
        text = export(french_catalog)
        reread = parse(text)
        
        assert _snapshot(reread) == _snapshot(french_catalog)
        assert dict(reread.headers) == dict(french_catalog.headers)
        assert reread.header_comments == french_catalog.header_comments
    
    def test_export_is_idempotent(self, french_catalog: Catalog) -> None:
        first = export(french_catalog)
        second = export(parse(first))
        
        assert first == second
    
    def test_round_trip_of_entries_without_msgstr(self) -> None:
        catalog = parse('msgid "Hello"\n\nmsgid "a"\nmsgid_plural "b"\n')
        reread = parse(export(catalog))
        
        assert catalog.find('Hello').translations == ['']  # type: ignore[union-attr]
        assert catalog.find('a').translations == ['', '']  # type: ignore[union-attr]
        assert _snapshot(reread) == _snapshot(catalog)
    
    def test_header_block(self, french_catalog: Catalog) -> None:
        headers = PoFileWriter(french_catalog).export_headers()
        
        assert headers.startswith('# French translations for the media library.\n# Copyright (C) 2026\nmsgid ""\nmsgstr ""\n')
        assert '"Plural-Forms: nplurals=2; plural=(n > 1);\\n"' in headers
    
    def test_exclude_headers(self, french_catalog: Catalog) -> None:
        text = export(french_catalog, exclude_headers=True)
        
        assert 'Plural-Forms' not in text
        assert text.startswith('#: src/Trash.cs:42\n#, csharp-format\nmsgid "{0} media file restored from the trash."')
    
    def test_entry_layout(self) -> None:
        entry = Translation(
            singular='Open',
            context='menu',
            translations=['Ouvrir'],
            translator_comments='Reviewed',
            extracted_comments='Menu item',
            references=['a.py:1', 'b.py:2'],
            flags=['fuzzy', 'python-format'],
        )
        
        block = PoFileWriter(Catalog()).export_entry(entry)
        
        assert block == (
            '# Reviewed\n'
            '#. Menu item\n'
            '#: a.py:1 b.py:2\n'
            '#, fuzzy, python-format\n'
            'msgctxt "menu"\n'
            'msgid "Open"\n'
            'msgstr "Ouvrir"'
        )
    
    def test_plural_entry_without_translations(self) -> None:
        entry = Translation(singular='{0} file', plural='{0} files')
        
        block = PoFileWriter(Catalog()).export_entry(entry)
        
        assert block == 'msgid "{0} file"\nmsgid_plural "{0} files"\nmsgstr[0] ""\nmsgstr[1] ""'
    
    def test_entry_without_msgid_is_skipped(self) -> None:
        assert PoFileWriter(Catalog()).export_entry(Translation()) is None
    
    def test_translation_newlines_follow_source(self) -> None:
        entry = Translation(singular='Hello\n', translations=['Bonjour'])
        
        block = PoFileWriter(Catalog()).export_entry(entry)
        
        assert block is not None
        assert block.endswith('msgstr ""\n"Bonjour\\n"')
    
    def test_references_wrap_only_on_request(self) -> None:
        references = [f"src/module_{i}/very_long_file_name.py:{i}" for i in range(6)]
        entry = Translation(singular='a', translations=['b'], references=references)
        
        plain = PoFileWriter(Catalog()).export_entry(entry)
        wrapped = PoFileWriter(Catalog(), wrap_references=True).export_entry(entry)
        
        assert plain is not None and wrapped is not None
        assert plain.count('#: ') == 1
        assert wrapped.count('#: ') > 1
    
    def test_requires_catalog(self) -> None:
        with pytest.raises(ValueError):
            PoFileWriter(None)  # type: ignore[arg-type]


class TestSaveChanges:
    """Writing to paths, streams and temporary files."""
    
    def test_save_to_path(self, french_catalog: Catalog, tmp_path: Path) -> None:
        target = tmp_path / 'out.po'
        
        PoFileWriter(french_catalog).save_changes(str(target))
        
        assert len(read(str(target))) == len(french_catalog)
        assert b'\r\n' not in target.read_bytes()
    
    def test_save_to_temporary_file(self, french_catalog: Catalog) -> None:
        path = PoFileWriter(french_catalog).save_changes()
        
        assert path is not None
        try:
            assert read(path).find('Save') is not None
        finally:
            Path(path).unlink()
    
    def test_save_to_text_stream(self, french_catalog: Catalog) -> None:
        buffer = io.StringIO()
        
        PoFileWriter(french_catalog).save_changes(buffer)
        
        assert buffer.getvalue() == export(french_catalog)
    
    def test_save_to_binary_stream_uses_catalog_charset(self, french_catalog: Catalog) -> None:
        buffer = io.BytesIO()
        
        PoFileWriter(french_catalog).save_changes(buffer)
        
        assert buffer.getvalue().decode('utf-8') == export(french_catalog)
    
    def test_binary_stream_without_encoding(self) -> None:
        catalog = parse('msgid "a"\nmsgstr "b"\n')
        
        with pytest.raises(LookupError):
            PoFileWriter(catalog).save_changes(io.BytesIO())
    
    def test_binary_stream_with_explicit_encoding(self) -> None:
        catalog = parse('msgid "a"\nmsgstr "é"\n')
        buffer = io.BytesIO()
        
        PoFileWriter(catalog).save_changes(buffer, encoding='latin-1')
        
        assert 'é'.encode('latin-1') in buffer.getvalue()
    
    def test_non_writable_stream(self, french_catalog: Catalog, french_po: Path) -> None:
        with open(french_po, 'rb') as f:
            with pytest.raises(ValueError):
                PoFileWriter(french_catalog).save_changes(f)
