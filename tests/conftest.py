from __future__ import annotations

import shutil
from pathlib import Path
from typing import Iterator

import pytest

from pocatalog.IO.PoFileReader import read
from pocatalog.Localization.Catalog import Catalog
from pocatalog.Localization.Translator import current_locale, current_translator

FIXTURES = Path(__file__).parent / 'fixtures'

PLURAL_SINGULAR = '{0} media file restored from the trash.'
PLURAL_PLURAL = '{0} media files restored from the trash.'


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory of the bundled PO/POT files."""
    return FIXTURES


@pytest.fixture
def french_po(fixtures_dir: Path) -> Path:
    return fixtures_dir / 'fr-FR.po'


@pytest.fixture
def messages_pot(fixtures_dir: Path) -> Path:
    return fixtures_dir / 'messages.pot'


@pytest.fixture
def french_catalog(french_po: Path) -> Catalog:
    """The French fixture read from disk."""
    return read(str(french_po))


@pytest.fixture
def lang_dir(tmp_path: Path, french_po: Path) -> Path:
    """Writable directory holding a copy of the French catalog."""
    directory = tmp_path / 'lang'
    directory.mkdir()
    shutil.copy(french_po, directory / 'messages.fr-FR.po')
    return directory


@pytest.fixture(autouse=True)
def reset_context() -> Iterator[None]:
    """Keep the context-local translator from leaking between tests."""
    locale_token = current_locale.set(None)
    translator_token = current_translator.set(None)
    yield
    current_translator.reset(translator_token)
    current_locale.reset(locale_token)


def build_large_catalog(entry_count: int) -> str:
    """PO text with eight headers and ``entry_count`` entries."""
    lines = [
        '# Generated catalog',
        'msgid ""',
        'msgstr ""',
        '"Project-Id-Version: generated 1.0\\n"',
        '"Report-Msgid-Bugs-To: i18n@example.com\\n"',
        '"POT-Creation-Date: 2026-01-01 00:00+0000\\n"',
        '"PO-Revision-Date: 2026-01-02 00:00+0000\\n"',
        '"Language: de-DE\\n"',
        '"MIME-Version: 1.0\\n"',
        '"Content-Type: text/plain; charset=UTF-8\\n"',
        '"Plural-Forms: nplurals=2; plural=(n != 1);\\n"',
        '',
    ]

    for index in range(entry_count):
        lines.append(f'#: src/generated.py:{index + 1}')
        if index % 10 == 0:
            lines.append(f'msgid "Item {index}"')
            lines.append(f'msgid_plural "Items {index}"')
            lines.append(f'msgstr[0] "Eintrag {index}"')
            lines.append(f'msgstr[1] "Einträge {index}"')
        else:
            lines.append(f'msgid "Message {index}"')
            lines.append(f'msgstr "Nachricht {index}"')
        lines.append('')

    return '\n'.join(lines)
