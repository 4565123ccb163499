from __future__ import annotations

import io
from pathlib import Path
from typing import Dict, List, Tuple

import pytest

from pocatalog.Console import ConsoleKernel
from pocatalog.IO.PoFileReader import read
from pocatalog.IO.PoFileWriter import export

from .conftest import PLURAL_PLURAL, PLURAL_SINGULAR


def run(argv: List[str]) -> Tuple[int, str, str]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    code = ConsoleKernel(stdout, stderr).handle(argv)
    return code, stdout.getvalue(), stderr.getvalue()


def table_rows(output: str) -> Dict[str, str]:
    rows = {}
    for line in output.splitlines()[2:]:
        name, value = (part.strip() for part in line.split('|'))
        rows[name] = value
    return rows


class TestConsoleCommands:
    """Console commands run through the kernel."""
    
    def test_stats(self, french_po: Path) -> None:
        code, output, _ = run(['po:stats', str(french_po)])
        
        assert code == 0
        assert table_rows(output) == {
            'Culture': 'fr-FR',
            'Charset': 'UTF-8',
            'Headers': '8',
            'Plural forms': '2',
            'Entries': '7',
            'Translated': '6',
            'Plural entries': '1',
            'Fuzzy': '1',
        }
    
    def test_plural(self) -> None:
        code, output, _ = run(['po:plural', 'n%10==1 && n%100!=11 ? 0 : 1', '1', '11', '21'])
        rows = table_rows(output)
        
        assert code == 0
        assert rows == {'1': '0', '11': '1', '21': '0'}
    
    def test_export(self, french_po: Path) -> None:
        code, output, _ = run(['po:export', str(french_po)])
        
        assert code == 0
        assert output == export(read(str(french_po))) + '\n'
    
    def test_translate(self, lang_dir: Path) -> None:
        code, output, _ = run([
            'po:translate', str(lang_dir), 'fr-FR', PLURAL_SINGULAR,
            '--plural', PLURAL_PLURAL, '--count', '5',
        ])
        
        assert code == 0
        assert output == '5 fichiers médias restaurés depuis la corbeille.\n'
    
    def test_translate_with_context(self, lang_dir: Path) -> None:
        _, output, _ = run(['po:translate', str(lang_dir), 'fr-FR', 'Open', '--context', 'verb'])
        
        assert output == 'Ouvrir le fichier\n'
    
    def test_merge_to_output(self, tmp_path: Path, french_po: Path, messages_pot: Path) -> None:
        output_file = tmp_path / 'merged.po'
        
        code, output, _ = run(['po:merge', str(french_po), str(messages_pot), '--output', str(output_file)])
        
        assert code == 0
        assert output == f"Merged 3 new entries into {output_file}\n"
        assert len(read(str(output_file))) == 10
    
    def test_merge_in_place_with_backup(self, lang_dir: Path, messages_pot: Path) -> None:
        po = lang_dir / 'messages.fr-FR.po'
        
        code, output, _ = run(['po:merge', str(po), str(messages_pot), '--backup'])
        
        assert code == 0
        assert 'Backup written to' in output
        assert read(str(po)).find('Cancel') is not None
        assert len(list(lang_dir.glob('*.bak'))) == 1
    
    @pytest.mark.parametrize('argv', [
        ['po:plural', '(n', '1'],
        ['po:stats', 'missing-file.po'],
    ])
    def test_errors_exit_with_one(self, argv: List[str], tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        
        code, output, errors = run(argv)
        
        assert code == 1
        assert output == ''
        assert errors.startswith('Error: ')
    
    def test_unknown_command(self) -> None:
        with pytest.raises(SystemExit):
            run(['po:unknown'])
