"""
PO catalog console commands
"""
from __future__ import annotations

import argparse
from typing import List

from ...IO.PoFileReader import merge, read
from ...IO.PoFileWriter import PoFileWriter
from ...Localization.Plurals import PluralFormsEvaluator
from ...Localization.TranslationManager import TranslationManager
from ...Synchronization import save_changes
from ..Command import Command


class PoStatsCommand(Command):
    """Show entry and header statistics of a PO file"""
    
    signature = "po:stats"
    description = "Show statistics of a PO file"
    
    def configure(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument('file', help='PO file to inspect')
        parser.add_argument('--culture', help='Culture of the file (defaults to the Language header)')
    
    async def handle(self, args: argparse.Namespace) -> int:
        catalog = read(args.file, args.culture, enforce_culture=False)
        entries = list(catalog)
        translated = [e for e in entries if e.translations and all(e.translations)]
        
        self.table(
            ['Property', 'Value'],
            [
                ['Culture', catalog.culture_name or '-'],
                ['Charset', catalog.get_charset() or '-'],
                ['Headers', str(len(catalog.headers))],
                ['Plural forms', str(catalog.plural_count)],
                ['Entries', str(len(entries))],
                ['Translated', str(len(translated))],
                ['Plural entries', str(sum(1 for e in entries if e.plural is not None))],
                ['Fuzzy', str(sum(1 for e in entries if e.is_fuzzy))],
            ],
        )
        return 0


class PoMergeCommand(Command):
    """Refresh a PO file from its POT template"""
    
    signature = "po:merge"
    description = "Merge new strings from a POT template into a PO file"
    
    def configure(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument('po', help='Translated PO file')
        parser.add_argument('pot', help='POT template')
        parser.add_argument('--output', help='Write the result here instead of over the PO file')
        parser.add_argument('--backup', action='store_true', help='Keep a timestamped copy of the PO file')
        parser.add_argument('--culture', help='Culture of the PO file')
    
    async def handle(self, args: argparse.Namespace) -> int:
        before = len(read(args.po, args.culture, enforce_culture=False))
        catalog = merge(args.po, args.pot, args.culture)
        added = len(catalog) - before
        
        if args.output:
            PoFileWriter(catalog).save_changes(args.output)
            self.info(f"Merged {added} new entries into {args.output}")
            return 0
        
        backup = save_changes(catalog, backup=args.backup)
        self.info(f"Merged {added} new entries into {args.po}")
        if backup:
            self.info(f"Backup written to {backup}")
        return 0


class PoExportCommand(Command):
    """Print a PO file as rewritten by the writer"""
    
    signature = "po:export"
    description = "Re-export a PO file to standard output"
    
    def configure(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument('file', help='PO file to export')
        parser.add_argument('--exclude-headers', action='store_true', help='Omit the header entry')
        parser.add_argument('--wrap-references', action='store_true', help='Wrap long reference comments')
    
    async def handle(self, args: argparse.Namespace) -> int:
        catalog = read(args.file, enforce_culture=False)
        writer = PoFileWriter(catalog, wrap_references=args.wrap_references)
        self.stdout.write(writer.export(args.exclude_headers))
        self.stdout.write("\n")
        return 0


class PoTranslateCommand(Command):
    """Look up a message in the catalogs of a directory"""
    
    signature = "po:translate"
    description = "Translate a message with the PO files of a directory"
    
    def configure(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument('directory', help='Directory holding the PO files')
        parser.add_argument('culture', help='Target culture (e.g. fr-FR)')
        parser.add_argument('msgid', help='Source message')
        parser.add_argument('--plural', help='Plural source message')
        parser.add_argument('--count', type=int, default=1, help='Count selecting the plural form')
        parser.add_argument('--context', help='Message context')
        parser.add_argument('--subdirectories', action='store_true', help='Search subdirectories too')
    
    async def handle(self, args: argparse.Namespace) -> int:
        manager = TranslationManager(args.directory, include_subdirectories=args.subdirectories)
        with manager:
            await manager.load_translations_async(args.culture)
            if args.plural is not None:
                outcome = manager.translate_plural(
                    args.culture, args.msgid, args.plural, args.count, args.count, context=args.context
                )
            else:
                outcome = manager.translate(args.culture, args.msgid, context=args.context)
        
        self.line(outcome)
        return 0


class PoPluralCommand(Command):
    """Evaluate a Plural-Forms expression"""
    
    signature = "po:plural"
    description = "Show the plural form index an expression selects for each number"
    
    def configure(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument('expression', help="Plural expression, e.g. 'n != 1'")
        parser.add_argument('numbers', nargs='+', type=int, help='Numbers to evaluate')
    
    async def handle(self, args: argparse.Namespace) -> int:
        evaluator = PluralFormsEvaluator(args.expression)
        rows: List[List[str]] = [[str(n), str(evaluator.evaluate(n))] for n in args.numbers]
        self.table(['n', 'index'], rows)
        return 0


TRANSLATION_COMMANDS = [
    PoStatsCommand,
    PoMergeCommand,
    PoExportCommand,
    PoTranslateCommand,
    PoPluralCommand,
]
