from __future__ import annotations

from .TranslationCommands import (
    TRANSLATION_COMMANDS,
    PoExportCommand,
    PoMergeCommand,
    PoPluralCommand,
    PoStatsCommand,
    PoTranslateCommand,
)

__all__ = [
    'TRANSLATION_COMMANDS',
    'PoExportCommand',
    'PoMergeCommand',
    'PoPluralCommand',
    'PoStatsCommand',
    'PoTranslateCommand',
]
