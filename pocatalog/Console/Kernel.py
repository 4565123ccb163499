from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Dict, List, Optional, TextIO, Type

from ..Localization.Exceptions import PoCatalogError
from ..Log import get_log_manager
from .Command import Command
from .Commands import TRANSLATION_COMMANDS


class ConsoleKernel:
    """Registers the console commands and dispatches ``argv`` to them."""
    
    def __init__(self, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None) -> None:
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.commands: Dict[str, Command] = {}
        
        for command_class in TRANSLATION_COMMANDS:
            self.register(command_class)
    
    def register(self, command_class: Type[Command]) -> None:
        command = command_class(self.stdout, self.stderr)
        self.commands[command.signature] = command
    
    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(prog='pocatalog', description='gettext PO catalog tools')
        parser.add_argument('--log-channel', help='Log channel from config.logging')
        subparsers = parser.add_subparsers(dest='command', metavar='command')
        subparsers.required = True
        
        for signature, command in self.commands.items():
            command.configure(subparsers.add_parser(signature, help=command.description))
        
        return parser
    
    def handle(self, argv: Optional[List[str]] = None) -> int:
        """Parse arguments, run the command and return the exit code."""
        args = self.build_parser().parse_args(argv)
        get_log_manager().route(channel=args.log_channel)
        command = self.commands[args.command]
        
        try:
            return asyncio.run(command.handle(args))
        except (PoCatalogError, OSError, UnicodeError, LookupError) as e:
            command.logger.debug(f"{args.command} failed", exc_info=True)
            command.error(str(e))
            return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point."""
    try:
        return ConsoleKernel().handle(argv)
    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
