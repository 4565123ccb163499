from __future__ import annotations

import argparse
import logging
import sys
from abc import ABC, abstractmethod
from typing import List, Optional, TextIO


class Command(ABC):
    """Base console command."""
    
    # Command name and help text (to be overridden)
    signature: str = ""
    description: str = ""
    
    def __init__(self, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None) -> None:
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.logger = logging.getLogger(self.__class__.__name__)
    
    def configure(self, parser: argparse.ArgumentParser) -> None:
        """Declare the command's arguments."""
        pass
    
    @abstractmethod
    async def handle(self, args: argparse.Namespace) -> int:
        """Run the command and return its exit code."""
        pass
    
    def info(self, message: str) -> None:
        self.stdout.write(f"{message}\n")
    
    def line(self, message: str = "") -> None:
        self.stdout.write(f"{message}\n")
    
    def warning(self, message: str) -> None:
        self.stderr.write(f"Warning: {message}\n")
    
    def error(self, message: str) -> None:
        self.stderr.write(f"Error: {message}\n")
    
    def table(self, headers: List[str], rows: List[List[str]]) -> None:
        """Display a table."""
        col_widths = [max(len(str(row[i])) for row in [headers] + rows) for i in range(len(headers))]
        
        header_row = " | ".join(str(headers[i]).ljust(col_widths[i]) for i in range(len(headers)))
        self.line(header_row)
        self.line("-" * len(header_row))
        
        for row in rows:
            self.line(" | ".join(str(row[i]).ljust(col_widths[i]) for i in range(len(row))))
