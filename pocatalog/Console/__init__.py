from __future__ import annotations

from .Command import Command
from .Kernel import ConsoleKernel, main

__all__ = ['Command', 'ConsoleKernel', 'main']
