from __future__ import annotations

from .LocaleMiddleware import LocaleMiddleware

__all__ = ['LocaleMiddleware']
