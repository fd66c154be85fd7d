"""Application-side support code: structured logging.

This package is library-agnostic. It must NEVER import from ``mgbot/``.
"""

from core.logger import MgBotLogger

__all__ = [
    "MgBotLogger",
]
