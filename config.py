"""Application configuration: environment variables and derived constants.

Loads ``MG_BOT_URL``, ``MG_BOT_TOKEN``, ``MG_BOT_DEBUG``, ``MG_BOT_TIMEOUT``,
``LOG_LEVEL`` and ``LOG_FILE`` from the environment via ``python-dotenv``.
All values are resolved at import time so other modules can
``from config import …`` without repeated lookups.  The :mod:`mgbot`
library never imports this module except through ``MgClient.from_env``.
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import logging
import os

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv

# ── core ─────────────────────────────────────────────────────────────────────
from core.logger import MgBotLogger

# ── Environment bootstrap ────────────────────────────────────────────────────
load_dotenv()


# ── Helper functions (private) ───────────────────────────────────────────────


def _parse_bool(raw: str | None) -> bool:
    """Interpret ``1``/``true``/``yes``/``on`` (any case) as ``True``."""
    if not raw:
        return False
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _parse_timeout(raw: str | None, default: float = 60.0) -> float:
    """Parse a positive number of seconds, falling back to *default*."""
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _parse_level(raw: str | None) -> int:
    """Map a level name such as ``"DEBUG"`` to its :mod:`logging` constant."""
    if not raw:
        return logging.INFO
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO


# ── Public constants ─────────────────────────────────────────────────────────

LOG_LEVEL: int = _parse_level(os.environ.get("LOG_LEVEL"))
LOG_FILE: str | None = os.environ.get("LOG_FILE") or None

MG_BOT_URL: str | None = os.environ.get("MG_BOT_URL")
MG_BOT_TOKEN: str | None = os.environ.get("MG_BOT_TOKEN")
MG_BOT_DEBUG: bool = _parse_bool(os.environ.get("MG_BOT_DEBUG"))
MG_BOT_TIMEOUT: float = _parse_timeout(os.environ.get("MG_BOT_TIMEOUT"))


# ── Startup diagnostics ─────────────────────────────────────────────────────

logger = MgBotLogger.get_logger(LOG_LEVEL, LOG_FILE)

if MG_BOT_URL and MG_BOT_TOKEN:
    logger.info("Config loaded: MG_BOT_URL and MG_BOT_TOKEN are set", extra={"mg_bot_url": MG_BOT_URL})
else:
    logger.warning("Config loaded: MG_BOT_URL or MG_BOT_TOKEN is NOT set")

if MG_BOT_DEBUG:
    logger.warning("MG_BOT_DEBUG is on; request logs include the bot token")
