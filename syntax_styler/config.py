# config.py

import os
import logging
from typing import Optional

# --- Configuration Constants ---
CACHE_DIR_ENV = "SYNTAX_STYLER_CACHE_DIR"
LOCK_TIMEOUT = int(os.environ.get("SYNTAX_STYLER_LOCK_TIMEOUT", "10"))  # seconds for file locks
MAX_INPUT_LENGTH = int(os.environ.get("SYNTAX_STYLER_MAX_INPUT", "1000000"))  # characters
FETCH_TIMEOUT = int(os.environ.get("SYNTAX_STYLER_FETCH_TIMEOUT", "30"))  # seconds
DEFAULT_USER_AGENT = "syntax-styler/0.1.0 (+https://github.com/0kenx/mcp-servers)"
CACHE_ENTRIES_DIR = "entries"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# --- Logging Setup ---
log = logging.getLogger("syntax_styler")


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for the command line tool and the server.

    Library code only logs through ``log``; entry points call this once.

    Args:
        level: Level name; defaults to ``SYNTAX_STYLER_LOG_LEVEL`` or INFO
    """
    level_name = (level or os.environ.get("SYNTAX_STYLER_LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)


def get_cache_dir() -> Optional[str]:
    """Returns the persistent cache directory from the environment, if set."""
    cache_dir = os.environ.get(CACHE_DIR_ENV)
    if not cache_dir:
        return None
    return os.path.expanduser(cache_dir)
