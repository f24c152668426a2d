#!/usr/bin/env python3
"""
paths.py
-------------------
Path configuration for Kokizami.

The database file and the log directory live in the user's home by
default and can be moved with environment variables:

    KOKIZAMI_DB       path of the SQLite database file
    KOKIZAMI_LOG_DIR  directory for log files

Layout:
    ~/.kokizami.db       # Database
    ~/.kokizami/logs/    # Rotating operation and error logs
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from pathlib import Path

DB_ENV_VAR = "KOKIZAMI_DB"
LOG_DIR_ENV_VAR = "KOKIZAMI_LOG_DIR"

HOME: Path = Path.home()
APP_DIR: Path = HOME / ".kokizami"


def _from_env(name: str, default: Path) -> Path:
    """Return the path from an environment variable, or the default."""
    value = os.environ.get(name)
    return Path(value).expanduser() if value else default


# ----- Database -----
DB_PATH: Path = _from_env(DB_ENV_VAR, HOME / ".kokizami.db")

# ----- Logs -----
LOG_DIR: Path = _from_env(LOG_DIR_ENV_VAR, APP_DIR / "logs")
