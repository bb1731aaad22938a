"""
Runtime configuration read from the environment.

A .env file in the working directory is loaded first when present; real
environment variables win over it.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///data/jobly.db"
DEFAULT_TEST_DATABASE_URL = "sqlite:///data/jobly_test.db"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_env() -> None:
    """Load .env from the working directory if present."""
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def is_test_env() -> bool:
    return os.getenv("JOBLY_ENV", "").lower() == "test"


def get_database_url() -> str:
    """
    Database URL to connect to.

    JOBLY_DATABASE_URL wins; otherwise the test or default SQLite file is
    chosen from JOBLY_ENV.
    """
    url = os.getenv("JOBLY_DATABASE_URL")
    if url:
        return url
    return DEFAULT_TEST_DATABASE_URL if is_test_env() else DEFAULT_DATABASE_URL


def get_log_level() -> str:
    level = os.getenv("JOBLY_LOG_LEVEL", "INFO").upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"JOBLY_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {level!r}")
    return level


def get_log_dir() -> Optional[Path]:
    """Directory for log files, or None when file logging is off."""
    log_dir = os.getenv("JOBLY_LOG_DIR")
    return Path(log_dir) if log_dir else None
