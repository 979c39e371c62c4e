"""
Runtime configuration.

Settings come from the process environment, after values from a ``.env``
file in the working directory have been loaded with python-dotenv.
Command-line flags take precedence over everything here.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger("repocard.config")

DEFAULT_COMMIT_COUNT = 20
MAX_COMMIT_COUNT = 100


@dataclass(frozen=True)
class Settings:
    """Environment-derived defaults for the CLI."""
    github_token: Optional[str] = None
    log_level: str = "INFO"
    output_dir: Optional[str] = None
    commit_count: int = DEFAULT_COMMIT_COUNT


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build ``Settings`` from environment variables.

    Recognized variables: ``GITHUB_TOKEN``, ``REPOCARD_LOG_LEVEL``,
    ``REPOCARD_OUTPUT_DIR`` and ``REPOCARD_COMMIT_COUNT``.

    Args:
        env: Mapping to read instead of ``os.environ``; when given, no
            ``.env`` file is loaded

    Returns:
        Settings instance
    """
    if env is None:
        load_dotenv(find_dotenv(usecwd=True))
        env = os.environ

    return Settings(
        github_token=env.get("GITHUB_TOKEN") or None,
        log_level=_log_level(env.get("REPOCARD_LOG_LEVEL")),
        output_dir=env.get("REPOCARD_OUTPUT_DIR") or None,
        commit_count=_commit_count(env.get("REPOCARD_COMMIT_COUNT")),
    )


def clamp_commit_count(count: int) -> int:
    """Keep a requested commit count within what one API page can return."""
    return max(1, min(count, MAX_COMMIT_COUNT))


def default_export_dir() -> Path:
    """The user's Downloads folder, else Documents, else the home directory."""
    home = Path.home()
    for candidate in (home / "Downloads", home / "Documents"):
        if candidate.is_dir():
            return candidate
    return home


def _commit_count(raw: Optional[str]) -> int:
    if not raw:
        return DEFAULT_COMMIT_COUNT
    try:
        return clamp_commit_count(int(raw))
    except ValueError:
        logger.warning("Ignoring invalid REPOCARD_COMMIT_COUNT=%r", raw)
        return DEFAULT_COMMIT_COUNT


def _log_level(raw: Optional[str]) -> str:
    level = (raw or "INFO").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        logger.warning("Ignoring unknown REPOCARD_LOG_LEVEL=%r", raw)
        return "INFO"
    return level
