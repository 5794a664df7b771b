from __future__ import annotations

"""
Build Log Settings.

The console shows packaging progress; an optional rotating file keeps a
timestamped record of every run. Formats are fixed: only verbosity and the
rotation policy of the build log are configurable.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
# Debug output names the emitting stage
DEBUG_CONSOLE_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_LOG_MAX_BYTES = 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 2


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging settings of one hdeploy run.

    Attributes:
        level: Minimum severity name ('DEBUG', 'INFO', 'WARNING', ...).
        console: Write progress to stderr.
        log_file: Optional path of the rotating build log.
        max_bytes: Build log size that triggers rotation.
        backup_count: Rotated build logs to keep.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None
    max_bytes: int = DEFAULT_LOG_MAX_BYTES
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT

    @classmethod
    def for_run(
            cls,
            *,
            debug: bool = False,
            quiet: bool = False,
            log_file: Optional[str] = None,
            max_bytes: Optional[int] = None,
            backup_count: Optional[int] = None,
    ) -> "LoggingConfig":
        """Settings for a CLI run; None keeps the default rotation policy."""
        if debug:
            level = "DEBUG"
        elif quiet:
            level = "WARNING"
        else:
            level = "INFO"
        return cls(
            level=level,
            log_file=log_file,
            max_bytes=DEFAULT_LOG_MAX_BYTES if max_bytes is None else max(0, max_bytes),
            backup_count=DEFAULT_LOG_BACKUP_COUNT if backup_count is None else max(0, backup_count),
        )

    @property
    def console_format(self) -> str:
        if self.level.strip().upper() == "DEBUG":
            return DEBUG_CONSOLE_FORMAT
        return CONSOLE_FORMAT
