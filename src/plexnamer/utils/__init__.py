"""
A module providing constants, settings, logging and file utilities
for TV show renaming.

This module includes a collection of constants related to media file
handling, the renamer settings, the message channel used to report
failures, and a logging mechanism for safe and controlled outputs.
"""

from .constants import (
    DEBUG,
    DEFAULT_FILENAME_TEMPLATE,
    DEFAULT_SEASON_FOLDER_TEMPLATE,
    DEFAULT_SHOW_FOLDER_TEMPLATE,
    MESSAGE_FAILED_RENAME,
    PROBE_ATTEMPTS,
    PROBE_DELAY_SECONDS,
    STATUS_FAIL,
    STATUS_LOCKED,
    STATUS_MISSING,
    STATUS_MOVED,
    STATUS_OK,
    STATUS_SKIP,
    SUBTITLE_EXTENSIONS,
    VIDEO_EXTENSIONS,
)
from .logger import LogLevel
from .settings import RenamerSettings

__all__ = [
    "DEBUG",
    "VIDEO_EXTENSIONS",
    "SUBTITLE_EXTENSIONS",
    "DEFAULT_SHOW_FOLDER_TEMPLATE",
    "DEFAULT_SEASON_FOLDER_TEMPLATE",
    "DEFAULT_FILENAME_TEMPLATE",
    "MESSAGE_FAILED_RENAME",
    "PROBE_ATTEMPTS",
    "PROBE_DELAY_SECONDS",
    "STATUS_OK",
    "STATUS_SKIP",
    "STATUS_MOVED",
    "STATUS_MISSING",
    "STATUS_LOCKED",
    "STATUS_FAIL",
    "LogLevel",
    "RenamerSettings",
]
