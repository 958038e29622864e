"""
Renamer settings.

Settings are read from PLEXNAMER_* environment variables (a ``.env`` file is
loaded by the constants module) and fall back to the default templates.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from plexnamer.utils.constants import (
    DEFAULT_FILENAME_TEMPLATE,
    DEFAULT_SEASON_FOLDER_TEMPLATE,
    DEFAULT_SHOW_FOLDER_TEMPLATE,
    DEFAULT_SPACE_REPLACEMENT,
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class RenamerSettings:
    """Naming templates and rendering switches."""
    show_folder_template: str = DEFAULT_SHOW_FOLDER_TEMPLATE
    season_folder_template: str = DEFAULT_SEASON_FOLDER_TEMPLATE
    filename_template: str = DEFAULT_FILENAME_TEMPLATE
    ascii_replacement: bool = False
    space_substitution: bool = False
    space_replacement: str = DEFAULT_SPACE_REPLACEMENT
    thumb_postfix: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RenamerSettings":
        env = os.environ if environ is None else environ
        return cls(
            show_folder_template=env.get("PLEXNAMER_SHOW_FOLDER", DEFAULT_SHOW_FOLDER_TEMPLATE),
            season_folder_template=env.get("PLEXNAMER_SEASON_FOLDER", DEFAULT_SEASON_FOLDER_TEMPLATE),
            filename_template=env.get("PLEXNAMER_FILENAME", DEFAULT_FILENAME_TEMPLATE),
            ascii_replacement=_env_flag(env, "PLEXNAMER_ASCII", False),
            space_substitution=_env_flag(env, "PLEXNAMER_SPACE_SUBSTITUTION", False),
            space_replacement=env.get("PLEXNAMER_SPACE_REPLACEMENT", DEFAULT_SPACE_REPLACEMENT),
            thumb_postfix=_env_flag(env, "PLEXNAMER_THUMB_POSTFIX", True),
        )
