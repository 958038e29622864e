"""
Name sanitizing and safe filesystem helpers.

The text helpers make rendered names filesystem-safe. The file helpers probe
files for locks, move files and folders without clobbering existing targets
and clean up the empty folders a move leaves behind.
"""
import os
import re
import shutil
import time
from pathlib import Path

from unidecode import unidecode

from plexnamer.utils import logger
from plexnamer.utils.constants import (
    PROBE_ATTEMPTS,
    PROBE_DELAY_SECONDS,
    STACKING_REGEXES,
    STATUS_LOCKED,
    STATUS_MISSING,
    STATUS_OK,
)
from plexnamer.utils.errors import RelocationError
from plexnamer.utils.logger import LogLevel

_INVALID_CHARS = '"\\:<>|/?*'
_INVALID_TABLE = str.maketrans('', '', _INVALID_CHARS)


def normalize_text(text: str) -> str:
    """Normalize text by replacing separators with spaces and collapsing whitespace."""
    text = text.replace("_", " ").replace(".", " ")
    return re.sub(r"\s+", " ", text).strip()


def sanitize_filename(name: str) -> str:
    """
    Remove invalid filesystem characters from a name.
    Uses str.translate() for optimal performance.
    """
    if not name:
        return ""
    return name.translate(_INVALID_TABLE).strip()


def replace_invalid_characters(text: str) -> str:
    """
    Make a rendered name filesystem-safe.

    Colons are turned into dashes first ("Title: Sub" -> "Title - Sub"), then
    the remaining illegal characters are removed.
    """
    if not text:
        return ""
    text = text.replace(": ", " - ").replace(":", "-")
    return text.translate(_INVALID_TABLE)


def convert_to_ascii(text: str) -> str:
    """Transliterate text to plain ASCII ("Amélie" -> "Amelie")."""
    return unidecode(text) if text else ""


def get_stacking_marker(filename: str) -> str:
    """Return the stacking marker of a filename ("Show.cd1.avi" -> "cd1"), or ""."""
    for rx in STACKING_REGEXES:
        m = rx.match(filename)
        if m:
            return re.sub(r"[ _.-]+", "", m.group(2))
    return ""


def rename_in_place(path: Path) -> None:
    """Rename a file to its own name; fails while another process holds it open."""
    os.rename(path, path)


def probe_file(path: Path, attempts: int = PROBE_ATTEMPTS, delay: float = PROBE_DELAY_SECONDS) -> str:
    """
    Check that a file can be moved.

    Returns STATUS_OK when a no-op rename succeeds, STATUS_MISSING when the
    file is gone and STATUS_LOCKED when every attempt failed.
    """
    path = Path(path)
    for attempt in range(1, attempts + 1):
        if not path.exists():
            logger.log("probe.missing", LogLevel.DEBUG, file=str(path))
            return STATUS_MISSING
        try:
            rename_in_place(path)
            return STATUS_OK
        except OSError as e:
            logger.log("probe.locked", LogLevel.DEBUG, file=str(path), attempt=attempt, error=str(e))
            if attempt < attempts:
                time.sleep(delay)
    return STATUS_LOCKED


def _check_move(src: Path, dest: Path) -> None:
    if not src.exists():
        raise FileNotFoundError(f"source does not exist: {src}")
    if dest.exists() and not _same_entry(src, dest):
        raise RelocationError(f"destination already exists: {dest}")


def _same_entry(a: Path, b: Path) -> bool:
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False


def move_file_safe(src: Path, dest: Path) -> bool:
    """
    Move a file without overwriting another file.

    Returns False when source and destination are the same file, True after a
    move. Raises FileNotFoundError for a missing source and RelocationError when
    the destination is taken.
    """
    src, dest = Path(src), Path(dest)
    _check_move(src, dest)
    if src == dest:
        return False
    dest.parent.mkdir(parents=True, exist_ok=True)
    if _same_entry(src, dest):
        # Case-only rename on a case-insensitive filesystem
        tmp = dest.with_name(dest.name + ".tmp")
        os.rename(src, tmp)
        os.rename(tmp, dest)
    else:
        shutil.move(str(src), str(dest))
    logger.log("file.move", LogLevel.DEBUG, src=str(src), dest=str(dest))
    return True


def move_directory_safe(src: Path, dest: Path) -> bool:
    """Move a whole folder, same contract as move_file_safe()."""
    src, dest = Path(src), Path(dest)
    _check_move(src, dest)
    if src == dest:
        return False
    dest.parent.mkdir(parents=True, exist_ok=True)
    if _same_entry(src, dest):
        tmp = dest.with_name(dest.name + ".tmp")
        os.rename(src, tmp)
        os.rename(tmp, dest)
    else:
        shutil.move(str(src), str(dest))
    logger.log("file.move_dir", LogLevel.DEBUG, src=str(src), dest=str(dest))
    return True


def delete_empty_parents(directory: Path, stop_at: Path | None = None) -> int:
    """
    Delete `directory` if it is empty, then its parents while they are empty.

    Stops at the first non-empty folder, at `stop_at` (never deleted), at the
    filesystem root or on the first OS error. Returns the number of removed folders.
    """
    current = Path(directory)
    stop = Path(stop_at) if stop_at else None
    removed = 0
    while current.exists() and current.is_dir():
        if stop is not None and current == stop:
            break
        if current.parent == current:
            break
        try:
            if any(current.iterdir()):
                break
            current.rmdir()
        except OSError as err:
            logger.log("file.prune.skip", LogLevel.DEBUG, folder=str(current), error=str(err))
            break
        logger.log("file.prune", LogLevel.DEBUG, folder=str(current))
        removed += 1
        current = current.parent
    return removed
