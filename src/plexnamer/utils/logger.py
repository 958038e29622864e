"""
Structured, thread-safe logging for the renamer.

Every line carries a UTC timestamp, the level, an event name such as
``relocate.move`` and ``key=value`` fields:

    2024-01-01 12:00:00 | [INFO] | relocate.move | src="/a/x.mkv" | records=2 | worker="main"

Paths and dates are quoted like strings, lists print as ``[a,b]``. Lines go
through ``tqdm.write`` so a running batch progress bar stays intact.
"""
import datetime
import threading
from enum import Enum
from pathlib import PurePath
from typing import Any, Dict

from tqdm import tqdm

from plexnamer.utils.constants import LOG_LEVEL

_print_lock = threading.Lock()
_worker_ids: Dict[int, str] = {}
_worker_lock = threading.Lock()
_separator = " | "


class LogLevel(Enum):
    """Log level enumeration."""
    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4


_LEVEL_ALIASES = {"WARNING": LogLevel.WARN, "ERR": LogLevel.ERROR}


def parse_log_level(name: str, default: LogLevel = LogLevel.INFO) -> LogLevel:
    """Map a level name from the environment ("debug", "WARNING") to a LogLevel."""
    key = (name or "").strip().upper()
    if key in LogLevel.__members__:
        return LogLevel[key]
    return _LEVEL_ALIASES.get(key, default)


_current_level = parse_log_level(LOG_LEVEL)


def set_log_level(level: LogLevel) -> None:
    """Set the current log level."""
    global _current_level
    _current_level = level


def get_log_level() -> LogLevel:
    return _current_level


def _quote(text: str) -> str:
    # One entry per line
    escaped = text.replace("\r", "\\r").replace("\n", "\\n").replace('"', '\\"')
    return f'"{escaped}"'


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (str, PurePath)):
        return _quote(str(value))
    if isinstance(value, (datetime.date, datetime.datetime)):
        return _quote(value.isoformat())
    if isinstance(value, (list, tuple, set)):
        return "[" + ",".join(str(v) for v in value) + "]"
    return str(value)


def _format_kv(data: Dict[str, Any]) -> str:
    return _separator.join(f"{key}={_format_value(value)}" for key, value in data.items())


def log(event: str, level: LogLevel = LogLevel.INFO, **kwargs) -> None:
    """
    Write one structured log line.

    Args:
        event: Event name (e.g., 'parse.result', 'relocate.move')
        level: Log level (TRACE, DEBUG, INFO, WARN, ERROR)
        **kwargs: Key-value pairs to log
    """
    if level.value < _current_level.value:
        return

    kwargs.setdefault("worker", get_worker_id())
    timestamp = datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
    parts = [timestamp, f"[{level.name}]", event]
    if kwargs:
        parts.append(_format_kv(kwargs))

    with _print_lock:
        tqdm.write(_separator.join(parts))


def get_worker_id() -> str:
    """"main" for the main thread, w1, w2, ... for others in order of first use."""
    thread = threading.current_thread()
    if thread is threading.main_thread():
        return "main"

    with _worker_lock:
        if thread.ident not in _worker_ids:
            _worker_ids[thread.ident] = f"w{len(_worker_ids) + 1}"
        return _worker_ids[thread.ident]
