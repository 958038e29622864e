"""
Message channel for user-visible errors and warnings.

A MessageManager instance is handed to the relocation engine by its caller;
there is no global instance. Every pushed message is also logged.
"""
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List

from plexnamer.utils import logger
from plexnamer.utils.logger import LogLevel


class MessageLevel(Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


_LOG_LEVELS = {
    MessageLevel.INFO: LogLevel.INFO,
    MessageLevel.WARN: LogLevel.WARN,
    MessageLevel.ERROR: LogLevel.ERROR,
}


@dataclass
class Message:
    level: MessageLevel
    source: str
    key: str
    details: List[str] = field(default_factory=list)

    def __str__(self):
        suffix = " ".join(self.details)
        return f"[{self.level.value}] {self.source}: {self.key} {suffix}".rstrip()


class MessageManager:
    """Collects messages and forwards them to registered listeners."""

    def __init__(self):
        self._lock = threading.Lock()
        self._messages: List[Message] = []
        self._listeners: List[Callable[[Message], None]] = []

    def add_listener(self, listener: Callable[[Message], None]) -> None:
        with self._lock:
            self._listeners.append(listener)

    def push_message(self, message: Message) -> None:
        with self._lock:
            self._messages.append(message)
            listeners = list(self._listeners)
        logger.log(
            "message.push",
            _LOG_LEVELS[message.level],
            source=message.source,
            key=message.key,
            details=" ".join(message.details),
        )
        for listener in listeners:
            listener(message)

    @property
    def messages(self) -> List[Message]:
        with self._lock:
            return list(self._messages)

    def errors(self) -> List[Message]:
        return [m for m in self.messages if m.level == MessageLevel.ERROR]

    def clear(self) -> None:
        with self._lock:
            self._messages.clear()
