"""
Exceptions raised by the relocation engine.

They never escape a batch: the engine catches them per file and turns them
into a failed result plus an error message on the message channel.
"""
from pathlib import Path


class RenamerError(Exception):
    """Base exception for renaming errors."""

    pass


class FileLockedError(RenamerError):
    """Exception for files that stay locked after every probe attempt."""

    def __init__(self, path: Path, attempts: int):
        super().__init__(f"file is locked after {attempts} attempts: {path}")
        self.path = path
        self.attempts = attempts


class DiscStructureError(RenamerError):
    """Exception for disc files that do not sit in a BDMV or VIDEO_TS folder."""

    pass


class RelocationError(RenamerError):
    """Exception for moves that cannot be carried out."""

    pass
