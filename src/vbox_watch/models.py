"""Shared data models for vbox_watch."""

from dataclasses import dataclass
from enum import Enum


class EventKind(Enum):
    """Kind of file system operation delivered by the watch source."""

    WRITE = "write"
    RENAME = "rename"
    REMOVE = "remove"
    OTHER = "other"


@dataclass(frozen=True)
class FileEvent:
    """A single file system notification."""

    path: str
    """Path of the affected file, as reported by the watch source."""

    kind: EventKind
    """Operation that happened to the file."""


@dataclass
class InvocationResult:
    """Outcome of one guest command execution."""

    args: list[str]
    """Full argument list, executable first."""

    output: str = ""
    """Combined stdout and stderr of the process."""

    returncode: int | None = None
    """Exit status, or None if the process could not be spawned."""

    error: str | None = None
    """Error description when spawning failed or the exit status was non-zero."""

    @property
    def ok(self) -> bool:
        """True if the command ran and exited with status 0."""
        return self.error is None and self.returncode == 0
