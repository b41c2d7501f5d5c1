"""File system event source backed by watchdog.

Directories are registered one at a time with non-recursive watches, and every
notification is pushed onto a single queue that one consumer drains in
delivery order. Errors travel through the same queue as ``WatchError`` items.
"""

import logging
import os
import queue

from watchdog.events import (
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from vbox_watch.errors import WatchError
from vbox_watch.models import EventKind, FileEvent

logger = logging.getLogger(__name__)

_KIND_BY_TYPE = {
    EVENT_TYPE_MODIFIED: EventKind.WRITE,
    EVENT_TYPE_MOVED: EventKind.RENAME,
    EVENT_TYPE_DELETED: EventKind.REMOVE,
}


def to_file_event(event: FileSystemEvent) -> FileEvent:
    """Map a watchdog event onto a FileEvent.

    Directory events and event types without a debounce meaning (created,
    opened, closed) map to ``EventKind.OTHER``. Moves are reported on the
    source path since that is the file being replaced.
    """
    path = os.fsdecode(event.src_path)
    if event.is_directory:
        return FileEvent(path, EventKind.OTHER)
    return FileEvent(path, _KIND_BY_TYPE.get(event.event_type, EventKind.OTHER))


class _QueueingHandler(FileSystemEventHandler):
    """Forwards every watchdog event to the source queue."""

    def __init__(self, events: "queue.Queue[FileEvent | WatchError]"):
        self.events = events

    def dispatch(self, event: FileSystemEvent) -> None:
        try:
            self.events.put(to_file_event(event))
        except Exception as e:
            self.events.put(WatchError(f"Failed to handle {event!r}: {e}"))


class WatchSource:
    """Per-directory watch registration plus an event/error queue."""

    def __init__(self, observer: Observer | None = None):
        """Initialize source.

        Args:
            observer: Optional watchdog observer (a new ``Observer`` by default)
        """
        self.observer = observer if observer is not None else Observer()
        self.events: queue.Queue[FileEvent | WatchError] = queue.Queue()
        self._handler = _QueueingHandler(self.events)
        self.directories: list[str] = []

    def add_directory(self, path: str) -> None:
        """Watch files directly inside ``path``.

        Raises:
            OSError: If the platform backend refuses the watch
        """
        self.observer.schedule(self._handler, path, recursive=False)
        self.directories.append(path)
        logger.debug(f"Scheduled watch on {path}")

    def report_error(self, error: BaseException | str) -> None:
        """Push an error onto the error channel."""
        if not isinstance(error, WatchError):
            error = WatchError(str(error))
        self.events.put(error)

    def start(self) -> None:
        """Start delivering events.

        Call before ``add_directory`` so that registration failures surface
        from ``add_directory`` itself rather than from a later start.
        """
        self.observer.start()
        logger.debug("Watch source started")

    def stop(self) -> None:
        """Stop the observer thread."""
        if self.observer.is_alive():
            self.observer.stop()
            self.observer.join(timeout=2.0)
            logger.debug("Watch source stopped")

    def is_running(self) -> bool:
        return self.observer.is_alive()
