"""Per-file debouncing of write notifications.

Editors usually save a file as a burst of operations (truncate, write, flush,
or write-to-temp then rename over the original). Each path gets at most one
open debounce window: the first write opens it, further writes inside it are
coalesced, and a rename or remove of the path cancels it. When the window's
timer fires and the window is still open, the action runs once.

Example:
    a.txt modified at t=0ms     -> window opens, timer started
    a.txt modified at t=20ms    -> coalesced
    a.txt modified at t=40ms    -> coalesced
    timer fires at t=100ms      -> action("a.txt") runs once
"""

import logging
import queue
import threading
from collections.abc import Callable
from typing import Protocol

from vbox_watch.errors import WatchError
from vbox_watch.models import EventKind, FileEvent

logger = logging.getLogger(__name__)

DEFAULT_DELAY_MS = 100

_STOP = object()


class TimerLike(Protocol):
    """Subset of ``threading.Timer`` used by the coordinator."""

    def start(self) -> None:
        ...

    def cancel(self) -> None:
        ...


TimerFactory = Callable[[float, Callable[[], None]], TimerLike]


def _thread_timer(interval: float, function: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


class DebounceCoordinator:
    """Coalesces write events per path and runs one action per window.

    Events are expected from a single consumer (``handle`` or ``run``), while
    timer callbacks run on their own threads. The path to token map is the
    only state they share and is guarded by a lock.

    The token stays in the map while the action executes, so a path never has
    more than one action pending or running. The fire-time check and the
    action are not atomic: a remove arriving right after the check still lets
    the action run once.
    """

    def __init__(
        self,
        action: Callable[[str], object],
        delay_ms: int = DEFAULT_DELAY_MS,
        timer_factory: TimerFactory | None = None,
    ):
        """Initialize coordinator.

        Args:
            action: Called with the file path once a write is confirmed
            delay_ms: Debounce window length in milliseconds
            timer_factory: Creates unstarted timers (``threading.Timer`` by default)
        """
        if delay_ms <= 0:
            raise ValueError(f"delay_ms must be positive, got {delay_ms}")

        self.action = action
        self.delay_ms = delay_ms
        self._timer_factory = timer_factory or _thread_timer
        self._lock = threading.Lock()
        self._pending: dict[str, object] = {}
        self._timers: dict[object, TimerLike] = {}
        self._events: queue.Queue | None = None
        self._stopped = threading.Event()

    def handle(self, event: FileEvent) -> None:
        """Apply one event to the per-path state."""
        if event.kind is EventKind.WRITE:
            self._open_window(event.path)
        elif event.kind in (EventKind.RENAME, EventKind.REMOVE):
            self._cancel(event.path)

    def is_pending(self, path: str) -> bool:
        with self._lock:
            return path in self._pending

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def _open_window(self, path: str) -> None:
        token = object()
        with self._lock:
            if path in self._pending:
                logger.debug(f"Coalesced write: {path}")
                return
            self._pending[path] = token
            timer = self._timer_factory(self.delay_ms / 1000.0, lambda: self._fire(path, token))
            self._timers[token] = timer

        logger.debug(f"Debouncing {path} for {self.delay_ms}ms")
        timer.start()

    def _cancel(self, path: str) -> None:
        with self._lock:
            token = self._pending.pop(path, None)
        if token is not None:
            logger.debug(f"Cancelled pending notification: {path}")

    def _fire(self, path: str, token: object) -> None:
        try:
            with self._lock:
                still_pending = self._pending.get(path) is token
            if not still_pending or self._stopped.is_set():
                return

            logger.info(f"Change confirmed: {path}")
            try:
                self.action(path)
            except Exception as e:
                logger.error(f"Action failed for {path}: {e}")
        finally:
            with self._lock:
                if self._pending.get(path) is token:
                    del self._pending[path]
                self._timers.pop(token, None)

    def run(self, events: queue.Queue) -> None:
        """Consume events until ``stop`` is called.

        ``WatchError`` items are logged and the loop keeps going.
        """
        self._events = events
        logger.debug("Debounce loop started")
        while not self._stopped.is_set():
            item = events.get()
            if item is _STOP:
                break
            if isinstance(item, WatchError):
                logger.error(f"Watch error: {item}")
                continue
            self.handle(item)
        logger.debug("Debounce loop stopped")

    def stop(self) -> None:
        """End ``run`` and drop every open window."""
        self._stopped.set()
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
            self._pending.clear()
        for timer in timers:
            timer.cancel()
        if self._events is not None:
            self._events.put(_STOP)
