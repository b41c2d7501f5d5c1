"""Pytest configuration and fixtures."""

import sys
import threading
from pathlib import Path

import pytest

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


class FakeTimer:
    """Timer that only fires when the test says so."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function()


class FakeTimerFactory:
    """Records every timer the coordinator creates."""

    def __init__(self):
        self.timers: list[FakeTimer] = []

    def __call__(self, interval, function):
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    def fire_all(self):
        for timer in list(self.timers):
            timer.fire()


class RecordingAction:
    """Thread-safe action callback that records the paths it was called with."""

    def __init__(self):
        self.calls: list[str] = []
        self.called = threading.Event()
        self._lock = threading.Lock()

    def __call__(self, path):
        with self._lock:
            self.calls.append(path)
        self.called.set()


class FakeRegistry:
    """Stands in for WatchSource during tree registration."""

    def __init__(self, fail_on=None):
        self.directories: list[str] = []
        self.fail_on = fail_on

    def add_directory(self, path):
        if self.fail_on is not None and Path(path).name == self.fail_on:
            raise OSError(28, "inotify watch limit reached")
        self.directories.append(path)


@pytest.fixture
def timers():
    """Fake timer factory."""
    return FakeTimerFactory()


@pytest.fixture
def action():
    """Recording action callback."""
    return RecordingAction()


@pytest.fixture
def registry():
    """Fake directory registry."""
    return FakeRegistry()


@pytest.fixture
def project_tree(tmp_path):
    """A small project: src/, src/lib/, node_modules/pkg/, .git/objects/, .idea/."""
    for rel in ("src/lib", "node_modules/pkg", ".git/objects", ".idea", "docs"):
        (tmp_path / rel).mkdir(parents=True)
    (tmp_path / "src" / "a.txt").write_text("a")
    (tmp_path / "node_modules" / "x.js").write_text("x")
    return tmp_path
