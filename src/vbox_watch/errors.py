"""Exception types raised by vbox_watch."""


class VBoxWatchError(Exception):
    """Base class for vbox_watch errors."""


class IgnorePatternError(VBoxWatchError, ValueError):
    """An ignore glob could not be parsed."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid ignore pattern {pattern!r}: {reason}")


class RegistrationError(VBoxWatchError):
    """A directory could not be walked or registered with the watch source."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{message}: {path}")


class WatchError(VBoxWatchError):
    """Error reported by the watch source on its error channel."""
