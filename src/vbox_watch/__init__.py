"""vbox-watch: run a VirtualBox guest script when host files change."""

__version__ = "0.1.0"

from vbox_watch.config import WatchConfig, build_config, load_config_file
from vbox_watch.debounce import DebounceCoordinator
from vbox_watch.errors import IgnorePatternError, RegistrationError, VBoxWatchError, WatchError
from vbox_watch.ignore import IgnoreFilter, should_ignore, split_ignore_arg
from vbox_watch.invoker import CommandInvoker, build_args
from vbox_watch.models import EventKind, FileEvent, InvocationResult
from vbox_watch.registrar import register_tree
from vbox_watch.watch_source import WatchSource

__all__ = [
    "__version__",
    # Models
    "EventKind",
    "FileEvent",
    "InvocationResult",
    # Config
    "WatchConfig",
    "build_config",
    "load_config_file",
    # Components
    "IgnoreFilter",
    "should_ignore",
    "split_ignore_arg",
    "register_tree",
    "WatchSource",
    "DebounceCoordinator",
    "CommandInvoker",
    "build_args",
    # Errors
    "VBoxWatchError",
    "IgnorePatternError",
    "RegistrationError",
    "WatchError",
]
