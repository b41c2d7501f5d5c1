"""Initial registration of the watch root and its non-ignored subdirectories."""

import logging
import os
from typing import Protocol

from vbox_watch.errors import RegistrationError
from vbox_watch.ignore import IgnoreFilter

logger = logging.getLogger(__name__)


class DirectoryRegistry(Protocol):
    """Anything directories can be registered with (normally a WatchSource)."""

    def add_directory(self, path: str) -> None:
        ...


def register_tree(root: str, source: DirectoryRegistry, ignore_filter: IgnoreFilter) -> list[str]:
    """Walk ``root`` pre-order and register every directory that is not ignored.

    The root itself is always registered. An ignored directory is neither
    registered nor descended into.

    Args:
        root: Directory tree to watch
        source: Registry receiving one ``add_directory`` call per directory
        ignore_filter: Filter applied to bare directory names below the root

    Returns:
        Registered directories, in registration order

    Raises:
        RegistrationError: If the root is not a directory, a directory cannot
            be listed, or the source rejects a directory
    """
    if not os.path.exists(root):
        raise RegistrationError(root, "Watch root does not exist")
    if not os.path.isdir(root):
        raise RegistrationError(root, "Watch root is not a directory")

    registered: list[str] = []

    def on_walk_error(err: OSError) -> None:
        raise RegistrationError(err.filename or root, f"Cannot list directory ({err.strerror or err})") from err

    for dirpath, dirnames, _filenames in os.walk(root, topdown=True, onerror=on_walk_error):
        try:
            source.add_directory(dirpath)
        except Exception as e:
            raise RegistrationError(dirpath, f"Failed to watch directory ({e})") from e
        registered.append(dirpath)
        logger.info(f"Watching {dirpath}")

        # Pruning in place stops os.walk from descending into ignored subtrees
        kept = []
        for name in sorted(dirnames):
            if ignore_filter.should_ignore(name):
                logger.debug(f"Skipping {os.path.join(dirpath, name)}")
            else:
                kept.append(name)
        dirnames[:] = kept

    return registered
