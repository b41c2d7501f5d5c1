#!/usr/bin/env python3
"""
Example: Debounced change log without a VM
Shows how to wire the registrar, watch source and coordinator to any action.

Run it in a project directory and save a few files; each save burst is
printed once.
"""

import logging
import sys

from vbox_watch import DebounceCoordinator, IgnoreFilter, WatchSource, register_tree


def main(root: str = ".") -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    source = WatchSource()
    coordinator = DebounceCoordinator(lambda path: print(f"changed: {path}"), delay_ms=200)

    source.start()
    try:
        register_tree(root, source, IgnoreFilter.from_arg("node_modules;__pycache__"))
        coordinator.run(source.events)
    except KeyboardInterrupt:
        pass
    finally:
        coordinator.stop()
        source.stop()


if __name__ == "__main__":
    main(*sys.argv[1:2])
