"""CLI entry point for vbox-watch: watch a tree and run a guest script on changes."""

import argparse
import logging
import sys

from vbox_watch import __version__
from vbox_watch.config import WatchConfig, build_config, load_config_file
from vbox_watch.debounce import DEFAULT_DELAY_MS, DebounceCoordinator
from vbox_watch.errors import RegistrationError
from vbox_watch.ignore import DEFAULT_IGNORE, IgnoreFilter
from vbox_watch.invoker import CommandInvoker
from vbox_watch.registrar import register_tree
from vbox_watch.watch_source import WatchSource

logger = logging.getLogger("vbox_watch")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Flags use the single-dash spelling (``-shellScript``); the double-dash
    forms are accepted too. Flags that are not given are ``None`` so that
    config file values can fill them in.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="vbox-watch",
        description="Run a shell script inside a VirtualBox guest whenever files under a host directory change.",
        epilog="Examples:\n"
        "  vbox-watch -server dev-vm -username dev -password secret -shellScript /home/dev/reload.sh\n"
        "  vbox-watch -config vbox-watch.toml -delay 250\n"
        "  vbox-watch -path ./app -ignore 'node_modules;dist;build*'",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("-server", "--server", default=None, help="VM UUID or VM name")
    parser.add_argument(
        "-username",
        "--username",
        default=None,
        help="User name on the guest OS under which the script runs. The user must already exist.",
    )
    parser.add_argument("-password", "--password", default=None, help="Password for the given user name")
    parser.add_argument(
        "-shellScript",
        "--shell-script",
        dest="shell_script",
        default=None,
        help="Path of the guest shell script executed when a file changes",
    )
    parser.add_argument("-path", "--path", default=None, help="Root path to watch for changes (default: .)")
    parser.add_argument(
        "-delay",
        "--delay",
        type=int,
        default=None,
        help=f"Delay in milliseconds before notifying about a changed file (default: {DEFAULT_DELAY_MS})",
    )
    parser.add_argument(
        "-ignore",
        "--ignore",
        default=None,
        help=f"Semicolon-separated list of directories to ignore; glob expressions are supported "
        f"(default: {DEFAULT_IGNORE})",
    )
    parser.add_argument("-config", "--config", default=None, help="TOML file providing defaults for the flags above")
    parser.add_argument("-vboxmanage", "--vboxmanage", default=None, help="VBoxManage executable (default: VBoxManage)")
    parser.add_argument("-verbose", "--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser.parse_args(argv)


def setup_logging(verbose: bool = False) -> None:
    """Log to stderr; command output itself goes to stdout."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def load_settings(args: argparse.Namespace) -> tuple[WatchConfig, IgnoreFilter]:
    """Resolve the final configuration from flags and the optional config file.

    Raises:
        FileNotFoundError: If ``-config`` names a missing file
        ValueError: On an unparsable config file, bad delay or bad ignore glob
    """
    file_values = load_config_file(args.config) if args.config else {}
    config = build_config(
        {
            "server": args.server,
            "username": args.username,
            "password": args.password,
            "shell_script": args.shell_script,
            "path": args.path,
            "delay": args.delay,
            "ignore": args.ignore,
            "vboxmanage": args.vboxmanage,
        },
        file_values,
    )
    return config, IgnoreFilter(list(config.ignore))


def watch(config: WatchConfig, ignore_filter: IgnoreFilter, source: WatchSource | None = None) -> None:
    """Register the tree and process events until interrupted.

    A registration failure is logged and watching continues with the
    directories registered before it.
    """
    source = source or WatchSource()
    invoker = CommandInvoker(config)
    coordinator = DebounceCoordinator(invoker.invoke, delay_ms=config.delay_ms)

    if not config.shell_script:
        logger.warning("No shell script configured (-shellScript); the guest command will likely fail")

    source.start()
    try:
        try:
            registered = register_tree(config.root, source, ignore_filter)
            logger.info(f"Registered {len(registered)} directories (delay: {config.delay_ms}ms)")
        except RegistrationError as e:
            logger.error(f"Registration stopped: {e}")
        coordinator.run(source.events)
    finally:
        coordinator.stop()
        source.stop()


def main(argv: list[str] | None = None) -> None:
    """
    Main entry point for the vbox-watch CLI.

    Handles:
    - Argument parsing and config file merging
    - Rejecting bad configuration with exit code 1
    - Running the watch loop until Ctrl+C (exit code 130)
    """
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        config, ignore_filter = load_settings(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        watch(config, ignore_filter)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
