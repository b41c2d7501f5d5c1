"""Runtime configuration: the WatchConfig record and TOML config file loading."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from vbox_watch.debounce import DEFAULT_DELAY_MS
from vbox_watch.ignore import DEFAULT_IGNORE, split_ignore_arg

logger = logging.getLogger(__name__)

CONFIG_KEYS = (
    "server",
    "username",
    "password",
    "shell_script",
    "path",
    "delay",
    "ignore",
    "vboxmanage",
)


@dataclass(frozen=True)
class WatchConfig:
    """Settings shared by the registrar, coordinator and invoker."""

    server: str = ""
    """VM UUID or name."""

    username: str = ""
    """Guest OS user the script runs as. Must already exist in the guest."""

    password: str = ""
    """Password for ``username``."""

    shell_script: str = ""
    """Guest-side path of the script run on every confirmed change."""

    root: str = "."
    """Root of the watched directory tree."""

    delay_ms: int = DEFAULT_DELAY_MS
    """Debounce window in milliseconds."""

    ignore: tuple[str, ...] = tuple(split_ignore_arg(DEFAULT_IGNORE))
    """Glob patterns of directory names excluded from watching."""

    vboxmanage: str = "VBoxManage"
    """VBoxManage executable."""

    guest_shell: str = "/bin/bash"
    """Guest executable that runs ``shell_script``."""

    def __post_init__(self):
        if self.delay_ms <= 0:
            raise ValueError(f"delay must be a positive number of milliseconds, got {self.delay_ms}")


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Load settings from a TOML file.

    Only the keys in ``CONFIG_KEYS`` are read; any other key is logged and
    ignored. ``ignore`` may be a list of patterns or a semicolon-separated
    string.

    Args:
        path: Path to TOML config file

    Returns:
        Mapping of recognised keys to their values

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid TOML
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to parse config file {path}: {e}") from e

    values = {}
    for key, value in raw.items():
        if key not in CONFIG_KEYS:
            logger.warning(f"Unknown key '{key}' in {path}, ignoring")
            continue
        if key == "ignore" and isinstance(value, list):
            value = ";".join(str(v) for v in value)
        values[key] = value

    # Relative roots are relative to the config file, not the working directory
    if "path" in values and not Path(values["path"]).is_absolute():
        values["path"] = str(path.parent / values["path"])

    return values


def build_config(cli_values: dict[str, Any], file_values: dict[str, Any] | None = None) -> WatchConfig:
    """Merge command-line values over config file values over defaults.

    ``None`` in ``cli_values`` means the flag was not given.

    Raises:
        ValueError: If the delay is not a positive integer
    """
    merged: dict[str, Any] = dict(file_values or {})
    merged.update({k: v for k, v in cli_values.items() if v is not None})

    defaults = WatchConfig()
    delay = merged.get("delay", defaults.delay_ms)
    delay_error = f"delay must be an integer number of milliseconds: {delay!r}"
    # TOML booleans and fractional floats would otherwise truncate to an int
    if isinstance(delay, bool) or (isinstance(delay, float) and not delay.is_integer()):
        raise ValueError(delay_error)
    try:
        delay_ms = int(delay)
    except (TypeError, ValueError) as e:
        raise ValueError(delay_error) from e

    ignore = merged.get("ignore")
    return WatchConfig(
        server=str(merged.get("server", defaults.server)),
        username=str(merged.get("username", defaults.username)),
        password=str(merged.get("password", defaults.password)),
        shell_script=str(merged.get("shell_script", defaults.shell_script)),
        root=str(merged.get("path") or defaults.root),
        delay_ms=delay_ms,
        ignore=defaults.ignore if ignore is None else tuple(split_ignore_arg(ignore)),
        vboxmanage=str(merged.get("vboxmanage") or defaults.vboxmanage),
    )
