"""Runs the guest-side shell script through VBoxManage."""

import logging
import subprocess

from vbox_watch.config import WatchConfig
from vbox_watch.models import InvocationResult

logger = logging.getLogger(__name__)


def build_args(config: WatchConfig) -> list[str]:
    """Build the ``VBoxManage guestcontrol ... run`` argument list.

    Empty settings are left out rather than passed as empty arguments.
    The changed file is not part of the command; every change runs the same
    script.
    """
    template = [
        config.vboxmanage,
        "--nologo",
        "guestcontrol",
        config.server,
        "run",
        "--exe",
        config.guest_shell,
        "--username",
        config.username,
        "--password",
        config.password,
        "--wait-stdout",
        "--wait-stderr",
        "--unquoted-args",
        "--",
        "bash/arg0",
        config.shell_script,
    ]
    return [arg for arg in template if arg]


class CommandInvoker:
    """Executes the configured guest command once per confirmed change."""

    def __init__(self, config: WatchConfig, echo: bool = True):
        """Initialize invoker.

        Args:
            config: Runtime settings supplying server, credentials and script
            echo: Print the command output to stdout after each run
        """
        self.config = config
        self.echo = echo
        self.args = build_args(config)

    def invoke(self, path: str) -> InvocationResult:
        """Run the guest command synchronously for a confirmed write to ``path``.

        Never raises: spawn failures and non-zero exits are logged and
        returned in the result.
        """
        logger.info(f"Notifying {self.config.server or 'VM'} about {path}")
        result = InvocationResult(args=list(self.args))

        try:
            completed = subprocess.run(
                self.args,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                check=False,
            )
        except OSError as e:
            result.error = f"Failed to start {self.args[0]}: {e}"
            logger.error(result.error)
            return result

        result.output = completed.stdout or ""
        result.returncode = completed.returncode
        if completed.returncode != 0:
            result.error = f"{self.args[0]} exited with status {completed.returncode}"
            logger.error(f"{result.error}\n{result.output}")

        if self.echo:
            print(result.output)
        return result
