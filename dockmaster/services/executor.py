"""Run the container runtime CLI with a fixed argument vector and a bounded environment."""

import logging
import os
import re
import subprocess
from dataclasses import dataclass

from dockmaster.core.errors import InternalError

logger = logging.getLogger(__name__)

# Cap on how much stderr is kept in an error message.
STDERR_EXCERPT_MAX = 2000

# Environment variables passed through to the child process; DOCKER_* are passed as a prefix.
_PASSTHROUGH_ENV = ("PATH", "HOME", "LANG", "LC_ALL")
_PASSTHROUGH_PREFIX = "DOCKER_"

# "No such container: web", "get data: no such volume", "network backend not found".
# Other "not found" text (executable file not found, no such file or directory)
# describes a failure inside an object that does exist.
_NOT_FOUND_PATTERN = re.compile(
    r"\bno such (container|image|volume|network|object)\b"
    r"|\b(container|image|volume|network|manifest for) \S+ not found\b",
    re.IGNORECASE,
)


class CommandError(InternalError):
    """The runtime CLI could not be spawned or exited non-zero."""

    def __init__(self, command: list[str], exit_info: str, stderr: str = "") -> None:
        self.command = command
        self.exit_info = exit_info
        self.stderr = stderr.strip()[:STDERR_EXCERPT_MAX]
        message = self.stderr or f"Command failed ({exit_info}): {' '.join(command)}"
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        """True when stderr reports that the named object itself does not exist."""
        return _NOT_FOUND_PATTERN.search(self.stderr) is not None


@dataclass(frozen=True)
class CommandResult:
    stdout: str
    stderr: str


def _bounded_env() -> dict[str, str]:
    env = {key: os.environ[key] for key in _PASSTHROUGH_ENV if key in os.environ}
    env.update(
        (key, value) for key, value in os.environ.items() if key.startswith(_PASSTHROUGH_PREFIX)
    )
    return env


class CommandExecutor:
    """
    Spawns `binary args...` without a shell and captures stdout/stderr.

    Calls block the calling worker thread until the process exits; there is
    no timeout and no retry. Safe to share between threads.
    """

    def __init__(self, binary: str = "docker") -> None:
        self.binary = binary

    def run(self, args: list[str]) -> CommandResult:
        command = [self.binary, *args]
        logger.debug("Running runtime command", extra={"command": command})
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                # Container logs may carry arbitrary bytes.
                encoding="utf-8",
                errors="replace",
                check=False,
                env=_bounded_env(),
            )
        except OSError as e:
            logger.error(
                "Failed to spawn runtime command",
                extra={"command": command, "error": str(e)},
            )
            raise CommandError(command, f"spawn failed: {e}") from e

        if completed.returncode != 0:
            error = CommandError(command, f"exit status {completed.returncode}", completed.stderr)
            logger.error(
                "Runtime command failed",
                extra={"command": command, "exit_code": completed.returncode, "stderr": error.stderr},
            )
            raise error
        return CommandResult(stdout=completed.stdout, stderr=completed.stderr)

    def output(self, args: list[str]) -> str:
        """Run and return stdout only."""
        return self.run(args).stdout
