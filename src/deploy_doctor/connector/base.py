"""Connector interface shared by local and SSH execution."""

import shlex
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field

# Exit codes used when a command never produced one of its own.
EXIT_TIMEOUT = 124
EXIT_NOT_FOUND = 127
EXIT_TRANSPORT_ERROR = 255


@dataclass
class CommandResult:
    """Result of a command execution."""

    command: str
    stdout: str
    stderr: str
    exit_code: int
    timed_out: bool = False
    success: bool = field(init=False)

    def __post_init__(self) -> None:
        self.success = self.exit_code == 0 and not self.timed_out

    @property
    def first_line(self) -> str:
        """First non-empty stdout line, stripped."""
        for line in self.stdout.splitlines():
            if line.strip():
                return line.strip()
        return ""

    def error_excerpt(self, max_lines: int = 20) -> str:
        """Tail of the combined output, for use in remediation hints."""
        text = (self.stderr or self.stdout or "").strip()
        lines = text.splitlines()
        return "\n".join(lines[-max_lines:])


def as_command_string(command: str | Sequence[str]) -> str:
    if isinstance(command, str):
        return command
    return shlex.join(command)


def as_argv(command: str | Sequence[str]) -> list[str]:
    if isinstance(command, str):
        return shlex.split(command)
    return list(command)


class Connector(ABC):
    """Where checks run commands and look at files.

    Relative paths are resolved against the connector's working directory.
    """

    @abstractmethod
    def run(
        self,
        command: str | Sequence[str],
        timeout: float | None = None,
        privileged: bool = False,
    ) -> CommandResult:
        """Execute a command. Never raises for command failures.

        ``privileged`` asks for elevated rights where the connector can
        grant them (sudo over SSH); local execution runs as the caller.
        """
        ...

    @abstractmethod
    def has_tool(self, name: str) -> bool:
        """Whether an executable is available on PATH."""
        ...

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        ...

    @abstractmethod
    def dir_exists(self, path: str) -> bool:
        ...

    @abstractmethod
    def read_file(self, path: str) -> str | None:
        """Return file contents, or None if the file can't be read."""
        ...

    @property
    def label(self) -> str:
        """Short description of where commands run."""
        return "local"
