"""Local Connector - Runs commands and reads files on this machine.

Process execution goes through a ProcessRunner so tests can substitute
canned output for docker, openssl, dig and npm.
"""

import logging
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

from deploy_doctor.connector.base import (
    EXIT_NOT_FOUND,
    EXIT_TIMEOUT,
    CommandResult,
    Connector,
    as_argv,
    as_command_string,
)

logger = logging.getLogger(__name__)


class ProcessRunner:
    """Executes argv lists with subprocess."""

    def run(self, argv: Sequence[str], timeout: float | None = None, cwd: Path | None = None) -> CommandResult:
        command = as_command_string(argv)
        logger.debug("exec: %s (cwd=%s, timeout=%s)", command, cwd, timeout)
        try:
            proc = subprocess.run(
                list(argv),
                cwd=cwd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            return CommandResult(
                command=command,
                stdout=_decode(e.stdout),
                stderr=f"timed out after {timeout:g}s",
                exit_code=EXIT_TIMEOUT,
                timed_out=True,
            )
        except FileNotFoundError:
            return CommandResult(
                command=command,
                stdout="",
                stderr=f"{argv[0]}: command not found",
                exit_code=EXIT_NOT_FOUND,
            )
        except OSError as e:
            return CommandResult(command=command, stdout="", stderr=str(e), exit_code=EXIT_NOT_FOUND)

        return CommandResult(
            command=command,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            exit_code=proc.returncode,
        )

    def which(self, name: str) -> str | None:
        return shutil.which(name)


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


class LocalConnector(Connector):
    """Connector for the project directory on the local machine.

    Example:
        >>> local = LocalConnector(Path("."))
        >>> local.run(["docker", "--version"]).stdout
    """

    def __init__(self, root: Path, runner: ProcessRunner | None = None, timeout: float = 30) -> None:
        self.root = Path(root)
        self.runner = runner or ProcessRunner()
        self.timeout = timeout

    def resolve(self, path: str) -> Path:
        """Resolve a path against the project root."""
        p = Path(path).expanduser()
        if p.is_absolute():
            return p
        return self.root / p

    def run(
        self,
        command: str | Sequence[str],
        timeout: float | None = None,
        privileged: bool = False,
    ) -> CommandResult:
        cmd_timeout = timeout if timeout is not None else self.timeout
        return self.runner.run(as_argv(command), timeout=cmd_timeout, cwd=self.root)

    def has_tool(self, name: str) -> bool:
        return self.runner.which(name) is not None

    def file_exists(self, path: str) -> bool:
        return self.resolve(path).is_file()

    def dir_exists(self, path: str) -> bool:
        return self.resolve(path).is_dir()

    def read_file(self, path: str) -> str | None:
        try:
            return self.resolve(path).read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None

    def dir_size(self, path: str) -> int:
        """Total size in bytes of all regular files under a directory."""
        total = 0
        for item in self.resolve(path).rglob("*"):
            if item.is_file() and not item.is_symlink():
                total += item.stat().st_size
        return total

    @property
    def label(self) -> str:
        return f"local:{self.root}"
