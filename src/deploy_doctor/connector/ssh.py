"""SSH Connector - Host-level checks on a remote deployment server.

Certificate and port checks describe the machine that will serve the
site, which is often not the machine the checker runs on. This connector
lets those checks run there. It is read-only.
"""

import logging
import shlex
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import paramiko
from paramiko.ssh_exception import AuthenticationException, SSHException

from deploy_doctor.connector.base import (
    EXIT_TIMEOUT,
    EXIT_TRANSPORT_ERROR,
    CommandResult,
    Connector,
    as_command_string,
)

logger = logging.getLogger(__name__)


@dataclass
class SSHConfig:
    """SSH connection configuration."""

    host: str
    user: str = "root"
    port: int = 22
    key_path: str | None = None
    password: str | None = None  # Fallback, prefer keys
    use_sudo: bool = True
    timeout: float = 30


class SSHConnector(Connector):
    """SSH connection manager for remote read-only checks.

    Example:
        >>> config = SSHConfig(host="203.0.113.10", user="deploy")
        >>> with SSHConnector(config) as ssh:
        ...     ssh.dir_exists("/etc/letsencrypt/live/example.com")
    """

    def __init__(self, config: SSHConfig) -> None:
        self.config = config
        self._client: paramiko.SSHClient | None = None

    def connect(self) -> None:
        """Establish SSH connection."""
        self._client = paramiko.SSHClient()
        self._client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        connect_kwargs: dict = {
            "hostname": self.config.host,
            "port": self.config.port,
            "username": self.config.user,
            "timeout": self.config.timeout,
        }

        # Prefer key-based authentication
        if self.config.key_path:
            key_path = Path(self.config.key_path).expanduser()
            if key_path.exists():
                connect_kwargs["key_filename"] = str(key_path)
        elif self.config.password:
            connect_kwargs["password"] = self.config.password

        try:
            self._client.connect(**connect_kwargs)
        except AuthenticationException as e:
            raise ConnectionError(f"Authentication failed: {e}") from e
        except (SSHException, OSError) as e:
            raise ConnectionError(f"SSH error: {e}") from e
        logger.debug("connected to %s@%s:%s", self.config.user, self.config.host, self.config.port)

    def disconnect(self) -> None:
        """Close SSH connection."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "SSHConnector":
        self.connect()
        return self

    def __exit__(self, *args: object) -> None:
        self.disconnect()

    def run(
        self,
        command: str | Sequence[str],
        timeout: float | None = None,
        privileged: bool = False,
    ) -> CommandResult:
        """Execute a command on the remote server.

        Args:
            command: Shell string or argv list.
            timeout: Command timeout in seconds. Defaults to config timeout.
            privileged: Prefix with sudo for non-root users.
        """
        if not self._client:
            raise RuntimeError("Not connected. Use 'with SSHConnector(config):' context.")

        command = as_command_string(command)
        if privileged and self.config.use_sudo and self.config.user != "root":
            if self.config.password:
                # -S reads the password from stdin
                command = f"echo {shlex.quote(self.config.password)} | sudo -S {command}"
            else:
                command = f"sudo -n {command}"

        cmd_timeout = timeout if timeout is not None else self.config.timeout
        logger.debug("ssh exec: %s (timeout=%s)", command, cmd_timeout)

        channel = None
        try:
            _, stdout, stderr = self._client.exec_command(command, timeout=cmd_timeout)
            channel = stdout.channel
            # Drain output before waiting on the exit status, or a full window blocks the remote side
            out = stdout.read()
            err = stderr.read()
            if not channel.status_event.wait(cmd_timeout):
                raise TimeoutError("no exit status received")
            return CommandResult(
                command=command,
                stdout=out.decode("utf-8", errors="replace"),
                stderr=err.decode("utf-8", errors="replace"),
                exit_code=channel.recv_exit_status(),
            )
        except TimeoutError as e:
            if channel is not None:
                channel.close()
            return CommandResult(
                command=command,
                stdout="",
                stderr=f"timed out after {cmd_timeout:g}s: {e}",
                exit_code=EXIT_TIMEOUT,
                timed_out=True,
            )
        except (SSHException, OSError) as e:
            return CommandResult(
                command=command,
                stdout="",
                stderr=f"SSH Execution Error: {e}",
                exit_code=EXIT_TRANSPORT_ERROR,
            )

    def has_tool(self, name: str) -> bool:
        return self.run(f"command -v {shlex.quote(name)}", timeout=5).success

    def file_exists(self, path: str) -> bool:
        return self.run(f"test -f {shlex.quote(path)}", privileged=True).success

    def dir_exists(self, path: str) -> bool:
        return self.run(f"test -d {shlex.quote(path)}", privileged=True).success

    def read_file(self, path: str) -> str | None:
        result = self.run(f"cat {shlex.quote(path)}", privileged=True)
        if result.success:
            return result.stdout
        return None

    @property
    def label(self) -> str:
        return f"ssh:{self.config.user}@{self.config.host}"
