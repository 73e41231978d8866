"""Port Availability check.

Looks for anything already bound to the ports the container will publish
(80/443 by default) on the serving host.

- PORT-1: one result per port; Warn when in use, Pass when free

Listening sockets come from ``ss -tuln`` (or ``netstat -tuln``); when
neither is installed each port is probed with ``lsof -i :PORT``.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from deploy_doctor.checks import BaseCheck, CheckContext, register_check
from deploy_doctor.connector.base import Connector
from deploy_doctor.model.result import CheckResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListeningPort:
    """A socket bound on the host."""
    protocol: str  # tcp, udp
    address: str   # 0.0.0.0, 127.0.0.1, [::]
    port: int


def parse_socket_table(output: str) -> list[ListeningPort]:
    """Parse ``ss -tuln`` / ``netstat -tuln`` output.

    The local address is the first ``host:port`` column on each line; the
    peer column that follows it always ends in ``*``.
    """
    ports: list[ListeningPort] = []
    for line in output.strip().splitlines():
        parts = line.split()
        if not parts or not parts[0].lower().startswith(("tcp", "udp")):
            continue

        for part in parts[1:]:
            if ":" not in part:
                continue
            addr, _, port_text = part.rpartition(":")
            if not port_text.isdigit():
                continue
            ports.append(ListeningPort(
                protocol="udp" if parts[0].lower().startswith("udp") else "tcp",
                address=addr,
                port=int(port_text),
            ))
            break
    return ports


@register_check
class PortAvailabilityCheck(BaseCheck):
    """Are the published ports still free?"""

    @property
    def section(self) -> str:
        return "ports"

    @property
    def title(self) -> str:
        return "Port Availability"

    @property
    def order(self) -> int:
        return 100

    def run(self, context: CheckContext) -> Iterator[CheckResult]:
        host = context.host
        ports = context.config.ports
        bound = self._bound_ports(host, context.timeouts.command)

        if bound is None and not host.has_tool("lsof"):
            for port in ports:
                yield self.warned(
                    "PORT-1",
                    f"Port {port} availability unknown (ss, netstat and lsof not installed)",
                    subject=str(port),
                )
            return

        for port in ports:
            if bound is not None:
                in_use = port in bound
            else:
                in_use = host.run(["lsof", "-i", f":{port}"], timeout=context.timeouts.command).success

            if in_use:
                yield self.warned(
                    "PORT-1",
                    f"Port {port} is already in use",
                    subject=str(port),
                    hint=f"Find the owner with: sudo ss -ltnp 'sport = :{port}'",
                )
            else:
                yield self.passed("PORT-1", f"Port {port} is available", subject=str(port))

    def _bound_ports(self, host: Connector, timeout: float) -> set[int] | None:
        """Ports with a bound socket, or None if no socket table is available."""
        for tool in ("ss", "netstat"):
            if not host.has_tool(tool):
                continue
            res = host.run([tool, "-tuln"], timeout=timeout)
            if res.success:
                return {p.port for p in parse_socket_table(res.stdout)}
            logger.debug("%s -tuln failed: %s", tool, res.stderr.strip())
        return None
