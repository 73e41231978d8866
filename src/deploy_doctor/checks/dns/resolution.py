"""DNS Configuration check.

- DNS-1: target hostname has an A record (dig +short); optional, Warn only
"""

import ipaddress
from collections.abc import Iterator

from deploy_doctor.checks import BaseCheck, CheckContext, register_check
from deploy_doctor.model.result import CheckResult


def first_ipv4(output: str) -> str | None:
    """First IPv4 address in ``dig +short`` output (CNAME lines are skipped)."""
    for line in output.splitlines():
        candidate = line.strip()
        try:
            return str(ipaddress.IPv4Address(candidate))
        except ValueError:
            continue
    return None


@register_check
class DNSCheck(BaseCheck):
    """Does the deployment hostname resolve yet?"""

    @property
    def section(self) -> str:
        return "dns"

    @property
    def title(self) -> str:
        return "DNS Configuration"

    @property
    def order(self) -> int:
        return 90

    def run(self, context: CheckContext) -> Iterator[CheckResult]:
        hostname = context.config.target_hostname
        project = context.project

        if not project.has_tool("dig"):
            yield self.warned("DNS-1", "dig not installed, skipping DNS check", subject=hostname)
            return

        res = project.run(["dig", "+short", hostname, "A"], timeout=context.timeouts.dns)
        if res.timed_out:
            yield self.warned("DNS-1", f"DNS lookup for {hostname} timed out", subject=hostname)
            return

        address = first_ipv4(res.stdout) if res.success else None
        if address:
            yield self.passed("DNS-1", f"DNS resolves to: {address}", subject=hostname)
        else:
            yield self.warned(
                "DNS-1",
                "DNS not configured or not resolving",
                subject=hostname,
                hint=f"Create an A record for {hostname}",
            )
