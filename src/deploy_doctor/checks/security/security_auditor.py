"""Security Auditor.

Checks for common hardening gaps in the serving configuration.

Checks:
- SEC-1: Security response headers (HSTS, X-Frame-Options, ...) set in nginx.conf
- SEC-2: Only modern TLS protocol versions enabled
- SEC-3: Container drops root (USER nginx in the Dockerfile)

All three are textual heuristics; see checks.heuristics.
"""

from collections.abc import Iterator

from deploy_doctor.checks import BaseCheck, CheckContext, register_check
from deploy_doctor.checks.heuristics import TextRule, apply_rule, literal, strip_comments
from deploy_doctor.model.result import CheckResult

TLS_PROTOCOLS_RULE = TextRule(
    id="SEC-2",
    pattern=literal("ssl_protocols TLSv1.2 TLSv1.3"),
    present="Modern SSL protocols configured",
    absent="SSL protocols may not be optimally configured",
)

NON_ROOT_RULE = TextRule(
    id="SEC-3",
    pattern=r"^\s*USER\s+nginx\b",
    present="Container runs as non-root user",
    absent="Container may be running as root",
)


def header_rule(header: str) -> TextRule:
    return TextRule(
        id="SEC-1",
        pattern=literal(header),
        present=f"{header} configured",
        absent=f"{header} not configured",
    )


@register_check
class SecurityAuditor(BaseCheck):
    """Auditor for security settings."""

    @property
    def section(self) -> str:
        return "security"

    @property
    def title(self) -> str:
        return "Security Configuration"

    @property
    def order(self) -> int:
        return 70

    def run(self, context: CheckContext) -> Iterator[CheckResult]:
        config = context.config
        nginx_conf = context.project.read_file(config.nginx_config)
        if nginx_conf is None:
            yield self.skipped("SEC-1", f"{config.nginx_config} not found, header checks skipped")
        else:
            text = strip_comments(nginx_conf, "nginx")
            for header in config.required_headers:
                yield apply_rule(self, header_rule(header), text, subject=header)
            yield apply_rule(self, TLS_PROTOCOLS_RULE, text)

        dockerfile = context.project.read_file(config.dockerfile)
        if dockerfile is None:
            yield self.skipped("SEC-3", f"{config.dockerfile} not found, user check skipped")
        else:
            yield apply_rule(self, NON_ROOT_RULE, strip_comments(dockerfile, "dockerfile"))
