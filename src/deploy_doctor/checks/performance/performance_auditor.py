"""Performance Auditor.

Checks:
- PERF-1: gzip compression enabled
- PERF-2: HTTP/2 enabled
- PERF-3: static asset caching (expires)
- PERF-4: minification configured in the bundler
"""

from collections.abc import Iterator

from deploy_doctor.checks import BaseCheck, CheckContext, register_check
from deploy_doctor.checks.heuristics import TextRule, apply_rule, literal, strip_comments
from deploy_doctor.model.result import CheckResult

NGINX_RULES = (
    TextRule(
        id="PERF-1",
        pattern=literal("gzip on"),
        present="Gzip compression enabled",
        absent="Gzip compression not configured",
    ),
    TextRule(
        id="PERF-2",
        pattern=literal("http2"),
        present="HTTP/2 enabled",
        absent="HTTP/2 not enabled",
    ),
    TextRule(
        id="PERF-3",
        pattern=r"\bexpires\b",
        present="Static asset caching configured",
        absent="Asset caching not configured",
    ),
)

MINIFY_RULE = TextRule(
    id="PERF-4",
    pattern=r"\bminify\b",
    present="Minification configured in Vite",
    absent="Minification may not be configured",
)


@register_check
class PerformanceAuditor(BaseCheck):
    """Auditor for delivery performance settings."""

    @property
    def section(self) -> str:
        return "performance"

    @property
    def title(self) -> str:
        return "Performance Configuration"

    @property
    def order(self) -> int:
        return 80

    def run(self, context: CheckContext) -> Iterator[CheckResult]:
        config = context.config

        nginx_conf = context.project.read_file(config.nginx_config)
        if nginx_conf is None:
            yield self.skipped("PERF-1", f"{config.nginx_config} not found, nginx performance checks skipped")
        else:
            text = strip_comments(nginx_conf, "nginx")
            for rule in NGINX_RULES:
                yield apply_rule(self, rule, text)

        bundler_conf = context.project.read_file(config.bundler_config)
        if bundler_conf is None:
            yield self.skipped("PERF-4", f"{config.bundler_config} not found, minification check skipped")
        else:
            yield apply_rule(self, MINIFY_RULE, strip_comments(bundler_conf, "js"))
