"""nginx Configuration check.

- NGINX-1: ``nginx -t`` passes, run in a throwaway nginx container so no
  local nginx install is needed
- NGINX-2: no proxy_pass left over (the image serves static files)
- NGINX-3: SPA fallback routing (try_files ... index.html)
"""

import logging
from collections.abc import Iterator

from deploy_doctor.checks import BaseCheck, CheckContext, register_check
from deploy_doctor.checks.heuristics import TextRule, apply_rule, strip_comments
from deploy_doctor.connector.base import EXIT_NOT_FOUND
from deploy_doctor.model.result import CheckResult

logger = logging.getLogger(__name__)

CONTAINER_CONF_PATH = "/etc/nginx/conf.d/default.conf"
DOCKER_UNAVAILABLE = "cannot test nginx config: docker unavailable"

PROXY_PASS_RULE = TextRule(
    id="NGINX-2",
    pattern=r"\bproxy_pass\b",
    present="nginx config contains proxy_pass (should serve static files)",
    absent="nginx config serves static files (no proxy_pass)",
    wanted=False,
)

SPA_FALLBACK_RULE = TextRule(
    id="NGINX-3",
    pattern=r"try_files.*index\.html",
    present="SPA fallback routing configured",
    absent="SPA fallback routing may not be configured",
)


@register_check
class NginxConfigCheck(BaseCheck):
    """Syntax test plus static-serving heuristics for nginx.conf."""

    @property
    def section(self) -> str:
        return "nginx"

    @property
    def title(self) -> str:
        return "nginx Configuration"

    @property
    def order(self) -> int:
        return 40

    def run(self, context: CheckContext) -> Iterator[CheckResult]:
        config = context.config
        conf_name = config.nginx_config
        content = context.project.read_file(conf_name)
        if content is None:
            yield self.skipped("NGINX", f"{conf_name} not found, nginx checks skipped", subject=conf_name)
            return

        yield self._syntax_test(context)

        text = strip_comments(content, "nginx")
        yield apply_rule(self, PROXY_PASS_RULE, text)
        yield apply_rule(self, SPA_FALLBACK_RULE, text)

    def _syntax_test(self, context: CheckContext) -> CheckResult:
        config = context.config
        if not context.project.has_tool("docker"):
            return self.failed("NGINX-1", DOCKER_UNAVAILABLE, hint="Install Docker to run nginx -t in a container")

        conf_path = context.project.resolve(config.nginx_config).resolve()
        command = [
            "docker", "run", "--rm",
            "-v", f"{conf_path}:{CONTAINER_CONF_PATH}:ro",
            config.nginx_image,
            "nginx", "-t",
        ]
        res = context.project.run(command, timeout=context.timeouts.build)
        if res.success:
            return self.passed("NGINX-1", "nginx configuration is valid")
        if res.timed_out:
            return self.failed("NGINX-1", f"nginx configuration test timed out ({config.nginx_image})")
        if res.exit_code == EXIT_NOT_FOUND or "Cannot connect to the Docker daemon" in res.stderr:
            return self.failed("NGINX-1", DOCKER_UNAVAILABLE, hint=res.error_excerpt(5) or None)
        logger.debug("nginx -t output:\n%s", res.stderr)
        return self.failed(
            "NGINX-1",
            "nginx configuration has errors",
            hint=res.error_excerpt() or None,
        )
