"""SSL Certificates check.

Looks for a certificate chain and private key in the CA-managed directory
on the serving host (certbot's /etc/letsencrypt/live/<hostname>), falling
back to a local ``certs/`` directory shipped with the project.

- SSL-1: certificate material present
- SSL-2: certificate expiry, read with openssl (CA-managed path only)
"""

import logging
from collections.abc import Iterator
from datetime import datetime, timezone

from deploy_doctor.checks import BaseCheck, CheckContext, register_check
from deploy_doctor.connector.base import Connector
from deploy_doctor.model.result import CheckResult

logger = logging.getLogger(__name__)

CERT_FILES = ("fullchain.pem", "privkey.pem")


def parse_openssl_enddate(value: str) -> datetime | None:
    """Parse openssl's notAfter value, e.g. "May 10 12:34:56 2026 GMT"."""
    value = value.strip()
    if value.startswith("notAfter="):
        value = value[len("notAfter="):]
    for fmt in ("%b %d %H:%M:%S %Y %Z", "%b  %d %H:%M:%S %Y %Z"):
        try:
            parsed = datetime.strptime(value, fmt)
            return parsed.replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None


def _join(directory: str, name: str) -> str:
    return f"{directory.rstrip('/')}/{name}"


@register_check
class CertificateCheck(BaseCheck):
    """TLS material for the target hostname."""

    @property
    def section(self) -> str:
        return "ssl"

    @property
    def title(self) -> str:
        return "SSL Certificates"

    @property
    def order(self) -> int:
        return 30

    def run(self, context: CheckContext) -> Iterator[CheckResult]:
        config = context.config
        primary = config.cert_path
        fallback = config.cert_fallback_path

        if context.host.dir_exists(primary):
            if self._has_cert_files(context.host, primary):
                yield self.passed("SSL-1", f"SSL certificates found in {primary}", subject=primary)
                yield from self._check_expiry(context, primary)
            else:
                yield self.failed(
                    "SSL-1",
                    f"SSL certificate files missing in {primary}",
                    subject=primary,
                    hint=f"Expected {' and '.join(CERT_FILES)}",
                )
        elif context.project.dir_exists(fallback):
            if self._has_cert_files(context.project, fallback):
                yield self.passed("SSL-1", f"SSL certificates found in {fallback}/", subject=fallback)
            else:
                yield self.failed(
                    "SSL-1",
                    f"SSL certificate files missing in {fallback}/",
                    subject=fallback,
                    hint=f"Expected {' and '.join(CERT_FILES)}",
                )
        else:
            yield self.failed(
                "SSL-1",
                "No SSL certificates found",
                hint=f"Run: sudo certbot certonly --standalone -d {config.target_hostname}",
            )

    def _has_cert_files(self, connector: Connector, directory: str) -> bool:
        return all(connector.file_exists(_join(directory, name)) for name in CERT_FILES)

    def _check_expiry(self, context: CheckContext, directory: str) -> Iterator[CheckResult]:
        host = context.host
        if not host.has_tool("openssl"):
            logger.debug("openssl not available on %s, skipping expiry", host.label)
            return

        res = host.run(
            ["openssl", "x509", "-in", _join(directory, "fullchain.pem"), "-noout", "-enddate"],
            timeout=context.timeouts.command,
            privileged=True,
        )
        end_text = res.first_line
        if not res.success or not end_text:
            logger.debug("openssl printed no end date: %s", res.stderr.strip())
            return
        if end_text.startswith("notAfter="):
            end_text = end_text[len("notAfter="):]

        expires = parse_openssl_enddate(end_text)
        if expires is None:
            yield self.passed("SSL-2", f"Certificate expires: {end_text}")
            return

        days_left = int((expires - datetime.now(timezone.utc)).total_seconds() // 86400)
        if days_left < 0:
            yield self.failed(
                "SSL-2",
                f"Certificate expired: {end_text}",
                hint=f"Run: sudo certbot renew --cert-name {context.config.target_hostname}",
            )
        elif days_left < context.config.cert_expiry_warn_days:
            yield self.warned(
                "SSL-2",
                f"Certificate expires: {end_text} ({days_left} day(s) left)",
                hint="Check that the certbot renewal timer is active",
            )
        else:
            yield self.passed("SSL-2", f"Certificate expires: {end_text} ({days_left} day(s) left)")
