"""Tests for the SSL Certificates check."""

import shutil
from pathlib import Path
from datetime import datetime, timedelta, timezone

from deploy_doctor.checks.ssl.certificates import CertificateCheck, parse_openssl_enddate

from conftest import HOSTNAME, run_check, statuses


def _enddate(delta: timedelta) -> str:
    return (datetime.now(timezone.utc) + delta).strftime("%b %d %H:%M:%S %Y GMT")


def _make_primary(config):
    primary = Path(config.cert_path)
    primary.mkdir(parents=True)
    (primary / "fullchain.pem").write_text("chain")
    (primary / "privkey.pem").write_text("key")
    return primary


def test_parse_openssl_enddate():
    parsed = parse_openssl_enddate("notAfter=May 10 12:34:56 2026 GMT")
    assert parsed == datetime(2026, 5, 10, 12, 34, 56, tzinfo=timezone.utc)
    assert parse_openssl_enddate("not a date") is None


def test_no_certificates_anywhere_gives_one_fail_with_hint(context, project_dir):
    shutil.rmtree(project_dir / "certs")

    results = run_check(CertificateCheck, context)

    assert statuses(results) == ["fail"]
    assert results[0].message == "No SSL certificates found"
    assert "certbot certonly" in results[0].hint
    assert HOSTNAME in results[0].hint


def test_local_fallback_passes_without_expiry_lookup(context, runner):
    results = run_check(CertificateCheck, context)

    assert statuses(results) == ["pass"]
    assert "certs/" in results[0].message
    assert not runner.called("openssl")


def test_local_fallback_missing_key_fails(context, project_dir):
    (project_dir / "certs" / "privkey.pem").unlink()

    results = run_check(CertificateCheck, context)

    assert statuses(results) == ["fail"]
    assert "missing" in results[0].message


def test_primary_path_reports_expiry(context, runner, config):
    _make_primary(config)
    end = _enddate(timedelta(days=80))
    runner.on("openssl", "x509", stdout=f"notAfter={end}\n")

    results = run_check(CertificateCheck, context)

    assert statuses(results) == ["pass", "pass"]
    assert results[0].message == f"SSL certificates found in {config.cert_path}"
    assert results[1].id == "SSL-2"
    assert results[1].message.startswith(f"Certificate expires: {end}")


def test_primary_path_takes_precedence_over_fallback(context, runner, config):
    _make_primary(config)

    run_check(CertificateCheck, context)

    assert runner.called("openssl", "x509", "-in", f"{config.cert_path}/fullchain.pem")


def test_expiry_soon_warns_and_expired_fails(context, runner, config):
    _make_primary(config)

    runner.on("openssl", "x509", stdout=f"notAfter={_enddate(timedelta(days=5))}\n")
    soon = run_check(CertificateCheck, context)
    assert statuses(soon) == ["pass", "warn"]

    runner.on("openssl", "x509", stdout=f"notAfter={_enddate(timedelta(days=-2))}\n")
    expired = run_check(CertificateCheck, context)
    assert statuses(expired) == ["pass", "fail"]
    assert "renew" in expired[1].hint


def test_no_openssl_skips_expiry(context, runner, config):
    _make_primary(config)
    runner.tools.discard("openssl")

    results = run_check(CertificateCheck, context)

    assert statuses(results) == ["pass"]


def test_primary_dir_without_files_fails(context, config):
    Path(config.cert_path).mkdir(parents=True)

    results = run_check(CertificateCheck, context)

    assert statuses(results) == ["fail"]
    assert config.cert_path in results[0].message
