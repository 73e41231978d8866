"""Tests for the check registry and battery runner."""

import shutil

import pytest

from deploy_doctor.checks import CheckContext, get_all_checks, run_checks, section_names, select_checks
from deploy_doctor.checks.dns.resolution import DNSCheck
from deploy_doctor.config import ReadinessConfig
from deploy_doctor.connector.local import LocalConnector
from deploy_doctor.model.result import Status

BATTERY = ["docker", "files", "ssl", "nginx", "build", "image", "security", "performance", "dns", "ports"]


def test_battery_order():
    assert section_names() == BATTERY
    assert len(get_all_checks()) == len(BATTERY)


def test_select_and_skip_sections():
    assert [c.section for c in select_checks(sections=["ssl", "dns"])] == ["ssl", "dns"]
    assert "image" not in [c.section for c in select_checks(skip=["image"])]


def test_unknown_section_rejected():
    with pytest.raises(ValueError, match="Unknown section"):
        select_checks(sections=["kubernetes"])


def test_healthy_project_is_ready(context, runner):
    runner.on("dig", stdout="93.184.215.14\n")

    report = run_checks(context)

    assert report.tally.failed == 0
    assert report.tally.warned == 0
    assert report.tally.passed == report.tally.total == len(report.results) == 30
    assert report.tally.exit_code == 0


def test_streaming_callbacks(context):
    seen_sections, seen_results = [], []

    report = run_checks(
        context,
        sections=["files", "dns"],
        on_section=lambda check: seen_sections.append(check.section),
        on_result=seen_results.append,
    )

    assert seen_sections == ["files", "dns"]
    assert seen_results == report.results


def test_tally_invariant_with_skips(context, project_dir):
    (project_dir / "nginx.conf").unlink()
    shutil.rmtree(project_dir / "dist")

    report = run_checks(context)

    attempted = [r for r in report.results if r.status is not Status.SKIP]
    tally = report.tally
    assert tally.passed + tally.failed + tally.warned == tally.total == len(attempted)
    assert tally.skipped == 4  # nginx section, build output, security headers, nginx performance
    assert report.get("FILE-1:nginx.conf").status is Status.FAIL
    assert tally.exit_code == 1


def test_crashing_check_becomes_fail(context, monkeypatch):
    def explode(self, ctx):
        yield self.passed("DNS-1", "first result survives")
        raise RuntimeError("resolver exploded")

    monkeypatch.setattr(DNSCheck, "run", explode)

    report = run_checks(context, sections=["dns", "ports"])

    keys = [r.key for r in report.results]
    assert keys[:2] == ["DNS-1", "DNS-ERR"]
    crash = report.get("DNS-ERR")
    assert crash.status is Status.FAIL
    assert "RuntimeError: resolver exploded" in crash.message
    assert any(k.startswith("PORT-1") for k in keys)


def test_two_runs_are_identical(context):
    first = run_checks(context)
    second = run_checks(context)

    assert first.tally == second.tally
    assert [r.key for r in first.results] == [r.key for r in second.results]


def test_result_keys_unique_with_repeated_config_entries(project_dir, runner, config):
    config = ReadinessConfig(**{
        **config.model_dump(),
        "ports": [80, 443, 80],
        "required_files": ["Dockerfile", "Dockerfile", "nginx.conf"],
    })
    context = CheckContext(config=config, project=LocalConnector(project_dir, runner=runner))

    report = run_checks(context, sections=["files", "ports"])

    keys = [r.key for r in report.results]
    assert len(keys) == len(set(keys)) == 4
