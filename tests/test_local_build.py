"""Tests for the Build Test check."""

import shutil

from deploy_doctor.checks.build.local_build import LocalBuildCheck, human_size

from conftest import run_check, statuses


def test_human_size():
    assert human_size(512) == "512B"
    assert human_size(2048) == "2.0K"
    assert human_size(5 * 1024 * 1024) == "5.0M"
    assert human_size(3 * 1024 ** 3) == "3.0G"


def test_successful_build(context, runner):
    results = run_check(LocalBuildCheck, context)

    assert [r.id for r in results] == ["BUILD-1", "BUILD-2", "BUILD-3", "BUILD-4"]
    assert statuses(results) == ["pass"] * 4
    assert results[2].message.startswith("Build output size: ")
    assert runner.called("npm", "run", "build")


def test_missing_node_modules_only_warns(context, project_dir):
    shutil.rmtree(project_dir / "node_modules")

    results = run_check(LocalBuildCheck, context)

    assert statuses(results)[0] == "warn"
    assert "npm install" in results[0].hint
    assert "fail" not in statuses(results)


def test_build_failure_stops_section(context, runner):
    runner.on("npm", "run", "build", stderr="error during build:\nCould not resolve './App'", exit_code=1)

    results = run_check(LocalBuildCheck, context)

    assert statuses(results) == ["pass", "fail"]
    assert "Could not resolve" in results[1].hint


def test_build_timeout_fails(context, runner):
    runner.on("npm", "run", "build", exit_code=124, timed_out=True)

    results = run_check(LocalBuildCheck, context)

    assert statuses(results) == ["pass", "fail"]
    assert "timed out" in results[1].message


def test_missing_entry_html_fails(context, project_dir):
    (project_dir / "dist" / "index.html").unlink()

    results = run_check(LocalBuildCheck, context)

    assert statuses(results) == ["pass", "pass", "pass", "fail"]


def test_missing_output_dir_is_skipped_not_passed(context, project_dir):
    shutil.rmtree(project_dir / "dist")

    results = run_check(LocalBuildCheck, context)

    assert statuses(results) == ["pass", "pass", "skip"]


def test_custom_build_command(context, runner):
    cfg = context.config.model_copy(update={"build_command": ["pnpm", "build"]})
    context.config = cfg

    run_check(LocalBuildCheck, context)

    assert runner.called("pnpm", "build")
    assert not runner.called("npm")
