"""Tests for the Docker environment and image build checks."""

from deploy_doctor.checks.docker.environment import DockerEnvironmentCheck, parse_docker_version
from deploy_doctor.checks.docker.image_build import DockerBuildCheck

from conftest import run_check, statuses


def test_parse_docker_version():
    assert parse_docker_version("Docker version 27.1.1, build 6312585") == "27.1.1"
    assert parse_docker_version("garbage") is None


def test_docker_installed_and_running(context, runner):
    runner.on("docker", "--version", stdout="Docker version 27.1.1, build 6312585\n")

    results = run_check(DockerEnvironmentCheck, context)

    assert statuses(results) == ["pass", "pass"]
    assert results[0].message == "Docker is installed (27.1.1)"


def test_docker_missing_fails_both(context, runner):
    runner.tools.discard("docker")
    runner.on("docker", "info", stderr="docker: command not found", exit_code=127)

    results = run_check(DockerEnvironmentCheck, context)

    assert statuses(results) == ["fail", "fail"]
    assert [r.id for r in results] == ["DOCKER-1", "DOCKER-2"]


def test_daemon_down(context, runner):
    runner.on("docker", "info", stderr="Cannot connect to the Docker daemon", exit_code=1)

    results = run_check(DockerEnvironmentCheck, context)

    assert statuses(results) == ["pass", "fail"]
    assert "Cannot connect" in results[1].hint


def test_image_build_reports_size_and_cleans_up(context, runner):
    runner.on("docker", "images", stdout="48.3MB\n")

    results = run_check(DockerBuildCheck, context)

    assert statuses(results) == ["pass", "pass"]
    assert results[1].message == "Docker image size: 48.3MB"
    assert runner.called("docker", "build")
    assert runner.called("docker", "rmi", context.config.test_image_tag)


def test_image_build_failure_still_cleans_up(context, runner):
    runner.on("docker", "build", stderr="failed to solve: process did not complete", exit_code=1)

    results = run_check(DockerBuildCheck, context)

    assert statuses(results) == ["fail"]
    assert "failed to solve" in results[0].hint
    assert not runner.called("docker", "images")
    assert runner.called("docker", "rmi", context.config.test_image_tag)


def test_image_build_timeout_fails(context, runner):
    runner.on("docker", "build", exit_code=124, timed_out=True)

    results = run_check(DockerBuildCheck, context)

    assert statuses(results) == ["fail"]
    assert "timed out" in results[0].message
    assert runner.called("docker", "rmi")


def test_cleanup_failure_is_not_reported(context, runner):
    runner.on("docker", "rmi", stderr="No such image", exit_code=1)

    results = run_check(DockerBuildCheck, context)

    assert statuses(results) == ["pass", "pass"]
