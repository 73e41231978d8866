"""
Click-based CLI for deploy-doctor.

IMPORTANT: This module only ORCHESTRATES. It never reasons or makes decisions.
- Loads configuration
- Opens connectors
- Invokes the readiness action
- Maps the verdict to an exit code
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from deploy_doctor import __version__
from deploy_doctor.actions.readiness import REPORTERS, ReadinessAction, create_reporter
from deploy_doctor.checks import CheckContext, get_all_checks, select_checks
from deploy_doctor.config import CONFIG_FILENAME, ConfigError, load_config, write_default_config
from deploy_doctor.connector.local import LocalConnector, ProcessRunner
from deploy_doctor.connector.ssh import SSHConfig, SSHConnector

console = Console()
logger = logging.getLogger(__name__)

# Exit code for bad invocations and aborted runs, distinct from "not ready" (1)
EXIT_USAGE = 2


def _error(message: str) -> None:
    console.print(f"[bold red]Error:[/] {escape(message)}")


@click.group()
@click.version_option(version=__version__, prog_name="deploy-doctor")
@click.option("--verbose", "-v", is_flag=True, help="Log every command that is run")
def main(verbose: bool) -> None:
    """🩺 deploy-doctor: production readiness checks for containerised SPAs.

    Verifies build, image, nginx, TLS, DNS and port prerequisites before
    a deploy.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument(
    "project_dir",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option("--config", "-c", "config_file", type=click.Path(dir_okay=False, path_type=Path), help=f"Config file (default: ./{CONFIG_FILENAME})")
@click.option("--hostname", "-H", help="Deployment hostname (overrides config)")
@click.option("--format", "fmt", type=click.Choice(list(REPORTERS)), default="rich", show_default=True, help="Output format")
@click.option("--section", "sections", multiple=True, help="Only run this section (repeatable)")
@click.option("--skip", "skip", multiple=True, help="Skip this section (repeatable)")
@click.option("--timeout", type=float, help="Timeout in seconds for ordinary commands")
@click.option("--build-timeout", type=float, help="Timeout in seconds for builds")
@click.option("--ssh", "ssh_host", help="Run host checks (certificates, ports) on this server")
@click.option("--ssh-user", default="root", show_default=True)
@click.option("--ssh-port", default=22, show_default=True, type=int)
@click.option("--ssh-key", type=click.Path(), help="Private key for --ssh")
def check(
    project_dir: Path,
    config_file: Path | None,
    hostname: str | None,
    fmt: str,
    sections: tuple[str, ...],
    skip: tuple[str, ...],
    timeout: float | None,
    build_timeout: float | None,
    ssh_host: str | None,
    ssh_user: str,
    ssh_port: int,
    ssh_key: str | None,
) -> None:
    """Run the production readiness battery against PROJECT_DIR.

    Exits 0 when no check failed (warnings allowed), 1 otherwise.
    """
    timeouts = {k: v for k, v in (("command", timeout), ("build", build_timeout)) if v is not None}
    try:
        config = load_config(
            project_dir,
            config_file,
            overrides={"target_hostname": hostname, "timeouts": timeouts or None},
        )
        select_checks(sections or config.sections, skip or config.skip_sections)
    except (ConfigError, ValueError) as e:
        _error(str(e))
        sys.exit(EXIT_USAGE)

    project = LocalConnector(project_dir, runner=ProcessRunner(), timeout=config.timeouts.command)
    reporter = create_reporter(fmt, console, config)

    try:
        if ssh_host:
            ssh_config = SSHConfig(
                host=ssh_host,
                user=ssh_user,
                port=ssh_port,
                key_path=ssh_key,
                timeout=config.timeouts.command,
            )
            with SSHConnector(ssh_config) as ssh:
                context = CheckContext(config=config, project=project, host=ssh)
                _, exit_code = ReadinessAction(context, reporter).run(sections, skip)
        else:
            context = CheckContext(config=config, project=project)
            _, exit_code = ReadinessAction(context, reporter).run(sections, skip)
    except ConnectionError as e:
        _error(str(e))
        sys.exit(EXIT_USAGE)
    except Exception as e:
        logger.debug("check aborted", exc_info=True)
        _error(f"{type(e).__name__}: {e}")
        sys.exit(EXIT_USAGE)

    sys.exit(exit_code)


@main.command("checks")
def list_checks() -> None:
    """List the check battery in run order."""
    table = Table(title="Check battery")
    table.add_column("#", justify="right")
    table.add_column("Section", style="cyan")
    table.add_column("Title")
    table.add_column("Description", style="dim")

    for n, check_cls in enumerate(get_all_checks(), start=1):
        instance = check_cls()
        doc = (check_cls.__doc__ or "").strip().splitlines()
        table.add_row(str(n), instance.section, instance.title, doc[0] if doc else "")
    console.print(table)


@main.command()
@click.argument(
    "project_dir",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option("--hostname", "-H", help="Deployment hostname")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def init(project_dir: Path, hostname: str | None, force: bool) -> None:
    """Write a default deploy-doctor.yaml into PROJECT_DIR."""
    target = project_dir / CONFIG_FILENAME
    if target.exists() and not force:
        _error(f"{target} already exists (use --force to overwrite)")
        sys.exit(EXIT_USAGE)
    try:
        write_default_config(target, hostname=hostname)
    except Exception as e:
        logger.debug("init aborted", exc_info=True)
        _error(f"Could not write {target}: {e}")
        sys.exit(EXIT_USAGE)
    console.print(f"[green]✓ Config written to:[/] {escape(str(target))}")


if __name__ == "__main__":
    main()
