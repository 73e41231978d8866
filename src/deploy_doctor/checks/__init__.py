"""Check plugin system for deploy-doctor.

Each battery section (docker, files, ssl, ...) is a BaseCheck subclass
registered with @register_check. Sections run in ascending ``order`` and
stream their results, so each one can be printed as it is produced.
"""

import importlib
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from deploy_doctor.config import ReadinessConfig
from deploy_doctor.connector.base import Connector
from deploy_doctor.connector.local import LocalConnector
from deploy_doctor.model.result import CheckResult, RunReport, Status

logger = logging.getLogger(__name__)

BUILTIN_CHECK_MODULES = (
    "deploy_doctor.checks.docker.environment",
    "deploy_doctor.checks.files.required_files",
    "deploy_doctor.checks.ssl.certificates",
    "deploy_doctor.checks.nginx.config_check",
    "deploy_doctor.checks.build.local_build",
    "deploy_doctor.checks.docker.image_build",
    "deploy_doctor.checks.security.security_auditor",
    "deploy_doctor.checks.performance.performance_auditor",
    "deploy_doctor.checks.dns.resolution",
    "deploy_doctor.checks.ports.port_auditor",
)


@dataclass
class CheckContext:
    """Context passed to all checks.

    ``project`` is the directory holding the Dockerfile, nginx.conf and
    friends. ``host`` is the machine that will serve the site; it is the
    same local connector unless the run targets a server over SSH.
    """

    config: ReadinessConfig
    project: LocalConnector
    host: Connector | None = None

    def __post_init__(self) -> None:
        if self.host is None:
            self.host = self.project

    @property
    def timeouts(self):
        return self.config.timeouts


class BaseCheck(ABC):
    """Abstract base class for all checks.

    Each check must implement:
    - section / title / order
    - run(context) -> Iterator[CheckResult]
    """

    @property
    @abstractmethod
    def section(self) -> str:
        """Section name used for filtering (e.g. 'ssl', 'ports')."""
        ...

    @property
    @abstractmethod
    def title(self) -> str:
        """Human-readable section header."""
        ...

    @property
    @abstractmethod
    def order(self) -> int:
        """Position in the battery."""
        ...

    @abstractmethod
    def run(self, context: CheckContext) -> Iterator[CheckResult]:
        """Run the check and yield its results."""
        ...

    def result(self, id: str, status: Status, message: str, **kwargs) -> CheckResult:
        """Build a CheckResult tagged with this check's section."""
        return CheckResult(id=id, status=status, message=message, section=self.section, **kwargs)

    def passed(self, id: str, message: str, **kwargs) -> CheckResult:
        return self.result(id, Status.PASS, message, **kwargs)

    def failed(self, id: str, message: str, **kwargs) -> CheckResult:
        return self.result(id, Status.FAIL, message, **kwargs)

    def warned(self, id: str, message: str, **kwargs) -> CheckResult:
        return self.result(id, Status.WARN, message, **kwargs)

    def skipped(self, id: str, message: str, **kwargs) -> CheckResult:
        return self.result(id, Status.SKIP, message, **kwargs)


# Registry of all available checks
_check_registry: list[type[BaseCheck]] = []


def register_check(check_class: type[BaseCheck]) -> type[BaseCheck]:
    """Decorator to register a check class."""
    if check_class not in _check_registry:
        _check_registry.append(check_class)
    return check_class


def load_builtin_checks() -> None:
    """Import the built-in check modules so they register themselves."""
    for module in BUILTIN_CHECK_MODULES:
        importlib.import_module(module)


def get_all_checks() -> list[type[BaseCheck]]:
    """Get all registered check classes in battery order."""
    load_builtin_checks()
    return sorted(_check_registry, key=lambda cls: cls().order)


def section_names() -> list[str]:
    return [cls().section for cls in get_all_checks()]


def select_checks(
    sections: Iterable[str] | None = None,
    skip: Iterable[str] | None = None,
) -> list[BaseCheck]:
    """Instantiate the battery, filtered by section name.

    Raises:
        ValueError: If an unknown section name is given.
    """
    checks = [cls() for cls in get_all_checks()]
    known = {c.section for c in checks}
    wanted = set(sections or [])
    unwanted = set(skip or [])
    unknown = (wanted | unwanted) - known
    if unknown:
        raise ValueError(
            f"Unknown section(s): {', '.join(sorted(unknown))}. "
            f"Available: {', '.join(c.section for c in checks)}"
        )
    return [
        c for c in checks
        if (not wanted or c.section in wanted) and c.section not in unwanted
    ]


def run_checks(
    context: CheckContext,
    sections: Iterable[str] | None = None,
    skip: Iterable[str] | None = None,
    on_section: Callable[[BaseCheck], None] | None = None,
    on_result: Callable[[CheckResult], None] | None = None,
) -> RunReport:
    """Run the battery and fold every result into one report.

    A check that raises is not allowed to take the run down: whatever it
    yielded so far is kept and the crash becomes a single Fail result.
    """
    report = RunReport(hostname=context.config.target_hostname)

    def emit(result: CheckResult) -> None:
        report.add(result)
        if on_result:
            on_result(result)

    for check in select_checks(sections, skip):
        if on_section:
            on_section(check)
        try:
            for result in check.run(context):
                emit(result)
        except Exception as e:
            logger.warning("Check %s failed: %s", check.__class__.__name__, e, exc_info=True)
            emit(check.failed(
                f"{check.section.upper()}-ERR",
                f"{check.title} check crashed: {e.__class__.__name__}: {e}",
            ))

    return report
