"""CheckResult and RunTally - The outcome of one readiness run."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Status(Enum):
    """Outcome of a single check."""

    PASS = "pass"
    FAIL = "fail"  # Blocks the readiness gate
    WARN = "warn"  # Advisory, never affects the exit code
    SKIP = "skip"  # Precondition absent, check not attempted


@dataclass(frozen=True)
class CheckResult:
    """A single check outcome.

    Attributes:
        id: Stable identifier of the check (e.g. 'FILE-1', 'SEC-1').
        status: Pass, Fail, Warn or Skip.
        message: Human-readable one-line outcome.
        section: Battery section the check belongs to.
        subject: What this particular result is about (file, header, port).
        hint: Optional remediation text.
    """

    id: str
    status: Status
    message: str
    section: str = ""
    subject: str | None = None
    hint: str | None = None

    @property
    def key(self) -> str:
        """Stable key, unique within a run."""
        if self.subject:
            return f"{self.id}:{self.subject}"
        return self.id

    @property
    def attempted(self) -> bool:
        return self.status is not Status.SKIP

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "id": self.id,
            "section": self.section,
            "status": self.status.value,
            "subject": self.subject,
            "message": self.message,
            "hint": self.hint,
        }

    def __str__(self) -> str:
        return f"[{self.status.value.upper()}] {self.key}: {self.message}"


@dataclass
class RunTally:
    """Pass/fail/warn counters for one run.

    Only attempted checks are counted, so
    ``passed + failed + warned == total`` always holds.
    """

    passed: int = 0
    failed: int = 0
    warned: int = 0
    skipped: int = 0

    def record(self, result: CheckResult) -> None:
        if result.status is Status.PASS:
            self.passed += 1
        elif result.status is Status.FAIL:
            self.failed += 1
        elif result.status is Status.WARN:
            self.warned += 1
        else:
            self.skipped += 1

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.warned

    @property
    def ready(self) -> bool:
        """Readiness gate: no failed checks. Warnings are allowed."""
        return self.failed == 0

    @property
    def exit_code(self) -> int:
        return 0 if self.ready else 1

    def to_dict(self) -> dict[str, int]:
        return {
            "passed": self.passed,
            "failed": self.failed,
            "warned": self.warned,
            "skipped": self.skipped,
            "total": self.total,
        }


@dataclass
class RunReport:
    """All results of a run, in the order they were produced."""

    hostname: str = ""
    results: list[CheckResult] = field(default_factory=list)
    tally: RunTally = field(default_factory=RunTally)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def add(self, result: CheckResult) -> None:
        self.results.append(result)
        self.tally.record(result)

    def by_section(self, section: str) -> list[CheckResult]:
        return [r for r in self.results if r.section == section]

    def get(self, key: str) -> CheckResult | None:
        """Find a result by its stable key."""
        return next((r for r in self.results if r.key == key), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "hostname": self.hostname,
            "started_at": self.started_at.isoformat(),
            "ready": self.tally.ready,
            "exit_code": self.tally.exit_code,
            "summary": self.tally.to_dict(),
            "results": [r.to_dict() for r in self.results],
        }
