"""Model package - Core data structures for deploy-doctor."""

from deploy_doctor.model.result import CheckResult, RunReport, RunTally, Status

__all__ = [
    "CheckResult",
    "RunReport",
    "RunTally",
    "Status",
]
