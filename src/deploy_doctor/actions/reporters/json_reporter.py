"""Structured (JSON / YAML) Reporter Implementations."""

import json

import yaml

from deploy_doctor.actions.reporters.base import BaseReporter
from deploy_doctor.model.result import RunReport


class JsonReporter(BaseReporter):
    """Machine-readable JSON output, printed once the run is complete."""

    def report_summary(self, report: RunReport) -> int:
        self.console.out(json.dumps(report.to_dict(), indent=2), highlight=False)
        return report.tally.exit_code


class YamlReporter(BaseReporter):
    """Machine-readable YAML output."""

    def report_summary(self, report: RunReport) -> int:
        self.console.out(yaml.safe_dump(report.to_dict(), sort_keys=False).rstrip(), highlight=False)
        return report.tally.exit_code
