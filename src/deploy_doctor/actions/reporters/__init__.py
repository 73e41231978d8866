"""Reporters for readiness runs."""

from deploy_doctor.actions.reporters.base import BaseReporter
from deploy_doctor.actions.reporters.json_reporter import JsonReporter, YamlReporter
from deploy_doctor.actions.reporters.plain_reporter import PlainReporter
from deploy_doctor.actions.reporters.rich_reporter import RichReporter

__all__ = [
    "BaseReporter",
    "JsonReporter",
    "PlainReporter",
    "RichReporter",
    "YamlReporter",
]
