"""Connectors - Where checks run commands and read files."""

from deploy_doctor.connector.base import CommandResult, Connector
from deploy_doctor.connector.local import LocalConnector, ProcessRunner

__all__ = [
    "CommandResult",
    "Connector",
    "LocalConnector",
    "ProcessRunner",
]
