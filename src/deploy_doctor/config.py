"""Configuration for deploy-doctor readiness runs.

Settings are read from a YAML file and validated with pydantic. Lookup
order: explicit path, $DEPLOY_DOCTOR_CONFIG, <project>/deploy-doctor.yaml,
then built-in defaults.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "deploy-doctor.yaml"
CONFIG_ENV_VAR = "DEPLOY_DOCTOR_CONFIG"


class ConfigError(ValueError):
    """Raised when a configuration file can't be loaded or is invalid."""


class TimeoutSettings(BaseModel):
    """Upper bounds, in seconds, for external process calls."""

    command: float = Field(default=30, gt=0)
    build: float = Field(default=600, gt=0)
    dns: float = Field(default=10, gt=0)


class ReadinessConfig(BaseModel):
    """Everything the check battery needs to know about a deployment."""

    model_config = ConfigDict(extra="forbid")

    target_hostname: str = "example.com"
    cert_primary_path: str | None = Field(
        default=None,
        description="CA-managed certificate directory; defaults to /etc/letsencrypt/live/<hostname>",
    )
    cert_fallback_path: str = "certs"
    cert_expiry_warn_days: int = Field(default=14, ge=0)
    required_files: list[str] = Field(
        default_factory=lambda: [
            "Dockerfile",
            "nginx.conf",
            "package.json",
            "vite.config.js",
            ".dockerignore",
        ]
    )
    required_headers: list[str] = Field(
        default_factory=lambda: [
            "Strict-Transport-Security",
            "X-Frame-Options",
            "X-Content-Type-Options",
            "X-XSS-Protection",
        ]
    )

    nginx_config: str = "nginx.conf"
    dockerfile: str = "Dockerfile"
    bundler_config: str = "vite.config.js"
    nginx_image: str = "nginx:1.27-alpine"
    test_image_tag: str = "deploy-doctor-test:check"

    build_command: list[str] = Field(default_factory=lambda: ["npm", "run", "build"])
    dependency_dir: str = "node_modules"
    build_output_dir: str = "dist"
    entry_html: str = "index.html"

    ports: list[int] = Field(default_factory=lambda: [80, 443])
    timeouts: TimeoutSettings = Field(default_factory=TimeoutSettings)
    next_steps: list[str] = Field(
        default_factory=lambda: [
            "Deploy: make deploy",
            "Or:     docker-compose up -d --build",
            "Check:  make health",
        ]
    )

    sections: list[str] = Field(default_factory=list, description="Only run these sections (empty = all)")
    skip_sections: list[str] = Field(default_factory=list)

    @field_validator("ports")
    @classmethod
    def _valid_ports(cls, value: list[int]) -> list[int]:
        for port in value:
            if not 0 < port < 65536:
                raise ValueError(f"invalid port: {port}")
        return list(dict.fromkeys(value))

    @field_validator("required_files", "required_headers")
    @classmethod
    def _unique(cls, value: list[str]) -> list[str]:
        # Each entry becomes a result subject, which must be unique per run
        return list(dict.fromkeys(value))

    @field_validator("build_command")
    @classmethod
    def _non_empty_command(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("build_command must not be empty")
        return value

    @property
    def cert_path(self) -> str:
        """Resolved CA-managed certificate directory."""
        if self.cert_primary_path:
            return self.cert_primary_path
        return f"/etc/letsencrypt/live/{self.target_hostname}"


def find_config_file(project_dir: Path, explicit: str | Path | None = None) -> Path | None:
    """Locate the config file to use, if any."""
    if explicit:
        return Path(explicit).expanduser()

    env_config = os.getenv(CONFIG_ENV_VAR)
    if env_config:
        return Path(env_config).expanduser()

    candidate = Path(project_dir) / CONFIG_FILENAME
    if candidate.is_file():
        return candidate
    return None


def load_config(
    project_dir: Path,
    explicit: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> ReadinessConfig:
    """Load and validate configuration.

    Args:
        project_dir: Project being checked.
        explicit: Path given on the command line.
        overrides: Values that win over the file (CLI flags).

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    data: dict[str, Any] = {}
    config_file = find_config_file(project_dir, explicit)
    if config_file is not None:
        if not config_file.is_file():
            raise ConfigError(f"Config file not found: {config_file}")
        try:
            raw = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not read {config_file}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"{config_file}: top level must be a mapping")
        data.update(raw)
        logger.debug("loaded config from %s", config_file)

    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(data.get(key), dict):
            data[key] = {**data[key], **value}
        else:
            data[key] = value

    try:
        return ReadinessConfig(**data)
    except ValidationError as e:
        source = config_file or "defaults"
        raise ConfigError(f"Invalid configuration ({source}):\n{e}") from e


def write_default_config(path: Path, hostname: str | None = None) -> Path:
    """Write the default configuration as YAML."""
    config = ReadinessConfig(target_hostname=hostname) if hostname else ReadinessConfig()
    data = config.model_dump(exclude={"sections", "skip_sections"})
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path
