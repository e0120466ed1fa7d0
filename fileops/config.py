from __future__ import annotations

import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fileops.models.search import DEFAULT_MAX_FILE_SIZE

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"


def expand_env_vars(config_str: str) -> str:
    """
    Expand environment variables in the format ${VAR_NAME} within a YAML string.
    Skips expansion in YAML comments (lines starting with #).

    Args:
        config_str: YAML configuration string potentially containing ${VAR_NAME} placeholders

    Returns:
        YAML string with all ${VAR_NAME} placeholders expanded to environment variable values

    Raises:
        KeyError: If a referenced environment variable is not set
    """
    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        try:
            return os.environ[var_name]
        except KeyError:
            msg = f"Environment variable '{var_name}' referenced in config.yaml but not set"
            raise KeyError(msg) from None

    lines = []
    for line in config_str.split("\n"):
        stripped = line.lstrip()
        if stripped.startswith("#"):
            lines.append(line)
        else:
            lines.append(re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}", replace_var, line))

    return "\n".join(lines)


def load_config_from_yaml(config_path: str | Path) -> dict[str, Any]:
    """
    Load YAML configuration file and expand environment variables.

    Args:
        config_path: Path to config.yaml file

    Returns:
        Dictionary containing the parsed configuration

    Raises:
        FileNotFoundError: If config file is not found
        ValueError: If the YAML is invalid or references unset variables
    """
    config_file = Path(config_path)
    if not config_file.exists():
        msg = (
            f"Configuration file not found at {config_path}\n"
            f"Use CONFIG_PATH environment variable to override location."
        )
        raise FileNotFoundError(msg)

    with open(config_file) as f:
        config_str = f.read()

    try:
        expanded_config = expand_env_vars(config_str)
    except KeyError as e:
        msg = f"Error expanding environment variables in config.yaml: {e}"
        raise ValueError(msg) from None

    try:
        config_dict = yaml.safe_load(expanded_config)
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in config.yaml: {e}"
        raise ValueError(msg) from None

    if config_dict is None:
        return {}

    if not isinstance(config_dict, dict):
        msg = "config.yaml must contain a YAML mapping/dictionary at root level"
        raise ValueError(msg)

    return config_dict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=None,
        case_sensitive=False,
    )

    # Workspace sandbox (None = any path on the host is reachable)
    workspace_root: str | None = None

    # Security
    auth_token: str  # Required
    environment: str = "development"

    # Search defaults
    max_file_size: int = Field(
        default=DEFAULT_MAX_FILE_SIZE,
        description="Files larger than this many bytes are skipped by content search",
    )
    default_max_results: int = Field(default=100, description="Result cap when a call omits one")

    # Shell command runner
    commands_enabled: bool = True
    command_timeout_seconds: int = Field(
        default=30,
        description="Timeout for run_command invocations",
    )

    # HTTP client
    http_timeout_seconds: int = Field(
        default=30,
        description="Timeout for http_request invocations",
    )

    # Observability
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("max_file_size", "default_max_results", "command_timeout_seconds", "http_timeout_seconds")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            msg = "must be a positive integer"
            raise ValueError(msg)
        return v

    @field_validator("workspace_root", mode="after")
    @classmethod
    def validate_workspace_root(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


def _flatten_config(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Flatten nested YAML structure to Settings field format."""
    flat_config: dict[str, Any] = {}

    workspace = config_dict.get("workspace")
    if isinstance(workspace, dict) and "root" in workspace:
        flat_config["workspace_root"] = workspace["root"]

    auth = config_dict.get("auth")
    if isinstance(auth, dict) and "token" in auth:
        flat_config["auth_token"] = auth["token"]

    logging_section = config_dict.get("logging")
    if isinstance(logging_section, dict):
        if "level" in logging_section:
            flat_config["log_level"] = logging_section["level"]
        if "json" in logging_section:
            flat_config["log_json"] = logging_section["json"]

    search = config_dict.get("search")
    if isinstance(search, dict):
        if "max_file_size" in search:
            flat_config["max_file_size"] = search["max_file_size"]
        if "max_results" in search:
            flat_config["default_max_results"] = search["max_results"]

    commands = config_dict.get("commands")
    if isinstance(commands, dict):
        if "enabled" in commands:
            flat_config["commands_enabled"] = commands["enabled"]
        if "timeout_seconds" in commands:
            flat_config["command_timeout_seconds"] = commands["timeout_seconds"]

    http = config_dict.get("http")
    if isinstance(http, dict) and "timeout_seconds" in http:
        flat_config["http_timeout_seconds"] = http["timeout_seconds"]

    if "environment" in config_dict:
        flat_config["environment"] = config_dict["environment"]

    return flat_config


def build_settings(config_path: str | Path | None = None) -> Settings:
    """
    Build settings from config.yaml, falling back to environment variables.

    Values present in the YAML file win over environment variables. When no
    config file exists, Settings reads everything from the environment.
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH)

    flat_config: dict[str, Any] = {}
    if Path(config_path).exists():
        flat_config = _flatten_config(load_config_from_yaml(config_path))
    else:
        logger.debug("No config file found, using environment", extra={"path": str(config_path)})

    try:
        return Settings(**flat_config)
    except ValidationError as e:
        print(f"Configuration validation error: {e}")
        raise


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first access."""
    return build_settings()


class _SettingsProxy:
    """
    Proxy to Settings that loads lazily.

    Lets modules import `settings` at import time while the actual values are
    only read (and validated) on first attribute access.
    """

    def __getattr__(self, name: str) -> object:
        return getattr(get_settings(), name)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Settings are read-only; build a new Settings instead"
        raise AttributeError(msg)


settings = _SettingsProxy()  # type: ignore[assignment]
