"""Config-file loading and environment selection for zklock.

A config file holds one entry per environment; each entry lists the
store endpoints and may set the root, TTL, timeout and auth for that
environment:

    {
      "default_environment": "production",
      "environments": {
        "production": {"servers": ["zk1:2181", "zk2:2181"], "ttl": 30}
      }
    }
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from zklock.core.constants import (
    CONFIG_FILE_ENV_VAR,
    DEFAULT_CONFIG_FILE,
    DEFAULT_ENVIRONMENT,
    ENVIRONMENT_ENV_VAR,
)
from zklock.core.exceptions import ConfigurationError

_ENVIRONMENT_FIELDS = {"servers", "root", "ttl", "timeout", "auth"}


@dataclass
class EnvironmentSettings:
    """Settings of one named environment from a config file."""

    name: str
    config_file: str | None = None
    servers: list[str] = field(default_factory=list)
    root: str | None = None
    ttl: int | None = None
    timeout: float | None = None
    auth: str | None = None


def bootstrap_dotenv(logger: logging.Logger) -> None:
    """Load a .env file from the working directory (or a parent), if present."""
    try:
        dotenv_path = find_dotenv(usecwd=True)
        if dotenv_path and load_dotenv(dotenv_path):
            logger.debug(".env file found and loaded")
        else:
            logger.debug(".env file not found")
    except OSError as e:
        logger.debug(f"Failed to load .env via python-dotenv: {e}")


def normalize_server(entry: Any) -> str:
    """Turn a "host:port" string or {"host", "port"} object into "host:port".

    Raises:
        ConfigurationError: If the entry has neither form
    """
    if isinstance(entry, str) and entry.strip():
        value = entry.strip()
        return value if ":" in value else f"{value}:2181"
    if isinstance(entry, dict) and entry.get("host"):
        return f"{str(entry['host']).strip()}:{entry.get('port', 2181)}"
    raise ConfigurationError("Invalid server entry", field="servers", details=repr(entry))


def load_config_file(path: Path) -> dict[str, Any]:
    """Read and structurally check a JSON config file.

    Raises:
        ConfigurationError: If the file is unreadable or malformed
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError("Invalid JSON in config file", config_file=str(path), details=str(e)) from e
    except OSError as e:
        raise ConfigurationError("Cannot read config file", config_file=str(path), details=str(e)) from e

    if not isinstance(data, dict):
        raise ConfigurationError("Config file must contain a JSON object", config_file=str(path))
    environments = data.get("environments", {})
    if not isinstance(environments, dict):
        raise ConfigurationError(
            "'environments' must be an object keyed by environment name",
            config_file=str(path),
            field="environments",
        )
    return data


def _parse_environment(name: str, raw: Any, config_file: str, logger: logging.Logger) -> EnvironmentSettings:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Environment '{name}' must be an object", config_file=config_file, field=name)

    unknown = sorted(set(raw) - _ENVIRONMENT_FIELDS)
    if unknown:
        logger.warning(f"Ignoring unknown keys in environment '{name}': {', '.join(unknown)}")

    servers = raw.get("servers", [])
    if isinstance(servers, str):
        servers = [servers]
    if not isinstance(servers, list):
        raise ConfigurationError("'servers' must be a list", config_file=config_file, field="servers")

    try:
        ttl = int(raw["ttl"]) if raw.get("ttl") is not None else None
        timeout = float(raw["timeout"]) if raw.get("timeout") is not None else None
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Environment '{name}' has a non-numeric ttl or timeout", config_file=config_file, details=str(e)
        ) from e

    for key in ("root", "auth"):
        if raw.get(key) is not None and not isinstance(raw[key], str):
            raise ConfigurationError(
                f"Environment '{name}' has a non-string {key}", config_file=config_file, field=key
            )

    return EnvironmentSettings(
        name=name,
        config_file=config_file,
        servers=[normalize_server(entry) for entry in servers],
        root=raw.get("root"),
        ttl=ttl,
        timeout=timeout,
        auth=raw.get("auth"),
    )


class EnvironmentResolver:
    """Resolves the active environment using a priority-based strategy.

    Config file: --config > $ZKLOCK_CONFIG > ~/.zklock.json (optional).
    Environment: --env > $ZKLOCK_ENV > file's "default_environment" > "default".
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def resolve(self, config_file: str | None = None, environment: str | None = None) -> EnvironmentSettings | None:
        """Load the config file and select one environment.

        Args:
            config_file: Explicit config file path (must exist when given)
            environment: Explicit environment name

        Returns:
            The selected environment, or None when no config file is in use

        Raises:
            ConfigurationError: If an explicit file or environment is missing,
                or the file is malformed
        """
        bootstrap_dotenv(self.logger)

        path, explicit = self._config_path(config_file)
        if not path.exists():
            if explicit:
                raise ConfigurationError("Config file not found", config_file=str(path))
            self.logger.debug(f"No config file at {path}; using built-in defaults")
            requested = environment or os.environ.get(ENVIRONMENT_ENV_VAR)
            if requested:
                raise ConfigurationError(
                    f"Environment '{requested}' requested but no config file found", config_file=str(path)
                )
            return None

        data = load_config_file(path)
        environments = data.get("environments", {})
        default_name = data.get("default_environment")
        if default_name is not None and not isinstance(default_name, str):
            raise ConfigurationError(
                "'default_environment' must be a string", config_file=str(path), field="default_environment"
            )
        name = environment or os.environ.get(ENVIRONMENT_ENV_VAR) or default_name
        name = name or DEFAULT_ENVIRONMENT

        if name not in environments:
            available = ", ".join(sorted(environments)) or "none"
            raise ConfigurationError(
                f"Unknown environment '{name}'",
                config_file=str(path),
                field="environments",
                details=f"available: {available}",
            )

        settings = _parse_environment(name, environments[name], str(path), self.logger)
        self.logger.debug(f"Using environment '{name}' from {path}")
        return settings

    @staticmethod
    def _config_path(config_file: str | None) -> tuple[Path, bool]:
        if config_file:
            return Path(config_file).expanduser(), True
        from_env = os.environ.get(CONFIG_FILE_ENV_VAR)
        if from_env:
            return Path(from_env).expanduser(), True
        return Path(DEFAULT_CONFIG_FILE).expanduser(), False
