"""Locate, parse and validate devflow.toml."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from devflow.config.models import DevflowConfig
from devflow.exceptions import ConfigNotFoundError, ConfigValidationError

CONFIG_FILE_NAME = "devflow.toml"


def find_config_file(project_path: Path | None = None, override: Path | None = None) -> Path:
    """Locate the config file. *override* takes precedence.

    Raises:
        ConfigNotFoundError: If no config file exists
    """
    if override is not None:
        if not override.is_file():
            raise ConfigNotFoundError(f"Config file not found: {override}")
        return override

    project = project_path or Path.cwd()
    candidate = project / CONFIG_FILE_NAME
    if not candidate.is_file():
        raise ConfigNotFoundError(f"No {CONFIG_FILE_NAME} found in {project}")
    return candidate


def load_toml(path: Path) -> dict[str, Any]:
    """Parse a TOML file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigNotFoundError(f"Config file not found: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def parse_config(data: dict[str, Any], source: str = CONFIG_FILE_NAME) -> DevflowConfig:
    """Validate raw config data.

    Raises:
        ConfigValidationError: With one problem per failed check
    """
    try:
        return DevflowConfig.model_validate(data)
    except ValidationError as e:
        problems = []
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"])
            message = error["msg"].removeprefix("Value error, ")
            problems.append(f"{location}: {message}" if location else message)
        raise ConfigValidationError(f"Invalid configuration in {source}", problems) from e


def load_config(project_path: Path | None = None, config_path: Path | None = None) -> DevflowConfig:
    """Load and validate the devflow configuration.

    Args:
        project_path: Directory to look for devflow.toml in (defaults to cwd)
        config_path: Explicit config file, overriding the lookup

    Returns:
        The validated configuration
    """
    path = find_config_file(project_path, config_path)
    return parse_config(load_toml(path), source=str(path))
