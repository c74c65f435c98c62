"""Run configuration loading for uplift."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema

from uplift.domain.exceptions import ConfigurationError
from uplift.schemas import validate_config

DEFAULT_CONFIG_NAME = "uplift.json"
STRICT_ENV_VAR = "UPLIFT_STRICT"


@dataclass(frozen=True)
class UpliftConfig:
    """Settings shared by the CLI and the default orchestrator wiring."""

    strict: bool = False
    knowledge_base: str | None = None  # None = bundled data/versions.json
    registry: str | None = None
    state_dir: str = ".uplift"
    rmax: int = 3
    build_command: tuple[str, ...] = ("npx", "ng", "build")
    test_command: tuple[str, ...] = ("npx", "ng", "test", "--watch=false")


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


def config_from_dict(data: dict[str, Any]) -> UpliftConfig:
    """
    Build a config from a parsed document.

    Raises:
        ConfigurationError: If the document does not match config.schema.json
    """
    try:
        validate_config(data)
    except jsonschema.ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e.message}") from e

    defaults = UpliftConfig()
    return UpliftConfig(
        strict=data.get("strict", defaults.strict) or _env_flag(STRICT_ENV_VAR),
        knowledge_base=data.get("knowledge_base", defaults.knowledge_base),
        registry=data.get("registry", defaults.registry),
        state_dir=data.get("state_dir", defaults.state_dir),
        rmax=data.get("rmax", defaults.rmax),
        build_command=tuple(data.get("build_command", defaults.build_command)),
        test_command=tuple(data.get("test_command", defaults.test_command)),
    )


def load_config(path: str | Path | None = None) -> UpliftConfig:
    """
    Load configuration from a JSON file.

    Args:
        path: Path to the config file. A missing file yields the defaults.

    Returns:
        UpliftConfig, with UPLIFT_STRICT applied

    Raises:
        ConfigurationError: If the file is not valid JSON or fails validation
    """
    if path is None or not Path(path).exists():
        return config_from_dict({})

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected object in {path}, got {type(data).__name__}")
    return config_from_dict(data)
