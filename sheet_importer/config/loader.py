from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_ASSET_LABEL_PREFIX,
    DEFAULT_ERROR_LOG_DIR,
    DEFAULT_PREVIEW_ROWS,
    ImporterConfig,
)
from ..models.import_state import OutputMode

"""Config loader.

Responsibilities:
- Load the YAML config (default ``config/import.yml``)
- Validate it against the packaged JSON schema (config_schema.json)
- Apply defaults for missing keys
- Apply environment overrides (SHEET_IMPORT_OUTPUT_MODE, SHEET_IMPORT_READ_TIMEOUT)
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "load_config_or_default",
    "apply_env_overrides",
]

DEFAULT_CONFIG_PATH = Path("config/import.yml")
SCHEMA_PATH = Path(__file__).parent / "config_schema.json"

ENV_OUTPUT_MODE = "SHEET_IMPORT_OUTPUT_MODE"
ENV_READ_TIMEOUT = "SHEET_IMPORT_READ_TIMEOUT"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the packaged JSON schema.

    Raises:
        ConfigError: the schema file is missing / invalid, or the data does
            not conform (unknown keys, wrong types, bad enum values ...)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _build_config(data: Mapping[str, Any]) -> ImporterConfig:
    timeout = data.get("read_timeout_seconds")
    return ImporterConfig(
        output_mode=OutputMode(data.get("output_mode", OutputMode.ROWS.value)),
        asset_label_prefix=data.get("asset_label_prefix", DEFAULT_ASSET_LABEL_PREFIX),
        null_sentinels=frozenset(s.strip().upper() for s in data.get("null_sentinels", [])),
        read_timeout_seconds=float(timeout) if timeout is not None else None,
        error_log_dir=data.get("error_log_dir", DEFAULT_ERROR_LOG_DIR),
        preview_rows=data.get("preview_rows", DEFAULT_PREVIEW_ROWS),
    )


def load_config(path: Path) -> ImporterConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)
    return _build_config(data)


def load_config_or_default(path: Path | None = None) -> ImporterConfig:
    """Load ``path`` if given; otherwise the default path when it exists, else defaults.

    An explicitly requested file that does not exist is still an error.
    """
    if path is not None:
        return load_config(path)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return ImporterConfig()


def apply_env_overrides(
    cfg: ImporterConfig, environ: Mapping[str, str] | None = None
) -> ImporterConfig:
    """Return ``cfg`` with values taken from the environment where set.

    The CLI loads ``.env`` (python-dotenv, override=True) before calling this,
    so values from ``.env`` take precedence over the config file.
    """
    env = os.environ if environ is None else environ
    updates: dict[str, Any] = {}

    mode = env.get(ENV_OUTPUT_MODE)
    if mode:
        try:
            updates["output_mode"] = OutputMode(mode.strip().lower())
        except ValueError as e:
            raise ConfigError(f"{ENV_OUTPUT_MODE}: expected 'rows' or 'assets', got {mode!r}") from e

    timeout = env.get(ENV_READ_TIMEOUT)
    if timeout:
        try:
            seconds = float(timeout)
        except ValueError as e:
            raise ConfigError(f"{ENV_READ_TIMEOUT}: not a number: {timeout!r}") from e
        if seconds <= 0:
            raise ConfigError(f"{ENV_READ_TIMEOUT}: must be positive, got {timeout!r}")
        updates["read_timeout_seconds"] = seconds

    return replace(cfg, **updates) if updates else cfg
