# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kloudlib/config/loader.py

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from .stack import StackConfig

log = logging.getLogger("kloudlib")


class ConfigError(RuntimeError):
    """Stack file missing, unreadable or invalid."""


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    data = yaml.safe_load(expanded) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {path}, got {type(data).__name__}")
    return data


def find_secrets_file(config_path: Path) -> Path:
    """
    Where generated credentials live:

    1. KLOUDLIB_SECRETS_FILE environment variable
    2. secrets.yaml next to the stack file
    """
    env = os.environ.get("KLOUDLIB_SECRETS_FILE")
    if env:
        return Path(env)
    return Path(config_path).parent / "secrets.yaml"


def load_config(path: str | Path) -> StackConfig:
    """
    Load and validate a stack file.

    ``${ENV_VAR}`` placeholders are resolved with ``os.path.expandvars``
    before parsing, so license keys and the like can stay out of the file.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Stack file not found: {path}")

    try:
        data = _load_yaml(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    try:
        cfg = StackConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid stack file {path}:\n{e}") from e

    log.debug(f"Loaded stack {cfg.name!r} from {path}: {', '.join(cfg.component_names()) or 'no components'}")
    return cfg
