"""Configuration loading for folio.yaml.

Resolution order:
  1. Explicit path (``--config`` / ``FOLIO_CONFIG``)
  2. ./folio.yaml
  3. ~/.folio/config.yaml
  4. Built-in defaults (no file needed)

String values may reference environment variables as ``${VAR}`` or
``${VAR:-fallback}``.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from folio.config.schema import FolioConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "FOLIO_CONFIG"

_ENV_PATTERN = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def _env_lookup(match: re.Match) -> str:
    name, fallback = match.group(1), match.group(2)
    return os.environ.get(name) or (fallback or "")


def _expand_env_vars(value: Any) -> Any:
    """Recursively expand ${VAR} / ${VAR:-fallback} in config values."""
    if isinstance(value, str):
        return _ENV_PATTERN.sub(_env_lookup, value)
    if isinstance(value, Mapping):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


def candidate_paths() -> list[Path]:
    """Implicit config locations, most specific first."""
    return [Path.cwd() / "folio.yaml", Path.home() / ".folio" / "config.yaml"]


def _find_config_file(explicit_path: str | Path | None = None) -> Path | None:
    if explicit_path is None:
        explicit_path = os.environ.get(CONFIG_ENV_VAR) or None

    if explicit_path is not None:
        path = Path(explicit_path).expanduser()
        if path.is_file():
            return path
        logger.warning("Config file not found: %s; using defaults", path)
        return None

    return next((p for p in candidate_paths() if p.is_file()), None)


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path) as f:
        raw = yaml.safe_load(f)
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"{path}: top level must be a mapping, got {type(raw).__name__}")
    return _expand_env_vars(raw)


def load_config(path: str | Path | None = None) -> FolioConfig:
    """Load and validate configuration.

    Raises:
        ValueError: The file is not a YAML mapping, or fails validation
            (pydantic ``ValidationError`` is a ValueError).
        yaml.YAMLError: The file is not valid YAML.
    """
    config_path = _find_config_file(path)
    if config_path is None:
        logger.debug("No config file, using defaults")
        return FolioConfig()

    logger.info("Loading config from %s", config_path)
    config = FolioConfig.model_validate(_read_yaml(config_path))
    logger.debug(
        "Config: %d account name(s), chart cap %d",
        len(config.accounts), config.combiner.max_symbols,
    )
    return config


def resolve_path(path_str: str) -> Path:
    """Config path string → absolute Path (``~`` expanded)."""
    return Path(path_str).expanduser().resolve()
