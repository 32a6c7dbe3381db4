# concept_rag/config/loader.py
"""
Layered configuration loading.

Merge strategy:
    1. Package defaults (concept_rag/config/defaults/default.yaml) - always loaded
    2. User config file (optional) - overrides defaults
    3. Programmatic overrides (optional) - override both

The result is validated against ConceptRagConfig, so every value is
guaranteed to exist and be in range.

Usage:
    from concept_rag.config.loader import load_config

    config = load_config()                         # defaults only
    config = load_config("concept_rag.yaml")       # defaults + user file
    config = load_config(overrides={"fuzzy": {"similarity_threshold": 0.7}})
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from concept_rag.core.exceptions import InvalidConfigurationError
from concept_rag.logging.logger import get_logger
from concept_rag.logging.tags import CONFIG

from .schema import ConceptRagConfig

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "default.yaml"


# =============================================================================
# Errors
# =============================================================================


class ConfigError(Exception):
    """Base error for configuration loading."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"{message} (file: {path})"
        super().__init__(message)


class ConfigNotFoundError(ConfigError):
    """Raised when a config file doesn't exist."""

    pass


class ConfigParseError(ConfigError):
    """Raised when YAML parsing fails."""

    pass


class ConfigValidationError(ConfigError, InvalidConfigurationError):
    """Raised when config doesn't match the schema."""

    pass


# =============================================================================
# Helpers
# =============================================================================


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML file and return it as a dictionary.

    Raises:
        ConfigNotFoundError: If file doesn't exist
        ConfigParseError: If YAML is invalid or its root is not a mapping
    """
    p = Path(path)

    if not p.exists():
        raise ConfigNotFoundError("Config file not found", path=p)

    if p.is_dir():
        raise ConfigError("Config path is a directory, not a file", path=p)

    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Invalid YAML syntax: {e}", path=p) from e

    if not isinstance(data, dict):
        raise ConfigParseError("Config root must be a mapping (dict)", path=p)

    logger.debug(f"{CONFIG} Loaded config from {p}")
    return data


def deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Values from `override` take precedence. Nested dicts are merged
    recursively; lists are replaced entirely.

    Examples:
        >>> deep_merge({"a": 1, "b": {"c": 2, "d": 3}}, {"b": {"c": 10}})
        {'a': 1, 'b': {'c': 10, 'd': 3}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_defaults() -> Dict[str, Any]:
    """Load the package default configuration."""
    return load_yaml(DEFAULT_CONFIG_PATH)


# =============================================================================
# Loading
# =============================================================================


def load_config(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ConceptRagConfig:
    """
    Load and validate configuration.

    Args:
        path: Optional user YAML file merged over the package defaults
        overrides: Optional dict merged over everything else

    Returns:
        Validated ConceptRagConfig

    Raises:
        ConfigNotFoundError: If `path` doesn't exist
        ConfigParseError: If YAML is invalid
        ConfigValidationError: If the merged config doesn't match the schema
    """
    data = load_defaults()
    source = "defaults"

    if path is not None:
        data = deep_merge(data, load_yaml(path))
        source = f"defaults + {path}"

    if overrides:
        data = deep_merge(data, overrides)
        source = f"{source} + overrides"

    try:
        config = ConceptRagConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(
            f"Config validation failed: {e}",
            path=Path(path) if path is not None else None,
        ) from e

    logger.debug(f"{CONFIG} Using config from {source}")
    return config


__all__ = [
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "DEFAULT_CONFIG_PATH",
    "deep_merge",
    "load_config",
    "load_defaults",
    "load_yaml",
]
