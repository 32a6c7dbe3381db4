# concept_rag/config/__init__.py
"""Configuration schema and layered YAML loading."""

from .loader import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    deep_merge,
    load_config,
    load_yaml,
)
from .schema import (
    ConceptRagConfig,
    FuzzyMatchConfig,
    IndexConfig,
    LoggingConfig,
    SearchConfig,
    VectorizerConfig,
)

__all__ = [
    "ConceptRagConfig",
    "FuzzyMatchConfig",
    "IndexConfig",
    "LoggingConfig",
    "SearchConfig",
    "VectorizerConfig",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "deep_merge",
    "load_config",
    "load_yaml",
]
