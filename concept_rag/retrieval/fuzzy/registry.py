# concept_rag/retrieval/fuzzy/registry.py
"""
Similarity matcher registry with lazy auto-discovery.

Matchers live in concept_rag.retrieval.fuzzy.plugins. Any class there
defining `plugin_name` and `calculate_similarity` is picked up on first
lookup. Host applications can add their own with register_matcher().

Usage:
    matcher = create_matcher("levenshtein")
    matcher.calculate_similarity("machin", "machine")  # 0.857...
"""

from __future__ import annotations

import importlib
import pkgutil
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Type

from concept_rag.core.exceptions import InvalidConfigurationError, MatcherNotFoundError
from concept_rag.logging.logger import get_logger
from concept_rag.logging.tags import FUZZY

from .base import SimilarityMatcher

logger = get_logger(__name__)


@dataclass
class MatcherRegistry:
    """
    Registry of similarity matcher classes keyed by plugin name.

    Args:
        scan_packages: Packages scanned (non-recursively) on first lookup
        required_method: Method a class must define to be registered
    """

    scan_packages: List[str]
    required_method: str = "calculate_similarity"
    _plugins: Dict[str, Type[Any]] = field(default_factory=dict, repr=False)
    _discovered: bool = field(default=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def get(self, name: str) -> Type[Any]:
        """Get a matcher class by name."""
        self._ensure_discovered()

        if name not in self._plugins:
            raise MatcherNotFoundError(
                f"Unknown similarity matcher: {name!r}. Available: {self.list_available()}"
            )
        return self._plugins[name]

    def list_available(self) -> List[str]:
        self._ensure_discovered()
        return sorted(self._plugins.keys())

    def register(self, matcher_class: Type[Any]) -> Type[Any]:
        """
        Manually register a matcher class. Usable as a class decorator.

        Raises:
            InvalidConfigurationError: If the class lacks the required attributes
                or another class already uses its name
        """
        if not hasattr(matcher_class, self.required_method):
            raise InvalidConfigurationError(
                f"Matcher {matcher_class.__name__} missing required method "
                f"{self.required_method!r}"
            )

        name = getattr(matcher_class, "plugin_name", None)
        if not name:
            raise InvalidConfigurationError(
                f"Matcher {matcher_class.__name__} missing required attribute 'plugin_name'"
            )

        existing = self._plugins.get(name)
        if existing is not None and existing is not matcher_class:
            raise InvalidConfigurationError(
                f"Duplicate similarity matcher: {name!r}. "
                f"Found in {existing.__module__} and {matcher_class.__module__}"
            )

        self._plugins[name] = matcher_class
        logger.debug(f"{FUZZY} Registered similarity matcher: {name!r}")
        return matcher_class

    def _ensure_discovered(self) -> None:
        if self._discovered:
            return

        with self._lock:
            if self._discovered:
                return

            for package_name in self.scan_packages:
                try:
                    package = importlib.import_module(package_name)
                except ImportError as e:
                    logger.debug(f"{FUZZY} Could not import {package_name}: {e}")
                    continue
                self._scan_package(package)

            self._discovered = True

    def _scan_package(self, package: Any) -> None:
        package_path = getattr(package, "__path__", None)
        if not package_path:
            return

        for _, modname, ispkg in pkgutil.iter_modules(package_path, prefix=f"{package.__name__}."):
            if ispkg:
                continue
            module = importlib.import_module(modname)
            self._scan_module(module)

    def _scan_module(self, module: Any) -> None:
        for name in dir(module):
            if name.startswith("_"):
                continue

            obj = getattr(module, name)
            if not isinstance(obj, type) or obj.__module__ != module.__name__:
                continue
            if not hasattr(obj, self.required_method) or not hasattr(obj, "plugin_name"):
                continue

            self.register(obj)


MATCHER_REGISTRY = MatcherRegistry(scan_packages=["concept_rag.retrieval.fuzzy.plugins"])


def get_matcher_class(name: str) -> Type[Any]:
    """Get a similarity matcher class by name."""
    return MATCHER_REGISTRY.get(name)


def create_matcher(name: str = "levenshtein", **kwargs: Any) -> SimilarityMatcher:
    """Instantiate a registered similarity matcher."""
    return get_matcher_class(name)(**kwargs)


def register_matcher(matcher_class: Type[Any]) -> Type[Any]:
    """Register a custom similarity matcher."""
    return MATCHER_REGISTRY.register(matcher_class)


def list_matchers() -> List[str]:
    """List available similarity matcher names."""
    return MATCHER_REGISTRY.list_available()


__all__ = [
    "MatcherRegistry",
    "MATCHER_REGISTRY",
    "get_matcher_class",
    "create_matcher",
    "register_matcher",
    "list_matchers",
]
