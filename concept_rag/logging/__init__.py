# concept_rag/logging/__init__.py
"""Logging helpers shared by every concept_rag module."""

from .logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
