# concept_rag/logging/logger.py
"""
Unified logging setup for concept_rag.

All modules use:
    from concept_rag.logging.logger import get_logger
    logger = get_logger(__name__)

Log namespaces follow module paths, so a host application can tune
`concept_rag.retrieval` and `concept_rag.index` independently.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

DEFAULT_FORMAT = "[%(levelname)s] %(name)s - %(message)s"


def configure_logging(
    level: int | str = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream: TextIO = sys.stdout,
) -> None:
    """
    Configure the root logging handler.

    Called once by the host application (or by create_search_service when
    `logging.configure` is set). Safe to call multiple times: a second
    handler is never installed.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Modules call this to get a logger.

    Do NOT configure logging here - configuration happens in configure_logging().
    """
    return logging.getLogger(name)
