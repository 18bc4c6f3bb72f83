"""Small helper to build the runtime settings for the cryptr command line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional
import logging
import os

from cryptr.core.fileio import CHUNK_SIZE
from .logging_config import resolve_level


ENV_LOG_LEVEL = "CRYPTR_LOG_LEVEL"
ENV_CHUNK_SIZE = "CRYPTR_CHUNK_SIZE"


@dataclass
class CliConfig:
    """Settings the commands need; none of them reach the crypto formats."""

    log_level: int = logging.INFO
    chunk_size: int = CHUNK_SIZE


def _parse_chunk_size(raw: str | int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"chunk size must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"chunk size must be positive, got {value}")
    return value


def build_config(
    env: Optional[Mapping[str, str]] = None,
    log_level: Optional[str | int] = None,
    chunk_size: Optional[int] = None,
) -> CliConfig:
    """
    Build a CliConfig from environment variables and command line overrides.

    - ``CRYPTR_LOG_LEVEL``: level name (``DEBUG``, ``INFO``...), default INFO
    - ``CRYPTR_CHUNK_SIZE``: streaming buffer size in bytes, default 1024

    Explicit arguments win over the environment. Invalid values raise
    ``ValueError``.
    """
    if env is None:
        env = os.environ

    level = log_level if log_level is not None else env.get(ENV_LOG_LEVEL)
    size = chunk_size if chunk_size is not None else env.get(ENV_CHUNK_SIZE)

    config = CliConfig()
    if level is not None and level != "":
        config.log_level = resolve_level(level)
    if size is not None and size != "":
        config.chunk_size = _parse_chunk_size(size)
    return config
