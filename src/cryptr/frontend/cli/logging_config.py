"""Logging setup for the cryptr command line."""

import logging
import sys
from typing import Union


def resolve_level(level: Union[int, str]) -> int:
    # Accept either a logging constant, its digits ("10") or a name such as "debug".
    if isinstance(level, int):
        return level
    if level.strip().isdigit():
        return int(level)
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"unknown log level: {level!r}")
    return value


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    # Progress lines go to stdout like the original tool's messages.
    logging.basicConfig(
        level=resolve_level(level),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )
