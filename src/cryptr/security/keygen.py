import logging
import os
from pathlib import Path
from typing import Optional, Union

from cryptr.core.exceptions import EntropySourceError, InvalidKeyLengthError
from cryptr.core.fileio import read_bytes, write_bytes


logger = logging.getLogger(__name__)

KEY_SIZE = 16  # AES-128


def generate_key() -> bytes:
    """Return a fresh 128-bit AES key from the OS secure random source."""
    try:
        return os.urandom(KEY_SIZE)
    except NotImplementedError as e:
        raise EntropySourceError("no secure random source available") from e


def check_key(key: bytes) -> bytes:
    if len(key) != KEY_SIZE:
        raise InvalidKeyLengthError(
            f"AES key must be exactly {KEY_SIZE} bytes, got {len(key)}"
        )
    return key


def write_key_file(path: Union[str, Path], key: Optional[bytes] = None) -> bytes:
    """
    Write a raw secret key (no header, no encoding) to ``path``.

    A new key is generated unless one is passed in. Returns the key written.
    """
    if key is None:
        key = generate_key()
    check_key(key)
    write_bytes(path, key)
    logger.debug("secret key written to %s", path)
    return key


def read_key_file(path: Union[str, Path]) -> bytes:
    """Load a raw secret key file and validate its length."""
    return check_key(read_bytes(path))
