"""Streaming AES-128-CBC file encryption with a random IV prefix.

Encrypted file layout:
- 16 bytes: IV (fresh per encryption)
- N bytes: AES-128-CBC ciphertext of the PKCS#7 padded plaintext (N % 16 == 0, N >= 16)

There is no MAC or tag. A flipped bit is only noticed when it breaks the
padding of the final block, so this format gives confidentiality only; pair it
with a signature or an authenticated channel when integrity matters.
"""
from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import BinaryIO, Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from cryptr.core.exceptions import EntropySourceError, PaddingError
from cryptr.core.fileio import CHUNK_SIZE, atomic_output, open_input
from .keygen import check_key, read_key_file


logger = logging.getLogger(__name__)

IV_SIZE = 16
BLOCK_SIZE_BITS = 128

# single message for every decryption failure so callers can't tell padding from key errors
_DECRYPT_FAILED = "decryption failed"


def _new_iv() -> bytes:
    try:
        return os.urandom(IV_SIZE)
    except NotImplementedError as e:
        raise EntropySourceError("no secure random source available") from e


def _check_chunk_size(chunk_size: int) -> None:
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")


def _read_exact(inf: BinaryIO, size: int) -> bytes:
    # short reads are legal on pipes and sockets
    buf = bytearray()
    while len(buf) < size:
        part = inf.read(size - len(buf))
        if not part:
            break
        buf += part
    return bytes(buf)


def encrypt_stream(
    inf: BinaryIO, outf: BinaryIO, key: bytes, chunk_size: int = CHUNK_SIZE
) -> bytes:
    """
    Encrypt everything readable from ``inf`` into ``outf``.

    Writes the IV first, then one transformed block run per ``chunk_size``
    read, then the final padded block. Only ``chunk_size`` bytes of plaintext
    are held at a time. Returns the IV that was used.
    """
    check_key(key)
    _check_chunk_size(chunk_size)

    iv = _new_iv()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()

    outf.write(iv)
    total = 0
    while True:
        chunk = inf.read(chunk_size)
        if not chunk:
            break
        total += len(chunk)
        outf.write(encryptor.update(padder.update(chunk)))
    outf.write(encryptor.update(padder.finalize()) + encryptor.finalize())

    logger.debug("encrypted %d plaintext bytes", total)
    return iv


def decrypt_stream(
    inf: BinaryIO, outf: BinaryIO, key: bytes, chunk_size: int = CHUNK_SIZE
) -> None:
    """
    Decrypt an ``IV || ciphertext`` stream from ``inf`` into ``outf``.

    The unpadder keeps the last block back until the end of input, so every
    byte written before a failure is real plaintext, but the output as a whole
    must be discarded if :class:`PaddingError` is raised.
    """
    check_key(key)
    _check_chunk_size(chunk_size)

    iv = _read_exact(inf, IV_SIZE)
    if len(iv) != IV_SIZE:
        raise PaddingError(_DECRYPT_FAILED)

    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
    try:
        while True:
            chunk = inf.read(chunk_size)
            if not chunk:
                break
            outf.write(unpadder.update(decryptor.update(chunk)))
        outf.write(unpadder.update(decryptor.finalize()) + unpadder.finalize())
    except ValueError:
        # bad padding, ragged length or empty body: all reported the same way
        raise PaddingError(_DECRYPT_FAILED) from None


def encrypt_bytes(data: bytes, key: bytes) -> bytes:
    """Return ``IV || ciphertext`` for an in-memory plaintext."""
    out = io.BytesIO()
    encrypt_stream(io.BytesIO(data), out, key)
    return out.getvalue()


def decrypt_bytes(blob: bytes, key: bytes) -> bytes:
    out = io.BytesIO()
    decrypt_stream(io.BytesIO(blob), out, key)
    return out.getvalue()


def encrypt_file(
    in_path: Union[str, Path],
    key_path: Union[str, Path],
    out_path: Union[str, Path],
    chunk_size: int = CHUNK_SIZE,
) -> None:
    """Encrypt ``in_path`` with the raw key stored at ``key_path`` into ``out_path``."""
    key = read_key_file(key_path)
    with open_input(in_path) as inf, atomic_output(out_path) as outf:
        encrypt_stream(inf, outf, key, chunk_size=chunk_size)
    logger.debug("encrypted %s -> %s", in_path, out_path)


def decrypt_file(
    in_path: Union[str, Path],
    key_path: Union[str, Path],
    out_path: Union[str, Path],
    chunk_size: int = CHUNK_SIZE,
) -> None:
    """Decrypt ``in_path`` (IV prefixed) with the key at ``key_path`` into ``out_path``."""
    key = read_key_file(key_path)
    with open_input(in_path) as inf, atomic_output(out_path) as outf:
        decrypt_stream(inf, outf, key, chunk_size=chunk_size)
    logger.debug("decrypted %s -> %s", in_path, out_path)
