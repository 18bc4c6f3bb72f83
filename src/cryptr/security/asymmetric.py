"""RSA key wrapping for secret keys.

A wrapped key is one RSA block: PKCS#1 v1.5 encryption of the raw key bytes,
exactly as long as the modulus (256 bytes for RSA-2048).

Note: OpenSSL 3.2+ applies implicit rejection to PKCS#1 v1.5 decryption, so a
wrong private key can yield random bytes instead of an error. Pass
``expected_size`` to :func:`unwrap_key_file` when the result must be an AES key.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

from cryptography.hazmat.primitives.asymmetric import padding, rsa

from cryptr.core.exceptions import InvalidKeyLengthError, UnwrapError
from cryptr.core.fileio import CHUNK_SIZE, atomic_output, open_input
from .keys import load_private_key_file, load_public_key_file


logger = logging.getLogger(__name__)

PKCS1_V15_OVERHEAD = 11


def modulus_size(key: Union[rsa.RSAPublicKey, rsa.RSAPrivateKey]) -> int:
    return (key.key_size + 7) // 8


def max_payload_size(key: Union[rsa.RSAPublicKey, rsa.RSAPrivateKey]) -> int:
    """Largest plaintext one PKCS#1 v1.5 block can carry for ``key``."""
    return modulus_size(key) - PKCS1_V15_OVERHEAD


def wrap_key(key_material: bytes, public_key: rsa.RSAPublicKey) -> bytes:
    limit = max_payload_size(public_key)
    if len(key_material) > limit:
        raise InvalidKeyLengthError(
            f"payload of {len(key_material)} bytes exceeds the {limit} byte "
            f"limit of a {public_key.key_size}-bit RSA key"
        )
    return public_key.encrypt(key_material, padding.PKCS1v15())


def unwrap_key(blob: bytes, private_key: rsa.RSAPrivateKey) -> bytes:
    if len(blob) != modulus_size(private_key):
        raise UnwrapError(
            f"wrapped key must be {modulus_size(private_key)} bytes, got {len(blob)}"
        )
    try:
        return private_key.decrypt(blob, padding.PKCS1v15())
    except ValueError:
        raise UnwrapError("key unwrap failed") from None


def _collect(inf: BinaryIO, limit: int, chunk_size: int) -> Optional[bytes]:
    # Read ``inf`` in chunk_size pieces; None as soon as more than ``limit`` bytes arrive.
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    buf = bytearray()
    while True:
        chunk = inf.read(chunk_size)
        if not chunk:
            return bytes(buf)
        buf += chunk
        if len(buf) > limit:
            return None


def wrap_stream(
    inf: BinaryIO,
    outf: BinaryIO,
    public_key: rsa.RSAPublicKey,
    chunk_size: int = CHUNK_SIZE,
) -> int:
    """Wrap the bytes readable from ``inf``; returns the number of bytes written."""
    data = _collect(inf, max_payload_size(public_key), chunk_size)
    if data is None:
        raise InvalidKeyLengthError(
            f"input exceeds the {max_payload_size(public_key)} byte limit of a "
            f"{public_key.key_size}-bit RSA key"
        )
    blob = wrap_key(data, public_key)
    outf.write(blob)
    return len(blob)


def unwrap_stream(
    inf: BinaryIO,
    outf: BinaryIO,
    private_key: rsa.RSAPrivateKey,
    chunk_size: int = CHUNK_SIZE,
) -> bytes:
    """Unwrap one RSA block read from ``inf``; returns the recovered bytes."""
    blob = _collect(inf, modulus_size(private_key), chunk_size)
    if blob is None:
        raise UnwrapError(f"wrapped key longer than {modulus_size(private_key)} bytes")
    key_material = unwrap_key(blob, private_key)
    outf.write(key_material)
    return key_material


def wrap_key_file(
    key_path: Union[str, Path],
    public_key_path: Union[str, Path],
    out_path: Union[str, Path],
    chunk_size: int = CHUNK_SIZE,
) -> None:
    """Encrypt the secret key file at ``key_path`` with a DER public key."""
    public_key = load_public_key_file(public_key_path)
    with open_input(key_path) as inf, atomic_output(out_path) as outf:
        wrap_stream(inf, outf, public_key, chunk_size=chunk_size)
    logger.debug("wrapped %s under %s -> %s", key_path, public_key_path, out_path)


def unwrap_key_file(
    blob_path: Union[str, Path],
    private_key_path: Union[str, Path],
    out_path: Union[str, Path],
    chunk_size: int = CHUNK_SIZE,
    expected_size: Optional[int] = None,
) -> None:
    """Decrypt a wrapped key file with a DER private key and write the raw key."""
    private_key = load_private_key_file(private_key_path)
    with open_input(blob_path) as inf, atomic_output(out_path) as outf:
        key_material = unwrap_stream(inf, outf, private_key, chunk_size=chunk_size)
        if expected_size is not None and len(key_material) != expected_size:
            raise UnwrapError("key unwrap failed")
    logger.debug("unwrapped %s with %s -> %s", blob_path, private_key_path, out_path)
