"""
RSA key material for key wrapping.

Public keys are SubjectPublicKeyInfo, private keys unencrypted PKCS#8, both
DER encoded on disk (``*.der``). PEM armoured copies of the same structures
are accepted on load as well.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from cryptr.core.exceptions import InvalidKeyLengthError, KeyParseError
from cryptr.core.fileio import atomic_output, read_bytes


logger = logging.getLogger(__name__)

PEM_PREFIX = b"-----BEGIN"
DEFAULT_KEY_BITS = 2048
MIN_KEY_BITS = 1024
PUBLIC_EXPONENT = 65537

_PARSE_ERRORS = (ValueError, TypeError, UnsupportedAlgorithm)


def _is_pem(data: bytes) -> bool:
    return data.lstrip().startswith(PEM_PREFIX)


def load_public_key(data: bytes) -> rsa.RSAPublicKey:
    """Parse an RSA public key (SubjectPublicKeyInfo)."""
    try:
        if _is_pem(data):
            key = serialization.load_pem_public_key(data)
        else:
            key = serialization.load_der_public_key(data)
    except _PARSE_ERRORS as e:
        raise KeyParseError(f"invalid public key: {e}") from e

    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyParseError(f"expected an RSA public key, got {type(key).__name__}")
    return key


def load_private_key(data: bytes) -> rsa.RSAPrivateKey:
    """Parse an unencrypted RSA private key (PKCS#8)."""
    try:
        if _is_pem(data):
            key = serialization.load_pem_private_key(data, password=None)
        else:
            key = serialization.load_der_private_key(data, password=None)
    except _PARSE_ERRORS as e:
        raise KeyParseError(f"invalid private key: {e}") from e

    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyParseError(f"expected an RSA private key, got {type(key).__name__}")
    return key


def load_public_key_file(path: Union[str, Path]) -> rsa.RSAPublicKey:
    return load_public_key(read_bytes(path))


def load_private_key_file(path: Union[str, Path]) -> rsa.RSAPrivateKey:
    return load_private_key(read_bytes(path))


def generate_keypair(key_size: int = DEFAULT_KEY_BITS) -> Tuple[bytes, bytes]:
    """Generate an RSA key pair.

    Returns:
        (private_der, public_der): PKCS#8 and SubjectPublicKeyInfo DER bytes.
    """
    if key_size < MIN_KEY_BITS:
        raise InvalidKeyLengthError(
            f"RSA key size must be at least {MIN_KEY_BITS} bits, got {key_size}"
        )

    private_key = rsa.generate_private_key(
        public_exponent=PUBLIC_EXPONENT, key_size=key_size
    )
    priv_der = private_key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    pub_der = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return priv_der, pub_der


def write_keypair(
    private_path: Union[str, Path],
    public_path: Union[str, Path],
    key_size: int = DEFAULT_KEY_BITS,
) -> None:
    """Generate a key pair and write both halves as DER files.

    Both outputs share one scope: if either file cannot be created or
    written, neither is committed. The public half is moved into place first.
    """
    priv_der, pub_der = generate_keypair(key_size)
    with atomic_output(private_path) as priv_out, atomic_output(public_path) as pub_out:
        priv_out.write(priv_der)
        pub_out.write(pub_der)
    logger.debug("%d-bit RSA key pair written to %s / %s", key_size, private_path, public_path)
