"""Security helpers: key generation, streaming AES-CBC and RSA key wrapping for Cryptr.

This package provides:
- 128-bit secret key generation and raw key files
- Streaming AES-128-CBC/PKCS#7 encryption with an IV prefix
- DER/PEM RSA key loading and key-pair generation
- RSA PKCS#1 v1.5 wrapping of secret keys

There is no authentication tag anywhere in these formats.
"""

from .keygen import KEY_SIZE, generate_key, read_key_file, write_key_file
from .symmetric import (
    IV_SIZE,
    encrypt_stream,
    decrypt_stream,
    encrypt_bytes,
    decrypt_bytes,
    encrypt_file,
    decrypt_file,
)
from .keys import (
    load_public_key,
    load_private_key,
    load_public_key_file,
    load_private_key_file,
    generate_keypair,
    write_keypair,
)
from .asymmetric import (
    max_payload_size,
    wrap_key,
    unwrap_key,
    wrap_stream,
    unwrap_stream,
    wrap_key_file,
    unwrap_key_file,
)

__all__ = [
    "KEY_SIZE",
    "IV_SIZE",
    "generate_key",
    "read_key_file",
    "write_key_file",
    "encrypt_stream",
    "decrypt_stream",
    "encrypt_bytes",
    "decrypt_bytes",
    "encrypt_file",
    "decrypt_file",
    "load_public_key",
    "load_private_key",
    "load_public_key_file",
    "load_private_key_file",
    "generate_keypair",
    "write_keypair",
    "max_payload_size",
    "wrap_key",
    "unwrap_key",
    "wrap_stream",
    "unwrap_stream",
    "wrap_key_file",
    "unwrap_key_file",
]
