"""Command line front end for Cryptr.

Start here with `python -m cryptr.frontend.cli.app` or the installed `cryptr` script.

Usage:
    cryptr generatekey <key output file>
    cryptr encryptfile <file to encrypt> <secret key file> <encrypted output file>
    cryptr decryptfile <file to decrypt> <secret key file> <decrypted output file>
    cryptr encryptkey <key to encrypt> <public key to encrypt with> <encrypted key file>
    cryptr decryptkey <key to decrypt> <private key to decrypt with> <decrypted key file>
    cryptr genkeypair <private key output file> <public key output file> [--bits N]
"""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from cryptr.core.exceptions import CryptrError
from cryptr.security.asymmetric import unwrap_key_file, wrap_key_file
from cryptr.security.keygen import KEY_SIZE, write_key_file
from cryptr.security.keys import DEFAULT_KEY_BITS, write_keypair
from cryptr.security.symmetric import decrypt_file, encrypt_file

from .context import CliConfig, build_config
from .logging_config import configure_logging


logger = logging.getLogger("cryptr")

EXIT_OK = 0
EXIT_FAILURE = 1


# === Command handlers ===


def cmd_generate_key(args: argparse.Namespace, config: CliConfig) -> None:
    logger.info("Generating secret key and writing it to %s", args.key_file)
    write_key_file(args.key_file)


def cmd_encrypt_file(args: argparse.Namespace, config: CliConfig) -> None:
    logger.info("Encrypting %s with key %s to %s", args.input, args.key_file, args.output)
    encrypt_file(args.input, args.key_file, args.output, chunk_size=config.chunk_size)


def cmd_decrypt_file(args: argparse.Namespace, config: CliConfig) -> None:
    logger.info("Decrypting %s with key %s to %s", args.input, args.key_file, args.output)
    decrypt_file(args.input, args.key_file, args.output, chunk_size=config.chunk_size)


def cmd_encrypt_key(args: argparse.Namespace, config: CliConfig) -> None:
    logger.info(
        "Encrypting key file %s with public key file %s to %s",
        args.key_file,
        args.public_key,
        args.output,
    )
    wrap_key_file(args.key_file, args.public_key, args.output, chunk_size=config.chunk_size)


def cmd_decrypt_key(args: argparse.Namespace, config: CliConfig) -> None:
    logger.info(
        "Decrypting key file %s with private key file %s to %s",
        args.wrapped_key,
        args.private_key,
        args.output,
    )
    unwrap_key_file(
        args.wrapped_key,
        args.private_key,
        args.output,
        chunk_size=config.chunk_size,
        expected_size=KEY_SIZE,
    )


def cmd_generate_keypair(args: argparse.Namespace, config: CliConfig) -> None:
    logger.info(
        "Generating %d-bit RSA key pair into %s and %s",
        args.bits,
        args.private_key,
        args.public_key,
    )
    write_keypair(args.private_key, args.public_key, key_size=args.bits)


# === Argument parsing ===


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cryptr",
        description="Encrypt files with secret keys and secret keys with RSA keys.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging (overrides CRYPTR_LOG_LEVEL)",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="Streaming buffer size in bytes (default: CRYPTR_CHUNK_SIZE or 1024)",
    )
    sub = parser.add_subparsers(dest="command", metavar="command")
    sub.required = True

    p = sub.add_parser("generatekey", help="Generate a 128-bit secret key")
    p.add_argument("key_file", help="File to store the secret key")
    p.set_defaults(handler=cmd_generate_key)

    p = sub.add_parser("encryptfile", help="Encrypt a file with a secret key")
    p.add_argument("input", help="File to encrypt")
    p.add_argument("key_file", help="Secret key file")
    p.add_argument("output", help="Encrypted output file (IV + ciphertext)")
    p.set_defaults(handler=cmd_encrypt_file)

    p = sub.add_parser("decryptfile", help="Decrypt a file with a secret key")
    p.add_argument("input", help="File to decrypt")
    p.add_argument("key_file", help="Secret key file")
    p.add_argument("output", help="Decrypted output file")
    p.set_defaults(handler=cmd_decrypt_file)

    p = sub.add_parser("encryptkey", help="Encrypt a secret key with a public key (*.der)")
    p.add_argument("key_file", help="Secret key file to encrypt")
    p.add_argument("public_key", help="Public key to encrypt with")
    p.add_argument("output", help="Encrypted key file")
    p.set_defaults(handler=cmd_encrypt_key)

    p = sub.add_parser("decryptkey", help="Decrypt a secret key with a private key (*.der)")
    p.add_argument("wrapped_key", help="Encrypted key file")
    p.add_argument("private_key", help="Private key to decrypt with")
    p.add_argument("output", help="Decrypted secret key file")
    p.set_defaults(handler=cmd_decrypt_key)

    p = sub.add_parser("genkeypair", help="Generate an RSA key pair as DER files")
    p.add_argument("private_key", help="PKCS#8 private key output file")
    p.add_argument("public_key", help="SubjectPublicKeyInfo public key output file")
    p.add_argument(
        "--bits",
        type=int,
        default=DEFAULT_KEY_BITS,
        help=f"RSA modulus size (default: {DEFAULT_KEY_BITS})",
    )
    p.set_defaults(handler=cmd_generate_keypair)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one cryptr command and return the process exit code."""
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(
            log_level=logging.DEBUG if args.verbose else None,
            chunk_size=args.chunk_size,
        )
    except ValueError as e:
        parser.error(str(e))

    configure_logging(config.log_level)

    try:
        args.handler(args, config)
    except CryptrError as e:
        logger.error("%s failed: %s", args.command, e)
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
