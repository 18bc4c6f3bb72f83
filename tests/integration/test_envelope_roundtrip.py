"""
End-to-end envelope encryption: content under a secret key, the secret key under RSA.
"""

import os

import pytest

from cryptr.core.exceptions import PaddingError
from cryptr.security import (
    decrypt_file,
    encrypt_file,
    read_key_file,
    unwrap_key_file,
    wrap_key_file,
    write_key_file,
)


def test_hello_world_scenario(tmp_path):
    key_path = tmp_path / "key.bin"
    plain = tmp_path / "plain.txt"
    enc = tmp_path / "enc.bin"
    out = tmp_path / "out.txt"

    write_key_file(key_path)
    assert key_path.stat().st_size == 16

    plain.write_bytes(b"hello world")
    encrypt_file(plain, key_path, enc)
    assert enc.stat().st_size == 16 + 16

    decrypt_file(enc, key_path, out)
    assert out.read_bytes() == b"hello world"


def test_key_wrap_scenario(tmp_path, rsa_key_files):
    priv_path, pub_path = rsa_key_files
    key_path = tmp_path / "key.bin"
    enc_key = tmp_path / "enc_key.bin"
    key2 = tmp_path / "key2.bin"

    write_key_file(key_path)
    wrap_key_file(key_path, pub_path, enc_key)
    assert enc_key.stat().st_size == 256

    unwrap_key_file(enc_key, priv_path, key2)
    assert key2.read_bytes() == key_path.read_bytes()


def test_recipient_decrypts_with_unwrapped_key(tmp_path, rsa_key_files):
    """Sender encrypts a file and wraps its key; recipient reverses both steps."""
    priv_path, pub_path = rsa_key_files
    sender = tmp_path / "sender"
    recipient = tmp_path / "recipient"
    sender.mkdir()
    recipient.mkdir()

    document = os.urandom(64 * 1024 + 3)
    (sender / "report.pdf").write_bytes(document)
    write_key_file(sender / "key.bin")
    encrypt_file(sender / "report.pdf", sender / "key.bin", sender / "report.enc")
    wrap_key_file(sender / "key.bin", pub_path, sender / "key.enc")

    # only the two encrypted artifacts travel
    for name in ("report.enc", "key.enc"):
        (recipient / name).write_bytes((sender / name).read_bytes())

    unwrap_key_file(recipient / "key.enc", priv_path, recipient / "key.bin", expected_size=16)
    assert read_key_file(recipient / "key.bin") == read_key_file(sender / "key.bin")
    decrypt_file(recipient / "report.enc", recipient / "key.bin", recipient / "report.pdf")
    assert (recipient / "report.pdf").read_bytes() == document


def test_truncated_encrypted_file_rejected(tmp_path):
    key_path = tmp_path / "key.bin"
    write_key_file(key_path)
    plain = tmp_path / "plain.txt"
    plain.write_bytes(b"x" * 100)
    enc = tmp_path / "enc.bin"
    encrypt_file(plain, key_path, enc)

    enc.write_bytes(enc.read_bytes()[:-5])
    with pytest.raises(PaddingError):
        decrypt_file(enc, key_path, tmp_path / "out.txt")
    assert not (tmp_path / "out.txt").exists()
