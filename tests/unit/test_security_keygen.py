"""Unit tests for secret key generation and raw key files."""

from unittest.mock import patch

import pytest

from cryptr.core.exceptions import EntropySourceError, FileAccessError, InvalidKeyLengthError
from cryptr.security import keygen
from cryptr.security.keygen import KEY_SIZE, generate_key, read_key_file, write_key_file


def test_generate_key_length():
    key = generate_key()
    assert isinstance(key, bytes)
    assert len(key) == KEY_SIZE == 16


def test_generate_key_is_random():
    """Two fresh keys must never collide in practice."""
    keys = {generate_key() for _ in range(100)}
    assert len(keys) == 100


def test_generate_key_without_entropy_source():
    with patch.object(keygen.os, "urandom", side_effect=NotImplementedError):
        with pytest.raises(EntropySourceError):
            generate_key()


def test_write_key_file_is_raw_bytes(tmp_path):
    """The key file holds exactly the 16 key bytes, no header or encoding."""
    path = tmp_path / "key.bin"
    key = write_key_file(path)
    assert path.read_bytes() == key
    assert path.stat().st_size == 16


def test_write_key_file_with_given_key(tmp_path):
    path = tmp_path / "key.bin"
    write_key_file(path, b"\x01" * 16)
    assert read_key_file(path) == b"\x01" * 16


def test_write_key_file_rejects_bad_key(tmp_path):
    path = tmp_path / "key.bin"
    with pytest.raises(InvalidKeyLengthError):
        write_key_file(path, b"short")
    assert not path.exists()


def test_write_key_file_unwritable(tmp_path):
    with pytest.raises(FileAccessError):
        write_key_file(tmp_path / "missing-dir" / "key.bin")


@pytest.mark.parametrize("size", [0, 15, 17, 32])
def test_read_key_file_wrong_length(tmp_path, size):
    path = tmp_path / "key.bin"
    path.write_bytes(b"k" * size)
    with pytest.raises(InvalidKeyLengthError, match="exactly 16 bytes"):
        read_key_file(path)


def test_read_key_file_missing(tmp_path):
    with pytest.raises(FileAccessError):
        read_key_file(tmp_path / "missing.bin")
