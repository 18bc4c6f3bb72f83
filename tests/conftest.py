"""Shared fixtures: RSA key pairs are slow to generate, so build them once per session."""

import pytest

from cryptr.security.keys import generate_keypair


@pytest.fixture(scope="session")
def rsa_keypair():
    """(private_der, public_der) for a 2048-bit RSA key."""
    return generate_keypair(2048)


@pytest.fixture(scope="session")
def other_rsa_keypair():
    """A second, unrelated 2048-bit key pair."""
    return generate_keypair(2048)


@pytest.fixture
def rsa_key_files(tmp_path, rsa_keypair):
    """Writes the session key pair to priv.der / pub.der and returns both paths."""
    priv_der, pub_der = rsa_keypair
    priv_path = tmp_path / "priv.der"
    pub_path = tmp_path / "pub.der"
    priv_path.write_bytes(priv_der)
    pub_path.write_bytes(pub_der)
    return priv_path, pub_path
