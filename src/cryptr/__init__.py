"""Cryptr: local envelope encryption for files and secret keys."""

__version__ = "0.1.0"
