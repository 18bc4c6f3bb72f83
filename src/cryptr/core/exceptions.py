"""
Exceptions for Cryptr
Every failure surfaced by the security modules derives from CryptrError
"""


class CryptrError(Exception):
    # general container for errors
    pass


class FileAccessError(CryptrError):
    # raised when a key, input or output path cannot be read or written
    pass


class EntropySourceError(CryptrError):
    # raised when the OS has no secure random source
    pass


class InvalidKeyLengthError(CryptrError):
    # raised for a symmetric key that is not 16 bytes, or a payload too large for the RSA key
    pass


class KeyParseError(CryptrError):
    # raised when public / private key bytes cannot be parsed as RSA keys
    pass


class DecryptionError(CryptrError):
    # raised when decryption fails (wrong key, corrupted or truncated input)
    pass


class PaddingError(DecryptionError):
    # raised by symmetric decryption; the message never says why
    pass


class UnwrapError(DecryptionError):
    # raised when an RSA wrapped key cannot be recovered
    pass
