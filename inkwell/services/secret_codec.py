"""Reversible encryption for the stored SMTP password.

Ciphertext layout (hex encoded): ``iv (16 bytes) || AES-256-CBC(PKCS7(plaintext))``.
A fresh IV is drawn for every call, so encrypting the same password twice never
yields the same ciphertext.
"""

import os
from functools import lru_cache

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from inkwell.config import get_settings

KEY_SIZE = 32
IV_SIZE = 16
_BLOCK_BITS = algorithms.AES.block_size


class DecodingError(Exception):
    """Raised when a value cannot be decrypted by this codec."""


class SecretCodec:
    """AES-256-CBC codec bound to a single key."""

    def __init__(self, key: bytes) -> None:
        if len(key) != KEY_SIZE:
            raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(key)}.")
        self._key = key

    def encrypt(self, plaintext: str) -> str:
        iv = os.urandom(IV_SIZE)
        padder = padding.PKCS7(_BLOCK_BITS).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

        encryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return (iv + ciphertext).hex()

    def decrypt(self, encrypted: str) -> str:
        """Return the plaintext for *encrypted*.

        Raises:
            DecodingError: if *encrypted* is not hex, has the wrong length, or
                does not unpad/decode cleanly under this key.
        """
        try:
            raw = bytes.fromhex(encrypted)
        except ValueError as exc:
            raise DecodingError("Ciphertext is not valid hex.") from exc

        block_bytes = _BLOCK_BITS // 8
        if len(raw) < IV_SIZE + block_bytes or len(raw) % block_bytes:
            raise DecodingError("Ciphertext has an invalid length.")

        iv, ciphertext = raw[:IV_SIZE], raw[IV_SIZE:]
        decryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(_BLOCK_BITS).unpadder()
        try:
            data = unpadder.update(padded) + unpadder.finalize()
            return data.decode("utf-8")
        except ValueError as exc:
            # UnicodeDecodeError is a ValueError too
            raise DecodingError("Ciphertext could not be decrypted.") from exc


@lru_cache
def get_codec() -> SecretCodec:
    """Codec for the process-wide key from ``ENCRYPTION_KEY``."""
    return SecretCodec(get_settings().encryption_key_bytes)


def encrypt_secret(plaintext: str) -> str:
    return get_codec().encrypt(plaintext)


def decrypt_secret(encrypted: str) -> str:
    return get_codec().decrypt(encrypted)
