"""AES-128-CBC payload cipher matching the smart-bin firmware.

Every call draws a fresh random IV and prefixes it to the ciphertext.
Never log keys or plaintext.
"""

from __future__ import annotations

import secrets
from typing import Any, Callable

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from config.settings import AES_KEY_BYTES
from qr_fixtures.common.exceptions import EncryptionError
from qr_fixtures.devices.codec import IV_BYTES, canonical_json, frame, unframe
from qr_fixtures.devices.ports import PayloadCipherPort


class AesCbcCipherAdapter(PayloadCipherPort):
    """Encrypt JSON records with a pre-shared AES-128 key in CBC mode."""

    def __init__(
        self,
        key: str | bytes,
        iv_source: Callable[[int], bytes] = secrets.token_bytes,
    ):
        if isinstance(key, str):
            key = key.encode("utf-8")
        if len(key) != AES_KEY_BYTES:
            raise EncryptionError(f"AES key must be {AES_KEY_BYTES} bytes, got {len(key)}")
        try:
            self._algorithm = algorithms.AES(key)
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise EncryptionError(f"AES primitive unavailable: {exc}") from exc
        self._iv_source = iv_source

    def encode(self, record: Any) -> str:
        plaintext = canonical_json(record).encode("utf-8")
        iv = self._iv_source(IV_BYTES)
        return frame(iv, self.encrypt_bytes(plaintext, iv))

    def decode(self, encoded: str) -> str:
        iv, ciphertext = unframe(encoded)
        try:
            decryptor = Cipher(self._algorithm, modes.CBC(iv)).decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            plaintext = unpadder.update(padded) + unpadder.finalize()
            return plaintext.decode("utf-8")
        except (ValueError, UnicodeDecodeError) as exc:
            raise EncryptionError("Failed to decrypt payload") from exc

    def encrypt_bytes(self, plaintext: bytes, iv: bytes) -> bytes:
        """Pad with PKCS#7 and encrypt ``plaintext`` under ``iv``."""
        if not isinstance(iv, bytes) or len(iv) != IV_BYTES:
            raise EncryptionError(f"IV must be {IV_BYTES} bytes")
        try:
            padder = padding.PKCS7(algorithms.AES.block_size).padder()
            padded = padder.update(plaintext) + padder.finalize()
            encryptor = Cipher(self._algorithm, modes.CBC(iv)).encryptor()
            return encryptor.update(padded) + encryptor.finalize()
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise EncryptionError(f"AES-CBC encryption failed: {exc}") from exc


__all__ = ["AesCbcCipherAdapter"]
