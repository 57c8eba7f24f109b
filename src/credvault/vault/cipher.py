# Symmetric encryption of stored provider access tokens.
#
# AES-256-GCM under one process-wide 32-byte key, with a fresh random
# 16-byte IV on every encrypt() call. Envelope wire format:
#   <32 hex chars IV>:<hex ciphertext+tag>
#
# Security Note:
#     Never log plaintext or envelope values.

import binascii
import logging
import os
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..core.errors import CryptoFailure

logger = logging.getLogger(__name__)

KEY_LENGTH = 32  # AES-256
IV_LENGTH = 16
ENVELOPE_DELIMITER = ":"


class SymmetricCipher:
    """
    Encrypts/decrypts secrets into hex envelopes.

    The IV is always generated internally; callers cannot supply one.
    """

    def __init__(self, key: bytes):
        if len(key) != KEY_LENGTH:
            raise ValueError(f"Cipher key must be exactly {KEY_LENGTH} bytes, got {len(key)}")
        self._aesgcm = AESGCM(key)

    @classmethod
    def from_secret(cls, secret: str) -> "SymmetricCipher":
        """
        Build a cipher from a configured secret string.

        The UTF-8 bytes are padded with '0' or truncated to exactly 32 bytes.
        No key derivation is applied.
        """
        raw = secret.encode("utf-8")
        key = raw.ljust(KEY_LENGTH, b"0")[:KEY_LENGTH]
        return cls(key)

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt plaintext under a new random IV.

        Returns:
            Envelope string "<iv hex>:<ciphertext hex>"

        Raises:
            CryptoFailure: plaintext cannot be encoded or encrypted
        """
        iv = os.urandom(IV_LENGTH)
        try:
            ciphertext = self._aesgcm.encrypt(iv, plaintext.encode("utf-8"), None)
        except (OverflowError, ValueError) as exc:
            raise CryptoFailure("Encryption failed") from exc
        return f"{iv.hex()}{ENVELOPE_DELIMITER}{ciphertext.hex()}"

    def decrypt(self, envelope: str) -> Optional[str]:
        """
        Decrypt an envelope produced by encrypt().

        Returns:
            Plaintext, or None when the envelope is corrupted, truncated,
            tampered with or encrypted under a different key.
        """
        try:
            iv_hex, ct_hex = envelope.split(ENVELOPE_DELIMITER)
            iv = bytes.fromhex(iv_hex)
            ciphertext = bytes.fromhex(ct_hex)
            if len(iv) != IV_LENGTH or not ciphertext:
                raise ValueError("bad envelope layout")
            plaintext = self._aesgcm.decrypt(iv, ciphertext, None)
            return plaintext.decode("utf-8")
        except (AttributeError, ValueError, binascii.Error, InvalidTag) as exc:
            logger.warning("Failed to decrypt envelope: %s", type(exc).__name__)
            return None
