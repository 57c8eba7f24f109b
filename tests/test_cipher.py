"""Tests for SymmetricCipher envelopes.

Covers:
  - Round trip
  - Fresh IV per call
  - Envelope wire format
  - Tampered / truncated / foreign-key envelopes return None
  - Key sizing from a configured secret
"""

import re

import pytest

from credvault.vault.cipher import IV_LENGTH, KEY_LENGTH, SymmetricCipher

ENVELOPE_RE = re.compile(r"^[0-9a-f]{32}:[0-9a-f]+$")


class TestRoundTrip:

    @pytest.mark.parametrize("plaintext", [
        "APP_USR-1234567890123456-abcdef",
        "x",
        "",
        "ação çñ 日本",
    ])
    def test_decrypt_inverts_encrypt(self, cipher, plaintext):
        assert cipher.decrypt(cipher.encrypt(plaintext)) == plaintext

    def test_envelope_format(self, cipher):
        envelope = cipher.encrypt("TEST-token-value-long-enough")
        assert ENVELOPE_RE.match(envelope)
        iv_hex, _ = envelope.split(":")
        assert len(bytes.fromhex(iv_hex)) == IV_LENGTH

    def test_fresh_iv_every_call(self, cipher):
        envelopes = [cipher.encrypt("same plaintext") for _ in range(20)]
        ivs = {e.split(":")[0] for e in envelopes}
        assert len(ivs) == 20
        assert len(set(envelopes)) == 20


class TestDecryptFailures:

    def test_tampered_ciphertext_returns_none(self, cipher):
        iv_hex, ct_hex = cipher.encrypt("APP_USR-secret-token-000").split(":")
        flipped = ("0" if ct_hex[0] != "0" else "1") + ct_hex[1:]
        assert cipher.decrypt(f"{iv_hex}:{flipped}") is None

    def test_tampered_iv_returns_none(self, cipher):
        iv_hex, ct_hex = cipher.encrypt("APP_USR-secret-token-000").split(":")
        flipped = ("0" if iv_hex[0] != "0" else "1") + iv_hex[1:]
        assert cipher.decrypt(f"{flipped}:{ct_hex}") is None

    def test_truncated_ciphertext_returns_none(self, cipher):
        envelope = cipher.encrypt("APP_USR-secret-token-000")
        assert cipher.decrypt(envelope[:-6]) is None

    @pytest.mark.parametrize("envelope", [
        "",
        "no-delimiter",
        "zz:zz",
        "00ff:00ff",
        ":",
        "a:b:c",
        "00112233445566778899aabbccddeeff:",
    ])
    def test_malformed_envelope_returns_none(self, cipher, envelope):
        assert cipher.decrypt(envelope) is None

    def test_wrong_key_returns_none(self, cipher):
        envelope = cipher.encrypt("APP_USR-secret-token-000")
        other = SymmetricCipher.from_secret("a-completely-different-key")
        assert other.decrypt(envelope) is None


class TestKeys:

    def test_short_secret_padded(self):
        padded = SymmetricCipher.from_secret("short")
        explicit = SymmetricCipher(b"short".ljust(KEY_LENGTH, b"0"))
        assert explicit.decrypt(padded.encrypt("value")) == "value"

    def test_long_secret_truncated(self):
        secret = "k" * 40
        truncated = SymmetricCipher.from_secret(secret)
        explicit = SymmetricCipher(b"k" * KEY_LENGTH)
        assert explicit.decrypt(truncated.encrypt("value")) == "value"

    def test_wrong_key_size_rejected(self):
        with pytest.raises(ValueError):
            SymmetricCipher(b"too short")
