"""Tests for CredentialVault.

Covers:
  - Status scenarios (configured, not configured, unknown user)
  - Write validation happens before any crypto or store work
  - Clear semantics
  - Corrupted envelopes degrade to an empty preview
  - Store failures become generic results
  - Injectable public key policy
"""

from unittest.mock import MagicMock

import pytest

from credvault.core.errors import ErrorKind, StoreFailure
from credvault.vault import (
    CredentialState,
    CredentialVault,
    PublicKeyPolicy,
    mask_preview,
)

ACCESS_TOKEN = "AAAAAAAAAAAAAAAAAAAAAA"  # 22 chars


class TestStatus:

    def test_set_then_status(self, vault, user):
        """Configured credentials report previews, never plaintext."""
        result = vault.set_credentials(user.id, ACCESS_TOKEN, "TEST-1234")
        assert result.success is True

        status = vault.get_status(user.id)
        assert status.success is True
        assert status.has_credentials is True
        assert status.state == CredentialState.CONFIGURED
        assert status.public_key_preview == "...1234"
        assert status.access_token_preview == "...AAAA"
        assert ACCESS_TOKEN not in repr(status)

    def test_fresh_user_not_configured(self, vault, user):
        status = vault.get_status(user.id)
        assert status.success is True
        assert status.has_credentials is False
        assert status.state == CredentialState.NOT_CONFIGURED
        assert status.access_token_preview == ""
        assert status.public_key_preview == ""

    def test_unknown_user_not_found(self, vault):
        status = vault.get_status("no-such-user")
        assert status.success is False
        assert status.error == ErrorKind.NOT_FOUND
        assert status.message == "User not found"

    def test_corrupted_envelope_omits_preview(self, vault, store, user):
        store.update_credentials(user.id, "deadbeef:cafebabe", "APP_USR-98765")
        status = vault.get_status(user.id)
        assert status.success is True
        assert status.has_credentials is True
        assert status.access_token_preview == ""
        assert status.public_key_preview == "...8765"

    def test_only_public_key_is_not_configured(self, vault, store, user):
        with store._connect() as conn:
            conn.execute("UPDATE users SET public_key = 'TEST-5555' WHERE id = ?", (user.id,))
        status = vault.get_status(user.id)
        assert status.has_credentials is False
        assert status.public_key_preview == "...5555"

    def test_short_public_key_preview_is_raw(self, vault, store, user):
        store.update_credentials(user.id, vault.cipher.encrypt(ACCESS_TOKEN), "TEST")
        assert vault.get_status(user.id).public_key_preview == "TEST"

    def test_stored_value_is_ciphertext(self, vault, store, user):
        vault.set_credentials(user.id, ACCESS_TOKEN, "TEST-1234")
        stored = store.get_credentials(user.id)
        assert stored.access_token != ACCESS_TOKEN
        assert ACCESS_TOKEN not in stored.access_token
        assert stored.public_key == "TEST-1234"


class TestSetCredentials:

    def test_short_access_token_rejected_without_mutation(self, store, user):
        cipher = MagicMock()
        vault = CredentialVault(store, cipher)

        result = vault.set_credentials(user.id, "A" * 10, "TEST-1234")

        assert result.success is False
        assert result.error == ErrorKind.VALIDATION
        assert result.message == "Invalid Access Token"
        cipher.encrypt.assert_not_called()
        assert store.get_credentials(user.id).access_token is None
        assert store.get_credentials(user.id).public_key is None

    def test_bad_prefix_rejected(self, vault, store, user):
        result = vault.set_credentials(user.id, ACCESS_TOKEN, "FOO-123")
        assert result.success is False
        assert result.error == ErrorKind.VALIDATION
        assert "APP_USR" in result.message and "TEST" in result.message
        assert store.get_credentials(user.id).public_key is None

    @pytest.mark.parametrize("access_token,public_key", [
        ("", "TEST-1234"),
        (ACCESS_TOKEN, ""),
        (None, "TEST-1234"),
        (ACCESS_TOKEN, None),
    ])
    def test_missing_fields_rejected(self, vault, user, access_token, public_key):
        result = vault.set_credentials(user.id, access_token, public_key)
        assert result.error == ErrorKind.VALIDATION
        assert result.message == "Access Token and Public Key are required"

    def test_exactly_min_length_accepted(self, vault, user):
        assert vault.set_credentials(user.id, "B" * 20, "APP_USR-1").success is True

    def test_unknown_user_not_found(self, vault):
        result = vault.set_credentials("ghost", ACCESS_TOKEN, "TEST-1234")
        assert result.success is False
        assert result.error == ErrorKind.NOT_FOUND

    def test_overwrite_uses_fresh_envelope(self, vault, store, user):
        vault.set_credentials(user.id, ACCESS_TOKEN, "TEST-1234")
        first = store.get_credentials(user.id).access_token
        vault.set_credentials(user.id, ACCESS_TOKEN, "TEST-1234")
        second = store.get_credentials(user.id).access_token
        assert first != second
        assert first.split(":")[0] != second.split(":")[0]

    def test_updates_timestamp(self, vault, store, user):
        assert store.get_by_id(user.id).updated_at is None
        vault.set_credentials(user.id, ACCESS_TOKEN, "TEST-1234")
        assert store.get_by_id(user.id).updated_at is not None


class TestClearCredentials:

    def test_clear_then_status(self, vault, user):
        vault.set_credentials(user.id, ACCESS_TOKEN, "TEST-1234")

        result = vault.clear_credentials(user.id)
        assert result.success is True

        status = vault.get_status(user.id)
        assert status.has_credentials is False
        assert status.access_token_preview == ""
        assert status.public_key_preview == ""

    def test_clear_unknown_user(self, vault):
        result = vault.clear_credentials("ghost")
        assert result.success is False
        assert result.error == ErrorKind.NOT_FOUND


class TestStoreFailures:

    @pytest.fixture
    def broken_vault(self, cipher):
        store = MagicMock()
        store.get_credentials.side_effect = StoreFailure("disk I/O error near users.access_token")
        store.update_credentials.side_effect = StoreFailure("disk I/O error")
        store.clear_credentials.side_effect = StoreFailure("disk I/O error")
        return CredentialVault(store, cipher)

    def test_status_generic_message(self, broken_vault):
        status = broken_vault.get_status("u1")
        assert status.success is False
        assert status.error == ErrorKind.STORE
        assert "disk" not in status.message
        assert "users" not in status.message

    def test_set_generic_message(self, broken_vault):
        result = broken_vault.set_credentials("u1", ACCESS_TOKEN, "TEST-1234")
        assert result.error == ErrorKind.STORE
        assert "disk" not in result.message

    def test_clear_generic_message(self, broken_vault):
        result = broken_vault.clear_credentials("u1")
        assert result.error == ErrorKind.STORE


class TestPolicy:

    def test_custom_prefixes(self, store, cipher, user):
        vault = CredentialVault(store, cipher, policy=PublicKeyPolicy(prefixes=("pk_live_",)))
        assert vault.set_credentials(user.id, ACCESS_TOKEN, "TEST-1234").success is False
        assert vault.set_credentials(user.id, ACCESS_TOKEN, "pk_live_abcd").success is True

    def test_default_prefixes(self):
        policy = PublicKeyPolicy()
        assert policy.accepts("APP_USR-abc")
        assert policy.accepts("TEST-abc")
        assert not policy.accepts("test-abc")


class TestMaskPreview:

    @pytest.mark.parametrize("value,expected", [
        (None, ""),
        ("", ""),
        ("abcd", ""),
        ("abcde", "...bcde"),
        (ACCESS_TOKEN, "...AAAA"),
    ])
    def test_mask(self, value, expected):
        assert mask_preview(value) == expected
