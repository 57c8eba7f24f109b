"""
Shared pytest fixtures for the credvault test suite.

The autouse fixture isolates the audit logger into a temp directory so
tests never write into the real ``./audit_logs/``.
"""

import pytest

from credvault.auth import PasswordHasher, TokenIssuer
from credvault.config import Settings
from credvault.store import UserStore
from credvault.vault import CredentialVault, SymmetricCipher

# Low work factor keeps hashing fast in tests
TEST_ITERATIONS = 1_000


@pytest.fixture(autouse=True)
def _isolate_audit_logs(tmp_path, monkeypatch):
    """Redirect the global AuditLogger to a temp directory for every test."""
    import credvault.core.audit_log as audit_mod

    old_logger = audit_mod._audit_logger
    audit_mod._audit_logger = None

    orig_init = audit_mod.AuditLogger.__init__

    def patched_init(self, log_dir=None):
        orig_init(self, log_dir=log_dir or tmp_path / "audit_logs")

    monkeypatch.setattr(audit_mod.AuditLogger, "__init__", patched_init)

    yield

    if audit_mod._audit_logger is not None:
        audit_mod._audit_logger.close()
    audit_mod._audit_logger = old_logger


@pytest.fixture
def store(tmp_path):
    return UserStore(db_path=tmp_path / "users.db")


@pytest.fixture
def cipher():
    return SymmetricCipher.from_secret("unit-test-encryption-key-32-char")


@pytest.fixture
def hasher():
    return PasswordHasher(iterations=TEST_ITERATIONS)


@pytest.fixture
def issuer():
    return TokenIssuer("unit-test-token-secret", ttl_seconds=3600)


@pytest.fixture
def vault(store, cipher):
    return CredentialVault(store, cipher)


@pytest.fixture
def user(store, hasher):
    return store.create_user("Owner@Example.com", hasher.hash("Secret123"), "Owner")


@pytest.fixture
def settings(tmp_path):
    return Settings(
        encryption_key="api-test-encryption-key-32-chars",
        token_secret="api-test-token-secret",
        db_path=tmp_path / "api.db",
        audit_dir=tmp_path / "api_audit",
        pbkdf2_iterations=TEST_ITERATIONS,
    )


@pytest.fixture
def anyio_backend():
    # Async tests use asyncio APIs directly (asyncio.gather), so run them on asyncio only
    return "asyncio"
