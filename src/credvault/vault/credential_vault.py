# Credential Vault - per-user payment provider credentials
#
# Stores the provider access token encrypted (SymmetricCipher envelope)
# and the public key in cleartext. Callers only ever get masked previews.
#
# Status:
#   CONFIGURED      access token and public key both present
#   NOT_CONFIGURED  either one absent
#
# Every public operation returns a structured result; VaultError
# subclasses raised inside are converted at the boundary.

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from ..core import EventSeverity, EventType, get_audit_logger
from ..core.errors import ErrorKind, NotFoundError, ValidationError, VaultError
from ..store.users import UserStore
from .cipher import SymmetricCipher

logger = logging.getLogger(__name__)

MIN_ACCESS_TOKEN_LENGTH = 20
DEFAULT_PUBLIC_KEY_PREFIXES = ("APP_USR", "TEST")
PREVIEW_MARKER = "..."
PREVIEW_LENGTH = 4

MSG_CONFIGURED = "Credentials configured"
MSG_NOT_CONFIGURED = "Credentials not configured"
MSG_UPDATED = "Credentials updated successfully"
MSG_CLEARED = "Credentials removed successfully"
MSG_USER_NOT_FOUND = "User not found"
MSG_REQUIRED = "Access Token and Public Key are required"
MSG_BAD_ACCESS_TOKEN = "Invalid Access Token"

# Generic messages: no store or crypto detail reaches the client
_GENERIC_MESSAGES = {
    ErrorKind.STORE: "Failed to process credentials",
    ErrorKind.CRYPTO: "Failed to process credentials",
}


class CredentialState(str, Enum):
    CONFIGURED = "configured"
    NOT_CONFIGURED = "not_configured"


@dataclass(frozen=True)
class PublicKeyPolicy:
    """Accepted public key prefixes for the payment provider."""
    prefixes: Sequence[str] = DEFAULT_PUBLIC_KEY_PREFIXES

    def accepts(self, public_key: str) -> bool:
        return any(public_key.startswith(prefix) for prefix in self.prefixes)

    def describe(self) -> str:
        return " or ".join(self.prefixes)


@dataclass
class OperationResult:
    """Outcome of a vault mutation."""
    success: bool
    message: str
    error: Optional[ErrorKind] = None


@dataclass
class CredentialStatus(OperationResult):
    """Outcome of a status read, with masked previews."""
    has_credentials: bool = False
    access_token_preview: str = ""
    public_key_preview: str = ""
    state: CredentialState = field(default=CredentialState.NOT_CONFIGURED)


def mask_preview(value: Optional[str]) -> str:
    """Return '...' plus the last 4 characters, or '' for short/absent values."""
    if not value or len(value) <= PREVIEW_LENGTH:
        return ""
    return PREVIEW_MARKER + value[-PREVIEW_LENGTH:]


def _failure(exc: VaultError, cls=OperationResult, **extra) -> OperationResult:
    message = _GENERIC_MESSAGES.get(exc.kind, str(exc))
    return cls(success=False, message=message, error=exc.kind, **extra)


class CredentialVault:
    """
    Read/write/clear operations over a user's encrypted provider credentials.

    Args:
        store: User store
        cipher: Cipher used for the access token
        policy: Public key prefix policy (default APP_USR / TEST)
    """

    def __init__(
        self,
        store: UserStore,
        cipher: SymmetricCipher,
        policy: Optional[PublicKeyPolicy] = None,
    ):
        self.store = store
        self.cipher = cipher
        self.policy = policy or PublicKeyPolicy()
        self.audit = get_audit_logger()

    # ── Validation ───────────────────────────────────────────────────

    def validate(self, access_token: Optional[str], public_key: Optional[str]) -> None:
        """
        Check credential input before any crypto or store work.

        Raises:
            ValidationError: with a caller-facing message
        """
        if not access_token or not public_key:
            raise ValidationError(MSG_REQUIRED)

        if len(access_token) < MIN_ACCESS_TOKEN_LENGTH:
            raise ValidationError(MSG_BAD_ACCESS_TOKEN)

        if not self.policy.accepts(public_key):
            raise ValidationError(f"Public Key must start with {self.policy.describe()}")

    # ── Operations ───────────────────────────────────────────────────

    def get_status(self, user_id: str) -> CredentialStatus:
        """
        Report whether credentials are configured, with masked previews.

        The access token is decrypted only to slice its preview. An
        undecryptable envelope leaves the preview empty but still counts
        as present for has_credentials.
        """
        try:
            stored = self.store.get_credentials(user_id)
            if stored is None:
                raise NotFoundError(MSG_USER_NOT_FOUND)
        except VaultError as exc:
            self._log_failure(user_id, exc, "status read")
            return _failure(exc, CredentialStatus)

        has_credentials = bool(stored.access_token and stored.public_key)

        public_key_preview = ""
        if stored.public_key:
            public_key = stored.public_key
            public_key_preview = (
                PREVIEW_MARKER + public_key[-PREVIEW_LENGTH:]
                if len(public_key) > PREVIEW_LENGTH
                else public_key
            )

        access_token_preview = ""
        if stored.access_token:
            decrypted = self.cipher.decrypt(stored.access_token)
            access_token_preview = mask_preview(decrypted)
            if decrypted is None:
                self.audit.log_credential_event(
                    EventType.DECRYPT_FAILED,
                    user_id,
                    "Stored access token preview unavailable",
                    severity=EventSeverity.ALERT,
                )

        self.audit.log_credential_event(
            EventType.CREDENTIALS_VIEWED, user_id, "Credential status read",
            details={"has_credentials": has_credentials},
        )

        return CredentialStatus(
            success=True,
            message=MSG_CONFIGURED if has_credentials else MSG_NOT_CONFIGURED,
            has_credentials=has_credentials,
            access_token_preview=access_token_preview,
            public_key_preview=public_key_preview,
            state=CredentialState.CONFIGURED if has_credentials else CredentialState.NOT_CONFIGURED,
        )

    def set_credentials(
        self,
        user_id: str,
        access_token: Optional[str],
        public_key: Optional[str],
    ) -> OperationResult:
        """Validate, encrypt the access token with a fresh IV, and store both fields."""
        try:
            self.validate(access_token, public_key)
            envelope = self.cipher.encrypt(access_token)
            if not self.store.update_credentials(user_id, envelope, public_key):
                raise NotFoundError(MSG_USER_NOT_FOUND)
        except VaultError as exc:
            self._log_failure(user_id, exc, "update")
            return _failure(exc)

        self.audit.log_credential_event(
            EventType.CREDENTIALS_UPDATED, user_id, "Credentials updated"
        )
        return OperationResult(success=True, message=MSG_UPDATED)

    def clear_credentials(self, user_id: str) -> OperationResult:
        """Remove both credential fields."""
        try:
            if not self.store.clear_credentials(user_id):
                raise NotFoundError(MSG_USER_NOT_FOUND)
        except VaultError as exc:
            self._log_failure(user_id, exc, "clear")
            return _failure(exc)

        self.audit.log_credential_event(
            EventType.CREDENTIALS_CLEARED, user_id, "Credentials removed"
        )
        return OperationResult(success=True, message=MSG_CLEARED)

    def _log_failure(self, user_id: str, exc: VaultError, operation: str):
        if exc.kind == ErrorKind.VALIDATION:
            self.audit.log_credential_event(
                EventType.CREDENTIALS_REJECTED, user_id,
                f"Credential {operation} rejected: {exc}",
                severity=EventSeverity.INVESTIGATE,
            )
        elif exc.kind == ErrorKind.NOT_FOUND:
            self.audit.log_credential_event(
                EventType.CREDENTIALS_REJECTED, user_id,
                f"Credential {operation} for unknown user",
                severity=EventSeverity.INVESTIGATE,
            )
        else:
            logger.error("Credential %s failed for %s: %s", operation, user_id, exc)
            self.audit.log_credential_event(
                EventType.STORE_ERROR, user_id,
                f"Credential {operation} failed",
                severity=EventSeverity.CRITICAL,
            )
