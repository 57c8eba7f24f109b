# Error taxonomy for the credential vault and its auth primitives.
#
# Operations raise these internally and convert them into structured
# results at their public boundary. The API layer maps ErrorKind values
# to HTTP status codes.

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a failed operation, as reported in results."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    CRYPTO = "crypto"
    STORE = "store"
    AUTH_INVALID = "auth_invalid"
    AUTH_EXPIRED = "auth_expired"


class VaultError(Exception):
    """Base class for all credvault errors."""

    kind: ErrorKind = ErrorKind.STORE


class ValidationError(VaultError):
    """Malformed caller input. Always recoverable, never a server fault."""

    kind = ErrorKind.VALIDATION


class NotFoundError(VaultError):
    """The user id does not resolve in the store."""

    kind = ErrorKind.NOT_FOUND


class DuplicateEmailError(VaultError):
    """Registration with an email that is already taken."""

    kind = ErrorKind.CONFLICT


class CryptoFailure(VaultError):
    """Ciphertext could not be decrypted."""

    kind = ErrorKind.CRYPTO


class StoreFailure(VaultError):
    """The persistence layer errored. Detail stays server-side."""

    kind = ErrorKind.STORE


class AuthError(VaultError):
    """Session token problem."""

    kind = ErrorKind.AUTH_INVALID


class InvalidTokenError(AuthError):
    """Malformed or badly signed token."""

    kind = ErrorKind.AUTH_INVALID


class ExpiredTokenError(AuthError):
    """Structurally valid token whose expiry has passed."""

    kind = ErrorKind.AUTH_EXPIRED
