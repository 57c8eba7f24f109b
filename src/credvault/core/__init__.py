# Core module - shared utilities
#
# - Audit logging
# - Error taxonomy

from .audit_log import (
    AuditLogger,
    EventSeverity,
    EventType,
    configure_audit_logger,
    get_audit_logger,
)
from .errors import (
    AuthError,
    CryptoFailure,
    DuplicateEmailError,
    ErrorKind,
    ExpiredTokenError,
    InvalidTokenError,
    NotFoundError,
    StoreFailure,
    ValidationError,
    VaultError,
)

__all__ = [
    # Audit Logging
    "AuditLogger",
    "EventType",
    "EventSeverity",
    "configure_audit_logger",
    "get_audit_logger",
    # Errors
    "ErrorKind",
    "VaultError",
    "ValidationError",
    "NotFoundError",
    "DuplicateEmailError",
    "CryptoFailure",
    "StoreFailure",
    "AuthError",
    "InvalidTokenError",
    "ExpiredTokenError",
]
