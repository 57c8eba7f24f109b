# Registration and login.
#
# Issues session tokens for new and returning users. Login failures use
# one generic message whether the email or the password was wrong.

import logging
from dataclasses import dataclass
from typing import Optional

from ..core import EventSeverity, EventType, get_audit_logger
from ..core.errors import DuplicateEmailError, ErrorKind, ValidationError, VaultError
from ..store.users import UserRecord, UserStore
from .passwords import PasswordHasher, validate_email, validate_password
from .tokens import TokenClaims, TokenIssuer

logger = logging.getLogger(__name__)

MSG_REGISTER_REQUIRED = "Email, password and name are required"
MSG_LOGIN_REQUIRED = "Email and password are required"
MSG_INVALID_EMAIL = "Invalid email"
MSG_EMAIL_TAKEN = "Email already registered"
MSG_BAD_LOGIN = "Invalid email or password"
MSG_SERVER_ERROR = "Authentication service unavailable"


@dataclass
class AuthResult:
    """Outcome of register/login."""
    success: bool
    message: str = ""
    token: Optional[str] = None
    user: Optional[dict] = None
    error: Optional[ErrorKind] = None


def _public_user(user: UserRecord) -> dict:
    return {"id": user.id, "email": user.email, "name": user.name}


class AuthService:
    """
    Registers and logs in users against the user store.

    Args:
        store: User store
        hasher: Password hasher
        issuer: Session token issuer
    """

    def __init__(self, store: UserStore, hasher: PasswordHasher, issuer: TokenIssuer):
        self.store = store
        self.hasher = hasher
        self.issuer = issuer
        self.audit = get_audit_logger()

    def _issue_for(self, user: UserRecord) -> str:
        return self.issuer.issue(TokenClaims(user_id=user.id, email=user.email, name=user.name))

    def register(self, email: str, password: str, name: str) -> AuthResult:
        """
        Create a user and return a session token.

        Email and password are validated before hashing; a taken email
        yields a CONFLICT result.
        """
        try:
            if not email or not password or not name:
                raise ValidationError(MSG_REGISTER_REQUIRED)
            if not validate_email(email):
                raise ValidationError(MSG_INVALID_EMAIL)
            is_valid, error_msg = validate_password(password)
            if not is_valid:
                raise ValidationError(error_msg)

            if self.store.get_by_email(email) is not None:
                raise DuplicateEmailError(MSG_EMAIL_TAKEN)

            # UNIQUE(email) still backstops a concurrent registration
            user = self.store.create_user(email, self.hasher.hash(password), name)
        except VaultError as exc:
            if exc.kind == ErrorKind.STORE:
                logger.error("Registration failed: %s", exc)
                return AuthResult(success=False, message=MSG_SERVER_ERROR, error=exc.kind)
            return AuthResult(success=False, message=str(exc), error=exc.kind)

        self.audit.log_event(
            event_type=EventType.USER_REGISTERED,
            severity=EventSeverity.INFO,
            message="User registered",
            user_context={"user_id": user.id},
        )
        return AuthResult(
            success=True,
            message="User registered",
            token=self._issue_for(user),
            user=_public_user(user),
        )

    def login(self, email: str, password: str) -> AuthResult:
        """Verify credentials and return a session token."""
        if not email or not password:
            return AuthResult(success=False, message=MSG_LOGIN_REQUIRED, error=ErrorKind.VALIDATION)

        try:
            user = self.store.get_by_email(email)
        except VaultError as exc:
            logger.error("Login lookup failed: %s", exc)
            return AuthResult(success=False, message=MSG_SERVER_ERROR, error=exc.kind)

        if user is None or not self.hasher.verify(password, user.password_hash):
            self.audit.log_event(
                event_type=EventType.USER_LOGIN_FAILED,
                severity=EventSeverity.INVESTIGATE,
                message="Login failed",
                details={"known_user": user is not None},
            )
            return AuthResult(success=False, message=MSG_BAD_LOGIN, error=ErrorKind.AUTH_INVALID)

        self.audit.log_event(
            event_type=EventType.USER_LOGIN,
            severity=EventSeverity.INFO,
            message="Login succeeded",
            user_context={"user_id": user.id},
        )
        return AuthResult(
            success=True,
            message="Login succeeded",
            token=self._issue_for(user),
            user=_public_user(user),
        )
