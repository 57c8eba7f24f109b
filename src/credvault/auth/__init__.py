# Auth primitives: password hashing, session tokens, register/login

from .passwords import PasswordHasher, validate_email, validate_password
from .service import AuthResult, AuthService
from .tokens import TokenClaims, TokenIssuer

__all__ = [
    "PasswordHasher",
    "validate_email",
    "validate_password",
    "TokenClaims",
    "TokenIssuer",
    "AuthResult",
    "AuthService",
]
