# Stateless session tokens (HS256 JWT).
#
# Payload: {"sub", "email", "name", "iat", "exp"}
#
# Nothing is stored server-side. Changing the secret invalidates every
# token issued before the change. Expiry is checked against the injected
# clock, not PyJWT's wall clock.

import time
from dataclasses import dataclass
from typing import Callable, Optional

import jwt

from ..core.errors import ExpiredTokenError, InvalidTokenError

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["sub", "email", "name", "iat", "exp"]


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a session token."""
    user_id: str
    email: str
    name: str
    issued_at: Optional[int] = None
    expires_at: Optional[int] = None

    def to_dict(self) -> dict:
        return {"user_id": self.user_id, "email": self.email, "name": self.name}


class TokenIssuer:
    """
    Issues and validates signed, time-bound session tokens.

    Args:
        secret: HMAC signing key, loaded once at startup
        ttl_seconds: Validity window from issuance
        clock: Returns current unix time (injectable for tests)
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int,
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise ValueError("Token secret must not be empty")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def issue(self, claims: TokenClaims) -> str:
        """Return a signed token for claims, expiring ttl_seconds from now."""
        now = int(self._clock())
        payload = {
            "sub": claims.user_id,
            "email": claims.email,
            "name": claims.name,
            "iat": now,
            "exp": now + self.ttl_seconds,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def validate(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry, returning the embedded claims.

        Raises:
            InvalidTokenError: Malformed token or bad signature
            ExpiredTokenError: Signature valid but expiry has passed
        """
        try:
            data = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
            claims = TokenClaims(
                user_id=str(data["sub"]),
                email=str(data["email"]),
                name=str(data["name"]),
                issued_at=int(data["iat"]),
                expires_at=int(data["exp"]),
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("Invalid token") from exc
        except (ValueError, TypeError) as exc:
            raise InvalidTokenError("Malformed token payload") from exc

        if self._clock() >= claims.expires_at:
            raise ExpiredTokenError("Token expired")

        return claims
