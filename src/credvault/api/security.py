# API Security - bearer session token gate
#
# Every credential route depends on get_current_identity, which validates
# the Authorization: Bearer <token> header with the TokenIssuer and hands
# the route the embedded claims. Routes trust that identity as-is.

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from ..auth.tokens import TokenClaims
from ..core import EventSeverity, EventType, get_audit_logger
from ..core.errors import AuthError, ExpiredTokenError
from .services import Services, get_services


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(None),
    services: Services = Depends(get_services),
) -> TokenClaims:
    """
    FastAPI dependency to validate the session token.

    Usage in routes:
        @router.get("/protected")
        def handler(identity: TokenClaims = Depends(get_current_identity)): ...

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    if not authorization:
        raise _unauthorized("Missing Authorization header")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Authorization header must be 'Bearer <token>'")

    try:
        return services.issuer.validate(token.strip())
    except AuthError as exc:
        get_audit_logger().log_event(
            event_type=EventType.TOKEN_REJECTED,
            severity=EventSeverity.INVESTIGATE,
            message="Session token rejected",
            details={
                "reason": exc.kind.value,
                "client": request.client.host if request.client else None,
            },
        )
        if isinstance(exc, ExpiredTokenError):
            raise _unauthorized("Session expired")
        raise _unauthorized("Invalid session token")
