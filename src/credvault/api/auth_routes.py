# Auth API - registration, login and identity check
#
# Returned tokens go in the Authorization: Bearer header of later calls.

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..auth import AuthResult
from ..auth.tokens import TokenClaims
from ..core.errors import ErrorKind
from .security import get_current_identity
from .services import Services, get_services

router = APIRouter(prefix="/api/auth", tags=["auth"])

_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.AUTH_INVALID: 401,
    ErrorKind.STORE: 500,
}


# Request Models
class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


def _auth_response(result: AuthResult, success_status: int = 200) -> JSONResponse:
    if not result.success:
        return JSONResponse(
            status_code=_STATUS_CODES.get(result.error, 500),
            content={"success": False, "error": result.message},
        )
    return JSONResponse(
        status_code=success_status,
        content={"success": True, "token": result.token, "user": result.user},
    )


# Endpoints

@router.post("/register")
def register(request: RegisterRequest, services: Services = Depends(get_services)):
    """
    Register a new user.

    Password requirements:
    - At least 8 characters
    - At least one letter and one number
    """
    result = services.auth.register(request.email, request.password, request.name)
    return _auth_response(result, success_status=201)


@router.post("/login")
def login(request: LoginRequest, services: Services = Depends(get_services)):
    """Authenticate with email and password."""
    result = services.auth.login(request.email, request.password)
    return _auth_response(result)


@router.get("/me")
async def me(identity: TokenClaims = Depends(get_current_identity)):
    """Return the identity carried by the session token."""
    return {"success": True, "user": identity.to_dict()}
