# Credentials API - payment provider credentials for the logged-in user
#
# GET    /api/credentials  status + masked previews
# PUT    /api/credentials  set access token and public key
# DELETE /api/credentials  remove both

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..auth.tokens import TokenClaims
from ..core.errors import ErrorKind
from ..vault import OperationResult
from .security import get_current_identity
from .services import Services, get_services

router = APIRouter(prefix="/api/credentials", tags=["credentials"])

_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.AUTH_INVALID: 401,
    ErrorKind.AUTH_EXPIRED: 401,
    ErrorKind.CRYPTO: 500,
    ErrorKind.STORE: 500,
}


# Request/Response Models
class UpdateCredentialsRequest(BaseModel):
    access_token: Optional[str] = None
    public_key: Optional[str] = None


class CredentialStatusResponse(BaseModel):
    success: bool
    hasCredentials: bool
    accessTokenPreview: str
    publicKeyPreview: str
    message: str


class MessageResponse(BaseModel):
    success: bool
    message: str


def status_code_for(result: OperationResult) -> int:
    if result.success:
        return 200
    return _STATUS_CODES.get(result.error, 500)


def _message_response(result: OperationResult) -> JSONResponse:
    return JSONResponse(
        status_code=status_code_for(result),
        content=MessageResponse(success=result.success, message=result.message).model_dump(),
    )


# Endpoints

@router.get("", response_model=CredentialStatusResponse)
def get_credentials_status(
    identity: TokenClaims = Depends(get_current_identity),
    services: Services = Depends(get_services),
):
    """
    Report whether the user's credentials are configured.

    Never returns the access token, only '...' + its last 4 characters.
    """
    result = services.vault.get_status(identity.user_id)
    if not result.success:
        return _message_response(result)

    return CredentialStatusResponse(
        success=True,
        hasCredentials=result.has_credentials,
        accessTokenPreview=result.access_token_preview,
        publicKeyPreview=result.public_key_preview,
        message=result.message,
    )


@router.put("", response_model=MessageResponse)
def update_credentials(
    request: UpdateCredentialsRequest,
    identity: TokenClaims = Depends(get_current_identity),
    services: Services = Depends(get_services),
):
    """
    Store new credentials.

    access_token must be at least 20 characters; public_key must start
    with an accepted provider prefix (APP_USR or TEST).
    """
    result = services.vault.set_credentials(
        identity.user_id, request.access_token, request.public_key
    )
    return _message_response(result)


@router.delete("", response_model=MessageResponse)
def delete_credentials(
    identity: TokenClaims = Depends(get_current_identity),
    services: Services = Depends(get_services),
):
    """Remove both credential fields."""
    result = services.vault.clear_credentials(identity.user_id)
    return _message_response(result)
