# Service wiring for the API.
#
# build_services() turns Settings into the object graph once at startup.
# Keys flow into constructors here and nowhere else.

from dataclasses import dataclass

from fastapi import Request

from ..auth import AuthService, PasswordHasher, TokenIssuer
from ..config import Settings
from ..store import UserStore
from ..vault import CredentialVault, SymmetricCipher


@dataclass
class Services:
    settings: Settings
    store: UserStore
    cipher: SymmetricCipher
    hasher: PasswordHasher
    issuer: TokenIssuer
    vault: CredentialVault
    auth: AuthService


def build_services(settings: Settings) -> Services:
    store = UserStore(db_path=settings.db_path)
    cipher = SymmetricCipher.from_secret(settings.encryption_key)
    hasher = PasswordHasher(iterations=settings.pbkdf2_iterations)
    issuer = TokenIssuer(settings.token_secret, settings.token_ttl_seconds)
    return Services(
        settings=settings,
        store=store,
        cipher=cipher,
        hasher=hasher,
        issuer=issuer,
        vault=CredentialVault(store, cipher),
        auth=AuthService(store, hasher, issuer),
    )


def get_services(request: Request) -> Services:
    """FastAPI dependency returning the app's Services."""
    return request.app.state.services
