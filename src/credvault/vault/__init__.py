# Vault Module - encrypted payment provider credentials
#
# Access token stored as an AES-256-GCM envelope, public key in cleartext.
# Clients only ever see masked previews.

from .cipher import SymmetricCipher
from .credential_vault import (
    CredentialState,
    CredentialStatus,
    CredentialVault,
    OperationResult,
    PublicKeyPolicy,
    mask_preview,
)

__all__ = [
    "SymmetricCipher",
    "CredentialVault",
    "CredentialState",
    "CredentialStatus",
    "OperationResult",
    "PublicKeyPolicy",
    "mask_preview",
]
