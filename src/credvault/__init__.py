# credvault - per-user vault for payment provider credentials
#
# Access tokens are encrypted at rest (AES-256-GCM), public keys are kept
# in cleartext, and clients only ever see masked previews. Access is gated
# by password login and signed session tokens.

__version__ = "0.1.0"
__description__ = "Per-user encrypted payment provider credential vault"

__all__ = ["__version__"]
