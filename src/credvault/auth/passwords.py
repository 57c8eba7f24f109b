# User password hashing and input validation.
#
# PBKDF2-HMAC-SHA256 with a fresh random salt per hash. Stored format:
#   pbkdf2_sha256$<iterations>$<salt b64>$<digest b64>

import base64
import binascii
import hmac
import os
import re
from typing import Tuple

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

ALGORITHM = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 600_000  # OWASP 2023 recommendation for PBKDF2-SHA256
MAX_ITERATIONS = 10_000_000  # stored hashes above this are treated as corrupt
SALT_LENGTH = 16
DIGEST_LENGTH = 32

MIN_PASSWORD_LENGTH = 8

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class PasswordHasher:
    """
    Salted, computationally expensive one-way password hashing.

    Two calls to hash() with the same password return different strings
    (fresh salt each time); both verify.
    """

    def __init__(self, iterations: int = DEFAULT_ITERATIONS):
        if iterations < 1:
            raise ValueError("iterations must be positive")
        self.iterations = iterations

    @staticmethod
    def _derive(password: str, salt: bytes, iterations: int) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=DIGEST_LENGTH,
            salt=salt,
            iterations=iterations,
        )
        return kdf.derive(password.encode("utf-8"))

    def hash(self, password: str) -> str:
        """
        Hash a password with a new random salt.

        Args:
            password: Cleartext password

        Returns:
            Encoded hash string safe to store
        """
        salt = os.urandom(SALT_LENGTH)
        digest = self._derive(password, salt, self.iterations)
        return "$".join((
            ALGORITHM,
            str(self.iterations),
            base64.b64encode(salt).decode("ascii"),
            base64.b64encode(digest).decode("ascii"),
        ))

    def verify(self, password: str, hash_string: str) -> bool:
        """
        Check a password against a stored hash.

        Returns False for a wrong password and for a malformed stored hash;
        never raises on bad stored data.
        """
        try:
            algorithm, iterations_raw, salt_b64, digest_b64 = hash_string.split("$")
            if algorithm != ALGORITHM:
                return False
            iterations = int(iterations_raw)
            if not 1 <= iterations <= MAX_ITERATIONS:
                return False
            salt = base64.b64decode(salt_b64, validate=True)
            expected = base64.b64decode(digest_b64, validate=True)
            if not salt or len(expected) != DIGEST_LENGTH:
                return False
            candidate = self._derive(password, salt, iterations)
        except (AttributeError, ValueError, OverflowError, binascii.Error):
            return False

        # Constant-time comparison
        return hmac.compare_digest(candidate, expected)


def validate_password(password: str) -> Tuple[bool, str]:
    """
    Check registration password requirements.

    Requirements:
    - At least 8 characters
    - At least one letter
    - At least one number

    Returns:
        (is_valid, error_message)
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        return False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"

    if not any(c.isalpha() for c in password):
        return False, "Password must contain at least one letter"

    if not any(c.isdigit() for c in password):
        return False, "Password must contain at least one number"

    return True, ""


def validate_email(email: str) -> bool:
    """Basic shape check: local@domain.tld, no whitespace."""
    return bool(_EMAIL_RE.match(email or ""))
