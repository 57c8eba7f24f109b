"""
Runtime configuration for credvault.

Values come from environment variables (optionally via a ``.env`` file):

    CREDVAULT_ENCRYPTION_KEY     secret the 32-byte cipher key is cut from
    CREDVAULT_TOKEN_SECRET       HMAC key for session tokens
    CREDVAULT_TOKEN_TTL          token validity window in seconds
    CREDVAULT_DB_PATH            SQLite database file
    CREDVAULT_AUDIT_DIR          audit log directory
    CREDVAULT_PBKDF2_ITERATIONS  password hashing work factor
    CREDVAULT_ENV                "production" hides internal error detail

Security Note:
    When the key variables are missing the built-in defaults are used and a
    warning is logged. Those defaults are public; never run them in
    production.
"""
import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_ENCRYPTION_KEY = "your-32-char-secret-key-here!!!"
DEFAULT_TOKEN_SECRET = "credvault-dev-token-secret-not-for-production"
DEFAULT_TOKEN_TTL = 24 * 60 * 60
DEFAULT_PBKDF2_ITERATIONS = 600_000


class Settings(BaseModel):
    """Validated process-wide configuration, built once at startup."""

    encryption_key: str = Field(default=DEFAULT_ENCRYPTION_KEY, min_length=1)
    token_secret: str = Field(default=DEFAULT_TOKEN_SECRET, min_length=1)
    token_ttl_seconds: int = Field(default=DEFAULT_TOKEN_TTL, ge=60)
    db_path: Path = Path("data/credvault.db")
    audit_dir: Path = Path("./audit_logs")
    pbkdf2_iterations: int = Field(default=DEFAULT_PBKDF2_ITERATIONS, ge=1)
    environment: str = "development"

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        return v.strip().lower() or "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def uses_default_keys(self) -> bool:
        return (
            self.encryption_key == DEFAULT_ENCRYPTION_KEY
            or self.token_secret == DEFAULT_TOKEN_SECRET
        )


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    dotenv_path: Optional[Path] = None,
) -> Settings:
    """Build Settings from the environment.

    Args:
        environ: Mapping to read instead of ``os.environ`` (tests).
        dotenv_path: Explicit ``.env`` file. Only consulted when reading
            ``os.environ``; existing variables are never overridden.

    Returns:
        Populated Settings instance.
    """
    if environ is None:
        load_dotenv(dotenv_path=dotenv_path, override=False)
        environ = os.environ

    values = {}
    mapping = {
        "CREDVAULT_ENCRYPTION_KEY": "encryption_key",
        "CREDVAULT_TOKEN_SECRET": "token_secret",
        "CREDVAULT_TOKEN_TTL": "token_ttl_seconds",
        "CREDVAULT_DB_PATH": "db_path",
        "CREDVAULT_AUDIT_DIR": "audit_dir",
        "CREDVAULT_PBKDF2_ITERATIONS": "pbkdf2_iterations",
        "CREDVAULT_ENV": "environment",
    }
    for env_name, field_name in mapping.items():
        raw = environ.get(env_name)
        if raw:
            values[field_name] = raw

    settings = Settings(**values)

    if settings.uses_default_keys:
        # Never log key material, only which variable fell back.
        missing = [
            name for name, value, default in (
                ("CREDVAULT_ENCRYPTION_KEY", settings.encryption_key, DEFAULT_ENCRYPTION_KEY),
                ("CREDVAULT_TOKEN_SECRET", settings.token_secret, DEFAULT_TOKEN_SECRET),
            )
            if value == default
        ]
        logger.warning("Using insecure built-in default for %s", ", ".join(missing))

    return settings
