"""
Application configuration management.

Settings are read from environment variables (or a ``.env`` file) once per
process via :func:`get_settings`.
"""

import re
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings

_HEX_KEY_RE = re.compile(r"^[0-9a-fA-F]{64}$")


class Settings(BaseSettings):
    """
    Application configuration from environment variables.

    All settings can be overridden via environment variables with the same name.
    """

    # AES-256 key for the SMTP password, 32 bytes as 64 hex characters
    encryption_key: str

    # Logging
    log_level: str = "INFO"

    # Header set by the identity provider's gateway carrying the caller's role
    role_header: str = "X-User-Role"

    # Outbound email
    smtp_timeout_seconds: float = 10.0

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("encryption_key")
    @classmethod
    def _check_key(cls, value: str) -> str:
        if not _HEX_KEY_RE.match(value):
            raise ValueError("ENCRYPTION_KEY must be 64 hex characters (32 bytes)")
        return value

    @property
    def encryption_key_bytes(self) -> bytes:
        return bytes.fromhex(self.encryption_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
