from typing import Optional

from pydantic import BaseModel, Field, field_validator

PASSWORD_MIN_LENGTH = 8


class EmailSettingsForm(BaseModel):
    email_host_smtp: str = Field(min_length=1, max_length=50)
    email_port_smtp: int = Field(ge=1, le=65535)
    is_email_secure_smtp: bool = False
    email_user: str = Field(min_length=1, max_length=50)
    email_pass: Optional[str] = Field(
        default=None,
        description="Plaintext SMTP password. Omit to keep the stored one.",
    )

    @field_validator("email_pass")
    @classmethod
    def _check_password(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
        return value


class StoredEmailSettings(BaseModel):
    """Email settings as persisted: the password only ever in encrypted form."""

    email_host_smtp: str
    email_port_smtp: int
    is_email_secure_smtp: bool
    email_user: str
    email_pass_encrypted: str


class EmailSettingsResponse(BaseModel):
    email_host_smtp: str
    email_port_smtp: int
    is_email_secure_smtp: bool
    email_user: str
    has_password: bool
    """Whether a password is stored. The password itself is write-only."""
