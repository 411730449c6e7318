"""Email settings upsert/read, keeping the SMTP password encrypted at rest."""

import logging
import threading
from typing import Callable, Optional

from inkwell.errors import FieldError, FormValidationError
from inkwell.models.email_settings import (
    EmailSettingsForm,
    EmailSettingsResponse,
    StoredEmailSettings,
)
from inkwell.services.secret_codec import encrypt_secret

logger = logging.getLogger(__name__)


class EmailSettingsStore:
    """Single-record holder for the email settings.

    Stands in for the settings row of the external database; the only value
    it ever sees for the password is ciphertext.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._settings: Optional[StoredEmailSettings] = None

    def get(self) -> Optional[StoredEmailSettings]:
        with self._lock:
            return self._settings

    def update(
        self,
        change: Callable[[Optional[StoredEmailSettings]], StoredEmailSettings],
    ) -> StoredEmailSettings:
        """Replace the record with ``change(current)`` under a single lock.

        If *change* raises, the stored record is left as it was.
        """
        with self._lock:
            self._settings = change(self._settings)
            return self._settings


def to_response(stored: StoredEmailSettings) -> EmailSettingsResponse:
    return EmailSettingsResponse(
        email_host_smtp=stored.email_host_smtp,
        email_port_smtp=stored.email_port_smtp,
        is_email_secure_smtp=stored.is_email_secure_smtp,
        email_user=stored.email_user,
        has_password=bool(stored.email_pass_encrypted),
    )


def upsert_email_settings(store: EmailSettingsStore, form: EmailSettingsForm) -> StoredEmailSettings:
    """Create or update the email settings from *form*.

    A supplied password replaces the stored one; an omitted password keeps it.

    Raises:
        FormValidationError: when creating settings without a password.
    """

    def apply(existing: Optional[StoredEmailSettings]) -> StoredEmailSettings:
        if form.email_pass:
            encrypted = encrypt_secret(form.email_pass)
        elif existing is not None:
            encrypted = existing.email_pass_encrypted
        else:
            raise FormValidationError(
                [FieldError("email_pass", "Password is required when creating email settings")]
            )
        return StoredEmailSettings(
            email_host_smtp=form.email_host_smtp,
            email_port_smtp=form.email_port_smtp,
            is_email_secure_smtp=form.is_email_secure_smtp,
            email_user=form.email_user,
            email_pass_encrypted=encrypted,
        )

    stored = store.update(apply)
    logger.info(
        "Email settings saved for %s:%d (password changed: %s)",
        stored.email_host_smtp,
        stored.email_port_smtp,
        bool(form.email_pass),
    )
    return stored
