import logging

import aiosmtplib
from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from inkwell.config import get_settings
from inkwell.models.contact import ContactForm, ContactResponse
from inkwell.routers.deps import get_email_settings_store
from inkwell.services.email_settings import EmailSettingsStore
from inkwell.services.mailer import send_contact_message
from inkwell.services.secret_codec import decrypt_secret

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(tags=["Contact"])


@router.post("/contact", response_model=ContactResponse, summary="Send a contact-form message")
@limiter.limit("5/minute")
async def contact(
    request: Request,
    body: ContactForm,
    store: EmailSettingsStore = Depends(get_email_settings_store),
) -> ContactResponse:
    """Forward a visitor's message to the site's configured mailbox.

    The SMTP password is decrypted immediately before sending; a
    :class:`~inkwell.services.secret_codec.DecodingError` propagates to the
    app-level handler, which reports it without cryptographic detail.
    """
    stored = store.get()
    if stored is None:
        logger.error("Contact form submitted but email settings are missing")
        raise HTTPException(status_code=503, detail="Email is not configured.")

    password = decrypt_secret(stored.email_pass_encrypted)

    try:
        await send_contact_message(
            stored, password, body, timeout=get_settings().smtp_timeout_seconds
        )
    except aiosmtplib.SMTPException as exc:
        logger.error("SMTP error sending contact message via %s: %s", stored.email_host_smtp, exc)
        raise HTTPException(status_code=502, detail="Error sending the email.")

    return ContactResponse(message="Email sent successfully")
