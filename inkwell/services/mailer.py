import logging
from email.message import EmailMessage
from email.utils import formataddr

import aiosmtplib

from inkwell.models.contact import ContactForm
from inkwell.models.email_settings import StoredEmailSettings

logger = logging.getLogger(__name__)


def build_contact_message(settings: StoredEmailSettings, form: ContactForm) -> EmailMessage:
    """Build the notification for a contact-form submission.

    The message is sent from and to the configured mailbox; the visitor's
    address goes in Reply-To.
    """
    message = EmailMessage()
    message["From"] = formataddr((f"{form.name} via Contact Form", settings.email_user))
    message["To"] = settings.email_user
    message["Reply-To"] = form.email
    message["Subject"] = f"Contact Form: Message from {form.name}"
    message.set_content(f"Name: {form.name}\nEmail: {form.email}\nMessage: {form.message}")
    return message


async def send_contact_message(
    settings: StoredEmailSettings,
    password: str,
    form: ContactForm,
    timeout: float,
) -> None:
    """Deliver a contact-form submission through the configured SMTP relay.

    *password* is the already-decrypted SMTP password; it is used for this
    call only and never logged.

    Raises:
        aiosmtplib.SMTPException: on connection, authentication or delivery errors.
    """
    message = build_contact_message(settings, form)
    await aiosmtplib.send(
        message,
        hostname=settings.email_host_smtp,
        port=settings.email_port_smtp,
        username=settings.email_user,
        password=password,
        use_tls=settings.is_email_secure_smtp,
        timeout=timeout,
    )
    logger.info("Contact message sent via %s", settings.email_host_smtp)
