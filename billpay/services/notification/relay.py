"""Outbound SMTP relay built on aiosmtplib."""

import asyncio
from email.message import EmailMessage
from typing import Protocol

import aiosmtplib

from billpay.common.config import Settings
from billpay.common.errors import UpstreamError, UpstreamUnavailable
from billpay.services.notification.messages import OutboundMessage


class MailRelay(Protocol):
    async def deliver(self, message: OutboundMessage) -> None: ...


def build_email(message: OutboundMessage, from_email: str) -> EmailMessage:
    """Render one multipart/alternative message (plain text first, then HTML)."""

    email = EmailMessage()
    email["From"] = from_email
    email["To"] = message.to
    email["Subject"] = message.subject
    email.set_content(message.text)
    email.add_alternative(message.html, subtype="html")
    return email


class SmtpRelay:
    """Sends each message over a fresh SMTP connection."""

    dependency = "smtp"

    def __init__(self, settings: Settings) -> None:
        self.hostname = settings.smtp_host
        self.port = settings.smtp_port
        self.use_tls = settings.smtp_secure
        self.credentials = settings.smtp_credentials
        self.timeout = settings.smtp_timeout_seconds
        self.from_email = settings.from_email

    async def deliver(self, message: OutboundMessage) -> None:
        username, password = self.credentials or (None, None)
        try:
            await aiosmtplib.send(
                build_email(message, self.from_email),
                hostname=self.hostname,
                port=self.port,
                username=username,
                password=password,
                use_tls=self.use_tls,
                timeout=self.timeout,
            )
        except (aiosmtplib.SMTPConnectError, aiosmtplib.SMTPTimeoutError, asyncio.TimeoutError, OSError) as exc:
            raise UpstreamUnavailable(self.dependency, str(exc)) from exc
        except aiosmtplib.SMTPException as exc:
            raise UpstreamError(self.dependency, str(exc)) from exc
