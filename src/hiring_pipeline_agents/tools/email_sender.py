"""Email delivery via Resend, SendGrid or SMTP."""

from __future__ import annotations

import asyncio
from email.mime.multipart import MIMEMultipart
from typing import TYPE_CHECKING

import httpx
import structlog

from hiring_pipeline_core.exceptions import EmailDeliveryError

if TYPE_CHECKING:
    from hiring_pipeline_core.config.settings import Settings

logger = structlog.get_logger()


class EmailSender:
    """Send emails through the configured provider."""

    def __init__(
        self,
        provider: str = "smtp",
        from_email: str = "",
        smtp_host: str = "smtp.gmail.com",
        smtp_port: int = 587,
        smtp_user: str = "",
        smtp_password: str = "",
        sendgrid_api_key: str = "",
        resend_api_key: str = "",
        resend_api_url: str = "https://api.resend.com",
        timeout: float = 30.0,
    ) -> None:
        """Initialize with email provider configuration."""
        self._provider = provider
        self._from_email = from_email or smtp_user
        self._smtp_host = smtp_host
        self._smtp_port = smtp_port
        self._smtp_user = smtp_user
        self._smtp_password = smtp_password
        self._sendgrid_api_key = sendgrid_api_key
        self._resend_api_key = resend_api_key
        self._resend_api_url = resend_api_url.rstrip("/")
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> EmailSender:
        """Build a sender from application settings."""
        return cls(
            provider=settings.email_provider,
            from_email=settings.email_from,
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_user=settings.smtp_user,
            smtp_password=(
                settings.smtp_password.get_secret_value() if settings.smtp_password else ""
            ),
            sendgrid_api_key=(
                settings.sendgrid_api_key.get_secret_value()
                if settings.sendgrid_api_key
                else ""
            ),
            resend_api_key=(
                settings.resend_api_key.get_secret_value() if settings.resend_api_key else ""
            ),
            resend_api_url=settings.resend_api_url,
            timeout=settings.http_timeout_seconds,
        )

    async def send(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> bool:
        """Send an email. Any provider failure raises EmailDeliveryError."""
        try:
            if self._provider == "resend":
                return await self._send_resend(to_email, subject, html_body, text_body)
            if self._provider == "sendgrid":
                return await self._send_sendgrid(to_email, subject, html_body, text_body)
            return await self._send_smtp(to_email, subject, html_body, text_body)
        except EmailDeliveryError:
            raise
        except Exception as e:
            logger.error("email_send_failed", to=to_email, provider=self._provider, error=str(e))
            raise EmailDeliveryError(str(e)) from e

    async def _send_resend(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> bool:
        """Send via the Resend REST API."""
        payload = {
            "from": self._from_email,
            "to": [to_email],
            "subject": subject,
            "html": html_body,
            "text": text_body,
        }
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(
                f"{self._resend_api_url}/emails",
                json=payload,
                headers={"Authorization": f"Bearer {self._resend_api_key}"},
            )
        if not response.is_success:
            msg = f"Resend API error: {response.status_code} - {response.text}"
            logger.error("email_send_failed", to=to_email, provider="resend")
            raise EmailDeliveryError(msg)
        logger.info("email_sent_resend", to=to_email, message_id=response.json().get("id"))
        return True

    async def _send_smtp(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> bool:
        """Send via SMTP using aiosmtplib."""
        import aiosmtplib

        msg = self._build_smtp_message(to_email, subject, html_body, text_body)
        await aiosmtplib.send(
            msg,
            hostname=self._smtp_host,
            port=self._smtp_port,
            username=self._smtp_user,
            password=self._smtp_password,
            start_tls=True,
        )
        logger.info("email_sent_smtp", to=to_email)
        return True

    def _build_smtp_message(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> MIMEMultipart:
        """Build a multipart/alternative message with text and HTML parts."""
        from email.mime.text import MIMEText

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self._from_email
        msg["To"] = to_email
        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))
        return msg

    async def _send_sendgrid(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> bool:
        """Send via SendGrid API."""

        def _send() -> bool:
            from sendgrid import SendGridAPIClient
            from sendgrid.helpers.mail import Content, Email, Mail, To

            message = Mail(
                from_email=Email(self._from_email or "noreply@hiring.dev"),
                to_emails=To(to_email),
                subject=subject,
            )
            message.content = [
                Content("text/plain", text_body),
                Content("text/html", html_body),
            ]
            sg = SendGridAPIClient(self._sendgrid_api_key)
            response = sg.send(message)
            return response.status_code in (200, 201, 202)

        sent = await asyncio.to_thread(_send)
        if not sent:
            msg = "SendGrid rejected the message"
            raise EmailDeliveryError(msg)
        logger.info("email_sent_sendgrid", to=to_email)
        return True
