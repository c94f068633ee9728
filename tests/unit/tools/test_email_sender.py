"""Tests for email sender tool."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from hiring_pipeline_agents.tools.email_sender import EmailSender
from hiring_pipeline_core.exceptions import EmailDeliveryError
from tests.mocks.mock_settings import make_settings


@pytest.mark.unit
class TestEmailSender:
    """Test EmailSender provider routing and error handling."""

    def test_defaults_to_smtp(self) -> None:
        """Default provider is smtp."""
        sender = EmailSender()
        assert sender._provider == "smtp"

    def test_from_settings(self) -> None:
        """from_settings() unwraps secrets and picks the provider."""
        sender = EmailSender.from_settings(make_settings())
        assert sender._provider == "resend"
        assert sender._resend_api_key == "re-test"
        assert sender._from_email == "hiring@voidr.co"
        assert sender._smtp_password == ""

    @pytest.mark.parametrize(
        ("provider", "method"),
        [("smtp", "_send_smtp"), ("sendgrid", "_send_sendgrid"), ("resend", "_send_resend")],
    )
    async def test_send_routes_to_provider(self, provider: str, method: str) -> None:
        """send() dispatches to the configured provider."""
        sender = EmailSender(provider=provider)
        with patch.object(sender, method, new_callable=AsyncMock, return_value=True) as mocked:
            result = await sender.send("user@example.com", "Subject", "<p>hi</p>", "hi")

        assert result is True
        mocked.assert_called_once_with("user@example.com", "Subject", "<p>hi</p>", "hi")

    async def test_send_wraps_errors(self) -> None:
        """send() wraps unexpected errors in EmailDeliveryError."""
        sender = EmailSender(provider="smtp")
        with patch.object(
            sender,
            "_send_smtp",
            new_callable=AsyncMock,
            side_effect=ConnectionError("refused"),
        ):
            with pytest.raises(EmailDeliveryError, match="refused"):
                await sender.send("user@example.com", "Subject", "<p>hi</p>", "hi")

    async def test_send_reraises_email_delivery_error(self) -> None:
        """send() re-raises EmailDeliveryError directly."""
        sender = EmailSender(provider="smtp")
        with patch.object(
            sender,
            "_send_smtp",
            new_callable=AsyncMock,
            side_effect=EmailDeliveryError("already wrapped"),
        ):
            with pytest.raises(EmailDeliveryError, match="already wrapped"):
                await sender.send("user@example.com", "Subject", "<p>hi</p>", "hi")

    async def test_resend_posts_payload(self) -> None:
        """The Resend provider posts both bodies with bearer auth."""
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"id": "email-1"})

        transport = httpx.MockTransport(handler)
        real_client = httpx.AsyncClient
        sender = EmailSender(
            provider="resend",
            from_email="hiring@voidr.co",
            resend_api_key="re-key",
            resend_api_url="https://api.resend.test",
        )
        with patch(
            "hiring_pipeline_agents.tools.email_sender.httpx.AsyncClient",
            side_effect=lambda **kw: real_client(transport=transport),
        ):
            assert await sender.send("maria@example.com", "Hi", "<p>x</p>", "x") is True

        request = captured[0]
        assert str(request.url) == "https://api.resend.test/emails"
        assert request.headers["Authorization"] == "Bearer re-key"
        body = json.loads(request.content)
        assert body["to"] == ["maria@example.com"]
        assert body["from"] == "hiring@voidr.co"
        assert body["text"] == "x"

    async def test_resend_rejection_raises(self) -> None:
        """A non-2xx Resend response raises EmailDeliveryError."""
        transport = httpx.MockTransport(lambda _: httpx.Response(422, text="invalid"))
        real_client = httpx.AsyncClient
        sender = EmailSender(provider="resend", resend_api_key="re-key")
        with patch(
            "hiring_pipeline_agents.tools.email_sender.httpx.AsyncClient",
            side_effect=lambda **kw: real_client(transport=transport),
        ):
            with pytest.raises(EmailDeliveryError, match="422"):
                await sender.send("maria@example.com", "Hi", "<p>x</p>", "x")

    async def test_smtp_sends_multipart(self) -> None:
        """SMTP delivery sends a text+html message through aiosmtplib."""
        sender = EmailSender(provider="smtp", smtp_user="bot@voidr.co", smtp_password="pw")
        with patch("aiosmtplib.send", new_callable=AsyncMock) as mock_send:
            await sender.send("maria@example.com", "Hi", "<p>x</p>", "x")

        message = mock_send.call_args.args[0]
        assert message["To"] == "maria@example.com"
        assert message["From"] == "bot@voidr.co"
        assert [p.get_content_type() for p in message.get_payload()] == [
            "text/plain",
            "text/html",
        ]
        assert mock_send.call_args.kwargs["start_tls"] is True

    async def test_sendgrid_rejection_raises(self) -> None:
        """A non-2xx SendGrid status raises EmailDeliveryError."""
        sender = EmailSender(provider="sendgrid", sendgrid_api_key="sg-key")
        fake_client = MagicMock()
        fake_client.send.return_value = MagicMock(status_code=400)
        with patch("sendgrid.SendGridAPIClient", return_value=fake_client):
            with pytest.raises(EmailDeliveryError, match="SendGrid rejected"):
                await sender.send("maria@example.com", "Hi", "<p>x</p>", "x")
