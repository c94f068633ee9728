"""Hiring chat notifications via the Roam messages API."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog

from hiring_pipeline_core.exceptions import ChatDeliveryError

if TYPE_CHECKING:
    from hiring_pipeline_core.config.settings import Settings

logger = structlog.get_logger()


class RoamChatClient:
    """Post messages to the single configured Roam chat."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        """Initialize with settings and an optional shared HTTP client."""
        self._api_url = settings.roam_api_url.rstrip("/")
        self._api_key = settings.roam_api_key.get_secret_value()
        self._chat_id = settings.roam_chat_id
        self._timeout = settings.http_timeout_seconds
        self._client = client

    async def send_message(self, message: str) -> None:
        """Send one message. Raises ChatDeliveryError on any failure."""
        payload = {"chatId": self._chat_id, "message": message}
        headers = {"Authorization": f"Bearer {self._api_key}"}
        url = f"{self._api_url}/messages"

        try:
            if self._client is not None:
                response = await self._client.post(url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error("chat_send_failed", chat_id=self._chat_id, error=str(e))
            raise ChatDeliveryError(str(e)) from e

        if not response.is_success:
            msg = f"Roam API error: {response.status_code} - {response.text}"
            logger.error("chat_send_failed", chat_id=self._chat_id, status=response.status_code)
            raise ChatDeliveryError(msg)

        logger.info("chat_message_sent", chat_id=self._chat_id)
