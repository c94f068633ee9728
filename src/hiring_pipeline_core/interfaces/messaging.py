"""Abstract outbound messaging interfaces."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class EmailClient(Protocol):
    """One-way email delivery."""

    async def send(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> bool:
        """Send an email. Raises EmailDeliveryError on rejection."""
        ...


@runtime_checkable
class ChatClient(Protocol):
    """One-way chat delivery to a fixed destination."""

    async def send_message(self, message: str) -> None:
        """Post a message. Raises ChatDeliveryError on rejection."""
        ...
