"""Notifier: challenge email and hiring chat messages for resolved candidates."""

from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING

import structlog

from hiring_pipeline_agents.tools.contact_link import generate_contact_link

if TYPE_CHECKING:
    from hiring_pipeline_core.config.settings import Settings
    from hiring_pipeline_core.interfaces import ChatClient, EmailClient
    from hiring_pipeline_core.models.application import Evaluation

logger = structlog.get_logger()

CHALLENGE_EMAIL_HTML = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1 style="font-size: 22px;">Hi, {name}!</h1>
  <p>Thanks for applying to the <strong>{role_name}</strong> role at {company_name}.</p>
  <p>We reviewed your profile and would like to move on to the next step:
  the <strong>technical challenge</strong>.</p>
  <ol>
    <li>Open the challenge repository linked below</li>
    <li>Read the README carefully</li>
    <li>Fork the repository</li>
    <li>Complete the challenge at your own pace (we suggest up to 7 days)</li>
    <li>Reply to this email with the link to your repository</li>
  </ol>
  <p><a href="{challenge_link}">Open the technical challenge</a></p>
  <p>Good luck!<br/><strong>The {company_name} team</strong></p>
</div>
"""

CHALLENGE_EMAIL_TEXT = """\
Hi, {name}!

Thanks for applying to the {role_name} role at {company_name}.
We reviewed your profile and would like to move on to the technical challenge.

1. Open the challenge repository: {challenge_link}
2. Read the README carefully
3. Fork the repository
4. Complete the challenge at your own pace (we suggest up to 7 days)
5. Reply to this email with the link to your repository

Good luck!
The {company_name} team
"""


def _format_score(score: float) -> str:
    """Render 12.0 as '12' and 12.5 as '12.5'."""
    return f"{score:g}"


class Notifier:
    """Two independent one-way channels: candidate email and hiring chat."""

    def __init__(
        self,
        settings: Settings,
        email_sender: EmailClient,
        chat_client: ChatClient,
    ) -> None:
        """Initialize with settings and the two delivery clients."""
        self.settings = settings
        self._email_sender = email_sender
        self._chat_client = chat_client

    async def send_challenge_email(
        self,
        recipient_email: str,
        candidate_name: str,
        challenge_link: str,
        role_name: str,
    ) -> None:
        """Send the technical-challenge email. Raises EmailDeliveryError."""
        company_name = self.settings.company_name
        subject = f"Next step: technical challenge for {role_name} at {company_name}"
        html_body = CHALLENGE_EMAIL_HTML.format(
            name=escape(candidate_name),
            role_name=escape(role_name),
            company_name=escape(company_name),
            challenge_link=escape(challenge_link, quote=True),
        )
        text_body = CHALLENGE_EMAIL_TEXT.format(
            name=candidate_name,
            role_name=role_name,
            company_name=company_name,
            challenge_link=challenge_link,
        )
        await self._email_sender.send(recipient_email, subject, html_body, text_body)
        logger.info("challenge_email_sent", to=recipient_email, role=role_name)

    async def send_chat_notification(self, message: str) -> None:
        """Post a pre-rendered message to the hiring chat. Raises ChatDeliveryError."""
        await self._chat_client.send_message(message)

    def _contact_link(self, phone: str, name: str) -> str:
        return generate_contact_link(
            phone,
            name,
            company_name=self.settings.company_name,
            country_code=self.settings.default_country_code,
        )

    def render_qualified_message(
        self,
        name: str,
        email: str,
        phone: str,
        linkedin_url: str,
        role_name: str,
        evaluation: Evaluation,
        email_sent: bool = True,
    ) -> str:
        """Chat message announcing a qualified candidate."""
        challenge_line = (
            "Technical challenge sent by email"
            if email_sent
            else "Technical challenge email NOT sent, follow up manually"
        )
        bullets = "\n".join(f"• {b}" for b in evaluation.bullets)
        return (
            "New QUALIFIED candidate\n\n"
            f"Name: {name}\n"
            f"Email: {email}\n"
            f"Phone: {phone}\n"
            f"Role: {role_name}\n"
            f"Score: {_format_score(evaluation.score)}/{self.settings.max_score}\n\n"
            f"Summary:\n{bullets}\n\n"
            f"WhatsApp: {self._contact_link(phone, name)}\n"
            f"{challenge_line}\n\n"
            f"LinkedIn: {linkedin_url}"
        )

    def render_rejected_message(
        self,
        name: str,
        email: str,
        phone: str,
        linkedin_url: str,
        role_name: str,
        evaluation: Evaluation,
        score_threshold: float,
    ) -> str:
        """Chat message recording a rejected candidate, with the minimum score."""
        bullets = "\n".join(f"• {b}" for b in evaluation.bullets)
        return (
            "Candidate not qualified\n\n"
            f"Name: {name}\n"
            f"Email: {email}\n"
            f"Phone: {phone}\n"
            f"Role: {role_name}\n"
            f"Score: {_format_score(evaluation.score)}/{self.settings.max_score} "
            f"(minimum: {_format_score(score_threshold)})\n\n"
            f"Summary:\n{bullets}\n\n"
            f"WhatsApp: {self._contact_link(phone, name)}\n"
            f"LinkedIn: {linkedin_url}"
        )
