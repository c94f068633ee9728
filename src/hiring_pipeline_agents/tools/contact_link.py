"""Direct-message deep links for candidate phone numbers."""

from __future__ import annotations

import re
from urllib.parse import quote

_NON_DIGITS = re.compile(r"\D")

WHATSAPP_BASE_URL = "https://wa.me"


def normalize_phone(phone: str, country_code: str) -> str:
    """Strip non-digits and prefix the country code when it is missing."""
    digits = _NON_DIGITS.sub("", phone)
    if digits.startswith(country_code):
        return digits
    return f"{country_code}{digits}"


def generate_contact_link(
    phone: str,
    candidate_name: str,
    company_name: str,
    country_code: str = "55",
) -> str:
    """Build a WhatsApp link with a pre-filled greeting for the candidate."""
    number = normalize_phone(phone, country_code)
    greeting = (
        f"Hi {candidate_name}! I saw your application to {company_name} "
        "and would like to talk about the opportunity."
    )
    return f"{WHATSAPP_BASE_URL}/{number}?text={quote(greeting, safe='')}"
