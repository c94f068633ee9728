"""Tests for WhatsApp contact link generation."""

from __future__ import annotations

import pytest

from hiring_pipeline_agents.tools.contact_link import generate_contact_link, normalize_phone


@pytest.mark.unit
class TestNormalizePhone:
    """Test phone normalization."""

    def test_strips_non_digits_and_prefixes(self) -> None:
        """Formatting is removed and the country code prefixed."""
        assert normalize_phone("(11) 98765-4321", "55") == "5511987654321"

    def test_existing_prefix_not_duplicated(self) -> None:
        """A number already carrying the country code is left alone."""
        assert normalize_phone("+55 11 98765-4321", "55") == "5511987654321"


@pytest.mark.unit
class TestGenerateContactLink:
    """Test the deep link format."""

    def test_link_format(self) -> None:
        """The link targets wa.me with a URL-encoded greeting."""
        link = generate_contact_link("(11) 98765-4321", "Maria Silva", "Voidr")
        assert link.startswith("https://wa.me/5511987654321?text=")
        text = link.split("?text=", 1)[1]
        assert " " not in text
        assert "Maria%20Silva" in text
        assert "Voidr" in text

    def test_custom_country_code(self) -> None:
        """A different country code is honored."""
        link = generate_contact_link("415 555 0100", "Ann", "Voidr", country_code="1")
        assert link.startswith("https://wa.me/14155550100?text=")
