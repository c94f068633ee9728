"""Tests for scraper dataset models and callback payload access."""

from __future__ import annotations

import pytest

from hiring_pipeline_core.models.scrape import ScrapedProfile, extract_event_type
from tests.mocks.mock_factories import make_callback_payload, make_scraped_item


@pytest.mark.unit
class TestScrapedProfile:
    """Test parsing of raw dataset items."""

    def test_camel_case_aliases(self) -> None:
        """Scraper camelCase keys populate snake_case fields."""
        profile = ScrapedProfile.model_validate(make_scraped_item())
        assert profile.full_name == "Maria Silva"
        assert profile.experience[0].company_name == "Acme"
        assert profile.education[0].school_name == "UFSCar"
        assert profile.education[0].field_of_study == "Computer Science"

    def test_null_lists_become_empty(self) -> None:
        """Explicit nulls from the scraper are treated as empty lists."""
        profile = ScrapedProfile.model_validate(
            make_scraped_item(experience=None, education=None, skills=None)
        )
        assert profile.experience == []
        assert profile.education == []
        assert profile.skills == []

    def test_unknown_keys_kept(self) -> None:
        """Extra keys returned by the actor are preserved."""
        profile = ScrapedProfile.model_validate(make_scraped_item(connections=500))
        assert profile.model_extra == {"connections": 500}


@pytest.mark.unit
class TestExtractEventType:
    """Test both accepted callback payload shapes."""

    def test_top_level(self) -> None:
        """eventType at the top level is read."""
        assert extract_event_type(make_callback_payload("ACTOR.RUN.FAILED")) == "ACTOR.RUN.FAILED"

    def test_nested_under_resource(self) -> None:
        """eventType nested under resource is read."""
        payload = make_callback_payload("ACTOR.RUN.TIMED_OUT", nested=True)
        assert extract_event_type(payload) == "ACTOR.RUN.TIMED_OUT"

    def test_top_level_wins(self) -> None:
        """When both are present the top-level value is used."""
        payload = {"eventType": "A", "resource": {"eventType": "B"}}
        assert extract_event_type(payload) == "A"

    @pytest.mark.parametrize(
        "payload",
        [None, {}, {"resource": "not-a-dict"}, {"eventType": ""}, make_callback_payload(None)],
    )
    def test_missing(self, payload: dict[str, object] | None) -> None:
        """Absent or blank event types yield None."""
        assert extract_event_type(payload) is None
