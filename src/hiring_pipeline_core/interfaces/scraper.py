"""Abstract profile scraper interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from hiring_pipeline_core.models.scrape import ScrapedProfile


@runtime_checkable
class ProfileScraper(Protocol):
    """Asynchronous external scraping job for one profile URL."""

    async def start(self, profile_url: str, application_id: str) -> str:
        """Register a scraping job whose callback carries application_id. Returns the job id."""
        ...

    async def fetch_result(self, job_id: str) -> ScrapedProfile | None:
        """Return the first scraped item of a finished job, or None if empty."""
        ...
