"""LinkedIn profile scraping via Apify actor runs."""

from __future__ import annotations

import base64
import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import httpx
import structlog
from pydantic import ValidationError

from hiring_pipeline_core.constants import (
    APIFY_WEBHOOK_EVENTS,
    CALLBACK_PATH,
    CALLBACK_TOKEN_PARAM,
)
from hiring_pipeline_core.exceptions import ScraperUnavailableError
from hiring_pipeline_core.models.scrape import ScrapedProfile

if TYPE_CHECKING:
    from hiring_pipeline_core.config.settings import Settings

logger = structlog.get_logger()


class ApifyProfileScraper:
    """Start LinkedIn scraping runs on Apify and read their results.

    No call is retried here: a failed start or fetch surfaces immediately
    as ScraperUnavailableError and the caller decides what happens to the
    application.
    """

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        """Initialize with settings and an optional shared HTTP client."""
        self._base_url = settings.apify_base_url.rstrip("/")
        self._actor_id = settings.apify_actor_id
        self._token = settings.apify_token.get_secret_value()
        self._webhook_base_url = settings.webhook_base_url
        self._min_delay = settings.apify_min_delay
        self._max_delay = settings.apify_max_delay
        self._timeout = settings.http_timeout_seconds
        self._client = client

    def callback_url(self, application_id: str) -> str:
        """Build the callback address carrying application_id as correlation token."""
        query = urlencode({CALLBACK_TOKEN_PARAM: application_id})
        return f"{self._webhook_base_url}{CALLBACK_PATH}?{query}"

    async def start(self, profile_url: str, application_id: str) -> str:
        """Start an actor run for one profile URL and return the run id."""
        webhooks = [
            {
                "eventTypes": APIFY_WEBHOOK_EVENTS,
                "requestUrl": self.callback_url(application_id),
            }
        ]
        encoded_webhooks = base64.b64encode(json.dumps(webhooks).encode()).decode()
        run_input = {
            "profileUrls": [profile_url],
            "minDelay": self._min_delay,
            "maxDelay": self._max_delay,
        }

        data = await self._request(
            "POST",
            f"/acts/{self._actor_id}/runs",
            params={"webhooks": encoded_webhooks},
            body=run_input,
        )
        run_id = _dig(data, "data", "id")
        if not isinstance(run_id, str) or not run_id:
            msg = "Apify run response did not contain a run id"
            raise ScraperUnavailableError(msg)

        logger.info("scraping_run_started", run_id=run_id, application_id=application_id)
        return run_id

    async def fetch_result(self, job_id: str) -> ScrapedProfile | None:
        """Resolve the run's dataset and return its first item, or None if empty."""
        run = await self._request("GET", f"/actor-runs/{job_id}")
        dataset_id = _dig(run, "data", "defaultDatasetId")
        if not isinstance(dataset_id, str) or not dataset_id:
            msg = f"Apify run {job_id} has no default dataset"
            raise ScraperUnavailableError(msg)

        items = await self._request(
            "GET",
            f"/datasets/{dataset_id}/items",
            params={"clean": "true", "limit": 1},
        )
        if not isinstance(items, list):
            msg = f"Unexpected dataset items payload for dataset {dataset_id}"
            raise ScraperUnavailableError(msg)
        if not items:
            logger.warning("scraping_dataset_empty", run_id=job_id, dataset_id=dataset_id)
            return None

        try:
            profile = ScrapedProfile.model_validate(items[0])
        except ValidationError as e:
            msg = f"Malformed profile item in dataset {dataset_id}: {e}"
            raise ScraperUnavailableError(msg) from e

        logger.info("scraping_result_fetched", run_id=job_id, dataset_id=dataset_id)
        return profile

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """Issue one Apify API call, mapping every failure to ScraperUnavailableError."""
        url = f"{self._base_url}{path}"
        headers = {"Authorization": f"Bearer {self._token}"}
        try:
            async with self._session() as client:
                response = await client.request(
                    method, url, params=params, json=body, headers=headers
                )
        except httpx.HTTPError as e:
            msg = f"Apify request {method} {path} failed: {e}"
            raise ScraperUnavailableError(msg) from e

        if not response.is_success:
            msg = f"Apify request {method} {path} failed: {response.status_code} - {response.text}"
            raise ScraperUnavailableError(msg)

        try:
            return response.json()
        except ValueError as e:
            msg = f"Apify request {method} {path} returned invalid JSON"
            raise ScraperUnavailableError(msg) from e

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the shared client, or a short-lived one when none was given."""
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client


def _dig(data: Any, *keys: str) -> Any:
    """Walk nested dicts, returning None when any level is missing."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data
