"""Shared constants for hiring-pipeline."""

from __future__ import annotations

# Prompt versions: increment when prompt templates change
SCREENING_PROMPT_VERSION = "v1"

# Evaluation bullets are always normalized to this many entries
BULLET_COUNT = 5
BULLET_PLACEHOLDER = "Information not available"

# Apify run lifecycle events delivered to the scrape callback
APIFY_EVENT_SUCCEEDED = "ACTOR.RUN.SUCCEEDED"
APIFY_EVENT_FAILED = "ACTOR.RUN.FAILED"
APIFY_EVENT_ABORTED = "ACTOR.RUN.ABORTED"
APIFY_EVENT_TIMED_OUT = "ACTOR.RUN.TIMED_OUT"

APIFY_WEBHOOK_EVENTS: list[str] = [
    APIFY_EVENT_SUCCEEDED,
    APIFY_EVENT_FAILED,
    APIFY_EVENT_ABORTED,
    APIFY_EVENT_TIMED_OUT,
]
APIFY_FAILURE_EVENTS: frozenset[str] = frozenset(
    {APIFY_EVENT_FAILED, APIFY_EVENT_ABORTED, APIFY_EVENT_TIMED_OUT}
)

# Query parameter carrying the correlation token on the callback URL
CALLBACK_PATH = "/webhook/apify"
CALLBACK_TOKEN_PARAM = "applicationId"

# Record error messages
ERROR_SCRAPE_START_FAILED = "failed to start LinkedIn scraping"
ERROR_SCRAPE_FAILED = "scraping failed"
ERROR_NO_PROFILE_DATA = "no profile data returned from scraping"
ERROR_MISSING_JOB_ID = "missing scraping job id"
