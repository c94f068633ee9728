"""Factory functions returning valid domain model instances."""

from __future__ import annotations

from typing import Any

from hiring_pipeline_core.constants import APIFY_EVENT_FAILED, APIFY_EVENT_SUCCEEDED
from hiring_pipeline_core.models.application import (
    ApplicationStatus,
    CandidateSubmission,
    Evaluation,
)
from hiring_pipeline_core.models.scrape import ScrapedProfile
from hiring_pipeline_infra.db.models import ApplicationModel


def make_submission_data(**overrides: object) -> dict[str, Any]:
    """Create raw intake input as a web form would post it."""
    defaults: dict[str, Any] = {
        "name": "Maria Silva",
        "email": "Maria.Silva@Example.com",
        "phone": "(11) 98765-4321",
        "linkedin_url": "https://www.linkedin.com/in/maria-silva",
        "role": "sdet-jr",
    }
    defaults.update(overrides)
    return defaults


def make_submission(**overrides: object) -> CandidateSubmission:
    """Create a validated CandidateSubmission."""
    return CandidateSubmission(**make_submission_data(**overrides))


def make_scraped_item(**overrides: object) -> dict[str, Any]:
    """Create one raw dataset item in the scraper's camelCase shape."""
    defaults: dict[str, Any] = {
        "url": "https://www.linkedin.com/in/maria-silva",
        "fullName": "Maria Silva",
        "headline": "QA Engineer | Test Automation",
        "location": "São Carlos, São Paulo, Brazil",
        "summary": "Automation enthusiast.",
        "experience": [
            {
                "companyName": "Acme",
                "title": "QA Analyst",
                "location": "Remote",
                "dateRange": "Jan 2022 - Present",
                "description": "Playwright and Cypress suites.",
            }
        ],
        "education": [
            {
                "schoolName": "UFSCar",
                "degreeName": "Bachelor",
                "fieldOfStudy": "Computer Science",
                "dateRange": "2017 - 2021",
            }
        ],
        "skills": ["Playwright", "TypeScript", "Playwright"],
    }
    defaults.update(overrides)
    return defaults


def make_scraped_profile(**overrides: object) -> ScrapedProfile:
    """Create a ScrapedProfile from a raw dataset item."""
    return ScrapedProfile.model_validate(make_scraped_item(**overrides))


def make_evaluation(**overrides: object) -> Evaluation:
    """Create a qualified Evaluation with five bullets."""
    defaults: dict[str, Any] = {
        "score": 14,
        "qualified": True,
        "bullets": [
            "Federal university graduate",
            "Lives in an inland tech hub",
            "Remote QA experience",
            "Playwright in production",
            "Active open-source contributor",
        ],
        "reasoning": "Education 3, Location 4, Experience 4, Proactivity 3.",
    }
    defaults.update(overrides)
    return Evaluation(**defaults)


def make_application_model(**overrides: object) -> ApplicationModel:
    """Create an unsaved ApplicationModel in the scraping state."""
    defaults: dict[str, Any] = {
        "name": "Maria Silva",
        "email": "maria.silva@example.com",
        "phone": "(11) 98765-4321",
        "linkedin_url": "https://www.linkedin.com/in/maria-silva",
        "role": "sdet-jr",
        "status": ApplicationStatus.SCRAPING.value,
        "external_job_id": "run-123",
    }
    defaults.update(overrides)
    return ApplicationModel(**defaults)


def make_callback_payload(
    event_type: str | None = APIFY_EVENT_SUCCEEDED, *, nested: bool = False
) -> dict[str, Any]:
    """Create a scrape callback payload, top-level or nested under resource."""
    payload: dict[str, Any] = {"resource": {"id": "run-123", "defaultDatasetId": "ds-1"}}
    if event_type is None:
        return payload
    if nested:
        payload["resource"]["eventType"] = event_type
    else:
        payload["eventType"] = event_type
    return payload


def make_failure_payload(*, nested: bool = False) -> dict[str, Any]:
    """Create a failed-run callback payload."""
    return make_callback_payload(APIFY_EVENT_FAILED, nested=nested)
