"""Application aggregate: intake input, status, profile projection, verdict."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from urllib.parse import urlparse

from pydantic import BaseModel, EmailStr, Field, field_validator

from hiring_pipeline_core.constants import BULLET_COUNT


class ApplicationStatus(StrEnum):
    """Lifecycle states of an application."""

    PENDING = "pending"
    SCRAPING = "scraping"
    EVALUATING = "evaluating"
    QUALIFIED = "qualified"
    REJECTED = "rejected"
    ERROR = "error"


# Statuses that block a new application for the same (email, role)
ACTIVE_STATUSES: frozenset[ApplicationStatus] = frozenset(
    {
        ApplicationStatus.PENDING,
        ApplicationStatus.SCRAPING,
        ApplicationStatus.EVALUATING,
        ApplicationStatus.QUALIFIED,
    }
)

TERMINAL_STATUSES: frozenset[ApplicationStatus] = frozenset(
    {
        ApplicationStatus.QUALIFIED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.ERROR,
    }
)


def normalize_email(email: str) -> str:
    """Lower-case and strip an email address."""
    return email.strip().lower()


class CandidateSubmission(BaseModel):
    """Candidate facts submitted at intake."""

    name: str = Field(min_length=2, max_length=100, description="Full name")
    email: EmailStr = Field(description="Contact email address")
    phone: str = Field(min_length=10, max_length=20, description="Phone number")
    linkedin_url: str = Field(description="LinkedIn profile URL")
    role: str = Field(min_length=1, description="Role slug")

    @field_validator("name", "phone", "role", mode="before")
    @classmethod
    def strip_text(cls, value: object) -> object:
        """Trim surrounding whitespace from free-text fields."""
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def lower_email(cls, value: object) -> object:
        """Normalize email case before validation."""
        return normalize_email(value) if isinstance(value, str) else value

    @field_validator("linkedin_url")
    @classmethod
    def validate_linkedin_url(cls, value: str) -> str:
        """Require an http(s) URL pointing at a LinkedIn profile."""
        value = value.strip()
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            msg = "linkedin_url must be a valid URL"
            raise ValueError(msg)
        if "linkedin.com/in/" not in value:
            msg = "linkedin_url must point to a LinkedIn profile (linkedin.com/in/...)"
            raise ValueError(msg)
        return value


class Education(BaseModel):
    """Education entry of a scraped profile."""

    school: str = Field(description="School name")
    degree: str | None = Field(default=None, description="Degree name")
    field: str | None = Field(default=None, description="Field of study")
    date_range: str | None = Field(default=None, description="Attendance date range")


class Experience(BaseModel):
    """Experience entry of a scraped profile."""

    company: str = Field(description="Company name")
    title: str = Field(description="Job title")
    location: str | None = Field(default=None, description="Job location")
    start_date: str | None = Field(default=None, description="Start of the date range")
    end_date: str | None = Field(default=None, description="End of the date range")
    description: str | None = Field(default=None, description="Role description")


class LinkedInProfile(BaseModel):
    """Structured projection of a scraped LinkedIn profile."""

    headline: str | None = Field(default=None, description="Profile headline")
    location: str | None = Field(default=None, description="Profile location")
    summary: str | None = Field(default=None, description="About section")
    education: list[Education] = Field(default_factory=list, description="Ordered education")
    experience: list[Experience] = Field(default_factory=list, description="Ordered experience")
    skills: list[str] = Field(default_factory=list, description="Distinct skills")
    raw_markdown: str = Field(description="Normalized document consumed by the scorer")


class Evaluation(BaseModel):
    """Scoring verdict for a candidate."""

    score: float = Field(description="Total rubric score")
    qualified: bool = Field(description="score >= configured threshold")
    bullets: list[str] = Field(
        min_length=BULLET_COUNT,
        max_length=BULLET_COUNT,
        description="Exactly five summary bullets",
    )
    reasoning: str = Field(default="", description="Free-text justification")
    evaluated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When scoring finished"
    )


class IntakeResult(BaseModel):
    """Snapshot returned to the applicant after intake."""

    application_id: str = Field(description="Assigned application id")
    status: ApplicationStatus = Field(description="Status right after intake")


class ApplicationSummary(BaseModel):
    """Public view of an application. Never includes profile or reasoning."""

    id: str = Field(description="Application id")
    name: str = Field(description="Candidate name")
    role: str = Field(description="Role slug")
    status: ApplicationStatus = Field(description="Current status")
    qualified: bool | None = Field(default=None, description="Verdict, once evaluated")
    created_at: datetime = Field(description="Creation time")


class CallbackAck(BaseModel):
    """Immediate acknowledgment returned to the scrape callback sender."""

    received: bool = Field(default=True, description="Callback accepted")
    status: str = Field(description="'failed', 'processing' or 'ignored'")
