"""Raw scraper dataset item and callback payload models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ScrapedEducation(BaseModel):
    """Education entry as returned by the LinkedIn scraper."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    school_name: str | None = Field(default=None, alias="schoolName")
    degree_name: str | None = Field(default=None, alias="degreeName")
    field_of_study: str | None = Field(default=None, alias="fieldOfStudy")
    date_range: str | None = Field(default=None, alias="dateRange")


class ScrapedExperience(BaseModel):
    """Experience entry as returned by the LinkedIn scraper."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    company_name: str | None = Field(default=None, alias="companyName")
    title: str | None = None
    location: str | None = None
    date_range: str | None = Field(default=None, alias="dateRange")
    description: str | None = None


class ScrapedProfile(BaseModel):
    """One dataset item produced by the LinkedIn profile scraper.

    Unknown keys are kept so nothing the actor returns is lost.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    url: str | None = None
    full_name: str | None = Field(default=None, alias="fullName")
    headline: str | None = None
    location: str | None = None
    summary: str | None = None
    education: list[ScrapedEducation] = Field(default_factory=list)
    experience: list[ScrapedExperience] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)

    @field_validator("education", "experience", "skills", mode="before")
    @classmethod
    def none_as_empty(cls, value: object) -> object:
        """Treat explicit nulls from the actor as empty lists."""
        return [] if value is None else value


def extract_event_type(payload: dict[str, Any] | None) -> str | None:
    """Return the callback event type from either accepted payload shape.

    The scraper sends ``eventType`` at the top level for some webhook
    templates and nested under ``resource`` for others. Both are accepted.
    """
    if not payload:
        return None
    event_type = payload.get("eventType")
    if isinstance(event_type, str) and event_type:
        return event_type
    resource = payload.get("resource")
    if isinstance(resource, dict):
        nested = resource.get("eventType")
        if isinstance(nested, str) and nested:
            return nested
    return None
