"""Domain models for hiring-pipeline."""

from hiring_pipeline_core.models.application import (
    ACTIVE_STATUSES,
    TERMINAL_STATUSES,
    ApplicationStatus,
    ApplicationSummary,
    CallbackAck,
    CandidateSubmission,
    Education,
    Evaluation,
    Experience,
    IntakeResult,
    LinkedInProfile,
    normalize_email,
)
from hiring_pipeline_core.models.scrape import (
    ScrapedEducation,
    ScrapedExperience,
    ScrapedProfile,
    extract_event_type,
)

__all__ = [
    "ACTIVE_STATUSES",
    "TERMINAL_STATUSES",
    "ApplicationStatus",
    "ApplicationSummary",
    "CallbackAck",
    "CandidateSubmission",
    "Education",
    "Evaluation",
    "Experience",
    "IntakeResult",
    "LinkedInProfile",
    "ScrapedEducation",
    "ScrapedExperience",
    "ScrapedProfile",
    "extract_event_type",
    "normalize_email",
]
