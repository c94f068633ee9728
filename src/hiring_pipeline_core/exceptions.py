"""Custom exception hierarchy for hiring-pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hiring_pipeline_core.config.roles import Role


class HiringPipelineError(Exception):
    """Base exception for all hiring-pipeline errors."""


# --- Intake ---


class ApplicationValidationError(HiringPipelineError):
    """Raised when intake input fails validation. No record is created."""

    def __init__(self, message: str, details: list[dict[str, str]] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class UnknownRoleError(HiringPipelineError):
    """Raised when the requested role slug is unknown or inactive."""

    def __init__(self, slug: str, active_roles: list[Role]) -> None:
        super().__init__(f"Role not found or inactive: {slug}")
        self.slug = slug
        self.active_roles = active_roles


class DuplicateInProgressError(HiringPipelineError):
    """Raised when an in-flight application already exists for (email, role)."""

    def __init__(self, application_id: str, status: str) -> None:
        super().__init__(
            f"Application {application_id} already in progress with status {status}"
        )
        self.application_id = application_id
        self.status = status


class ApplicationNotFoundError(HiringPipelineError):
    """Raised when no application exists for the given id."""


class CallbackRejectedError(HiringPipelineError):
    """Raised when a scrape callback carries no usable correlation token."""


class RoleRegistryError(HiringPipelineError):
    """Raised when a role override file cannot be loaded."""


class RubricError(HiringPipelineError):
    """Raised when a rubric override file cannot be loaded."""


# --- Scraping ---


class ScraperUnavailableError(HiringPipelineError):
    """Raised when the scraping service rejects a call or returns non-success."""


# --- Scoring ---


class ScoringError(HiringPipelineError):
    """Base class for failures while scoring a candidate."""


class ScoringParseError(ScoringError):
    """Raised when no JSON object can be extracted from the scoring response."""


class ScoringServiceError(ScoringError):
    """Raised when the reasoning service call itself fails."""


class InvalidVerdictError(HiringPipelineError):
    """Raised when the extracted verdict lacks a numeric score or bullet list."""


# --- Notifications ---


class NotificationError(HiringPipelineError):
    """Base class for best-effort notification failures."""


class EmailDeliveryError(NotificationError):
    """Raised when email sending fails."""


class ChatDeliveryError(NotificationError):
    """Raised when the chat service rejects a message."""
