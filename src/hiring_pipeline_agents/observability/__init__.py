"""Observability: structured logging."""

from hiring_pipeline_agents.observability.logging import (
    bind_application_context,
    clear_application_context,
    configure_logging,
    mask_email,
    mask_phone,
    redact_pii,
)

__all__ = [
    "bind_application_context",
    "clear_application_context",
    "configure_logging",
    "mask_email",
    "mask_phone",
    "redact_pii",
]
