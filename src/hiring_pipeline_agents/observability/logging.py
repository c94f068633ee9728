"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars

if TYPE_CHECKING:
    from hiring_pipeline_core.config.settings import Settings

# Event keys that carry candidate PII and are masked before rendering
_EMAIL_KEYS = frozenset({"email", "to", "recipient"})
_PHONE_KEYS = frozenset({"phone"})


def mask_email(value: str) -> str:
    """Keep the first character of the local part and the domain."""
    local, sep, domain = value.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"


def mask_phone(value: str) -> str:
    """Keep only the last four digits."""
    digits = "".join(ch for ch in value if ch.isdigit())
    return f"***{digits[-4:]}" if digits else "***"


def redact_pii(
    _logger: object, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor masking candidate emails and phone numbers."""
    for key in _EMAIL_KEYS & event_dict.keys():
        if isinstance(event_dict[key], str):
            event_dict[key] = mask_email(event_dict[key])
    for key in _PHONE_KEYS & event_dict.keys():
        if isinstance(event_dict[key], str):
            event_dict[key] = mask_phone(event_dict[key])
    return event_dict


def configure_logging(settings: Settings) -> None:
    """Configure structlog with JSON or console rendering.

    Routes stdlib logging (httpx, sqlalchemy, anthropic) through the same
    processor chain so every line carries the bound application context.
    """
    shared_processors: list[structlog.types.Processor] = [
        merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_pii,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    level = _resolve_level(settings.log_level)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in ("httpx", "httpcore", "anthropic", "sqlalchemy.engine", "aiosqlite"):
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def bind_application_context(application_id: str, **extra: str) -> None:
    """Bind application_id (and any extra keys) to subsequent log entries."""
    bind_contextvars(application_id=application_id, **extra)


def clear_application_context() -> None:
    """Clear all bound context variables."""
    clear_contextvars()


def _resolve_level(level_name: str) -> int:
    """Convert a level name string to a logging level int."""
    level = logging.getLevelName(level_name.upper())
    return level if isinstance(level, int) else logging.INFO
