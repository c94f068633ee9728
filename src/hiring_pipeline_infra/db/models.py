"""SQLAlchemy ORM table models."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import JSON

from hiring_pipeline_core.models.application import ApplicationStatus


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class ApplicationModel(Base):
    """One candidate's application to one role.

    The scraped profile and the evaluation are stored as embedded JSON
    documents; they are written once each and never edited afterwards.
    """

    __tablename__ = "applications"
    __table_args__ = (Index("ix_applications_email_role", "email", "role"),)

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )

    # Candidate facts
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    linkedin_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    role: Mapped[str] = mapped_column(String(100), nullable=False)

    # Processing
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ApplicationStatus.PENDING.value, index=True
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    external_job_id: Mapped[str | None] = mapped_column(
        String(100), nullable=True, index=True
    )

    # Embedded documents
    linkedin_profile: Mapped[dict | None] = mapped_column(JSON, nullable=True)  # type: ignore[type-arg]
    evaluation: Mapped[dict | None] = mapped_column(JSON, nullable=True)  # type: ignore[type-arg]

    # Notifications
    email_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    chat_notified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
