"""Application repository for database operations."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hiring_pipeline_core.models.application import ACTIVE_STATUSES, normalize_email
from hiring_pipeline_infra.db.models import ApplicationModel


class ApplicationRepository:
    """CRUD operations for applications.

    Every write commits immediately so each state transition is durable
    before the next external call is made.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize with an async session."""
        self._session = session

    async def get_by_id(self, application_id: str) -> ApplicationModel | None:
        """Retrieve an application by ID."""
        return await self._session.get(ApplicationModel, application_id)

    async def find_in_progress(self, email: str, role: str) -> ApplicationModel | None:
        """Find an application for (email, role) whose status blocks a new one."""
        stmt = (
            select(ApplicationModel)
            .where(
                ApplicationModel.email == normalize_email(email),
                ApplicationModel.role == role,
                ApplicationModel.status.in_([s.value for s in ACTIVE_STATUSES]),
            )
            .order_by(ApplicationModel.created_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, model: ApplicationModel) -> ApplicationModel:
        """Insert a new application and commit."""
        model.email = normalize_email(model.email)
        self._session.add(model)
        await self._session.commit()
        return model

    async def save(self, model: ApplicationModel) -> ApplicationModel:
        """Commit pending changes to an application."""
        self._session.add(model)
        await self._session.commit()
        return model

    async def list_recent(self, limit: int = 50) -> list[ApplicationModel]:
        """List applications ordered by creation time, newest first."""
        stmt = (
            select(ApplicationModel)
            .order_by(ApplicationModel.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
