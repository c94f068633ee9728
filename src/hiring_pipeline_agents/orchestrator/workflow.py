"""Application state machine: intake, scrape callback, scoring, notification."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from hiring_pipeline_agents.agents.candidate_scorer import CandidateScorerAgent
from hiring_pipeline_agents.agents.notifier import Notifier
from hiring_pipeline_agents.observability import (
    bind_application_context,
    clear_application_context,
)
from hiring_pipeline_agents.orchestrator.background import BackgroundTaskRunner
from hiring_pipeline_agents.tools.chat_client import RoamChatClient
from hiring_pipeline_agents.tools.email_sender import EmailSender
from hiring_pipeline_agents.tools.profile_markdown import build_linkedin_profile
from hiring_pipeline_agents.tools.profile_scraper import ApifyProfileScraper
from hiring_pipeline_core.config.roles import Role, RoleRegistry
from hiring_pipeline_core.constants import (
    APIFY_FAILURE_EVENTS,
    ERROR_MISSING_JOB_ID,
    ERROR_NO_PROFILE_DATA,
    ERROR_SCRAPE_FAILED,
    ERROR_SCRAPE_START_FAILED,
)
from hiring_pipeline_core.exceptions import (
    ApplicationNotFoundError,
    ApplicationValidationError,
    CallbackRejectedError,
    ChatDeliveryError,
    DuplicateInProgressError,
    EmailDeliveryError,
    InvalidVerdictError,
    ScoringError,
    ScraperUnavailableError,
    UnknownRoleError,
)
from hiring_pipeline_core.models.application import (
    ApplicationStatus,
    ApplicationSummary,
    CallbackAck,
    CandidateSubmission,
    Evaluation,
    IntakeResult,
)
from hiring_pipeline_core.models.scrape import extract_event_type
from hiring_pipeline_infra.db.models import ApplicationModel
from hiring_pipeline_infra.db.repositories.application_repo import ApplicationRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from hiring_pipeline_core.config.settings import Settings
    from hiring_pipeline_core.interfaces import ProfileScraper

logger = structlog.get_logger()

# A scrape callback only advances records still waiting on the scraper
_AWAITING_SCRAPE: frozenset[str] = frozenset(
    {ApplicationStatus.PENDING.value, ApplicationStatus.SCRAPING.value}
)


def _validate_submission(data: CandidateSubmission | Mapping[str, Any]) -> CandidateSubmission:
    """Build a CandidateSubmission, mapping pydantic errors to per-field details."""
    if isinstance(data, CandidateSubmission):
        return data
    try:
        return CandidateSubmission.model_validate(dict(data))
    except ValidationError as e:
        details = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        msg = "Invalid application data"
        raise ApplicationValidationError(msg, details) from e


def _to_summary(application: ApplicationModel) -> ApplicationSummary:
    evaluation = application.evaluation or {}
    return ApplicationSummary(
        id=application.id,
        name=application.name,
        role=application.role,
        status=ApplicationStatus(application.status),
        qualified=evaluation.get("qualified"),
        created_at=application.created_at,
    )


class ApplicationWorkflow:
    """Drives applications through pending -> scraping -> evaluating -> verdict.

    Every status change is committed before the next external call, so a
    crash between steps leaves at most one side effect unresolved. Failures
    while advancing status park the record in ``error``; notification
    failures are logged and never change status.
    """

    def __init__(
        self,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession],
        scraper: ProfileScraper,
        scorer: CandidateScorerAgent,
        notifier: Notifier,
        roles: RoleRegistry,
        runner: BackgroundTaskRunner | None = None,
    ) -> None:
        """Initialize with settings, persistence and the external collaborators."""
        self.settings = settings
        self._session_factory = session_factory
        self._scraper = scraper
        self._scorer = scorer
        self._notifier = notifier
        self._roles = roles
        self.runner = runner or BackgroundTaskRunner()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> ApplicationWorkflow:
        """Wire the production scraper, scorer, notifier and role registry."""
        return cls(
            settings=settings,
            session_factory=session_factory,
            scraper=ApifyProfileScraper(settings),
            scorer=CandidateScorerAgent(settings),
            notifier=Notifier(
                settings,
                email_sender=EmailSender.from_settings(settings),
                chat_client=RoamChatClient(settings),
            ),
            roles=RoleRegistry.from_settings(settings.roles_path),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_roles(self) -> list[Role]:
        """Return the roles currently accepting applications."""
        return self._roles.active_roles()

    async def get_summary(self, application_id: str) -> ApplicationSummary:
        """Return the public view of one application."""
        async with self._session_factory() as session:
            application = await ApplicationRepository(session).get_by_id(application_id)
        if application is None:
            msg = f"Application not found: {application_id}"
            raise ApplicationNotFoundError(msg)
        return _to_summary(application)

    async def list_recent(self, limit: int = 50) -> list[ApplicationSummary]:
        """Return applications newest first, for operational review."""
        async with self._session_factory() as session:
            applications = await ApplicationRepository(session).list_recent(limit)
        return [_to_summary(a) for a in applications]

    # ------------------------------------------------------------------
    # Intake
    # ------------------------------------------------------------------

    async def submit(self, data: CandidateSubmission | Mapping[str, Any]) -> IntakeResult:
        """Create an application and start scraping its LinkedIn profile.

        A scraper failure does not fail the call: the record is created and
        parked in ``error`` and the snapshot reports that status.
        """
        submission = _validate_submission(data)
        if not self._roles.is_active(submission.role):
            raise UnknownRoleError(submission.role, self._roles.active_roles())

        async with self._session_factory() as session:
            repo = ApplicationRepository(session)
            existing = await repo.find_in_progress(submission.email, submission.role)
            if existing is not None:
                logger.info(
                    "application_duplicate",
                    existing_id=existing.id,
                    status=existing.status,
                    role=submission.role,
                )
                raise DuplicateInProgressError(existing.id, existing.status)

            application = await repo.create(
                ApplicationModel(
                    name=submission.name,
                    email=submission.email,
                    phone=submission.phone,
                    linkedin_url=submission.linkedin_url,
                    role=submission.role,
                    status=ApplicationStatus.PENDING.value,
                )
            )
            logger.info(
                "application_created",
                application_id=application.id,
                email=application.email,
                role=application.role,
            )

            await self._start_scraping(repo, application)
            return IntakeResult(
                application_id=application.id,
                status=ApplicationStatus(application.status),
            )

    async def _start_scraping(
        self, repo: ApplicationRepository, application: ApplicationModel
    ) -> None:
        """pending -> scraping on success, pending -> error on failure."""
        try:
            job_id = await self._scraper.start(application.linkedin_url, application.id)
        except ScraperUnavailableError as e:
            logger.error(
                "scraping_start_failed", application_id=application.id, error=str(e)
            )
            await self._park_in_error(repo, application, ERROR_SCRAPE_START_FAILED)
            return

        application.external_job_id = job_id
        application.status = ApplicationStatus.SCRAPING.value
        await repo.save(application)
        logger.info("scraping_started", application_id=application.id, job_id=job_id)

    # ------------------------------------------------------------------
    # Scrape callback
    # ------------------------------------------------------------------

    async def handle_scrape_callback(
        self,
        application_id: str | None,
        payload: Mapping[str, Any] | None,
    ) -> CallbackAck:
        """Acknowledge a scraper callback and detach candidate processing.

        The returned ack never waits on fetching, scoring or notifying.
        Missing or unknown correlation tokens are rejected synchronously.
        """
        if not application_id:
            msg = "Missing applicationId"
            raise CallbackRejectedError(msg)

        event_type = extract_event_type(dict(payload) if payload else None)

        async with self._session_factory() as session:
            repo = ApplicationRepository(session)
            application = await repo.get_by_id(application_id)
            if application is None:
                msg = f"Application not found: {application_id}"
                raise ApplicationNotFoundError(msg)

            logger.info(
                "scrape_callback_received",
                application_id=application_id,
                event_type=event_type,
                status=application.status,
            )

            if application.status not in _AWAITING_SCRAPE:
                logger.info(
                    "scrape_callback_ignored",
                    application_id=application_id,
                    status=application.status,
                )
                return CallbackAck(status="ignored")

            if event_type in APIFY_FAILURE_EVENTS:
                await self._park_in_error(repo, application, ERROR_SCRAPE_FAILED)
                return CallbackAck(status="failed")

        self.runner.spawn(
            self.process_candidate(application_id),
            name=f"process-candidate-{application_id}",
        )
        return CallbackAck(status="processing")

    async def process_candidate(self, application_id: str) -> None:
        """Fetch, project, score and notify for one application."""
        bind_application_context(application_id)
        try:
            async with self._session_factory() as session:
                repo = ApplicationRepository(session)
                application = await repo.get_by_id(application_id)
                if application is None:
                    logger.error("application_not_found", application_id=application_id)
                    return
                if application.status not in _AWAITING_SCRAPE:
                    logger.info("processing_skipped", status=application.status)
                    return

                evaluation = await self._advance(session, repo, application)
                if evaluation is not None:
                    await self._notify(repo, application, evaluation)
        finally:
            clear_application_context()

    async def _advance(
        self,
        session: AsyncSession,
        repo: ApplicationRepository,
        application: ApplicationModel,
    ) -> Evaluation | None:
        """Run the status-changing steps, parking the record on any failure."""
        try:
            return await self._scrape_and_score(repo, application)
        except (ScraperUnavailableError, ScoringError, InvalidVerdictError) as e:
            logger.error(
                "processing_failed",
                status=application.status,
                error_type=type(e).__name__,
                error=str(e),
            )
            await self._park_in_error(repo, application, str(e))
        except Exception as e:
            logger.exception(
                "processing_unexpected_error",
                status=application.status,
                error_type=type(e).__name__,
            )
            await session.rollback()
            await session.refresh(application)
            await self._park_in_error(repo, application, f"unexpected error: {e}")
        return None

    async def _scrape_and_score(
        self, repo: ApplicationRepository, application: ApplicationModel
    ) -> Evaluation | None:
        """scraping -> evaluating -> qualified|rejected."""
        if not application.external_job_id:
            await self._park_in_error(repo, application, ERROR_MISSING_JOB_ID)
            return None

        scraped = await self._scraper.fetch_result(application.external_job_id)
        if scraped is None:
            await self._park_in_error(repo, application, ERROR_NO_PROFILE_DATA)
            return None

        profile = build_linkedin_profile(scraped)
        application.linkedin_profile = profile.model_dump(mode="json")
        application.status = ApplicationStatus.EVALUATING.value
        await repo.save(application)
        logger.info(
            "profile_scraped",
            experience=len(profile.experience),
            education=len(profile.education),
            skills=len(profile.skills),
        )

        evaluation = await self._scorer.evaluate(
            profile.raw_markdown,
            application.name,
            self.settings.score_threshold,
        )
        application.evaluation = evaluation.model_dump(mode="json")
        application.status = (
            ApplicationStatus.QUALIFIED.value
            if evaluation.qualified
            else ApplicationStatus.REJECTED.value
        )
        await repo.save(application)
        logger.info(
            "candidate_evaluated",
            score=evaluation.score,
            qualified=evaluation.qualified,
            status=application.status,
        )
        return evaluation

    async def _notify(
        self,
        repo: ApplicationRepository,
        application: ApplicationModel,
        evaluation: Evaluation,
    ) -> None:
        """Best-effort notifications. Sent channels are never re-sent."""
        role = self._roles.get(application.role)
        role_name = role.name if role else application.role

        if evaluation.qualified:
            await self._send_challenge_email(repo, application, role)
            message = self._notifier.render_qualified_message(
                name=application.name,
                email=application.email,
                phone=application.phone,
                linkedin_url=application.linkedin_url,
                role_name=role_name,
                evaluation=evaluation,
                email_sent=application.email_sent_at is not None,
            )
        else:
            message = self._notifier.render_rejected_message(
                name=application.name,
                email=application.email,
                phone=application.phone,
                linkedin_url=application.linkedin_url,
                role_name=role_name,
                evaluation=evaluation,
                score_threshold=self.settings.score_threshold,
            )

        if application.chat_notified_at is not None:
            logger.info("chat_notification_already_sent")
            return
        try:
            await self._notifier.send_chat_notification(message)
        except ChatDeliveryError as e:
            logger.error("chat_notification_failed", error=str(e))
            return
        application.chat_notified_at = datetime.now(UTC)
        await repo.save(application)
        logger.info("chat_notification_sent", qualified=evaluation.qualified)

    async def _send_challenge_email(
        self,
        repo: ApplicationRepository,
        application: ApplicationModel,
        role: Role | None,
    ) -> None:
        if application.email_sent_at is not None:
            logger.info("challenge_email_already_sent")
            return
        if role is None:
            logger.warning("challenge_email_skipped_unknown_role", role=application.role)
            return
        try:
            await self._notifier.send_challenge_email(
                recipient_email=application.email,
                candidate_name=application.name,
                challenge_link=role.challenge_url,
                role_name=role.name,
            )
        except EmailDeliveryError as e:
            logger.error("challenge_email_failed", error=str(e))
            return
        application.email_sent_at = datetime.now(UTC)
        await repo.save(application)

    async def _park_in_error(
        self,
        repo: ApplicationRepository,
        application: ApplicationModel,
        message: str,
    ) -> None:
        """Move a record to ``error`` with a message and commit."""
        previous = application.status
        application.status = ApplicationStatus.ERROR.value
        application.error_message = message
        await repo.save(application)
        logger.warning(
            "application_error",
            application_id=application.id,
            previous_status=previous,
            error=message,
        )

    async def shutdown(self) -> None:
        """Wait for detached processing to finish."""
        await self.runner.drain()
