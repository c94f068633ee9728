"""CLI entrypoint using typer."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TypeVar

import structlog
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hiring_pipeline_agents.observability import configure_logging
from hiring_pipeline_agents.orchestrator.workflow import ApplicationWorkflow
from hiring_pipeline_core.config.roles import RoleRegistry
from hiring_pipeline_core.config.settings import Settings
from hiring_pipeline_core.exceptions import (
    ApplicationNotFoundError,
    ApplicationValidationError,
    CallbackRejectedError,
    DuplicateInProgressError,
    RoleRegistryError,
    UnknownRoleError,
)
from hiring_pipeline_infra.db.engine import create_engine
from hiring_pipeline_infra.db.session import create_session_factory, init_db

app = typer.Typer(
    name="hiring-pipeline",
    help="Candidate intake, LinkedIn screening and recruiter notification",
)
console = Console()
logger = structlog.get_logger()

T = TypeVar("T")


def _load_settings(verbose: bool) -> Settings:
    settings = Settings()  # type: ignore[call-arg]
    if verbose:
        settings.log_level = "DEBUG"
    configure_logging(settings)
    return settings


async def _with_workflow(
    settings: Settings,
    action: Callable[[ApplicationWorkflow], Awaitable[T]],
) -> T:
    """Run action against a workflow bound to a fresh engine, then clean up."""
    engine = create_engine(settings)
    try:
        await init_db(engine)
        workflow = ApplicationWorkflow.from_settings(settings, create_session_factory(engine))
        try:
            return await action(workflow)
        finally:
            await workflow.shutdown()
    finally:
        await engine.dispose()


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(code=1)


@app.command()
def roles(
    roles_path: Path | None = typer.Option(
        None,
        "--roles-file",
        envvar="HP_ROLES_PATH",
        help="JSON file replacing the built-in roles",
        exists=True,
    ),
) -> None:
    """List roles currently accepting applications."""
    try:
        registry = RoleRegistry.from_settings(roles_path)
    except RoleRegistryError as e:
        raise _fail(str(e)) from e

    table = Table(title="Open roles")
    table.add_column("Slug")
    table.add_column("Name")
    table.add_column("Challenge")
    for role in registry.active_roles():
        table.add_row(role.slug, role.name, role.challenge_url)
    console.print(table)


@app.command()
def apply(
    name: str = typer.Argument(..., help="Candidate full name"),
    email: str = typer.Argument(..., help="Candidate email"),
    phone: str = typer.Argument(..., help="Candidate phone number"),
    linkedin_url: str = typer.Argument(..., help="LinkedIn profile URL"),
    role: str = typer.Argument(..., help="Role slug"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Submit an application and start profile scraping."""
    settings = _load_settings(verbose)
    submission = {
        "name": name,
        "email": email,
        "phone": phone,
        "linkedin_url": linkedin_url,
        "role": role,
    }

    try:
        result = asyncio.run(_with_workflow(settings, lambda wf: wf.submit(submission)))
    except ApplicationValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        for detail in e.details:
            console.print(f"  {detail['field']}: {detail['message']}")
        raise typer.Exit(code=1) from e
    except UnknownRoleError as e:
        active = ", ".join(r.slug for r in e.active_roles)
        raise _fail(f"Unknown or inactive role '{e.slug}'. Open roles: {active}") from e
    except DuplicateInProgressError as e:
        raise _fail(
            f"An application for this role is already in progress "
            f"({e.application_id}, {e.status})"
        ) from e

    console.print(f"[bold green]Application created:[/bold green] {result.application_id}")
    console.print(f"  Status: {result.status}")
    if result.status == "error":
        raise typer.Exit(code=1)


@app.command()
def status(
    application_id: str = typer.Argument(..., help="Application ID"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Show the public summary of an application."""
    settings = _load_settings(verbose)
    try:
        summary = asyncio.run(
            _with_workflow(settings, lambda wf: wf.get_summary(application_id))
        )
    except ApplicationNotFoundError as e:
        raise _fail(str(e)) from e

    console.print(f"[bold]{summary.name}[/bold] ({summary.role})")
    console.print(f"  Status: {summary.status}")
    if summary.qualified is not None:
        console.print(f"  Qualified: {'yes' if summary.qualified else 'no'}")
    console.print(f"  Created: {summary.created_at.isoformat()}")


@app.command(name="list")
def list_applications(
    limit: int = typer.Option(50, "--limit", min=1, help="Maximum rows to show"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """List recent applications, newest first."""
    settings = _load_settings(verbose)
    summaries = asyncio.run(_with_workflow(settings, lambda wf: wf.list_recent(limit)))

    table = Table(title="Applications")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Role")
    table.add_column("Status")
    table.add_column("Created")
    for s in summaries:
        table.add_row(s.id, s.name, s.role, str(s.status), s.created_at.isoformat())
    console.print(table)


@app.command()
def callback(
    application_id: str = typer.Argument(..., help="Application ID (correlation token)"),
    payload_file: Path | None = typer.Option(
        None, "--payload", help="JSON file with the scraper callback payload", exists=True
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Deliver a scrape callback and wait for processing to finish."""
    settings = _load_settings(verbose)
    payload: dict[str, Any] = {}
    if payload_file is not None:
        try:
            loaded = json.loads(payload_file.read_text())
        except json.JSONDecodeError as e:
            raise _fail(f"Invalid JSON payload: {e}") from e
        if not isinstance(loaded, dict):
            raise _fail("Callback payload must be a JSON object")
        payload = loaded

    async def _deliver(workflow: ApplicationWorkflow) -> tuple[str, str]:
        ack = await workflow.handle_scrape_callback(application_id, payload)
        await workflow.shutdown()
        summary = await workflow.get_summary(application_id)
        return ack.status, str(summary.status)

    try:
        ack_status, final_status = asyncio.run(_with_workflow(settings, _deliver))
    except (ApplicationNotFoundError, CallbackRejectedError) as e:
        raise _fail(str(e)) from e

    console.print(f"[bold]Callback:[/bold] {ack_status}")
    console.print(f"  Status: {final_status}")


@app.command(name="init-db")
def init_db_command(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Create database tables."""
    settings = _load_settings(verbose)

    async def _init() -> None:
        engine = create_engine(settings)
        try:
            await init_db(engine)
        finally:
            await engine.dispose()

    asyncio.run(_init())
    console.print("[green]Database initialized[/green]")


@app.command()
def health() -> None:
    """Print service health."""
    try:
        settings = Settings()  # type: ignore[call-arg]
    except ValueError as e:
        raise _fail(f"Invalid configuration: {e}") from e
    console.print(
        json.dumps(
            {
                "status": "ok",
                "service": settings.service_name,
                "timestamp": datetime.now(UTC).isoformat(),
            }
        )
    )


if __name__ == "__main__":
    app()
