"""CLI entry point: commitledger.

Subcommands:
    commitledger init-db                         # Create tables
    commitledger team TEAM_ID [--json]           # Aggregate + store one team
    commitledger metrics TEAM_ID [--json]        # Show stored metrics of one team
    commitledger assignment ASSIGNMENT_ID        # Aggregate + store every team
    commitledger links URL... --since 2024-01-01 # Aggregate ad-hoc links, no DB
"""

from __future__ import annotations

import asyncio
import json
import sys
import uuid
from datetime import datetime, timezone

import click
from dotenv import load_dotenv

from commitledger.core.config import Settings, load_settings
from commitledger.core.database import create_all, create_engine, create_session_factory
from commitledger.core.logging import setup_logging
from commitledger.dao.metric_dao import MetricDAO
from commitledger.dao.metric_source_dao import MetricSourceDAO
from commitledger.dao.participant_dao import ParticipantDAO
from commitledger.dao.team_dao import AssignmentDAO, TeamDAO
from commitledger.engines.github_metrics.collector import collect_team_metrics
from commitledger.engines.github_metrics.github_client import GitHubClient
from commitledger.engines.github_metrics.models import TeamMetrics, TeamRunResult
from commitledger.engines.github_metrics.runner import TeamMetricsRunner, require_credential
from commitledger.models import Metric
from commitledger.services import MissingCredentialError, NotFoundError
from commitledger.services.metric_service import MetricService
from commitledger.services.participant_service import ParticipantService
from commitledger.services.team_service import TeamService

EXIT_NEEDS_AUTH = 2


def build_metric_service(settings: Settings) -> MetricService:
    participant_service = ParticipantService(ParticipantDAO(), settings.institution_domain)
    return MetricService(
        MetricDAO(), MetricSourceDAO(), participant_service, settings.metric_source
    )


def build_runner(settings: Settings) -> TeamMetricsRunner:
    """Wire DAOs and services into a runner."""
    metric_service = build_metric_service(settings)
    team_service = TeamService(TeamDAO(), AssignmentDAO())
    return TeamMetricsRunner(
        team_service,
        metric_service,
        excluded=settings.collaborators,
        max_pages=settings.max_pages,
        max_concurrency=settings.max_concurrency,
    )


def _parse_since(value: str) -> datetime:
    try:
        since = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise click.BadParameter(f"not an ISO-8601 date: {value!r}") from exc
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    return since


def _parse_uuid(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError as exc:
        raise click.BadParameter(f"not a UUID: {value!r}") from exc


def _print_metrics(metrics: TeamMetrics, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(metrics.to_dict(), indent=2))
        return
    click.echo(f"Dates: {', '.join(metrics.dates) or '-'}")
    for author, total in sorted(metrics.author_totals.items()):
        click.echo(f"  {author} <{metrics.authors.get(author, '')}>: {total} commits")
    click.echo(
        f"Additions: {metrics.total_additions}  Deletions: {metrics.total_deletions}  "
        f"Files changed: {metrics.total_files_changed}  Commits: {metrics.total_commits}"
    )
    for number, status in sorted(metrics.merge_status.items()):
        check = metrics.check_statuses.get(number, "-")
        click.echo(f"  PR #{number}: {status} (checks: {check})")
    for err in metrics.errors:
        click.echo(f"  ! {err}", err=True)


def _print_result(result: TeamRunResult) -> None:
    authors = len(result.metrics.author_totals) if result.metrics else 0
    click.echo(f"team {result.team_id}: {authors} authors, {result.stored} metrics stored")
    for err in result.errors:
        click.echo(f"  ! {err}", err=True)


def _metric_row(metric: Metric) -> dict:
    return {
        "github_id": metric.github_id,
        "total_commits": metric.total_commits,
        "participant_id": str(metric.participant_id) if metric.participant_id else None,
    }


def _needs_auth(exc: MissingCredentialError) -> None:
    click.echo(f"{exc}. Set GITHUB_TOKEN and retry.", err=True)
    sys.exit(EXIT_NEEDS_AUTH)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Commit ledger: per-team GitHub contribution metrics."""
    load_dotenv()
    setup_logging("DEBUG" if verbose else None)
    try:
        ctx.obj = load_settings()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc


@main.command("init-db")
@click.pass_obj
def init_db(settings: Settings) -> None:
    """Create database tables."""

    async def _run() -> None:
        engine = create_engine(settings.database_url)
        try:
            await create_all(engine)
        finally:
            await engine.dispose()

    asyncio.run(_run())
    click.echo("tables created")


@main.command("links")
@click.argument("urls", nargs=-1, required=True)
@click.option("--since", required=True, help="Earliest commit date for repository links")
@click.option("--json", "as_json", is_flag=True, help="Print the full report as JSON")
@click.pass_obj
def links_cmd(settings: Settings, urls: tuple[str, ...], since: str, as_json: bool) -> None:
    """Aggregate commit activity behind ad-hoc links (no database)."""
    since_dt = _parse_since(since)

    async def _run() -> TeamMetrics:
        async with GitHubClient(
            settings.github_token, timeout=settings.request_timeout
        ) as client:
            require_credential(client)
            return await collect_team_metrics(
                client,
                list(urls),
                since=since_dt,
                excluded=settings.collaborators,
                max_pages=settings.max_pages,
            )

    try:
        metrics = asyncio.run(_run())
    except MissingCredentialError as exc:
        _needs_auth(exc)
        return
    _print_metrics(metrics, as_json)


@main.command("team")
@click.argument("team_id")
@click.option("--json", "as_json", is_flag=True, help="Print the full report as JSON")
@click.pass_obj
def team_cmd(settings: Settings, team_id: str, as_json: bool) -> None:
    """Aggregate and store metrics for one team."""
    tid = _parse_uuid(team_id)
    runner = build_runner(settings)

    async def _run() -> TeamRunResult:
        engine = create_engine(settings.database_url)
        session_factory = create_session_factory(engine)
        try:
            async with GitHubClient(
                settings.github_token, timeout=settings.request_timeout
            ) as client:
                async with session_factory() as session:
                    async with session.begin():
                        return await runner.run(session, tid, client)
        finally:
            await engine.dispose()

    try:
        result = asyncio.run(_run())
    except MissingCredentialError as exc:
        _needs_auth(exc)
        return

    if result.metrics is None:
        for err in result.errors:
            click.echo(err, err=True)
        sys.exit(1)
    _print_metrics(result.metrics, as_json)
    if not as_json:
        click.echo(f"{result.stored} metrics stored")


@main.command("assignment")
@click.argument("assignment_id")
@click.pass_obj
def assignment_cmd(settings: Settings, assignment_id: str) -> None:
    """Aggregate and store metrics for every team of an assignment."""
    aid = _parse_uuid(assignment_id)
    runner = build_runner(settings)

    async def _run() -> list[TeamRunResult]:
        engine = create_engine(settings.database_url)
        session_factory = create_session_factory(engine)
        try:
            async with GitHubClient(
                settings.github_token, timeout=settings.request_timeout
            ) as client:
                return await runner.run_all(session_factory, aid, client)
        finally:
            await engine.dispose()

    try:
        results = asyncio.run(_run())
    except MissingCredentialError as exc:
        _needs_auth(exc)
        return
    except NotFoundError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)

    if not results:
        click.echo("no teams")
    for result in results:
        _print_result(result)


@main.command("metrics")
@click.argument("team_id")
@click.option("--json", "as_json", is_flag=True, help="Print the stored rows as JSON")
@click.pass_obj
def metrics_cmd(settings: Settings, team_id: str, as_json: bool) -> None:
    """Show the metrics stored for one team (no GitHub access)."""
    tid = _parse_uuid(team_id)
    metric_service = build_metric_service(settings)

    async def _run() -> list[dict]:
        engine = create_engine(settings.database_url)
        session_factory = create_session_factory(engine)
        try:
            async with session_factory() as session:
                metrics = await metric_service.list_team_metrics(session, tid)
                return [_metric_row(m) for m in metrics]
        finally:
            await engine.dispose()

    rows = sorted(asyncio.run(_run()), key=lambda r: r["github_id"])
    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return
    if not rows:
        click.echo("no metrics stored")
    for row in rows:
        participant = row["participant_id"] or "unresolved"
        click.echo(f"  {row['github_id']}: {row['total_commits']} commits ({participant})")
