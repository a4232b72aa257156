"""Tests for TeamMetricsRunner (mock collector + mock Services)."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from commitledger.engines.github_metrics.models import TeamMetrics
from commitledger.engines.github_metrics.runner import TeamMetricsRunner
from commitledger.services import MissingCredentialError, NotFoundError

# ── helpers ───────────────────────────────────────────────────────────────


def _fake_team(**overrides):
    team = MagicMock()
    team.id = overrides.get("id", uuid.uuid4())
    team.assignment_id = overrides.get("assignment_id", uuid.uuid4())
    team.submitted_links = overrides.get("submitted_links", ["https://github.com/o/r/pull/1"])
    return team


def _fake_assignment():
    assignment = MagicMock()
    assignment.created_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return assignment


def _make_runner(**kwargs):
    team_service = AsyncMock()
    metric_service = AsyncMock()
    runner = TeamMetricsRunner(team_service, metric_service, **kwargs)
    return runner, team_service, metric_service


def _client(has_token=True):
    client = AsyncMock()
    client.has_token = has_token
    return client


def _metrics():
    return TeamMetrics(
        authors={"alice": "alice@ncsu.edu"},
        author_totals={"alice": 3},
        dates=["2024-02-01"],
    )


class _FakeSessionFactory:
    """Stands in for async_sessionmaker: ``async with factory() as s, s.begin()``."""

    def __call__(self):
        session = MagicMock()
        session.__aenter__ = AsyncMock(return_value=session)
        session.__aexit__ = AsyncMock(return_value=False)
        tx = MagicMock()
        tx.__aenter__ = AsyncMock(return_value=tx)
        tx.__aexit__ = AsyncMock(return_value=False)
        session.begin.return_value = tx
        return session


# ── TestRun ───────────────────────────────────────────────────────────────


class TestRun:
    async def test_normal_flow(self):
        runner, team_service, metric_service = _make_runner(excluded={"Course Staff"})
        team = _fake_team()
        team_service.get_team.return_value = team
        team_service.get_assignment.return_value = _fake_assignment()
        metric_service.record_team_metrics.return_value = [MagicMock()]

        with patch(
            "commitledger.engines.github_metrics.runner.collect_team_metrics",
            new_callable=AsyncMock,
            return_value=_metrics(),
        ) as collect:
            result = await runner.run(AsyncMock(), team.id, _client())

        assert result.stored == 1
        assert result.errors == []
        assert result.metrics.author_totals == {"alice": 3}
        kwargs = collect.call_args.kwargs
        assert kwargs["since"] == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert kwargs["excluded"] == frozenset({"Course Staff"})
        metric_service.record_team_metrics.assert_called_once()
        args = metric_service.record_team_metrics.call_args[0]
        assert args[1:] == (team.id, {"alice": "alice@ncsu.edu"}, {"alice": 3})

    async def test_team_not_found(self):
        runner, team_service, metric_service = _make_runner()
        team_service.get_team.return_value = None

        team_id = uuid.uuid4()
        result = await runner.run(AsyncMock(), team_id, _client())

        assert result.team_id == team_id
        assert "not found" in result.errors[0]
        metric_service.record_team_metrics.assert_not_called()

    async def test_assignment_not_found(self):
        runner, team_service, _ = _make_runner()
        team_service.get_team.return_value = _fake_team()
        team_service.get_assignment.side_effect = NotFoundError("assignment not found")

        result = await runner.run(AsyncMock(), uuid.uuid4(), _client())
        assert "assignment not found" in result.errors[0]

    async def test_collect_errors_propagated(self):
        runner, team_service, metric_service = _make_runner()
        team_service.get_team.return_value = _fake_team()
        team_service.get_assignment.return_value = _fake_assignment()
        metric_service.record_team_metrics.return_value = []
        metrics = _metrics()
        metrics.errors.append("pull request x: boom")

        with patch(
            "commitledger.engines.github_metrics.runner.collect_team_metrics",
            new_callable=AsyncMock,
            return_value=metrics,
        ):
            result = await runner.run(AsyncMock(), uuid.uuid4(), _client())
        assert result.errors == ["pull request x: boom"]

    async def test_missing_credential(self):
        runner, team_service, _ = _make_runner()
        with pytest.raises(MissingCredentialError):
            await runner.run(AsyncMock(), uuid.uuid4(), _client(has_token=False))
        team_service.get_team.assert_not_called()


# ── TestRunAll ────────────────────────────────────────────────────────────


class TestRunAll:
    async def test_runs_every_team(self):
        runner, team_service, _ = _make_runner()
        teams = [_fake_team(), _fake_team()]
        team_service.list_teams.return_value = teams

        with patch.object(runner, "run", new_callable=AsyncMock) as run:
            run.side_effect = lambda session, team_id, client: MagicMock(team_id=team_id)
            results = await runner.run_all(_FakeSessionFactory(), uuid.uuid4(), _client())

        assert [r.team_id for r in results] == [t.id for t in teams]
        assert run.call_count == 2

    async def test_failing_team_isolated(self):
        runner, team_service, _ = _make_runner()
        good, bad = _fake_team(), _fake_team()
        team_service.list_teams.return_value = [good, bad]

        async def _run(session, team_id, client):
            if team_id == bad.id:
                raise RuntimeError("database went away")
            return MagicMock(team_id=team_id, errors=[])

        with patch.object(runner, "run", side_effect=_run):
            results = await runner.run_all(_FakeSessionFactory(), uuid.uuid4(), _client())

        assert results[0].errors == []
        assert results[1].team_id == bad.id
        assert "database went away" in results[1].errors[0]

    async def test_no_teams(self):
        runner, team_service, _ = _make_runner()
        team_service.list_teams.return_value = []
        assert await runner.run_all(_FakeSessionFactory(), uuid.uuid4(), _client()) == []

    async def test_missing_credential(self):
        runner, team_service, _ = _make_runner()
        with pytest.raises(MissingCredentialError):
            await runner.run_all(_FakeSessionFactory(), uuid.uuid4(), _client(has_token=False))
        team_service.list_teams.assert_not_called()
