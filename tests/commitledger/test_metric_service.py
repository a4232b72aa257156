"""Tests for MetricService (metric upserts against the database)."""

import pytest

from commitledger.dao.metric_dao import MetricDAO
from commitledger.dao.metric_source_dao import MetricSourceDAO
from commitledger.dao.participant_dao import ParticipantDAO
from commitledger.dao.team_dao import AssignmentDAO, TeamDAO
from commitledger.services.metric_service import MetricService
from commitledger.services.participant_service import ParticipantService


@pytest.fixture
def metric_dao():
    return MetricDAO()


@pytest.fixture
def service(metric_dao):
    return MetricService(
        metric_dao,
        MetricSourceDAO(),
        ParticipantService(ParticipantDAO(), "ncsu.edu"),
    )


@pytest.fixture
async def team(session):
    assignment = await AssignmentDAO().create(session, name="Program 2")
    return await TeamDAO().create(
        session, assignment_id=assignment.id, name="team-a", submitted_links=[]
    )


class TestUpsertMetric:
    async def test_creates_with_source_and_participant(self, service, session, team):
        alice = await ParticipantDAO().create(session, name="Alice", email="alice@ncsu.edu")

        metric = await service.upsert_metric(session, team.id, "alice@ncsu.edu", 3)

        assert metric.total_commits == 3
        assert metric.participant_id == alice.id
        source = await MetricSourceDAO().get_by_id(session, metric.metric_source_id)
        assert source.name == "Github"

    async def test_unresolved_participant_is_null(self, service, session, team):
        metric = await service.upsert_metric(session, team.id, "ghost@gmail.com", 1)
        assert metric.participant_id is None

    async def test_rerun_overwrites_total(self, service, metric_dao, session, team):
        first = await service.upsert_metric(session, team.id, "alice@ncsu.edu", 3)
        second = await service.upsert_metric(session, team.id, "alice@ncsu.edu", 5)

        assert second.id == first.id
        rows = await metric_dao.list_by_team(session, team.id)
        assert len(rows) == 1
        assert rows[0].total_commits == 5

    async def test_rerun_resolves_participant_later(self, service, session, team):
        first = await service.upsert_metric(session, team.id, "bob@gmail.com", 2)
        assert first.participant_id is None

        bob = await ParticipantDAO().create(session, name="Bob", email="bob@ncsu.edu")
        second = await service.upsert_metric(session, team.id, "bob@gmail.com", 2)
        assert second.participant_id == bob.id


class TestRecordTeamMetrics:
    async def test_idempotent(self, service, metric_dao, session, team):
        authors = {"alice": "alice@ncsu.edu", "bob": "bob@ncsu.edu"}
        totals = {"alice": 3, "bob": 1}

        await service.record_team_metrics(session, team.id, authors, totals)
        await service.record_team_metrics(session, team.id, authors, totals)

        rows = await metric_dao.list_by_team(session, team.id)
        assert {(m.github_id, m.total_commits) for m in rows} == {
            ("alice@ncsu.edu", 3),
            ("bob@ncsu.edu", 1),
        }

    async def test_names_sharing_email_are_folded(self, service, session, team):
        authors = {"alice": "alice@ncsu.edu", "Alice Smith": "alice@ncsu.edu"}
        stored = await service.record_team_metrics(
            session, team.id, authors, {"alice": 2, "Alice Smith": 4}
        )
        assert len(stored) == 1
        assert stored[0].total_commits == 6

    async def test_author_without_email_skipped(self, service, session, team):
        stored = await service.record_team_metrics(session, team.id, {"anon": ""}, {"anon": 2})
        assert stored == []

    async def test_teams_are_independent(self, service, metric_dao, session, team):
        other = await TeamDAO().create(
            session, assignment_id=team.assignment_id, name="team-b", submitted_links=[]
        )
        authors = {"alice": "alice@ncsu.edu"}
        await service.record_team_metrics(session, team.id, authors, {"alice": 3})
        await service.record_team_metrics(session, other.id, authors, {"alice": 9})

        assert (await metric_dao.list_by_team(session, team.id))[0].total_commits == 3
        assert (await service.list_team_metrics(session, other.id))[0].total_commits == 9
