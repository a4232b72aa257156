"""End-to-end tests for collect_team_metrics (mock GitHub, no DB)."""

import json

from gh_payloads import (
    ERROR_PAYLOAD,
    history_commit,
    history_page,
    mock_client,
    pr_commit,
    pr_page,
)

from commitledger.engines.github_metrics.collector import collect_team_metrics
from commitledger.engines.github_metrics.models import NOT_A_PULL_REQUEST, NOT_AVAILABLE


class TestCollectTeamMetrics:
    async def test_alice_scenario(self, since):
        page = pr_page(
            [
                pr_commit("alice", "alice@ncsu.edu", "2024-02-01T09:00:00Z"),
                pr_commit("alice", "alice@ncsu.edu", "2024-02-01T15:00:00Z"),
                pr_commit("alice", "alice@ncsu.edu", "2024-02-02T11:00:00Z"),
                pr_commit("Course Staff", "staff@ncsu.edu", "2024-02-03T11:00:00Z"),
            ]
        )
        client = mock_client([page], statuses={"headsha": {"state": "success"}})

        metrics = await collect_team_metrics(
            client,
            ["https://github.com/o/r/pull/3"],
            since=since,
            excluded={"Course Staff"},
        )

        assert metrics.author_totals == {"alice": 3}
        assert "Course Staff" not in metrics.authors
        assert metrics.dates == ["2024-02-01", "2024-02-02"]
        assert metrics.authors == {"alice": "alice@ncsu.edu"}
        assert metrics.merge_status == {3: "MERGEABLE"}
        assert metrics.check_statuses == {3: "success"}
        assert metrics.total_commits == 4
        assert metrics.errors == []

    async def test_repository_link_ignored_when_pull_request_present(self, since):
        client = mock_client([pr_page([])])
        metrics = await collect_team_metrics(
            client,
            ["https://github.com/o/r/pull/3", "https://github.com/o/r"],
            since=since,
        )
        assert client.graphql.call_count == 1
        assert "number" in client.graphql.call_args[0][1]
        assert list(metrics.head_refs) == [3]

    async def test_pull_request_fallback(self, since):
        client = mock_client([ERROR_PAYLOAD])
        metrics = await collect_team_metrics(
            client, ["https://github.com/o/r/pull/3"], since=since
        )

        assert metrics.total_additions == NOT_AVAILABLE
        assert metrics.total_deletions == NOT_AVAILABLE
        assert metrics.total_files_changed == NOT_AVAILABLE
        assert metrics.merge_status == {-1: NOT_A_PULL_REQUEST}
        assert metrics.head_refs[3].head_commit_sha is None
        assert metrics.check_statuses == {}
        client.commit_status.assert_not_called()
        assert len(metrics.errors) == 1

    async def test_totals_summed_across_pull_requests(self, since):
        pages = [
            pr_page([], number=1, additions=5, deletions=1, changedFiles=1, headRefOid="a"),
            pr_page([], number=2, additions=7, deletions=2, changedFiles=3, headRefOid="b"),
        ]
        metrics = await collect_team_metrics(
            mock_client(pages),
            ["https://github.com/o/r/pull/1", "https://github.com/o/r/pull/2"],
            since=since,
        )
        assert (metrics.total_additions, metrics.total_deletions) == (12, 3)
        assert metrics.total_files_changed == 4
        assert set(metrics.check_statuses) == {1, 2}

    async def test_unavailable_totals_stay_unavailable(self, since):
        pages = [ERROR_PAYLOAD, pr_page([], number=2)]
        metrics = await collect_team_metrics(
            mock_client(pages),
            ["https://github.com/o/r/pull/1", "https://github.com/o/r/pull/2"],
            since=since,
        )
        assert metrics.total_additions == NOT_AVAILABLE
        assert metrics.merge_status == {-1: NOT_A_PULL_REQUEST, 2: "MERGEABLE"}

    async def test_repository_mode(self, since):
        pages = [
            history_page([history_commit("bob", "bob@ncsu.edu", "2024-03-02T10:00:00Z")]),
            history_page([history_commit("bob", "bob@ncsu.edu", "2024-01-10T10:00:00Z")]),
        ]
        client = mock_client(pages)
        metrics = await collect_team_metrics(
            client,
            ["https://github.com/o/r", "https://github.com/o/s"],
            since=since,
        )
        assert metrics.author_totals == {"bob": 2}
        assert metrics.dates == ["2024-01-10", "2024-03-02"]
        assert metrics.merge_status == {}
        assert metrics.total_additions == 0
        client.commit_status.assert_not_called()

    async def test_malformed_link_skipped(self, since):
        pages = [history_page([history_commit("bob", "bob@ncsu.edu", "2024-03-02T10:00:00Z")])]
        metrics = await collect_team_metrics(
            mock_client(pages),
            ["https://github.com/o/r/tree/main", "https://github.com/o/r"],
            since=since,
        )
        assert metrics.author_totals == {"bob": 1}
        assert len(metrics.errors) == 1
        assert "cannot parse" in metrics.errors[0]

    async def test_empty_links(self, since):
        client = mock_client()
        metrics = await collect_team_metrics(client, [], since=since)
        assert metrics.author_totals == {}
        assert metrics.dates == []
        client.graphql.assert_not_called()

    async def test_to_dict_is_json_serializable(self, since):
        client = mock_client([ERROR_PAYLOAD])
        metrics = await collect_team_metrics(
            client, ["https://github.com/o/r/pull/3"], since=since
        )
        doc = json.loads(json.dumps(metrics.to_dict()))
        assert doc["merge_status"] == {"-1": NOT_A_PULL_REQUEST}
        assert doc["total_additions"] == NOT_AVAILABLE
