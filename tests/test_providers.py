from gitwrapped.github import GitHubClient
from gitwrapped.providers import (
    ContributionProvider,
    GraphQLContributions,
    Outcome,
    ProviderResult,
    PublicEventsContributions,
    resolve_activity,
)
from gitwrapped.stats import ActivityCounts

from conftest import FakeResponse, graphql_payload, push_event, transport_error


class Stub(ContributionProvider):
    def __init__(self, name, result, estimated=True):
        self.name = name
        self.result = result
        self.estimated = estimated
        self.calls = 0

    def fetch(self, username):
        self.calls += 1
        return self.result


def test_graphql_provider_skips_without_token(settings, session):
    result = GraphQLContributions(GitHubClient(settings, session)).fetch("octocat")
    assert result.outcome is Outcome.FAILED
    assert session.calls == []


def test_graphql_provider_ok(token_settings, session):
    session.add("POST", "/graphql", FakeResponse(200, graphql_payload(5, 0, 1, 1, 2, [("2025-01-01", 1), ("2025-01-02", 3)])))
    result = GraphQLContributions(GitHubClient(token_settings, session)).fetch("octocat")
    assert result.outcome is Outcome.OK
    assert result.counts.most_active_day == "Jan 2"
    assert result.counts.longest_streak == 2


def test_graphql_provider_transport_error_fails_quietly(token_settings, session):
    session.add("POST", "/graphql", transport_error())
    result = GraphQLContributions(GitHubClient(token_settings, session)).fetch("octocat")
    assert result.outcome is Outcome.FAILED


def test_events_provider_counts(settings, session):
    session.add("GET", "/users/octocat/events/public", FakeResponse(200, [
        push_event(3), {"type": "PullRequestEvent"}, {"type": "IssuesEvent"}, {"type": "IssuesEvent"},
    ]))
    result = PublicEventsContributions(GitHubClient(settings, session)).fetch("octocat")
    assert result.outcome is Outcome.OK
    assert (result.counts.commits, result.counts.pull_requests, result.counts.issues) == (3, 1, 2)


def test_events_provider_failure(settings, session):
    session.add("GET", "/users/octocat/events/public", FakeResponse(500, {}))
    result = PublicEventsContributions(GitHubClient(settings, session)).fetch("octocat")
    assert result.outcome is Outcome.FAILED


def test_exact_winner_stops_chain_without_floor():
    exact = Stub("graphql", ProviderResult.from_counts(ActivityCounts(commits=3, provenance="graphql")), estimated=False)
    events = Stub("events", ProviderResult.failed())
    counts = resolve_activity([exact, events], "octocat", repository_count=10)
    assert counts.commits == 3
    assert counts.provenance == "graphql"
    assert events.calls == 0


def test_failed_and_empty_are_treated_alike():
    for first in (ProviderResult.failed(), ProviderResult.from_counts(ActivityCounts(provenance="graphql"))):
        exact = Stub("graphql", first, estimated=False)
        events = Stub("events", ProviderResult.from_counts(ActivityCounts(commits=50, provenance="events")))
        counts = resolve_activity([exact, events], "octocat", repository_count=2)
        assert counts.commits == 50
        assert counts.provenance == "events"


def test_floor_applies_when_everything_fails():
    counts = resolve_activity([Stub("a", ProviderResult.failed()), Stub("b", ProviderResult.failed())], "x", 4)
    assert counts.commits == 32
    assert counts.provenance == "estimate"


def test_floor_exceeds_event_commits():
    events = Stub("events", ProviderResult.from_counts(ActivityCounts(commits=8, pull_requests=1, provenance="events")))
    counts = resolve_activity([events], "x", 4)
    assert counts.commits == 32
    assert counts.pull_requests == 1
    assert counts.provenance == "estimate"


def test_empty_exact_source_keeps_extras():
    exact = Stub(
        "graphql",
        ProviderResult.from_counts(ActivityCounts(contributed_to=6, most_active_day="Feb 1", provenance="graphql")),
        estimated=False,
    )
    events = Stub("events", ProviderResult.from_counts(ActivityCounts(commits=40, provenance="events")))
    counts = resolve_activity([exact, events], "x", 1)
    assert counts.commits == 40
    assert counts.contributed_to == 6
    assert counts.most_active_day == "Feb 1"


def test_zero_repositories_and_no_data_gives_zero():
    counts = resolve_activity([Stub("events", ProviderResult.from_counts(ActivityCounts()))], "x", 0)
    assert counts.commits == 0


def test_empty_exact_source_adds_pr_and_issue_counts():
    exact = Stub(
        "graphql",
        ProviderResult.from_counts(ActivityCounts(pull_requests=12, issues=5, contributed_to=3, provenance="graphql")),
        estimated=False,
    )
    events = Stub("events", ProviderResult.from_counts(ActivityCounts(commits=3, pull_requests=1, provenance="events")))
    counts = resolve_activity([exact, events], "x", 0)
    assert (counts.commits, counts.pull_requests, counts.issues) == (3, 13, 5)
    assert counts.contributed_to == 3


def test_empty_exact_source_counts_survive_failed_fallback():
    exact = Stub(
        "graphql",
        ProviderResult.from_counts(ActivityCounts(pull_requests=12, issues=5, provenance="graphql")),
        estimated=False,
    )
    counts = resolve_activity([exact, Stub("events", ProviderResult.failed())], "x", 2)
    assert (counts.commits, counts.pull_requests, counts.issues) == (16, 12, 5)
