"""
Contribution sources, tried in order until one yields commits.

Each provider reports one of three outcomes:

- ``ok``: commits were found; the chain stops here.
- ``empty``: the source answered but found no commits.
- ``failed``: the source was unavailable or errored.

``empty`` and ``failed`` both move on to the next provider. When the chain
ends on an estimated source (or on nothing), the commit floor
``repository_count * COMMITS_PER_REPO_FLOOR`` is applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence

from .github import BestEffortFailure, GitHubAPIError, GitHubClient
from .stats import ActivityCounts, compute_streaks, most_active_day

logger = logging.getLogger(__name__)

COMMITS_PER_REPO_FLOOR = 8


class Outcome(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class ProviderResult:
    outcome: Outcome
    counts: Optional[ActivityCounts] = None

    @classmethod
    def failed(cls) -> "ProviderResult":
        return cls(Outcome.FAILED)

    @classmethod
    def from_counts(cls, counts: ActivityCounts) -> "ProviderResult":
        return cls(Outcome.OK if counts.commits > 0 else Outcome.EMPTY, counts)


class ContributionProvider:
    name = "base"
    # Estimated sources are subject to the commit floor.
    estimated = True

    def fetch(self, username: str) -> ProviderResult:
        raise NotImplementedError


class GraphQLContributions(ContributionProvider):
    """Exact yearly counts and the contribution calendar; needs a token."""

    name = "graphql"
    estimated = False

    def __init__(self, client: GitHubClient) -> None:
        self.client = client

    def fetch(self, username: str) -> ProviderResult:
        if not self.client.has_token:
            logger.debug("No GITHUB_TOKEN configured, skipping GraphQL contributions for %s", username)
            return ProviderResult.failed()
        try:
            summary = self.client.fetch_contributions(username)
        except BestEffortFailure as e:
            logger.warning("GraphQL query failed for %s, falling back to events API: %s", username, e)
            return ProviderResult.failed()

        streaks = compute_streaks(summary.calendar) if summary.calendar else None
        counts = ActivityCounts(
            commits=summary.total_commits,
            pull_requests=summary.pull_request_contributions,
            issues=summary.issue_contributions,
            contributed_to=summary.repositories_contributed_to,
            most_active_day=most_active_day(summary.calendar),
            longest_streak=streaks["longest"] if streaks else None,
            current_streak=streaks["current"] if streaks else None,
            provenance=self.name,
        )
        return ProviderResult.from_counts(counts)


class PublicEventsContributions(ContributionProvider):
    """Counts derived from the last 100 public events."""

    name = "events"

    def __init__(self, client: GitHubClient) -> None:
        self.client = client

    def fetch(self, username: str) -> ProviderResult:
        try:
            events = self.client.fetch_public_events(username)
        except GitHubAPIError as e:
            logger.warning("Public events fetch failed for %s: %s", username, e)
            return ProviderResult.failed()

        commits = prs = issues = 0
        for event in events:
            if event.type == "PushEvent":
                commits += event.commit_count
            elif event.type == "PullRequestEvent":
                prs += 1
            elif event.type == "IssuesEvent":
                issues += 1
        return ProviderResult.from_counts(
            ActivityCounts(commits=commits, pull_requests=prs, issues=issues, provenance=self.name)
        )


def resolve_activity(
    providers: Sequence[ContributionProvider],
    username: str,
    repository_count: int,
) -> ActivityCounts:
    """
    Walk the provider chain and return the activity counters for a record.

    An exact source that came back empty still contributes: its PR and issue
    counts are added to the fallback's, and ``contributed_to`` plus the
    calendar-derived fields are kept.
    """
    extras: Optional[ActivityCounts] = None
    counts: Optional[ActivityCounts] = None
    winner: Optional[ContributionProvider] = None

    for provider in providers:
        result = provider.fetch(username)
        logger.debug("Contribution provider %s for %s: %s", provider.name, username, result.outcome.value)
        if result.outcome is Outcome.FAILED:
            continue
        if result.outcome is Outcome.OK:
            counts, winner = result.counts, provider
            break
        if not provider.estimated:
            if extras is None:
                extras = result.counts
            continue
        counts = result.counts

    if winner is not None and not winner.estimated:
        return counts

    counts = counts or ActivityCounts()
    floor = repository_count * COMMITS_PER_REPO_FLOOR
    provenance = counts.provenance if counts.commits > 0 and counts.commits >= floor else "estimate"
    counts = replace(counts, commits=max(counts.commits, floor), provenance=provenance)
    if extras is not None:
        counts = replace(
            counts,
            pull_requests=extras.pull_requests + counts.pull_requests,
            issues=extras.issues + counts.issues,
            contributed_to=extras.contributed_to,
            most_active_day=extras.most_active_day,
            longest_streak=extras.longest_streak,
            current_streak=extras.current_streak,
        )
    logger.info("Using %s contribution counts for %s (commits=%d)", counts.provenance, username, counts.commits)
    return counts
