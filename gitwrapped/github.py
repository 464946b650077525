"""
GitHub REST + GraphQL access for the wrapped pipeline.

Every request is a single attempt: there is no retry or backoff here. The
profile and repository fetches are fatal to an aggregation, so their
failures are raised as ``NotFound`` / ``UpstreamError``. The contribution
and events fetches are best-effort and their callers decide what to swallow.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from .config import Settings
from .schemas import ContributionSummary, Event, Profile, Repository, SchemaError

logger = logging.getLogger(__name__)


# -----------------------------
# Errors
# -----------------------------
class GitHubAPIError(RuntimeError):
    pass


class NotFound(GitHubAPIError):
    """The user does not exist (or the profile query was rejected)."""


class UpstreamError(GitHubAPIError):
    """GitHub answered with a non-success status or could not be reached."""


class BestEffortFailure(GitHubAPIError):
    """A privileged contribution query failed; callers degrade instead of failing."""


# -----------------------------
# GraphQL query
# -----------------------------
CONTRIBUTIONS_QUERY = """
query($username:String!) {
  user(login:$username) {
    contributionsCollection {
      totalCommitContributions
      restrictedContributionsCount
      totalPullRequestContributions
      totalIssueContributions
      totalRepositoriesWithContributedCommits
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            contributionCount
            date
          }
        }
      }
    }
    repositoriesContributedTo(first:100, contributionTypes:[COMMIT, PULL_REQUEST, ISSUE]) {
      totalCount
    }
  }
}
"""


class GitHubClient:
    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self.session = session if session is not None else requests.Session()

    @property
    def has_token(self) -> bool:
        return bool(self.settings.github_token)

    def _headers(self) -> Dict[str, str]:
        h = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "gitwrapped",
            "X-GitHub-Api-Version": self.settings.api_version,
        }
        if self.settings.github_token:
            h["Authorization"] = f"Bearer {self.settings.github_token}"
        return h

    def _get(self, path: str, *, params: Optional[dict] = None) -> requests.Response:
        url = f"{self.settings.api_base}{path}"
        logger.debug("GET %s params=%s", url, params)
        try:
            return self.session.get(url, headers=self._headers(), params=params, timeout=self.settings.request_timeout)
        except requests.RequestException as e:
            raise UpstreamError(f"GitHub request to {path} failed: {e}") from e

    @staticmethod
    def _json(resp: requests.Response, what: str) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError(f"GitHub returned invalid JSON for {what}") from e

    # -----------------------------
    # Fatal fetches
    # -----------------------------
    def fetch_profile(self, username: str) -> Profile:
        resp = self._get(f"/users/{username}")
        if 400 <= resp.status_code < 500:
            raise NotFound("User not found")
        if resp.status_code >= 500:
            raise UpstreamError(f"GitHub REST error {resp.status_code} while fetching profile")
        try:
            return Profile.from_api(self._json(resp, "profile"))
        except SchemaError as e:
            raise UpstreamError(f"Unexpected profile payload: {e}") from e

    def fetch_repositories(self, username: str) -> List[Repository]:
        resp = self._get(
            f"/users/{username}/repos",
            params={"per_page": 100, "sort": "updated", "type": "all"},
        )
        if resp.status_code >= 400:
            raise UpstreamError("Failed to fetch repositories")
        payload = self._json(resp, "repositories")
        if not isinstance(payload, list):
            raise UpstreamError("Unexpected repositories payload")
        return [Repository.from_api(r) for r in payload if isinstance(r, dict)]

    # -----------------------------
    # Best-effort fetches
    # -----------------------------
    def fetch_contributions(self, username: str) -> ContributionSummary:
        """
        Run the privileged GraphQL contributions query.

        Any failure (missing token, transport error, HTTP error, GraphQL
        errors, malformed body) is raised as ``BestEffortFailure``.
        """
        if not self.settings.github_token:
            raise BestEffortFailure("GraphQL requires GITHUB_TOKEN.")
        payload = {"query": CONTRIBUTIONS_QUERY, "variables": {"username": username}}
        url = f"{self.settings.api_base}/graphql"
        try:
            resp = self.session.post(url, headers=self._headers(), json=payload, timeout=self.settings.request_timeout)
        except requests.RequestException as e:
            raise BestEffortFailure(f"GitHub GraphQL request failed: {e}") from e
        if resp.status_code >= 400:
            raise BestEffortFailure(f"GitHub GraphQL error {resp.status_code}: {resp.text[:600]}")
        try:
            data = resp.json()
        except ValueError as e:
            raise BestEffortFailure("GitHub GraphQL returned invalid JSON") from e
        if not isinstance(data, dict):
            raise BestEffortFailure("GitHub GraphQL returned a non-object body")
        errors = data.get("errors")
        if errors:
            shown = errors[:3] if isinstance(errors, list) else errors
            raise BestEffortFailure(f"GitHub GraphQL errors: {shown}")
        body = data.get("data")
        if not isinstance(body, dict):
            raise BestEffortFailure("GitHub GraphQL response has no data object")
        user = body.get("user")
        try:
            return ContributionSummary.from_graphql(user)
        except SchemaError as e:
            raise BestEffortFailure(f"Unexpected GraphQL payload: {e}") from e

    def fetch_public_events(self, username: str) -> List[Event]:
        resp = self._get(f"/users/{username}/events/public", params={"per_page": 100})
        if resp.status_code >= 400:
            raise UpstreamError(f"GitHub REST error {resp.status_code} while fetching events")
        payload = self._json(resp, "events")
        if not isinstance(payload, list):
            return []
        return [Event.from_api(e) for e in payload if isinstance(e, dict)]
