from __future__ import annotations

import datetime as dt
from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

import pytest
import requests

from gitwrapped.aggregator import Aggregator
from gitwrapped.cache import CacheStore
from gitwrapped.config import Settings
from gitwrapped.github import GitHubClient

API = "https://api.github.test"
NOW = dt.datetime(2025, 12, 1, tzinfo=dt.timezone.utc)


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text or ("" if payload is None else str(payload))

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Stands in for requests.Session; routes are keyed by (METHOD, path)."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.calls: List[Dict[str, Any]] = []
        self.counts: Counter = Counter()

    def add(self, method: str, path: str, result: Any) -> None:
        self.routes[(method, path)] = result

    def _dispatch(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        path = url[len(API):] if url.startswith(API) else url
        self.calls.append({"method": method, "path": path, **kwargs})
        self.counts[path] += 1
        result = self.routes.get((method, path))
        if result is None:
            return FakeResponse(404, {"message": "Not Found"})
        if isinstance(result, Exception):
            raise result
        return result

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._dispatch("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._dispatch("POST", url, **kwargs)


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def profile_payload(login: str = "octocat", **overrides: Any) -> Dict[str, Any]:
    data = {
        "login": login,
        "avatar_url": f"https://avatars.githubusercontent.com/{login}",
        "bio": "Hello",
        "followers": 12,
        "following": 3,
        "public_repos": 4,
        "created_at": "2020-11-01T00:00:00Z",
    }
    data.update(overrides)
    return data


def repo_payload(name: str, stars: int = 0, language: Optional[str] = None, forks: int = 0, description: Optional[str] = None) -> Dict[str, Any]:
    return {
        "name": name,
        "stargazers_count": stars,
        "forks_count": forks,
        "language": language,
        "description": description,
    }


def push_event(commits: int) -> Dict[str, Any]:
    return {"type": "PushEvent", "payload": {"commits": [{"sha": str(i)} for i in range(commits)]}}


def graphql_payload(commits: int = 0, restricted: int = 0, prs: int = 0, issues: int = 0, contributed: int = 0, days: Optional[List[Tuple[str, int]]] = None) -> Dict[str, Any]:
    return {
        "data": {
            "user": {
                "contributionsCollection": {
                    "totalCommitContributions": commits,
                    "restrictedContributionsCount": restricted,
                    "totalPullRequestContributions": prs,
                    "totalIssueContributions": issues,
                    "totalRepositoriesWithContributedCommits": contributed,
                    "contributionCalendar": {
                        "totalContributions": sum(c for _, c in days or []),
                        "weeks": [{"contributionDays": [{"date": d, "contributionCount": c} for d, c in days or []]}],
                    },
                },
                "repositoriesContributedTo": {"totalCount": contributed},
            }
        }
    }


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(github_token="", api_base=API)


@pytest.fixture
def token_settings() -> Settings:
    return Settings(github_token="ghp_test", api_base=API)


def make_aggregator(settings: Settings, session: FakeSession, clock: FakeClock, **kwargs: Any) -> Aggregator:
    client = GitHubClient(settings, session=session)  # type: ignore[arg-type]
    cache: CacheStore = CacheStore(settings.cache_ttl_seconds, settings.cache_max_entries, clock=clock)
    return Aggregator(client, cache, now=lambda: NOW, **kwargs)


def transport_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection reset")
