"""
Typed views of the GitHub payloads the pipeline consumes.

Absent or null fields map to fixed defaults: "" for strings, 0 for counts,
an empty list for collections and None for timestamps.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class SchemaError(ValueError):
    pass


def _str(v: Any) -> str:
    return v if isinstance(v, str) else ""


def _int(v: Any) -> int:
    if isinstance(v, bool):
        return int(v)
    try:
        return max(0, int(v or 0))
    except (TypeError, ValueError):
        return 0


def _dateparse(s: Any) -> Optional[dt.datetime]:
    if not s or not isinstance(s, str):
        return None
    try:
        parsed = dt.datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed


@dataclass(frozen=True)
class Profile:
    login: str
    avatar_url: str = ""
    bio: str = ""
    followers: int = 0
    following: int = 0
    public_repos: int = 0
    # Only reported when the token belongs to this user.
    total_private_repos: int = 0
    created_at: Optional[dt.datetime] = None

    @classmethod
    def from_api(cls, data: Any) -> "Profile":
        if not isinstance(data, dict):
            raise SchemaError("profile is not an object")
        login = _str(data.get("login"))
        if not login:
            raise SchemaError("profile has no login")
        return cls(
            login=login,
            avatar_url=_str(data.get("avatar_url")),
            bio=_str(data.get("bio")),
            followers=_int(data.get("followers")),
            following=_int(data.get("following")),
            public_repos=_int(data.get("public_repos")),
            total_private_repos=_int(data.get("total_private_repos")),
            created_at=_dateparse(data.get("created_at")),
        )


@dataclass(frozen=True)
class Repository:
    name: str
    stargazers_count: int = 0
    forks_count: int = 0
    description: str = ""
    language: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Repository":
        return cls(
            name=_str(data.get("name")),
            stargazers_count=_int(data.get("stargazers_count")),
            forks_count=_int(data.get("forks_count")),
            description=_str(data.get("description")),
            language=_str(data.get("language")),
        )


@dataclass(frozen=True)
class CalendarDay:
    date: dt.date
    count: int


@dataclass(frozen=True)
class ContributionSummary:
    commit_contributions: int = 0
    restricted_contributions: int = 0
    pull_request_contributions: int = 0
    issue_contributions: int = 0
    repositories_contributed_to: int = 0
    # Chronological, in the order GitHub lists weeks and days.
    calendar: List[CalendarDay] = field(default_factory=list)

    @property
    def total_commits(self) -> int:
        return self.commit_contributions + self.restricted_contributions

    @classmethod
    def from_graphql(cls, user: Any) -> "ContributionSummary":
        if not isinstance(user, dict):
            raise SchemaError("user is missing")
        cc = user.get("contributionsCollection")
        if not isinstance(cc, dict):
            raise SchemaError("contributionsCollection is missing")
        try:
            return cls(
                commit_contributions=_int(cc.get("totalCommitContributions")),
                restricted_contributions=_int(cc.get("restrictedContributionsCount")),
                pull_request_contributions=_int(cc.get("totalPullRequestContributions")),
                issue_contributions=_int(cc.get("totalIssueContributions")),
                repositories_contributed_to=_int((user.get("repositoriesContributedTo") or {}).get("totalCount")),
                calendar=_calendar_days(cc.get("contributionCalendar")),
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise SchemaError(f"malformed contributions: {e}") from e


def _calendar_days(cal: Any) -> List[CalendarDay]:
    days: List[CalendarDay] = []
    if not isinstance(cal, dict):
        return days
    weeks = cal.get("weeks")
    for w in weeks if isinstance(weeks, list) else []:
        entries = w.get("contributionDays") if isinstance(w, dict) else None
        for d in entries if isinstance(entries, list) else []:
            if not isinstance(d, dict) or not isinstance(d.get("date"), str):
                continue
            try:
                day = dt.date.fromisoformat(d["date"])
            except ValueError:
                continue
            days.append(CalendarDay(day, _int(d.get("contributionCount"))))
    return days


@dataclass(frozen=True)
class Event:
    type: str
    commit_count: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Event":
        etype = _str(data.get("type"))
        commits = 0
        if etype == "PushEvent":
            payload = data.get("payload")
            payload = payload if isinstance(payload, dict) else {}
            listed = payload.get("commits")
            # Newer event payloads drop the commit list but keep its size.
            commits = len(listed) if isinstance(listed, list) else _int(payload.get("size"))
        return cls(type=etype, commit_count=commits)
