"""
Repository metrics, calendar metrics and final record assembly.
"""

from __future__ import annotations

import datetime as dt
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple

from .schemas import CalendarDay, Profile, Repository

TOP_LANGUAGES = 5
TOP_REPOS = 3
LINES_PER_COMMIT = 50

# Fixed English labels; strftime("%b") follows the process locale.
MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


# -----------------------------
# Record types
# -----------------------------
@dataclass(frozen=True)
class LanguageShare:
    name: str
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "percentage": self.percentage}


@dataclass(frozen=True)
class TopRepo:
    name: str
    stars: int
    description: str = ""
    language: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "stars": self.stars, "description": self.description, "language": self.language}


@dataclass(frozen=True)
class StatsRecord:
    username: str
    avatar: str
    bio: str
    total_repos: int
    total_stars: int
    total_forks: int
    followers: int
    following: int
    contributed_to: int
    total_commits: int
    total_prs: int
    total_issues: int
    account_age: int
    coding_velocity: int
    lines_of_code: int
    most_active_day: str
    most_used_language: str
    top_languages: Tuple[LanguageShare, ...] = ()
    top_repos: Tuple[TopRepo, ...] = ()
    longest_streak: Optional[int] = None
    current_streak: Optional[int] = None
    # Which contribution source produced the activity counters. Internal only.
    provenance: str = field(default="estimate", compare=False)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "username": self.username,
            "avatar": self.avatar,
            "bio": self.bio,
            "totalRepos": self.total_repos,
            "totalStars": self.total_stars,
            "totalForks": self.total_forks,
            "followers": self.followers,
            "following": self.following,
            "contributedTo": self.contributed_to,
            "totalCommits": self.total_commits,
            "totalPRs": self.total_prs,
            "totalIssues": self.total_issues,
            "accountAge": self.account_age,
            "codingVelocity": self.coding_velocity,
            "linesOfCode": self.lines_of_code,
            "mostActiveDay": self.most_active_day,
            "mostUsedLanguage": self.most_used_language,
            "topLanguages": [l.to_dict() for l in self.top_languages],
            "topRepos": [r.to_dict() for r in self.top_repos],
        }
        if self.longest_streak is not None:
            out["longestStreak"] = self.longest_streak
        if self.current_streak is not None:
            out["currentStreak"] = self.current_streak
        return out


@dataclass(frozen=True)
class RepoMetrics:
    repository_count: int
    total_stars: int
    total_forks: int
    top_languages: Tuple[LanguageShare, ...]
    top_repos: Tuple[TopRepo, ...]

    @property
    def most_used_language(self) -> str:
        return self.top_languages[0].name if self.top_languages else "Unknown"


@dataclass(frozen=True)
class ActivityCounts:
    commits: int = 0
    pull_requests: int = 0
    issues: int = 0
    contributed_to: int = 0
    most_active_day: str = ""
    longest_streak: Optional[int] = None
    current_streak: Optional[int] = None
    provenance: str = "estimate"


# -----------------------------
# Repository metrics
# -----------------------------
def aggregate_repositories(repos: Sequence[Repository]) -> RepoMetrics:
    total_stars = sum(r.stargazers_count for r in repos)
    total_forks = sum(r.forks_count for r in repos)

    # Counts repositories per primary language, not bytes of code.
    lang_counts = Counter(r.language for r in repos if r.language)
    with_lang = sum(lang_counts.values())
    shares = [LanguageShare(name, count / with_lang * 100) for name, count in lang_counts.items()] if with_lang else []
    top_languages = sorted(shares, key=lambda s: s.percentage, reverse=True)[:TOP_LANGUAGES]

    # sorted() is stable, so star ties keep the upstream (recently-updated) order.
    ranked = sorted(repos, key=lambda r: r.stargazers_count, reverse=True)[:TOP_REPOS]
    top_repos = [TopRepo(r.name, r.stargazers_count, r.description or "", r.language or "") for r in ranked]

    return RepoMetrics(
        repository_count=len(repos),
        total_stars=total_stars,
        total_forks=total_forks,
        top_languages=tuple(top_languages),
        top_repos=tuple(top_repos),
    )


# -----------------------------
# Calendar metrics
# -----------------------------
def day_label(d: dt.date) -> str:
    return f"{MONTH_ABBR[d.month - 1]} {d.day}"


def most_active_day(calendar: Sequence[CalendarDay]) -> str:
    """
    Label of the first day holding the highest contribution count, or "" when
    the calendar has no contributions at all.
    """
    best: Optional[CalendarDay] = None
    for day in calendar:
        if day.count > (best.count if best else 0):
            best = day
    return day_label(best.date) if best else ""


def compute_streaks(calendar: Sequence[CalendarDay]) -> Dict[str, int]:
    """
    Longest and current run of days with contributions > 0, inclusive of the
    last calendar day.
    """
    counts = {d.date: d.count for d in calendar}
    if not counts:
        return {"longest": 0, "current": 0}
    start_date, end_date = min(counts), max(counts)
    max_streak = 0
    cur_streak = 0
    d = start_date
    one = dt.timedelta(days=1)
    while d <= end_date:
        if counts.get(d, 0) > 0:
            cur_streak += 1
            if cur_streak > max_streak:
                max_streak = cur_streak
        else:
            cur_streak = 0
        d += one
    return {"longest": max_streak, "current": cur_streak}


# -----------------------------
# Assembly
# -----------------------------
def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def account_age_years(created_at: Optional[dt.datetime], now: dt.datetime) -> int:
    if created_at is None:
        return 0
    days = (now - created_at).total_seconds() / 86400
    return max(0, int(math.floor(days / 365)))


def assemble_record(
    profile: Profile,
    repo_metrics: RepoMetrics,
    activity: ActivityCounts,
    now: Optional[dt.datetime] = None,
) -> StatsRecord:
    now = now or dt.datetime.now(dt.timezone.utc)
    total_repos = profile.public_repos + profile.total_private_repos
    velocity = _round_half_up(activity.commits / total_repos) if total_repos > 0 else 0

    return StatsRecord(
        username=profile.login,
        avatar=profile.avatar_url,
        bio=profile.bio,
        total_repos=total_repos,
        total_stars=repo_metrics.total_stars,
        total_forks=repo_metrics.total_forks,
        followers=profile.followers,
        following=profile.following,
        contributed_to=activity.contributed_to,
        total_commits=activity.commits,
        total_prs=activity.pull_requests,
        total_issues=activity.issues,
        account_age=account_age_years(profile.created_at, now),
        coding_velocity=velocity,
        lines_of_code=activity.commits * LINES_PER_COMMIT,
        most_active_day=activity.most_active_day,
        most_used_language=repo_metrics.most_used_language,
        top_languages=repo_metrics.top_languages,
        top_repos=repo_metrics.top_repos,
        longest_streak=activity.longest_streak,
        current_streak=activity.current_streak,
        provenance=activity.provenance,
    )
