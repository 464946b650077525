"""
Static share card: theme palettes and layout geometry.

The SVG itself lives in ``templates/card_<layout>.svg``; this module only
works out colors, positions and display strings so the templates stay dumb.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional, Tuple

from .stats import StatsRecord

THEMES: Dict[str, Dict[str, str]] = {
    "dark": {"bg": "#000000", "text": "#ffffff", "muted": "#888888", "accent": "#ffffff", "subtle": "#333333", "card": "#111111"},
    "light": {"bg": "#fafafa", "text": "#0a0a0a", "muted": "#666666", "accent": "#0a0a0a", "subtle": "#e5e5e5", "card": "#ffffff"},
    "midnight": {"bg": "#0f172a", "text": "#e2e8f0", "muted": "#64748b", "accent": "#38bdf8", "subtle": "#1e293b", "card": "#111111"},
    "forest": {"bg": "#052e16", "text": "#dcfce7", "muted": "#86efac", "accent": "#4ade80", "subtle": "#14532d", "card": "#111111"},
    "sunset": {"bg": "#1c1917", "text": "#fef3c7", "muted": "#fcd34d", "accent": "#f59e0b", "subtle": "#292524", "card": "#111111"},
    "ocean": {"bg": "#0c4a6e", "text": "#e0f2fe", "muted": "#7dd3fc", "accent": "#0ea5e9", "subtle": "#075985", "card": "#111111"},
}

LAYOUTS: Dict[str, Dict[str, int]] = {
    "linear": {"width": 600, "height": 1500},
    "bento": {"width": 800, "height": 1300},
}

DEFAULT_THEME = "dark"
DEFAULT_LAYOUT = "linear"
FOOTER = "github-wrapped"


class CardError(ValueError):
    pass


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def _fmt(n: int) -> str:
    return f"{n:,}"


def _linear(record: StatsRecord) -> Dict[str, Any]:
    y = 240
    stats = []
    for value, label in (
        (record.total_repos, "repositories"),
        (record.total_stars, "stars"),
        (record.total_commits, "commits"),
        (record.total_prs, "pull requests"),
    ):
        stats.append({"value": _fmt(value), "label": label, "y": y})
        y += 100

    y += 50
    languages_y = y
    y += 40
    languages = []
    for lang in record.top_languages:
        languages.append(
            {"name": lang.name, "percent": f"{round(lang.percentage)}%", "y": y, "bar": round(500 * lang.percentage / 100)}
        )
        y += 50

    y += 40
    repos_y = y
    y += 40
    repos = []
    for i, repo in enumerate(record.top_repos[:3]):
        repos.append(
            {"label": f"{i + 1}. {truncate(repo.name, 20)}", "stars": f"★ {repo.stars}", "language": repo.language, "y": y}
        )
        y += 60

    return {"stats": stats, "languages_y": languages_y, "languages": languages, "repos_y": repos_y, "repos": repos}


def _bento(record: StatsRecord) -> Dict[str, Any]:
    top = 160
    tiles = [
        {"x": 50, "y": top, "w": 380, "h": 280, "label": "commits", "value": _fmt(record.total_commits),
         "subtitle": "you shipped code consistently", "big": True},
        {"x": 450, "y": top, "w": 300, "h": 130, "label": "repositories", "value": _fmt(record.total_repos)},
        {"x": 450, "y": top + 150, "w": 145, "h": 130, "label": "stars", "value": _fmt(record.total_stars)},
        {"x": 605, "y": top + 150, "w": 145, "h": 130, "label": "PRs", "value": _fmt(record.total_prs)},
    ]
    row = top + 300
    extras = [
        ("followers", _fmt(record.followers)),
        ("lines of code", _fmt(record.lines_of_code)),
        ("most active", record.most_active_day or "-"),
        ("velocity", f"{record.coding_velocity}/repo"),
    ]
    for i, (label, value) in enumerate(extras):
        tiles.append({"x": 50 + i * 180, "y": row, "w": 160, "h": 110, "label": label, "value": value})

    languages_y = row + 160
    languages = []
    for i, lang in enumerate(record.top_languages[:4]):
        languages.append(
            {"x": 50 + (i % 2) * 360, "y": languages_y + 30 + (i // 2) * 110, "name": lang.name, "rank": f"#{i + 1}",
             "percent": f"{round(lang.percentage)}%"}
        )

    repos_y = languages_y + 270
    repos = []
    for i, repo in enumerate(record.top_repos[:3]):
        repos.append(
            {"x": 50, "y": repos_y + 30 + i * 100, "label": f"{i + 1}. {truncate(repo.name, 24)}",
             "stars": f"★ {repo.stars}", "language": repo.language}
        )

    return {"tiles": tiles, "languages_y": languages_y, "languages": languages, "repos_y": repos_y, "repos": repos}


def resolve_style(theme: Optional[str], layout: Optional[str]) -> Tuple[str, str]:
    theme = theme or DEFAULT_THEME
    layout = layout or DEFAULT_LAYOUT
    if theme not in THEMES:
        raise CardError(f"Unknown theme {theme!r}; expected one of {', '.join(THEMES)}")
    if layout not in LAYOUTS:
        raise CardError(f"Unknown layout {layout!r}; expected one of {', '.join(LAYOUTS)}")
    return theme, layout


def card_context(
    record: StatsRecord,
    theme: Optional[str] = None,
    layout: Optional[str] = None,
    year: Optional[int] = None,
) -> Dict[str, Any]:
    theme, layout = resolve_style(theme, layout)
    body = _linear(record) if layout == "linear" else _bento(record)
    return {
        "template": f"card_{layout}.svg",
        "theme": THEMES[theme],
        "size": LAYOUTS[layout],
        "record": record,
        "year": year or dt.date.today().year,
        "footer": FOOTER,
        **body,
    }


def theme_names() -> List[str]:
    return list(THEMES)
