"""
Scene timeline for the animated year-in-review presentation.

The player renders six fixed scenes back to back. Each scene gets the slice
of the record it displays, a frame offset and a duration; opacity and the
progress bar are pure functions of the current frame.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .stats import StatsRecord

FPS = 30
SCENE_DURATION = 180
FADE_FRAMES = 15

SCENES = ("intro", "stats-overview", "languages", "contributions", "top-repos", "outro")
TOTAL_FRAMES = SCENE_DURATION * len(SCENES)


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def _ease_out(t: float) -> float:
    return 1 - (1 - t) * (1 - t)


def _ease_in(t: float) -> float:
    return t * t


def scene_opacity(frame: int, duration: int = SCENE_DURATION) -> float:
    """Opacity of a scene at a frame relative to its start: fade in, hold, fade out."""
    fade_in = _ease_out(_clamp(frame / FADE_FRAMES, 0.0, 1.0))
    fade_out = 1 - _ease_in(_clamp((frame - (duration - FADE_FRAMES)) / FADE_FRAMES, 0.0, 1.0))
    return min(fade_in, fade_out)


def progress(frame: int) -> List[float]:
    """Fill fraction (0..1) of each progress-bar segment at a global frame."""
    out = []
    for i in range(len(SCENES)):
        start = i * SCENE_DURATION
        out.append(_clamp((frame - start) / SCENE_DURATION, 0.0, 1.0))
    return out


def scene_at(frame: int) -> str:
    idx = int(_clamp(frame // SCENE_DURATION, 0, len(SCENES) - 1))
    return SCENES[idx]


def _scene_props(name: str, record: StatsRecord) -> Dict[str, Any]:
    if name == "intro":
        return {"username": record.username, "avatar": record.avatar}
    if name == "stats-overview":
        return {"totalRepos": record.total_repos, "totalStars": record.total_stars, "followers": record.followers}
    if name == "languages":
        return {"languages": [l.to_dict() for l in record.top_languages]}
    if name == "contributions":
        return {
            "totalCommits": record.total_commits,
            "totalPRs": record.total_prs,
            "totalIssues": record.total_issues,
        }
    if name == "top-repos":
        return {"repos": [r.to_dict() for r in record.top_repos]}
    return {"githubData": record.to_dict()}


def build_timeline(record: StatsRecord) -> Dict[str, Any]:
    return {
        "fps": FPS,
        "durationInFrames": TOTAL_FRAMES,
        "fadeFrames": FADE_FRAMES,
        "scenes": [
            {
                "name": name,
                "from": i * SCENE_DURATION,
                "durationInFrames": SCENE_DURATION,
                "props": _scene_props(name, record),
            }
            for i, name in enumerate(SCENES)
        ],
    }
