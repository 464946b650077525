import pytest

from gitwrapped.card import THEMES, CardError, card_context, resolve_style, truncate
from gitwrapped.schemas import Profile, Repository
from gitwrapped.stats import ActivityCounts, aggregate_repositories, assemble_record


@pytest.fixture
def record():
    repos = [
        Repository("a-very-long-repository-name", 30, language="Go"),
        Repository("b", 10, language="Rust"),
        Repository("c", 1),
    ]
    return assemble_record(Profile(login="octocat", public_repos=3), aggregate_repositories(repos), ActivityCounts(commits=1234))


def test_six_themes():
    assert list(THEMES) == ["dark", "light", "midnight", "forest", "sunset", "ocean"]


def test_defaults():
    assert resolve_style(None, None) == ("dark", "linear")


def test_unknown_layout():
    with pytest.raises(CardError):
        resolve_style("dark", "grid")


def test_truncate():
    assert truncate("short", 20) == "short"
    assert truncate("a-very-long-repository-name", 20) == "a-very-long-repos..."


def test_linear_context(record):
    ctx = card_context(record, "light", "linear", year=2025)
    assert ctx["template"] == "card_linear.svg"
    assert ctx["theme"]["bg"] == "#fafafa"
    assert ctx["stats"][2] == {"value": "1,234", "label": "commits", "y": 440}
    assert [l["percent"] for l in ctx["languages"]] == ["50%", "50%"]
    assert ctx["repos"][0]["label"] == "1. a-very-long-repos..."
    assert ctx["year"] == 2025


def test_bento_context(record):
    ctx = card_context(record, layout="bento")
    assert ctx["size"] == {"width": 800, "height": 1300}
    assert ctx["tiles"][0]["value"] == "1,234"
    assert ctx["languages"][0]["rank"] == "#1"
    assert len(ctx["repos"]) == 3
