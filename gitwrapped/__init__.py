"""
GitHub Wrapped: a year-in-review statistics profile for a GitHub user.
"""

from .aggregator import Aggregator
from .cache import CacheStore
from .config import Settings
from .github import BestEffortFailure, GitHubAPIError, GitHubClient, NotFound, UpstreamError
from .stats import LanguageShare, StatsRecord, TopRepo

__all__ = [
    "Aggregator",
    "BestEffortFailure",
    "CacheStore",
    "GitHubAPIError",
    "GitHubClient",
    "LanguageShare",
    "NotFound",
    "Settings",
    "StatsRecord",
    "TopRepo",
    "UpstreamError",
]

__version__ = "0.1.0"
