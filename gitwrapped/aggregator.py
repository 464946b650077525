"""
The aggregation pipeline: cache -> profile -> repositories -> contributions
-> record.

Only the profile and repository stages can fail an aggregation. Contribution
sources degrade to estimates (see ``providers``). A record is cached only
after every stage has completed.
"""

from __future__ import annotations

import datetime as dt
import logging
import threading
from concurrent.futures import Future
from typing import Callable, Dict, List, Optional

from .cache import CacheStore
from .config import Settings
from .github import GitHubClient
from .providers import ContributionProvider, GraphQLContributions, PublicEventsContributions, resolve_activity
from .stats import StatsRecord, aggregate_repositories, assemble_record

logger = logging.getLogger(__name__)


def _now_utc() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Aggregator:
    def __init__(
        self,
        client: GitHubClient,
        cache: CacheStore[StatsRecord],
        providers: Optional[List[ContributionProvider]] = None,
        single_flight: bool = True,
        now: Callable[[], dt.datetime] = _now_utc,
    ) -> None:
        self.client = client
        self.cache = cache
        self.providers = providers if providers is not None else [
            GraphQLContributions(client),
            PublicEventsContributions(client),
        ]
        self.single_flight = single_flight
        self._now = now
        self._inflight: Dict[str, "Future[StatsRecord]"] = {}
        self._inflight_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[GitHubClient] = None) -> "Aggregator":
        client = client or GitHubClient(settings)
        cache: CacheStore[StatsRecord] = CacheStore(settings.cache_ttl_seconds, settings.cache_max_entries)
        return cls(client, cache, single_flight=settings.single_flight)

    def aggregate(self, username: str) -> StatsRecord:
        cached = self.cache.get(username)
        if cached is not None:
            logger.info("Returning cached data for %s", username)
            return cached

        if not self.single_flight:
            return self._aggregate_and_store(username)

        key = username.lower()
        with self._inflight_lock:
            pending = self._inflight.get(key)
            leader = pending is None
            if leader:
                pending = Future()
                self._inflight[key] = pending

        if not leader:
            logger.debug("Joining in-flight aggregation for %s", username)
            return pending.result()

        try:
            record = self._aggregate_and_store(username)
        except BaseException as e:
            pending.set_exception(e)
            raise
        else:
            pending.set_result(record)
            return record
        finally:
            with self._inflight_lock:
                self._inflight.pop(key, None)

    def _aggregate_and_store(self, username: str) -> StatsRecord:
        logger.info("Fetching GitHub data for %s", username)
        profile = self.client.fetch_profile(username)
        repos = self.client.fetch_repositories(username)
        repo_metrics = aggregate_repositories(repos)
        activity = resolve_activity(self.providers, username, repo_metrics.repository_count)
        record = assemble_record(profile, repo_metrics, activity, now=self._now())
        self.cache.put(username, record)
        return record
