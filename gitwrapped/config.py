from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

# -----------------------------
# Defaults
# -----------------------------
GITHUB_API_BASE = "https://api.github.com"
API_VERSION = "2022-11-28"
CACHE_TTL_SECONDS = 300
CACHE_MAX_ENTRIES = 1024
REQUEST_TIMEOUT_SECONDS = 20


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    github_token: str = ""
    api_base: str = GITHUB_API_BASE
    api_version: str = API_VERSION
    cache_ttl_seconds: float = CACHE_TTL_SECONDS
    # None or 0 keeps every entry until overwritten.
    cache_max_entries: Optional[int] = CACHE_MAX_ENTRIES
    request_timeout: float = REQUEST_TIMEOUT_SECONDS
    single_flight: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        max_entries = _env_int("CACHE_MAX_ENTRIES", CACHE_MAX_ENTRIES)
        return cls(
            github_token=os.getenv("GITHUB_TOKEN", "").strip(),
            api_base=os.getenv("GITHUB_API_BASE", GITHUB_API_BASE).rstrip("/"),
            api_version=os.getenv("GITHUB_API_VERSION", API_VERSION),
            cache_ttl_seconds=_env_int("CACHE_TTL_SECONDS", CACHE_TTL_SECONDS),
            cache_max_entries=max_entries if max_entries > 0 else None,
            request_timeout=_env_int("REQUEST_TIMEOUT_SECONDS", REQUEST_TIMEOUT_SECONDS),
            single_flight=_env_bool("SINGLE_FLIGHT", True),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
