"""Response cache for the joke fetcher.

An explicit object handed to the fetcher: load() on session start, flush() on stop.
Entries are keyed by URL and expire after a TTL.
"""
from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Callable

from jokebox.errors import ParseError
from jokebox.json_utils import read_json, write_json
from jokebox.logging_utils import log_event


def is_cache_expired(expires_at: float, now: float) -> bool:
    """
    Check if a cache entry is past its expiry.
    Args:
        expires_at: epoch seconds at which the entry stops being valid
        now: current epoch seconds
    Returns:
        True if expired (now >= expires_at), False if fresh
    """
    return now >= expires_at


class FetchCache:
    def __init__(
        self,
        path: str | Path | None,
        *,
        ttl_s: float = 3600.0,
        clock: Callable[[], float] = time.time,
    ):
        self.path = Path(path) if path is not None else None
        self.ttl_s = ttl_s
        self._clock = clock
        self._entries: dict[str, dict] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def load(self) -> int:
        """
        Replace in-memory entries with the persisted ones, dropping expired entries.

        A corrupted cache file is not fatal: it is logged and the cache starts empty.
        Returns the number of entries loaded.
        """
        self._entries = {}
        if self.path is None:
            return 0

        try:
            raw = read_json(self.path, default={})
        except ParseError as exc:
            log_event("cache_load_failed", path=str(self.path), error=str(exc))
            return 0

        if not isinstance(raw, dict):
            log_event("cache_load_failed", path=str(self.path), error="expected a JSON object")
            return 0

        now = self._clock()
        for url, entry in raw.items():
            if not isinstance(entry, dict) or "expires_at" not in entry or "value" not in entry:
                continue
            try:
                expires_at = float(entry["expires_at"])
            except (TypeError, ValueError):
                log_event("cache_entry_skipped", url=url, expires_at=entry["expires_at"])
                continue
            if is_cache_expired(expires_at, now):
                continue
            self._entries[url] = {"expires_at": expires_at, "value": entry["value"]}

        log_event("cache_loaded", path=str(self.path), entries=len(self._entries))
        return len(self._entries)

    def flush(self) -> None:
        """Persist live entries. No-op for an in-memory cache (path=None)."""
        if self.path is None:
            return
        now = self._clock()
        live = {
            url: entry
            for url, entry in self._entries.items()
            if not is_cache_expired(entry["expires_at"], now)
        }
        write_json(self.path, live)
        log_event("cache_flushed", path=str(self.path), entries=len(live))

    def get(self, url: str) -> Any | None:
        """Cached value for `url`, or None on miss/expiry."""
        entry = self._entries.get(url)
        if entry is None:
            return None
        if is_cache_expired(entry["expires_at"], self._clock()):
            del self._entries[url]
            return None
        return entry["value"]

    def discard(self, url: str) -> None:
        self._entries.pop(url, None)

    def put(self, url: str, value: Any) -> None:
        self._entries[url] = {"expires_at": self._clock() + self.ttl_s, "value": value}

    def clear(self) -> None:
        """Drop all entries and delete the cache file."""
        self._entries = {}
        if self.path is not None and self.path.exists():
            self.path.unlink()
