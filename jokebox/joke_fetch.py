from __future__ import annotations

import json
import time
import urllib.error
import urllib.parse
import urllib.request

from jokebox.cache_utils import FetchCache
from jokebox.error_codes import (
    FETCH_PERMANENT,
    FETCH_TIMEOUT,
    FETCH_TRANSIENT,
    NOT_FOUND,
    PARSE_ERROR,
    RATE_LIMITED,
)
from jokebox.errors import JokeNotFoundError, NetworkError, ParseError, RemoteError
from jokebox.logging_utils import log_event
from jokebox.schemas import SingleJoke, TwoPartJoke, joke_from_api


# Keep results family friendly
BLACKLIST_FLAGS = "nsfw,religious,political,racist,sexist,explicit"
USER_AGENT = "jokebox/0.1"


def failure_code(exc: Exception) -> str:
    """Stable failure code for a fetch exception (used in log events)."""
    if isinstance(exc, JokeNotFoundError):
        return NOT_FOUND
    if isinstance(exc, ParseError):
        return PARSE_ERROR
    if isinstance(exc, NetworkError):
        return FETCH_TIMEOUT if exc.timeout else FETCH_TRANSIENT
    if isinstance(exc, RemoteError):
        if exc.status_code == 429:
            return RATE_LIMITED
        if 400 <= exc.status_code < 500:
            return FETCH_PERMANENT
        return FETCH_TRANSIENT
    return FETCH_TRANSIENT


def _is_transient(exc: Exception) -> bool:
    # timeouts and 5xx are worth another try; 429 and other 4xx are not
    if isinstance(exc, NetworkError):
        return exc.timeout
    if isinstance(exc, RemoteError):
        return 500 <= exc.status_code < 600
    return False


# Fetch and decode JSON from a URL - no retries, no cache
def fetch_json(url: str, *, timeout_s: float = 10.0):
    """GET `url` and decode the JSON body."""
    req = urllib.request.Request(
        url,
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
    )

    try:
        with urllib.request.urlopen(req, timeout=timeout_s) as resp:
            status = getattr(resp, "status", None)
            body = resp.read().decode("utf-8", errors="replace")

            if status is None or not 200 <= status < 300:
                raise RemoteError(status or 0, body=body)

    except urllib.error.HTTPError as exc:
        body = exc.read().decode("utf-8", errors="replace") if exc.fp is not None else None
        raise RemoteError(exc.code, f"HTTP {exc.code}: {exc.reason}", body=body) from exc
    except urllib.error.URLError as exc:
        is_timeout = isinstance(exc.reason, TimeoutError)
        raise NetworkError(f"URL error: {exc.reason}", timeout=is_timeout) from exc
    except TimeoutError as exc:
        raise NetworkError("timeout", timeout=True) from exc

    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON from {url}: {exc}") from exc


# Fetch with retry and exponential backoff for transient failures
def fetch_json_with_retry(url: str, *, attempts: int = 3, base_sleep_s: float = 0.5, timeout_s: float = 10.0):
    """Fetch JSON, retrying timeouts and 5xx. The last failure is re-raised."""
    for i in range(attempts):
        try:
            return fetch_json(url, timeout_s=timeout_s)
        except (NetworkError, RemoteError) as exc:
            if not _is_transient(exc) or i == attempts - 1:
                raise
            log_event("fetch_retry", url=url, attempt=i + 1, error_code=failure_code(exc), error=str(exc))
            time.sleep(base_sleep_s * (2 ** i))

    raise ValueError("attempts must be >= 1")


def _not_found_message(payload) -> str | None:
    """JokeAPI signals 'no match' with {"error": true, ...} in the body."""
    if isinstance(payload, dict) and payload.get("error") is True:
        return str(payload.get("message") or payload.get("additionalInfo") or "No matching joke found")
    return None


class JokeFetcher:
    """
    Client for the joke API.

    - One request per host every `min_interval_s` seconds
    - Responses cached per URL in the given FetchCache (searches only)
    - Payloads validated into SingleJoke / TwoPartJoke
    """

    def __init__(
        self,
        cache: FetchCache | None,
        *,
        api_url: str = "https://v2.jokeapi.dev/joke/",
        min_interval_s: float = 0.5,
        timeout_s: float = 10.0,
        attempts: int = 3,
        base_sleep_s: float = 0.5,
    ):
        self.cache = cache
        self.api_url = api_url if api_url.endswith("/") else api_url + "/"
        self.min_interval_s = min_interval_s
        self.timeout_s = timeout_s
        self.attempts = attempts
        self.base_sleep_s = base_sleep_s
        self._last_request: dict[str, float] = {}

    def search_url(self, term: str) -> str:
        query = urllib.parse.urlencode({"blacklistFlags": BLACKLIST_FLAGS, "contains": term})
        return f"{self.api_url}Any?{query}"

    def category_url(self, categories: list[str]) -> str:
        # Distinct, first-seen order; "Any" when nothing is liked yet
        cats = list(dict.fromkeys(c for c in categories if c)) or ["Any"]
        path = urllib.parse.quote(",".join(cats), safe=",")
        query = urllib.parse.urlencode({"blacklistFlags": BLACKLIST_FLAGS})
        return f"{self.api_url}{path}?{query}"

    def fetch_joke(self, term: str) -> SingleJoke | TwoPartJoke:
        """Fetch a joke containing `term`."""
        return self._get_joke(self.search_url(term), use_cache=True)

    def fetch_from_categories(self, categories: list[str]) -> SingleJoke | TwoPartJoke:
        """Fetch a random joke from `categories`. Never cached: each call should give a new joke."""
        return self._get_joke(self.category_url(categories), use_cache=False)

    def _throttle(self, url: str) -> None:
        host = urllib.parse.urlsplit(url).hostname or ""
        last = self._last_request.get(host)
        if last is not None:
            wait = self.min_interval_s - (time.monotonic() - last)
            if wait > 0:
                time.sleep(wait)
        self._last_request[host] = time.monotonic()

    def _get_joke(self, url: str, *, use_cache: bool) -> SingleJoke | TwoPartJoke:
        if use_cache and self.cache is not None:
            cached = self.cache.get(url)
            if cached is not None:
                try:
                    joke = joke_from_api(cached)
                except ParseError as exc:
                    # Bad entry: drop it and fetch fresh
                    log_event("cache_entry_invalid", url=url, error_code=PARSE_ERROR, error=str(exc))
                    self.cache.discard(url)
                else:
                    log_event("cache_hit", url=url)
                    return joke

        self._throttle(url)
        try:
            payload = fetch_json_with_retry(
                url,
                attempts=self.attempts,
                base_sleep_s=self.base_sleep_s,
                timeout_s=self.timeout_s,
            )
        except RemoteError as exc:
            # 4xx bodies can carry JokeAPI's "no matching joke" error
            message = None
            if exc.body and 400 <= exc.status_code < 500 and exc.status_code != 429:
                try:
                    message = _not_found_message(json.loads(exc.body))
                except json.JSONDecodeError:
                    message = None
            if message is not None:
                log_event("fetch_failed", url=url, error_code=NOT_FOUND, error=message)
                raise JokeNotFoundError(message) from exc
            log_event("fetch_failed", url=url, error_code=failure_code(exc), error=str(exc))
            raise
        except (NetworkError, ParseError) as exc:
            log_event("fetch_failed", url=url, error_code=failure_code(exc), error=str(exc))
            raise

        message = _not_found_message(payload)
        if message is not None:
            log_event("fetch_failed", url=url, error_code=NOT_FOUND, error=message)
            raise JokeNotFoundError(message)

        joke = joke_from_api(payload)
        if use_cache and self.cache is not None:
            self.cache.put(url, payload)
        log_event("fetch_ok", url=url, joke_id=joke.id, type=joke.type, category=joke.category)
        return joke
