from __future__ import annotations

# Load .env before reading configuration
from dotenv import load_dotenv
load_dotenv()

import argparse
import sys

from jokebox.cache_utils import FetchCache
from jokebox.config import load_config
from jokebox.errors import ParseError
from jokebox.joke_fetch import JokeFetcher
from jokebox.logging_utils import log_event
from jokebox.rating_store import RatingStore
from jokebox.report import ReportAggregator
from jokebox.session import JokeSession


def main(argv: list[str] | None = None, *, ask=input, say=print) -> int:
    p = argparse.ArgumentParser(description="Rate jokes and get recommendations similar to the ones you like.")
    p.add_argument("--data-dir", default=None, help="Where ratings, report and cache are stored")
    p.add_argument("--threshold", type=float, default=None, help="Similarity needed to recommend (0-1)")
    p.add_argument("--no-cache", action="store_true", help="Don't read or write the response cache file")
    args = p.parse_args(argv)

    if args.threshold is not None and not 0.0 <= args.threshold <= 1.0:
        p.error("--threshold must be between 0 and 1")

    cfg = load_config(data_dir=args.data_dir, threshold=args.threshold)

    cache = FetchCache(None if args.no_cache else cfg.cache_path, ttl_s=cfg.cache_ttl_s)
    cache.load()
    fetcher = JokeFetcher(
        cache,
        api_url=cfg.api_url,
        min_interval_s=cfg.min_interval_s,
        timeout_s=cfg.timeout_s,
    )
    session = JokeSession(
        fetcher,
        RatingStore(cfg.ratings_path),
        ReportAggregator(cfg.report_path),
        ask,
        say,
        threshold=cfg.threshold,
        max_attempts=cfg.max_attempts,
    )

    try:
        session.run()
    except ParseError as exc:
        log_event("session_failed", error_code="PARSE_ERROR", error=str(exc))
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        log_event("session_interrupted")
        say("\nBye!")
        return 130
    finally:
        cache.flush()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
