"""Recommend a joke similar to one the user rated.

Candidates come from the categories of liked jokes and must pass the similarity policy
in jokebox.similarity before they are presented.
"""
from __future__ import annotations

from dataclasses import dataclass

from jokebox.logging_utils import log_event
from jokebox.schemas import SingleJoke, TwoPartJoke
from jokebox.similarity import SIMILARITY_THRESHOLD, score_candidate


@dataclass
class Recommendation:
    joke: SingleJoke | TwoPartJoke
    similar: bool
    attempts: int


def liked_categories(records: list[SingleJoke | TwoPartJoke]) -> list[str]:
    """Distinct categories of liked records, first-seen order."""
    return list(dict.fromkeys(r.category for r in records if r.user_rating))


def recommend(
    fetcher,
    reference: SingleJoke | TwoPartJoke,
    records: list[SingleJoke | TwoPartJoke],
    *,
    threshold: float = SIMILARITY_THRESHOLD,
    max_attempts: int = 5,
) -> Recommendation:
    """
    Fetch up to `max_attempts` candidates and return the first one similar to `reference`.

    When none passes, the last candidate is returned with similar=False.
    Fetch errors propagate to the caller.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    categories = liked_categories(records)
    candidate = None
    for attempt in range(1, max_attempts + 1):
        candidate = fetcher.fetch_from_categories(categories)
        result = score_candidate(candidate, reference.text, threshold=threshold)
        log_event(
            "candidate_scored",
            joke_id=candidate.id,
            reference_id=reference.id,
            type=candidate.type,
            scores={k: round(v, 4) for k, v in result.scores.items()},
            accepted=result.accepted,
            attempt=attempt,
        )
        if result.accepted:
            return Recommendation(joke=candidate, similar=True, attempts=attempt)

    log_event("recommendation_fallback", joke_id=candidate.id, reference_id=reference.id, attempts=max_attempts)
    return Recommendation(joke=candidate, similar=False, attempts=max_attempts)
