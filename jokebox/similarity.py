"""Cosine similarity between jokes and the recommendation acceptance policy.

Pure domain logic. No I/O.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from jokebox.schemas import SingleJoke, TwoPartJoke
from jokebox.text_vectorizer import build_vocabulary, term_frequencies, tokenize, vectorize


SIMILARITY_THRESHOLD = 0.30


def cosine_similarity(vec_a, vec_b) -> float:
    """
    dot(a, b) / (|a| * |b|).

    Vectors must have equal length (ValueError otherwise).
    A zero-magnitude vector has no direction: the similarity is 0.0, never NaN.
    """
    a = np.asarray(vec_a, dtype=float)
    b = np.asarray(vec_b, dtype=float)
    if a.shape != b.shape:
        raise ValueError(f"vector length mismatch: {a.shape[0]} != {b.shape[0]}")

    # Single sqrt of the squared-norm product; exact when the product is a perfect square
    denom = math.sqrt(float(np.dot(a, a)) * float(np.dot(b, b)))
    if denom == 0.0:
        return 0.0

    score = float(np.dot(a, b)) / denom
    return max(0.0, min(1.0, score))


def joke_similarity(text_a: str, text_b: str) -> float:
    """Case-insensitive bag-of-words cosine similarity of two raw joke strings."""
    freq_a = term_frequencies(tokenize(text_a))
    freq_b = term_frequencies(tokenize(text_b))
    vocabulary = build_vocabulary(freq_a, freq_b)
    # Both vectors share one vocabulary ordering
    vec_a = vectorize(freq_a, vocabulary)
    vec_b = vectorize(freq_b, vocabulary)
    return cosine_similarity(vec_a, vec_b)


@dataclass
class CandidateScore:
    """Similarity scores behind one accept/reject decision."""
    scores: dict[str, float]
    accepted: bool


def score_candidate(
    candidate: SingleJoke | TwoPartJoke,
    reference_text: str,
    *,
    threshold: float = SIMILARITY_THRESHOLD,
) -> CandidateScore:
    """
    Decide whether `candidate` is similar enough to recommend.

    Rules:
    - single: similarity(joke, reference) >= threshold
    - twopart: setup AND delivery must each clear the threshold on their own
    """
    if isinstance(candidate, TwoPartJoke):
        scores = {
            "setup": joke_similarity(candidate.setup, reference_text),
            "delivery": joke_similarity(candidate.delivery, reference_text),
        }
    else:
        scores = {"joke": joke_similarity(candidate.joke, reference_text)}

    accepted = all(s >= threshold for s in scores.values())
    return CandidateScore(scores=scores, accepted=accepted)


def is_similar(
    candidate: SingleJoke | TwoPartJoke,
    reference_text: str,
    *,
    threshold: float = SIMILARITY_THRESHOLD,
) -> bool:
    return score_candidate(candidate, reference_text, threshold=threshold).accepted
