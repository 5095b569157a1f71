"""Bag-of-words term vectors for joke similarity.

Pure functions. Raw term counts only: no stemming, no stop words, no IDF weighting.
"""
from __future__ import annotations

from collections import Counter


def tokenize(text: str) -> list[str]:
    """
    Split on whitespace and case-fold.

    A token is any whitespace-delimited substring; punctuation stays attached
    ("dog." and "dog" are different tokens).
    """
    return text.lower().split()


def term_frequencies(tokens: list[str]) -> dict[str, int]:
    """Count occurrences of each token."""
    return dict(Counter(tokens))


def build_vocabulary(freq_a: dict[str, int], freq_b: dict[str, int]) -> list[str]:
    """
    Union of the terms of both frequency maps.

    Returned as a list so both vectors of one comparison iterate the same order:
    terms of `freq_a` first (insertion order), then terms only in `freq_b`.
    """
    vocab = dict.fromkeys(freq_a)
    vocab.update(dict.fromkeys(freq_b))
    return list(vocab)


def vectorize(freq: dict[str, int], vocabulary: list[str]) -> list[int]:
    """Count for each vocabulary term, 0 when absent. len(result) == len(vocabulary)."""
    return [freq.get(term, 0) for term in vocabulary]
