import pytest

from jokebox.errors import NetworkError
from jokebox.recommend import liked_categories, recommend
from jokebox.schemas import SingleJoke, TwoPartJoke


REFERENCE = SingleJoke(
    id=1,
    joke="why did the chicken cross the road to get to the other side",
    category="Misc",
    user_rating=True,
)


class FakeFetcher:
    """Serves queued candidates and records requested categories."""

    def __init__(self, candidates):
        self.candidates = list(candidates)
        self.requests: list[list[str]] = []

    def fetch_from_categories(self, categories):
        self.requests.append(list(categories))
        item = self.candidates.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


UNRELATED = SingleJoke(id=20, joke="knock knock", category="Misc")
SIMILAR = TwoPartJoke(
    id=21,
    setup="why did the chicken cross the road",
    delivery="to get to the other side",
    category="Misc",
)


def test_liked_categories_distinct_in_order():
    records = [
        SingleJoke(id=1, joke="a", category="Pun", user_rating=True),
        SingleJoke(id=2, joke="b", category="Dark", user_rating=False),
        SingleJoke(id=3, joke="c", category="Misc", user_rating=True),
        SingleJoke(id=4, joke="d", category="Pun", user_rating=True),
    ]
    assert liked_categories(records) == ["Pun", "Misc"]


def test_first_similar_candidate_returned():
    fetcher = FakeFetcher([UNRELATED, SIMILAR])
    rec = recommend(fetcher, REFERENCE, [REFERENCE], max_attempts=5)

    assert rec.joke == SIMILAR
    assert rec.similar is True
    assert rec.attempts == 2
    assert fetcher.requests == [["Misc"], ["Misc"]]


def test_fallback_to_last_candidate_when_none_similar():
    other = SingleJoke(id=22, joke="what's brown and sticky? a stick", category="Misc")
    fetcher = FakeFetcher([UNRELATED, other])
    rec = recommend(fetcher, REFERENCE, [REFERENCE], max_attempts=2)

    assert rec.joke == other
    assert rec.similar is False
    assert rec.attempts == 2


def test_no_likes_fetches_any_category():
    disliked = REFERENCE.model_copy(update={"user_rating": False})
    fetcher = FakeFetcher([SIMILAR])
    recommend(fetcher, disliked, [disliked])
    assert fetcher.requests == [[]]


def test_fetch_errors_propagate():
    fetcher = FakeFetcher([NetworkError("down")])
    with pytest.raises(NetworkError):
        recommend(fetcher, REFERENCE, [REFERENCE])


def test_invalid_max_attempts():
    with pytest.raises(ValueError):
        recommend(FakeFetcher([]), REFERENCE, [], max_attempts=0)
