import json

import pytest

from jokebox.errors import ParseError
from jokebox.rating_store import RatingStore
from jokebox.schemas import SingleJoke, with_rating


@pytest.fixture
def store(tmp_path):
    return RatingStore(tmp_path / "jokes.json")


def test_load_all_missing_file_is_empty(store):
    assert store.load_all() == []


def test_save_then_load_round_trip(store, twopart_joke):
    record = with_rating(twopart_joke, True)
    assert store.save(record) is True

    loaded = store.load_all()
    assert loaded == [record]


def test_duplicate_id_stored_once(store, single_joke):
    record = with_rating(single_joke, True)
    store.save(record)
    assert store.save(record) is False

    assert len(store.load_all()) == 1


def test_duplicate_id_keeps_first_rating(store, single_joke):
    store.save(with_rating(single_joke, True))
    store.save(with_rating(single_joke, False))

    [stored] = store.load_all()
    assert stored.user_rating is True


def test_save_preserves_order(store, single_joke, twopart_joke):
    store.save(with_rating(twopart_joke, False))
    store.save(with_rating(single_joke, True))
    assert [r.id for r in store.load_all()] == [2, 1]


def test_save_unrated_joke_raises(store, single_joke):
    with pytest.raises(ValueError):
        store.save(single_joke)


def test_file_is_json_array_of_records(store, twopart_joke):
    store.save(with_rating(twopart_joke, False))
    data = json.loads(store.path.read_text(encoding="utf-8"))
    assert isinstance(data, list)
    assert data[0]["joke"] == twopart_joke.text
    assert data[0]["user_rating"] is False


def test_malformed_file_raises_parse_error(store, single_joke):
    store.path.write_text("[{not json", encoding="utf-8")
    with pytest.raises(ParseError):
        store.load_all()
    with pytest.raises(ParseError):
        store.save(with_rating(single_joke, True))


def test_non_array_file_raises_parse_error(store):
    store.path.write_text('{"id": 1}', encoding="utf-8")
    with pytest.raises(ParseError):
        store.load_all()


def test_record_without_rating_raises_parse_error(store):
    store.path.write_text(
        json.dumps([{"id": 1, "type": "single", "joke": "x", "setup": None,
                     "delivery": None, "category": "Misc", "user_rating": None}]),
        encoding="utf-8",
    )
    with pytest.raises(ParseError):
        store.load_all()


def test_clear_deletes_file(store, single_joke):
    assert store.clear() is False
    store.save(with_rating(single_joke, True))
    assert store.clear() is True
    assert not store.path.exists()
    assert store.load_all() == []


def test_different_ids_both_stored(store):
    store.save(with_rating(SingleJoke(id=5, joke="a", category="Pun"), True))
    store.save(with_rating(SingleJoke(id=6, joke="a", category="Pun"), True))
    assert len(store.load_all()) == 2


def test_invalid_utf8_file_raises_parse_error(store, single_joke):
    store.path.write_bytes(b"[\xff\xfe]")
    with pytest.raises(ParseError):
        store.load_all()
    with pytest.raises(ParseError):
        store.save(with_rating(single_joke, True))
