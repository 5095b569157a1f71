import pytest

from jokebox.errors import ParseError
from jokebox.json_utils import read_json, write_json


def test_write_then_read(tmp_path):
    path = tmp_path / "nested" / "data.json"
    write_json(path, {"a": [1, 2]})
    assert read_json(path) == {"a": [1, 2]}


def test_missing_file_returns_default(tmp_path):
    assert read_json(tmp_path / "nope.json", default=[]) == []


def test_missing_file_without_default_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_json(tmp_path / "nope.json")


def test_malformed_json_raises_parse_error(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text('{"a": 1,}', encoding="utf-8")
    with pytest.raises(ParseError):
        read_json(path, default={})


def test_empty_file_raises_parse_error(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ParseError):
        read_json(path)


def test_write_overwrites(tmp_path):
    path = tmp_path / "data.json"
    write_json(path, [1, 2, 3])
    write_json(path, [])
    assert read_json(path) == []


def test_invalid_utf8_raises_parse_error(tmp_path):
    path = tmp_path / "binary.json"
    path.write_bytes(b"[\xff\xfe]")
    with pytest.raises(ParseError):
        read_json(path, default=[])
