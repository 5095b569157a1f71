# jokebox/rating_store.py
"""
Persistence for rated jokes.

The ratings file is a JSON array of rating records, rewritten whole on every save.
Single-writer: no locking.
"""
from __future__ import annotations

from pathlib import Path

from jokebox.errors import ParseError
from jokebox.json_utils import read_json, write_json
from jokebox.logging_utils import log_event
from jokebox.schemas import (
    SingleJoke,
    TwoPartJoke,
    is_rating_record,
    parse_joke,
    record_to_dict,
)


class RatingStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load_all(self) -> list[SingleJoke | TwoPartJoke]:
        """
        All persisted rating records, in save order.

        Missing file -> []. Malformed JSON, a non-array, or a record without a rating -> ParseError.
        """
        raw = read_json(self.path, default=[])
        if not isinstance(raw, list):
            raise ParseError(f"Error parsing file {self.path}: expected a JSON array")

        records = []
        for idx, item in enumerate(raw):
            record = parse_joke(item, source=f"{self.path}[{idx}]")
            if not is_rating_record(record):
                raise ParseError(f"Error parsing file {self.path}: record {record.id} has no user_rating")
            records.append(record)
        return records

    def save(self, record: SingleJoke | TwoPartJoke) -> bool:
        """
        Append `record` and rewrite the file.

        Idempotent on id: if a record with the same id is already stored, nothing is
        written (the existing rating is kept, not overwritten). Returns True if written.
        """
        if not is_rating_record(record):
            raise ValueError(f"joke {record.id} has no user_rating; rate it before saving")

        records = self.load_all()
        if any(existing.id == record.id for existing in records):
            log_event("rating_duplicate_skipped", joke_id=record.id, path=str(self.path))
            return False

        records.append(record)
        write_json(self.path, [record_to_dict(r) for r in records])
        log_event(
            "rating_saved",
            joke_id=record.id,
            category=record.category,
            liked=record.user_rating,
            total=len(records),
        )
        return True

    def clear(self) -> bool:
        """Delete the ratings file. Returns False if there was nothing to delete."""
        if not self.path.exists():
            return False
        self.path.unlink()
        return True
