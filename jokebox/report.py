# jokebox/report.py
"""
User report: like/dislike counts and liked/disliked categories.

generate() is pure; persist()/load() own the snapshot file.
"""
from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError

from jokebox.errors import ParseError
from jokebox.json_utils import read_json, write_json
from jokebox.logging_utils import log_event
from jokebox.schemas import CategorySets, RatingCounts, SingleJoke, TwoPartJoke, UserReport


class ReportAggregator:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def generate(self, records: list[SingleJoke | TwoPartJoke]) -> UserReport:
        """
        Recompute the report from scratch in one pass over `records`.

        A record counts as a like when user_rating is True, otherwise as a dislike.
        Categories are deduplicated; order is not preserved.
        """
        likes = 0
        dislikes = 0
        liked: list[str] = []
        disliked: list[str] = []

        for record in records:
            if record.user_rating:
                likes += 1
                liked.append(record.category)
            else:
                dislikes += 1
                disliked.append(record.category)

        report = UserReport(
            user_rating=RatingCounts(likes=likes, dislikes=dislikes),
            categories=CategorySets(liked=set(liked), disliked=set(disliked)),
        )
        log_event("report_generated", likes=likes, dislikes=dislikes, records=len(records))
        return report

    def persist(self, report: UserReport) -> None:
        """Overwrite the snapshot file with `report` (no merge with the previous snapshot)."""
        write_json(self.path, report.model_dump(mode="json"))
        log_event("report_persisted", path=str(self.path))

    def load(self) -> UserReport:
        """Last persisted snapshot. Missing file -> FileNotFoundError, malformed -> ParseError."""
        raw = read_json(self.path)
        try:
            return UserReport.model_validate(raw)
        except ValidationError as exc:
            raise ParseError(f"Error parsing file {self.path}: {exc}") from exc

    def clear(self) -> bool:
        if not self.path.exists():
            return False
        self.path.unlink()
        return True


def render_report(report: UserReport) -> str:
    """Plain-text report for the terminal."""
    liked = ", ".join(sorted(report.liked_categories)) or "None"
    disliked = ", ".join(sorted(report.disliked_categories)) or "None"

    lines = [
        "Your joke report",
        "----------------",
        f"Likes: {report.like_count}",
        f"Dislikes: {report.dislike_count}",
        f"Liked categories: {liked}",
        f"Disliked categories: {disliked}",
    ]
    return "\n".join(lines)
