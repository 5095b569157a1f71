from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_serializer, model_validator

from jokebox.errors import ParseError


TWOPART_SEPARATOR = "\n"


class SingleJoke(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["single"] = "single"
    id: int
    joke: str
    category: str
    # Always null for single jokes; present so persisted records share one shape
    setup: None = None
    delivery: None = None
    user_rating: bool | None = None

    @property
    def text(self) -> str:
        return self.joke


class TwoPartJoke(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["twopart"] = "twopart"
    id: int
    setup: str
    delivery: str
    category: str
    user_rating: bool | None = None

    @model_validator(mode="before")
    @classmethod
    def _drop_assembled_text(cls, data):
        # Persisted records carry the assembled text under "joke"; it is derived, not stored state
        if isinstance(data, dict) and "joke" in data:
            data = {k: v for k, v in data.items() if k != "joke"}
        return data

    @property
    def text(self) -> str:
        return self.setup + TWOPART_SEPARATOR + self.delivery


Joke = Annotated[Union[SingleJoke, TwoPartJoke], Field(discriminator="type")]

JOKE_ADAPTER: TypeAdapter = TypeAdapter(Joke)

# Keys JokeAPI sends that we keep; flags/safe/lang/error are dropped at the boundary
API_FIELDS = ("type", "id", "joke", "setup", "delivery", "category")


def parse_joke(data: object, *, source: str = "payload") -> SingleJoke | TwoPartJoke:
    """Validate one joke dict (tagged on `type`). Schema violations -> ParseError."""
    try:
        return JOKE_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise ParseError(f"Invalid joke in {source}: {exc}") from exc


def joke_from_api(payload: object) -> SingleJoke | TwoPartJoke:
    """Convert a JokeAPI response body into a Joke (unrated)."""
    if not isinstance(payload, dict):
        raise ParseError(f"Invalid joke payload: expected object, got {type(payload).__name__}")
    data = {k: payload[k] for k in API_FIELDS if k in payload}
    return parse_joke(data, source="API response")


def with_rating(joke: SingleJoke | TwoPartJoke, liked: bool) -> SingleJoke | TwoPartJoke:
    """Return a rating record: a copy of `joke` with user_rating set. The input is not mutated."""
    return joke.model_copy(update={"user_rating": bool(liked)})


def is_rating_record(joke: SingleJoke | TwoPartJoke) -> bool:
    return joke.user_rating is not None


def record_to_dict(record: SingleJoke | TwoPartJoke) -> dict:
    """JSON-ready dict for the ratings file. `joke` holds the assembled text for both kinds."""
    data = record.model_dump(mode="json")
    data["joke"] = record.text
    return {
        "id": data["id"],
        "type": data["type"],
        "joke": data["joke"],
        "setup": data.get("setup"),
        "delivery": data.get("delivery"),
        "category": data["category"],
        "user_rating": data["user_rating"],
    }


class RatingCounts(BaseModel):
    model_config = ConfigDict(extra="forbid")

    likes: int = 0
    dislikes: int = 0


class CategorySets(BaseModel):
    model_config = ConfigDict(extra="forbid")

    liked: set[str] = Field(default_factory=set)
    disliked: set[str] = Field(default_factory=set)

    @field_serializer("liked", "disliked")
    def _sorted(self, value: set[str]) -> list[str]:
        return sorted(value)


class UserReport(BaseModel):
    """Profile derived from all rating records. Snapshot shape mirrors the JSON file."""
    model_config = ConfigDict(extra="forbid")

    user_rating: RatingCounts = Field(default_factory=RatingCounts)
    categories: CategorySets = Field(default_factory=CategorySets)

    @property
    def like_count(self) -> int:
        return self.user_rating.likes

    @property
    def dislike_count(self) -> int:
        return self.user_rating.dislikes

    @property
    def liked_categories(self) -> set[str]:
        return self.categories.liked

    @property
    def disliked_categories(self) -> set[str]:
        return self.categories.disliked
