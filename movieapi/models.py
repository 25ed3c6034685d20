"""Data records served by the movie API and their JSON representations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Genre:
    """A movie genre."""

    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready mapping for this genre."""
        return {"id": self.id, "name": self.name}


@dataclass
class Actor:
    """A cast member; ``image_url`` is ``None`` when unknown."""

    id: int
    first_name: str
    last_name: str
    image_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready mapping, leaving out a missing image URL."""
        result: dict[str, Any] = {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }
        if self.image_url is not None:
            result["image_url"] = self.image_url
        return result


def _list_or_null(items: list[Any]) -> list[Any] | None:
    # Relations that were never loaded are reported as null rather than [].
    return list(items) if items else None


@dataclass
class Movie:
    """A movie together with its genres, keywords and cast."""

    id: int
    title: str
    tmdb_id: int = 0
    tagline: str = ""
    release_year: int = 0
    genres: list[Genre] = field(default_factory=list)
    overview: str | None = None
    score: float | None = None
    popularity: float | None = None
    keywords: list[str] = field(default_factory=list)
    language: str | None = None
    poster_url: str | None = None
    trailer_url: str | None = None
    casting: list[Actor] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready mapping, omitting empty optional fields."""
        result: dict[str, Any] = {"id": self.id}
        if self.tmdb_id:
            result["tmdb_id"] = self.tmdb_id
        result["title"] = self.title
        if self.tagline:
            result["tag_line"] = self.tagline
        result["release_year"] = self.release_year
        genres = _list_or_null(self.genres)
        result["genres"] = None if genres is None else [g.to_dict() for g in genres]
        if self.overview is not None:
            result["overview"] = self.overview
        if self.score is not None:
            result["score"] = self.score
        if self.popularity is not None:
            result["popularity"] = self.popularity
        result["keywords"] = _list_or_null(self.keywords)
        if self.language is not None:
            result["languages"] = self.language
        if self.poster_url is not None:
            result["poster_url"] = self.poster_url
        if self.trailer_url is not None:
            result["trailer_url"] = self.trailer_url
        casting = _list_or_null(self.casting)
        result["casting"] = None if casting is None else [a.to_dict() for a in casting]
        return result