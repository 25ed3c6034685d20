"""The storage interface the HTTP handlers depend on."""

from __future__ import annotations

from typing import Protocol

from movieapi.models import Genre, Movie


class MovieNotFoundError(LookupError):
    """Raised when a movie with the requested id does not exist."""

    def __init__(self, message: str = "movie not found") -> None:
        super().__init__(message)


class MovieStorage(Protocol):
    """Read access to movies and genres."""

    def get_top_movies(self) -> list[Movie]:
        """Return the most popular movies."""
        ...

    def get_random_movies(self) -> list[Movie]:
        """Return a random selection of movies."""
        ...

    def get_movie_by_id(self, movie_id: int) -> Movie:
        """Return one movie with its relations or raise MovieNotFoundError."""
        ...

    def search_movies_by_name(
        self, name: str, order: str, genre: int | None
    ) -> list[Movie]:
        """Return movies whose title or overview matches ``name``."""
        ...

    def get_all_genres(self) -> list[Genre]:
        """Return every genre ordered by id."""
        ...