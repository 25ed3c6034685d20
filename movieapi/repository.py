"""Relational storage for movies, genres, actors and keywords."""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import closing
from typing import Any

from movieapi.logger import Logger
from movieapi.models import Actor, Genre, Movie
from movieapi.storage import MovieNotFoundError

DEFAULT_LIMIT = 20

_MOVIE_SELECT = """
        SELECT id, tmdb_id, title, tagline, release_year, overview, score,
        popularity, language, poster_url, trailer_url
        FROM movies"""

_TOP_MOVIES = _MOVIE_SELECT + """
        ORDER BY popularity DESC
        LIMIT %s
"""

_RANDOM_MOVIES = _MOVIE_SELECT + """
        ORDER BY random() DESC
        LIMIT %s
"""

_MOVIE_BY_ID = _MOVIE_SELECT + """
        WHERE id = %s
"""

_GENRES_OF_MOVIE = """
        SELECT g.id, g.name
        FROM genres g
        JOIN movie_genres mg ON g.id = mg.genre_id
        WHERE mg.movie_id = %s
"""

_ACTORS_OF_MOVIE = """
        SELECT a.id, a.first_name, a.last_name, a.image_url
        FROM actors a
        JOIN movie_cast mc ON a.id = mc.actor_id
        WHERE mc.movie_id = %s
"""

_KEYWORDS_OF_MOVIE = """
        SELECT k.word
        FROM keywords k
        JOIN movie_keywords mk ON k.id = mk.keyword_id
        WHERE mk.movie_id = %s
"""

_ALL_GENRES = "SELECT id, name FROM genres ORDER BY id"

_DEFAULT_ORDER = "popularity DESC"
_ORDER_CLAUSES = {
    "score": "score DESC",
    "name": "title",
    "date": "release_year DESC",
}


def _as_float(value: Any) -> float | None:
    return None if value is None else float(value)


def _movie_from_row(row: Sequence[Any]) -> Movie:
    (
        movie_id,
        tmdb_id,
        title,
        tagline,
        release_year,
        overview,
        score,
        popularity,
        language,
        poster_url,
        trailer_url,
    ) = row
    return Movie(
        id=movie_id,
        title=title,
        tmdb_id=tmdb_id if tmdb_id is not None else 0,
        tagline=tagline if tagline is not None else "",
        release_year=release_year if release_year is not None else 0,
        overview=overview,
        score=_as_float(score),
        popularity=_as_float(popularity),
        language=language,
        poster_url=poster_url,
        trailer_url=trailer_url,
    )


class MovieRepository:
    """Movie storage backed by a DB-API connection using ``%s`` placeholders."""

    def __init__(self, connection: Any, logger: Logger) -> None:
        self._connection = connection
        self._logger = logger

    def _fetch_all(
        self, sql: str, params: Sequence[Any] | None, failure: str
    ) -> list[Sequence[Any]]:
        try:
            with closing(self._connection.cursor()) as cursor:
                if params is None:
                    cursor.execute(sql)
                else:
                    cursor.execute(sql, tuple(params))
                return list(cursor.fetchall())
        except Exception as exc:
            self._logger.error(failure, exc)
            raise

    def _movies(self, sql: str, params: Sequence[Any], failure: str) -> list[Movie]:
        rows = self._fetch_all(sql, params, failure)
        try:
            return [_movie_from_row(row) for row in rows]
        except (TypeError, ValueError) as exc:
            self._logger.error("Failed to scan movie row", exc)
            raise

    def get_top_movies(self) -> list[Movie]:
        """Return the most popular movies."""
        return self._movies(_TOP_MOVIES, (DEFAULT_LIMIT,), "Failed to query movies")

    def get_random_movies(self) -> list[Movie]:
        """Return a random selection of movies."""
        return self._movies(_RANDOM_MOVIES, (DEFAULT_LIMIT,), "Failed to query movies")

    def get_movie_by_id(self, movie_id: int) -> Movie:
        """Return one movie with genres, cast and keywords filled in."""
        rows = self._fetch_all(
            _MOVIE_BY_ID, (movie_id,), "Failed to query movie by ID"
        )
        if not rows:
            error = MovieNotFoundError()
            self._logger.error("Movie not found", error)
            raise error
        movie = _movie_from_row(rows[0])
        self._load_relations(movie)
        return movie

    def _load_relations(self, movie: Movie) -> None:
        suffix = f" for movie {movie.id}"
        movie.genres = [
            Genre(id=genre_id, name=name)
            for genre_id, name in self._fetch_all(
                _GENRES_OF_MOVIE, (movie.id,), "Failed to query genres" + suffix
            )
        ]
        movie.casting = [
            Actor(id=actor_id, first_name=first, last_name=last, image_url=image)
            for actor_id, first, last, image in self._fetch_all(
                _ACTORS_OF_MOVIE, (movie.id,), "Failed to query actors" + suffix
            )
        ]
        movie.keywords = [
            word
            for (word,) in self._fetch_all(
                _KEYWORDS_OF_MOVIE, (movie.id,), "Failed to query keywords" + suffix
            )
        ]

    def search_movies_by_name(
        self, name: str, order: str, genre: int | None
    ) -> list[Movie]:
        """Return movies whose title or overview contains ``name``, case-insensitively."""
        order_by = _ORDER_CLAUSES.get(order, _DEFAULT_ORDER)
        genre_filter = ""
        if genre is not None:
            genre_filter = (
                " AND ((SELECT COUNT(*) FROM movies_genres\n"
                "                WHERE movie_id=movies.id\n"
                f"                AND genre_id={int(genre)}) = 1)"
            )
        sql = (
            _MOVIE_SELECT
            + "\n        WHERE (title ILIKE %s OR overview ILIKE %s) "
            + genre_filter
            + "\n        ORDER BY "
            + order_by
            + "\n        LIMIT %s"
        )
        pattern = f"%{name}%"
        return self._movies(
            sql, (pattern, pattern, DEFAULT_LIMIT), "Failed to search movies by name"
        )

    def get_all_genres(self) -> list[Genre]:
        """Return every genre ordered by id."""
        rows = self._fetch_all(_ALL_GENRES, None, "Failed to query all genres")
        return [Genre(id=genre_id, name=name) for genre_id, name in rows]