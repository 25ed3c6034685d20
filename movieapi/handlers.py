"""HTTP handlers exposing the movie storage as a JSON API."""

from __future__ import annotations

import json
import re
from typing import Any

from werkzeug.wrappers import Request, Response

from movieapi.logger import Logger
from movieapi.storage import MovieNotFoundError, MovieStorage

_MOVIE_PATH_PREFIX = "/api/movies/"
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1
_JSON_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def _parse_int(text: str) -> int:
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError(f'parsing "{text}": invalid syntax')
    value = int(text)
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f'parsing "{text}": value out of range')
    return value


def _jsonable(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    return value


def _encode_json(value: Any) -> str:
    text = json.dumps(
        _jsonable(value), ensure_ascii=False, allow_nan=False, separators=(",", ":")
    )
    for char, escaped in _JSON_ESCAPES:
        text = text.replace(char, escaped)
    return text + "\n"


def _error_response(message: str, status: int) -> Response:
    response = Response(
        message + "\n", status=status, content_type="text/plain; charset=utf-8"
    )
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


def _or_null(items: list[Any]) -> list[Any] | None:
    # An empty result from storage is reported as null, not [].
    return items if items else None


class _ResponseError(Exception):
    def __init__(self, response: Response) -> None:
        super().__init__(response.status)
        self.response = response


class MovieHandlers:
    """Request handlers for the movie endpoints; each returns a Response."""

    def __init__(self, logger: Logger, storage: MovieStorage) -> None:
        self._logger = logger
        self._storage = storage

    def _json_response(self, value: Any) -> Response:
        try:
            body = _encode_json(value)
        except (TypeError, ValueError) as exc:
            self._logger.error("writeJSONResponse: ", exc)
            raise _ResponseError(_error_response("error: internal error", 500))
        return Response(body, status=200, content_type="application/json")

    def _storage_failure(self, err: Exception, context: str) -> Response:
        if isinstance(err, MovieNotFoundError):
            return _error_response(context, 404)
        self._logger.error(context, err)
        return _error_response("internal server error", 500)

    def _parse_id(self, text: str) -> int:
        try:
            return _parse_int(text)
        except ValueError as exc:
            self._logger.error("Invalid id format", exc)
            raise _ResponseError(_error_response("invalid id", 400))

    def get_top_movies(self, request: Request) -> Response:
        """Serve the most popular movies."""
        try:
            movies = self._storage.get_top_movies()
        except Exception as exc:
            self._logger.error("Get top movies error", exc)
            return _error_response(f"Internal error getting top movies: {exc}", 500)
        try:
            return self._json_response(_or_null(movies))
        except _ResponseError as failure:
            return failure.response

    def get_random_movies(self, request: Request) -> Response:
        """Serve a random selection of movies."""
        try:
            movies = self._storage.get_random_movies()
        except Exception as exc:
            self._logger.error("Get random movies: ", exc)
            return _error_response("Error getting random movies", 500)
        try:
            return self._json_response(_or_null(movies))
        except _ResponseError as failure:
            return failure.response

    def search_movies(self, request: Request) -> Response:
        """Serve movies matching the ``q``, ``order`` and ``genre`` parameters."""
        query = request.args.get("q", "")
        order = request.args.get("order", "")
        genre_text = request.args.get("genre", "")
        try:
            genre = self._parse_id(genre_text) if genre_text else None
            if not query:
                response = self._json_response([])
                self._logger.info("Served empty slice because query is empty too.")
                return response
            try:
                movies = self._storage.search_movies_by_name(query, order, genre)
            except Exception as exc:
                return self._storage_failure(exc, "failed to get movies")
            response = self._json_response(_or_null(movies))
        except _ResponseError as failure:
            return failure.response
        self._logger.info("successfully served movies")
        return response

    def get_movie(self, request: Request) -> Response:
        """Serve one movie whose id follows ``/api/movies/`` in the path."""
        id_text = request.path[len(_MOVIE_PATH_PREFIX):]
        try:
            movie_id = self._parse_id(id_text)
            try:
                movie = self._storage.get_movie_by_id(movie_id)
            except Exception as exc:
                return self._storage_failure(exc, "failed to get movie by id")
            response = self._json_response(movie)
        except _ResponseError as failure:
            return failure.response
        self._logger.info("Successfully server moview with ID: " + id_text)
        return response

    def get_genres(self, request: Request) -> Response:
        """Serve every genre."""
        try:
            genres = self._storage.get_all_genres()
        except Exception as exc:
            return self._storage_failure(exc, "failed to get genres")
        try:
            response = self._json_response(_or_null(genres))
        except _ResponseError as failure:
            return failure.response
        self._logger.info("Successfully served genres")
        return response