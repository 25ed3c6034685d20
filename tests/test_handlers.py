import json

import pytest
from werkzeug.wrappers import Request

from movieapi.handlers import MovieHandlers
from movieapi.logger import Logger
from movieapi.models import Genre, Movie
from movieapi.storage import MovieNotFoundError


class FakeStorage:
    def __init__(self, movies=None, genres=None, movie=None, error=None):
        self.movies = movies or []
        self.genres = genres or []
        self.movie = movie
        self.error = error
        self.calls = []

    def _result(self, value):
        if self.error is not None:
            raise self.error
        return value

    def get_top_movies(self):
        self.calls.append(("top",))
        return self._result(self.movies)

    def get_random_movies(self):
        self.calls.append(("random",))
        return self._result(self.movies)

    def get_movie_by_id(self, movie_id):
        self.calls.append(("by_id", movie_id))
        return self._result(self.movie)

    def search_movies_by_name(self, name, order, genre):
        self.calls.append(("search", name, order, genre))
        return self._result(self.movies)

    def get_all_genres(self):
        self.calls.append(("genres",))
        return self._result(self.genres)


@pytest.fixture
def logger(tmp_path):
    log = Logger(tmp_path / "errors.log")
    yield log
    log.close()


def make_request(path="/", query=None):
    return Request.from_values(path=path, query_string=query or {})


MOVIES = [Movie(id=1, title="Alien"), Movie(id=2, title="Heat")]


def test_top_movies_json(logger):
    handlers = MovieHandlers(logger, FakeStorage(movies=MOVIES))
    response = handlers.get_top_movies(make_request())
    body = response.get_data(as_text=True)
    assert response.status_code == 200
    assert response.headers["Content-Type"] == "application/json"
    assert body.endswith("\n")
    assert json.loads(body) == [m.to_dict() for m in MOVIES]


def test_top_movies_error(logger):
    handlers = MovieHandlers(logger, FakeStorage(error=RuntimeError("boom")))
    response = handlers.get_top_movies(make_request())
    assert response.status_code == 500
    assert response.get_data(as_text=True) == "Internal error getting top movies: boom\n"


def test_random_movies_error(logger):
    handlers = MovieHandlers(logger, FakeStorage(error=RuntimeError("boom")))
    response = handlers.get_random_movies(make_request())
    assert response.status_code == 500
    assert response.get_data(as_text=True) == "Error getting random movies\n"


def test_random_movies_empty_is_null(logger):
    handlers = MovieHandlers(logger, FakeStorage())
    response = handlers.get_random_movies(make_request())
    assert response.get_data(as_text=True) == "null\n"


def test_search_without_query_returns_empty_list(logger):
    storage = FakeStorage(movies=MOVIES)
    response = MovieHandlers(logger, storage).search_movies(make_request("/api/movies/search"))
    assert response.get_data(as_text=True) == "[]\n"
    assert storage.calls == []


def test_search_passes_parameters(logger):
    storage = FakeStorage(movies=MOVIES)
    request = make_request("/api/movies/search", {"q": "al", "order": "score", "genre": "4"})
    response = MovieHandlers(logger, storage).search_movies(request)
    assert storage.calls == [("search", "al", "score", 4)]
    assert [m["title"] for m in json.loads(response.get_data(as_text=True))] == ["Alien", "Heat"]


def test_search_invalid_genre(logger):
    storage = FakeStorage(movies=MOVIES)
    request = make_request("/api/movies/search", {"q": "al", "genre": "x"})
    response = MovieHandlers(logger, storage).search_movies(request)
    assert response.status_code == 400
    assert response.get_data(as_text=True) == "invalid id\n"
    assert storage.calls == []


def test_search_storage_failure(logger, tmp_path):
    storage = FakeStorage(error=RuntimeError("db down"))
    request = make_request("/api/movies/search", {"q": "al"})
    response = MovieHandlers(logger, storage).search_movies(request)
    assert response.status_code == 500
    assert response.get_data(as_text=True) == "internal server error\n"
    log = (tmp_path / "errors.log").read_text(encoding="utf-8")
    assert "failed to get movies: db down" in log


def test_get_movie_success(logger):
    movie = Movie(id=5, title="Heat", genres=[Genre(id=1, name="Crime")])
    storage = FakeStorage(movie=movie)
    response = MovieHandlers(logger, storage).get_movie(make_request("/api/movies/5"))
    assert storage.calls == [("by_id", 5)]
    assert json.loads(response.get_data(as_text=True)) == movie.to_dict()


def test_get_movie_accepts_sign(logger):
    storage = FakeStorage(movie=Movie(id=5, title="Heat"))
    response = MovieHandlers(logger, storage).get_movie(make_request("/api/movies/+5"))
    assert response.status_code == 200
    assert storage.calls == [("by_id", 5)]


@pytest.mark.parametrize("raw", ["abc", "", "5x", "1_000", "99999999999999999999"])
def test_get_movie_invalid_id(logger, raw):
    storage = FakeStorage(movie=Movie(id=5, title="Heat"))
    response = MovieHandlers(logger, storage).get_movie(make_request("/api/movies/" + raw))
    assert response.status_code == 400
    assert storage.calls == []


def test_get_movie_not_found(logger):
    storage = FakeStorage(error=MovieNotFoundError())
    response = MovieHandlers(logger, storage).get_movie(make_request("/api/movies/9"))
    assert response.status_code == 404
    assert response.get_data(as_text=True) == "failed to get movie by id\n"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_get_genres(logger):
    genres = [Genre(id=1, name="Drama"), Genre(id=2, name="Comedy")]
    response = MovieHandlers(logger, FakeStorage(genres=genres)).get_genres(make_request())
    assert json.loads(response.get_data(as_text=True)) == [g.to_dict() for g in genres]


def test_html_characters_escaped(logger):
    storage = FakeStorage(movies=[Movie(id=1, title="<b>&")])
    response = MovieHandlers(logger, storage).get_top_movies(make_request())
    body = response.get_data(as_text=True)
    assert "\\u003cb\\u003e\\u0026" in body
    assert json.loads(body)[0]["title"] == "<b>&"


def test_nan_score_is_internal_error(logger):
    storage = FakeStorage(movies=[Movie(id=1, title="X", score=float("nan"))])
    response = MovieHandlers(logger, storage).get_top_movies(make_request())
    assert response.status_code == 500
    assert response.get_data(as_text=True) == "error: internal error\n"