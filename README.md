# movieapi

`movieapi` serves a movie catalogue as JSON. It is a library with these modules:

- `movieapi.models` has the `Movie`, `Genre` and `Actor` dataclasses. Each has a
  `to_dict()` method. It returns the JSON shape the API sends.
- `movieapi.storage` has the `MovieStorage` protocol and the `MovieNotFoundError`
  exception, which is a `LookupError`.
- `movieapi.repository` has `MovieRepository`. It implements `MovieStorage` over a DB-API
  connection.
- `movieapi.handlers` has `MovieHandlers`. It takes Werkzeug requests and returns Werkzeug
  responses.
- `movieapi.logger` has `Logger`. It writes info messages to standard output and error
  messages to a log file.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Usage

```python
from werkzeug.routing import Map, Rule
from werkzeug.wrappers import Request

from movieapi.handlers import MovieHandlers
from movieapi.logger import Logger
from movieapi.repository import MovieRepository

connection = ...  # a DB-API connection whose driver uses %s placeholders

logger = Logger("movie-service.log")
repository = MovieRepository(connection, logger)
handlers = MovieHandlers(logger, repository)

urls = Map([
    Rule("/api/movies/top", endpoint=handlers.get_top_movies),
    Rule("/api/movies/random", endpoint=handlers.get_random_movies),
    Rule("/api/movies/search", endpoint=handlers.search_movies),
    Rule("/api/movies/<path:rest>", endpoint=handlers.get_movie),
    Rule("/api/genres", endpoint=handlers.get_genres),
])

@Request.application
def app(request):
    endpoint, _ = urls.bind_to_environ(request.environ).match()
    return endpoint(request)
```

`app` is a WSGI application.

## Endpoints

Each handler method takes a `werkzeug.wrappers.Request` and returns a `Response`.

- `get_top_movies` returns up to 20 movies, most popular first.
- `get_random_movies` returns up to 20 movies in random order.
- `search_movies` reads the query parameters `q`, `order` and `genre`.
  - If `q` is empty, the response is `[]`.
  - Titles and overviews are matched with `ILIKE '%q%'`, so case does not matter.
  - `order` may be `score`, `name` or `date`. Any other value sorts by popularity.
  - `genre` must be an integer. Other values get `400 invalid id`.
  - The response holds at most 20 movies.
- `get_movie` takes the id from the part of the path after `/api/movies/`.
  - It returns the movie with its genres, cast and keywords.
  - An unknown id gets `404`. An id that is not an integer gets `400`.
- `get_genres` returns every genre, ordered by id.

Successful responses are `application/json` and end with a newline. Error responses are
plain text, and any storage failure other than a missing movie gets `500`.

When storage returns no rows, the body is `null` instead of `[]`. A movie with no genres,
keywords or cast likewise has `null` in those fields. Optional movie fields that are
empty are left out of `Movie.to_dict()` entirely: `tmdb_id`, `tag_line`, `overview`,
`score`, `popularity`, `languages`, `poster_url` and `trailer_url`.

## Logger

`Logger(path)` opens `path` for appending.

- `info(msg)` writes to standard output. The line starts with `INFO: ` and then the date,
  time, file and line.
- `error(msg, err)` appends `ERROR: ... msg: err` to the file.
- `close()` closes the file. Any `error()` call after that is dropped.
- The logger can also be used as a context manager, which closes the file on exit.

## What this package does not do

- It has no command and no HTTP server. You must run the handlers with your own WSGI
  setup, as in the example above.
- It ships no database driver, schema or migrations. `MovieRepository` expects an
  existing PostgreSQL-style database and a connection you supply. It uses `ILIKE` and
  `random()`, and these tables:
  - `movies`, `genres`, `actors`, `keywords`
  - `movie_genres`, `movie_cast`, `movie_keywords`
  - `movies_genres`, which the genre filter in search uses
- It has no users, accounts or writes. All access is read-only.

## Running the tests

```
pytest
```