"""Application logger: informational lines to stdout, errors to a file."""

from __future__ import annotations

import logging
import os
import sys
from types import TracebackType
from typing import TextIO

_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


def _make_logger(name: str, prefix: str, stream: TextIO) -> logging.Logger:
    log = logging.Logger(name, level=logging.INFO)
    log.propagate = False
    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        logging.Formatter(
            prefix + "%(asctime)s %(filename)s:%(lineno)d: %(message)s",
            datefmt=_DATE_FORMAT,
        )
    )
    log.addHandler(handler)
    return log


class Logger:
    """Writes info messages to stdout and error messages to an append-only file."""

    def __init__(self, log_file_path: str | os.PathLike[str]) -> None:
        self._file = open(log_file_path, "a", encoding="utf-8")
        self._info = _make_logger("movieapi.info", "INFO: ", sys.stdout)
        self._error = _make_logger("movieapi.error", "ERROR: ", self._file)

    def info(self, msg: str) -> None:
        """Log an informational message to stdout."""
        self._info.info("%s", msg, stacklevel=2)

    def error(self, msg: str, err: object) -> None:
        """Log ``msg`` and the error to the log file; dropped once closed."""
        if self._file.closed:
            return
        detail = "<nil>" if err is None else str(err)
        self._error.info("%s: %s", msg, detail, stacklevel=2)
        self._file.flush()

    def close(self) -> None:
        """Close the log file."""
        if not self._file.closed:
            for handler in list(self._error.handlers):
                handler.flush()
                self._error.removeHandler(handler)
            self._file.close()

    def __enter__(self) -> Logger:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()