"""Minimal loggers and level-gated debug printing."""

from __future__ import annotations

import sys
from datetime import datetime
from typing import Any, TextIO

logging_level = 1


class StdOutLogger:
    """Writes time-stamped lines to a stream, standard error by default."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def _write(self, text: str) -> None:
        stream = self._stream if self._stream is not None else sys.stderr
        stamp = datetime.now().strftime("%Y/%m/%d %H:%M:%S")
        if not text.endswith("\n"):
            text += "\n"
        stream.write(f"{stamp} {text}")

    def println(self, *args: Any) -> None:
        self._write(" ".join(str(arg) for arg in args))

    def printf(self, fmt: str, *args: Any) -> None:
        self._write(fmt % args if args else fmt)


class EmptyLogger:
    """A logger that discards everything."""

    def println(self, *args: Any) -> None:
        pass

    def printf(self, fmt: str, *args: Any) -> None:
        pass


logger: StdOutLogger | EmptyLogger | None = None
empty_logger = EmptyLogger()


def debug(message: str) -> None:
    """Print ``message`` when the logging level is 0 or lower."""
    if logging_level <= 0:
        print(message)


def debug1(message: str) -> None:
    """Print ``message`` when the logging level is -1 or lower."""
    if logging_level <= -1:
        print(message)