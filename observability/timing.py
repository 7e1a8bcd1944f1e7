"""Timing utilities for performance measurement."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Generator

_logger = logging.getLogger("observability.timing")


class TimingContext:
    """Context manager for timing code blocks."""

    def __init__(self, name: str, tags: dict[str, Any] | None = None, log: bool = True):
        self.name = name
        self.tags = tags or {}
        self.log = log
        self.start_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self) -> "TimingContext":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.elapsed_ms = (time.perf_counter() - self.start_time) * 1000
        if self.log:
            _logger.debug(
                "%s took %.2fms",
                self.name,
                self.elapsed_ms,
                extra={"extra_fields": {"timer": self.name, "duration_ms": round(self.elapsed_ms, 2), **self.tags}},
            )


@contextmanager
def timed(
    name: str, tags: dict[str, Any] | None = None, log: bool = True
) -> Generator[TimingContext, None, None]:
    """Context manager for timing code blocks.

    Usage:
        with timed("scan_encode") as t:
            do_work()
        print(f"Took {t.elapsed_ms:.2f}ms")
    """
    ctx = TimingContext(name, tags, log)
    with ctx:
        yield ctx
