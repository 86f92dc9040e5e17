"""
app/services/sequence_counter.py

Thread-safe request counter with a fixed wraparound.
"""

from __future__ import annotations

import threading
from functools import lru_cache

from app.config import get_ingestion_settings


class SequenceCounter:
    """
    Yields 1, 2, ... wrap_at - 1, 0, 1, ... across threads without duplicates
    inside one cycle.
    """

    def __init__(self, *, wrap_at: int = 100, start: int = 1) -> None:
        if wrap_at < 2:
            raise ValueError("wrap_at must be at least 2.")
        self._wrap_at = wrap_at
        self._value = start % wrap_at
        self._lock = threading.Lock()

    @property
    def wrap_at(self) -> int:
        return self._wrap_at

    def next(self) -> int:
        with self._lock:
            current = self._value
            self._value = (self._value + 1) % self._wrap_at
        return current


@lru_cache(maxsize=1)
def get_greeting_counter() -> SequenceCounter:
    return SequenceCounter(wrap_at=get_ingestion_settings().greeting_wrap_at)
