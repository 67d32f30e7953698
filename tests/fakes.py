# tests/fakes.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta


class FakeClock:
    """
    Deterministic time source for TaskStore.

    Returns the same instant until advanced, so tests can reason about stamps exactly.
    """

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2026, 10, 19, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class SequentialIds:
    """Id factory producing t1, t2, ... (optionally replaying a fixed list first)."""

    def __init__(self, replay: list[str] | None = None) -> None:
        self._replay = list(replay or [])
        self._n = 0

    def __call__(self) -> str:
        if self._replay:
            return self._replay.pop(0)
        self._n += 1
        return f"t{self._n}"
