"""Timer value objects and their persisted record format.

States
------
IDLE      Waiting to be started.  ``current == original``.
RUNNING   Counting down once per second.
PAUSED    Frozen; remembers ``current``.
OVERRUN   Counted past zero; ``current`` keeps falling below zero.

Transitions
-----------
IDLE → RUNNING                      (start)
RUNNING → PAUSED | OVERRUN | IDLE   (pause / tick past zero / stop, reset)
PAUSED → RUNNING | IDLE             (resume / stop, reset)
OVERRUN → PAUSED | IDLE             (pause / stop, reset)
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Sequence


# ── enums ─────────────────────────────────────────────────────────────────


class TimerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    OVERRUN = "overrun"

    @property
    def is_active(self) -> bool:
        """True for every state that occupies the single active slot."""
        return self is not TimerState.IDLE

    @property
    def is_ticking(self) -> bool:
        return self in (TimerState.RUNNING, TimerState.OVERRUN)


# ── constants ─────────────────────────────────────────────────────────────

MAX_TIMERS = 2
MIN_TIMER_SECONDS = 10  # editor refuses anything shorter
PRESET_DURATIONS = (10 * 60, 5 * 60)  # seeded on first run, in this order


# ── model ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Timer:
    """A single countdown.  Immutable; use :meth:`evolve` to change it."""

    id: str
    original_duration_sec: int
    current_duration_sec: int
    state: TimerState = TimerState.IDLE
    created_at: int = 0  # epoch milliseconds

    @classmethod
    def create(cls, duration_sec: int) -> "Timer":
        return cls(
            id=str(uuid.uuid4()),
            original_duration_sec=duration_sec,
            current_duration_sec=duration_sec,
            state=TimerState.IDLE,
            created_at=int(time.time() * 1000),
        )

    def evolve(self, **changes: Any) -> "Timer":
        return replace(self, **changes)

    def stopped(self) -> "Timer":
        """Back to IDLE with the original duration restored."""
        return replace(
            self,
            state=TimerState.IDLE,
            current_duration_sec=self.original_duration_sec,
        )

    # ── record codec ──────────────────────────────────────────────────

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "original_duration_sec": self.original_duration_sec,
            "current_duration_sec": self.current_duration_sec,
            "state": self.state.value,
            "created_at": self.created_at,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Timer":
        """Build a timer from its JSON record.

        Raises ``KeyError``, ``TypeError`` or ``ValueError`` when the record
        is malformed; the store turns those into ``StoreCorrupt``.
        """
        original = record["original_duration_sec"]
        current = record["current_duration_sec"]
        created_at = record.get("created_at", 0)
        for value in (original, current, created_at):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"expected int, got {value!r}")
        if original < 0:
            raise ValueError(f"negative original duration {original}")
        timer_id = record["id"]
        if not isinstance(timer_id, str) or not timer_id:
            raise ValueError(f"bad timer id {timer_id!r}")
        return cls(
            id=timer_id,
            original_duration_sec=original,
            current_duration_sec=current,
            state=TimerState(record["state"]),
            created_at=created_at,
        )


# ── collection helpers ────────────────────────────────────────────────────


def find_timer(timers: Sequence[Timer], timer_id: str) -> Timer | None:
    for timer in timers:
        if timer.id == timer_id:
            return timer
    return None


def active_timer(timers: Sequence[Timer]) -> Timer | None:
    """The timer holding the active slot, if any."""
    for timer in timers:
        if timer.state.is_active:
            return timer
    return None


def replace_timer(timers: Sequence[Timer], updated: Timer) -> list[Timer]:
    """Return a copy of *timers* with the entry sharing ``updated.id`` swapped."""
    return [updated if t.id == updated.id else t for t in timers]


def check_invariants(timers: Sequence[Timer]) -> None:
    """Raise ``ValueError`` if *timers* breaks a collection invariant."""
    if len(timers) > MAX_TIMERS:
        raise ValueError(f"{len(timers)} timers exceeds the limit of {MAX_TIMERS}")
    ids = [t.id for t in timers]
    if len(set(ids)) != len(ids):
        raise ValueError("duplicate timer ids")
    active = [t.id for t in timers if t.state.is_active]
    if len(active) > 1:
        raise ValueError(f"more than one active timer: {active}")
