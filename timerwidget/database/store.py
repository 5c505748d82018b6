"""Persistent, observable timer collection.

Everything that changes a timer goes through :meth:`TimerStore.mutate`:
read the collection, apply a pure function, validate, write, notify.  The
whole sequence runs under one lock and one database transaction, so the
tick loop and user commands arriving from other threads never interleave
into a lost update.

Observers
---------
* ``changed(timers)`` — Qt signal carrying the new ``tuple[Timer, ...]``.
* :meth:`TimerStore.subscribe` — blocking iterator of snapshots, for code
  that doesn't live on a Qt event loop.

Both fire once per mutation that actually changed the collection, never
for no-ops.
"""

from __future__ import annotations

import json
import logging
import queue
import threading
from typing import Callable, Iterator, Sequence

from PyQt6.QtCore import QObject, pyqtSignal
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as OrmSession

from ..errors import StoreCorrupt, StoreError
from ..timer.models import (
    MAX_TIMERS,
    PRESET_DURATIONS,
    Timer,
    TimerState,
    check_invariants,
    find_timer,
    replace_timer,
)
from .db import Database
from .models import Preference

logger = logging.getLogger(__name__)

TIMERS_KEY = "timers_list"
INITIALIZED_KEY = "initialized"

Mutation = Callable[[list[Timer]], Sequence[Timer]]

_CLOSED = object()


# ── codec ─────────────────────────────────────────────────────────────────


def encode_timers(timers: Sequence[Timer]) -> str:
    return json.dumps([t.to_record() for t in timers])


def decode_timers(blob: str) -> list[Timer]:
    """Parse the persisted blob, raising ``StoreCorrupt`` on any defect."""
    try:
        records = json.loads(blob)
        if not isinstance(records, list):
            raise TypeError(f"expected a list, got {type(records).__name__}")
        timers = [Timer.from_record(r) for r in records]
        check_invariants(timers)
    except (ValueError, TypeError, KeyError, AttributeError) as exc:
        raise StoreCorrupt(f"cannot decode timer collection: {exc}") from exc
    return timers


# ── subscription ──────────────────────────────────────────────────────────


class Subscription:
    """Iterator over collection snapshots.

    Yields the snapshot current at subscription time, then one snapshot
    per change.  Iteration blocks until the next change and ends once
    :meth:`close` is called (by the subscriber or by the store).
    """

    def __init__(self, store: "TimerStore", initial: tuple[Timer, ...]) -> None:
        self._store = store
        self._queue: queue.SimpleQueue = queue.SimpleQueue()
        self._closed = False
        self._queue.put(initial)

    def __iter__(self) -> Iterator[tuple[Timer, ...]]:
        return self

    def __next__(self) -> tuple[Timer, ...]:
        if self._closed and self._queue.empty():
            raise StopIteration
        item = self._queue.get()
        if item is _CLOSED:
            raise StopIteration
        return item

    def get(self, timeout: float | None = None) -> tuple[Timer, ...] | None:
        """Next snapshot, or ``None`` if nothing arrives within *timeout*."""
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is _CLOSED:
            self._queue.put(_CLOSED)
            return None
        return item

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put(_CLOSED)
        self._store._unsubscribe(self)

    def _push(self, snapshot: tuple[Timer, ...]) -> None:
        if not self._closed:
            self._queue.put(snapshot)


# ── store ─────────────────────────────────────────────────────────────────


class TimerStore(QObject):
    """Sole owner of the persisted timer collection.

    Signals
    -------
    changed(timers: tuple[Timer, ...])
        Emitted after every mutation that changed the collection.  Emitted
        outside the store lock; receivers should connect queued so redraws
        never run on the mutator's stack.
    """

    changed = pyqtSignal(object)

    def __init__(self, database: Database, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._db = database
        self._lock = threading.RLock()
        self._subscribers: list[Subscription] = []
        self._subscribers_lock = threading.Lock()

    # ══════════════════════════════════════════════════════════════════
    #  LIFECYCLE
    # ══════════════════════════════════════════════════════════════════

    def open(self) -> None:
        try:
            self._db.open()
        except SQLAlchemyError as exc:
            raise StoreError(f"cannot open {self._db.url}: {exc}") from exc

    def close(self) -> None:
        """End every subscription and release the database."""
        with self._subscribers_lock:
            subscribers = list(self._subscribers)
        for sub in subscribers:
            sub.close()
        with self._lock:
            self._db.close()

    @property
    def database(self) -> Database:
        return self._db

    # ══════════════════════════════════════════════════════════════════
    #  READS
    # ══════════════════════════════════════════════════════════════════

    def load(self) -> list[Timer]:
        """Read the persisted collection.

        Raises ``StoreCorrupt`` if the blob cannot be decoded.  The broken
        blob is dropped first, so the following read returns ``[]``.
        """
        corrupt: StoreCorrupt | None = None
        with self._lock:
            try:
                with self._db.session() as db:
                    blob = self._get(db, TIMERS_KEY)
                    if blob is None:
                        return []
                    try:
                        return decode_timers(blob)
                    except StoreCorrupt as exc:
                        # Drop inside the transaction, raise once committed
                        logger.warning("Dropping corrupted timer collection: %r", blob[:200])
                        self._put(db, TIMERS_KEY, encode_timers([]))
                        corrupt = exc
            except SQLAlchemyError as exc:
                raise StoreError(f"cannot read timers: {exc}") from exc
        raise corrupt

    def snapshot(self) -> list[Timer]:
        """Like :meth:`load`, but a corrupted collection reads as empty."""
        try:
            return self.load()
        except StoreCorrupt:
            return []

    def find(self, timer_id: str) -> Timer | None:
        return find_timer(self.snapshot(), timer_id)

    # ══════════════════════════════════════════════════════════════════
    #  WRITES
    # ══════════════════════════════════════════════════════════════════

    def mutate(self, fn: Mutation) -> list[Timer]:
        """Atomically replace the collection with ``fn(collection)``.

        *fn* receives a fresh list it may modify or replace.  It runs with
        the store lock held and must not block.  The result must satisfy
        the collection invariants, otherwise ``ValueError`` is raised and
        nothing is written.  Database failures surface as ``StoreError``.
        """
        with self._lock:
            try:
                with self._db.session() as db:
                    before, corrupt = self._read_for_update(db)
                    after = list(fn(list(before)))
                    check_invariants(after)
                    did_change = after != before
                    if did_change or corrupt:
                        self._put(db, TIMERS_KEY, encode_timers(after))
            except SQLAlchemyError as exc:
                raise StoreError(f"cannot write timers: {exc}") from exc

        if did_change:
            self._notify(tuple(after))
        return after

    def add_timer(self, duration_sec: int) -> Timer:
        """Create an IDLE timer, evicting the oldest when at capacity."""
        if isinstance(duration_sec, bool) or not isinstance(duration_sec, int):
            raise ValueError(f"duration must be an int, got {duration_sec!r}")
        if duration_sec <= 0:
            raise ValueError(f"duration must be positive, got {duration_sec}")

        new_timer = Timer.create(duration_sec)

        def _add(timers: list[Timer]) -> list[Timer]:
            while len(timers) >= MAX_TIMERS:
                evicted = timers.pop(0)
                logger.info("Evicting timer %s (%ss)", evicted.id, evicted.original_duration_sec)
            timers.append(new_timer)
            return timers

        self.mutate(_add)
        logger.info("Added timer %s (%ss)", new_timer.id, duration_sec)
        return new_timer

    def update_state(
        self,
        timer_id: str,
        new_state: TimerState,
        new_current_sec: int | None = None,
    ) -> Timer | None:
        """Set a timer's state (and optionally its current value).

        Returns the updated timer, or ``None`` when *timer_id* is unknown,
        e.g. because it was evicted in the meantime.
        """
        result: list[Timer | None] = [None]

        def _update(timers: list[Timer]) -> list[Timer]:
            timer = find_timer(timers, timer_id)
            if timer is None:
                return timers
            changes: dict = {"state": new_state}
            if new_current_sec is not None:
                changes["current_duration_sec"] = new_current_sec
            result[0] = timer.evolve(**changes)
            return replace_timer(timers, result[0])

        self.mutate(_update)
        if result[0] is None:
            logger.debug("update_state: unknown timer %s", timer_id)
        return result[0]

    def ensure_initialized(self) -> bool:
        """Seed the preset timers on first run.  Returns True if it seeded."""
        with self._lock:
            try:
                with self._db.session() as db:
                    if self._get(db, INITIALIZED_KEY) == "true":
                        return False
                    presets = [Timer.create(d) for d in PRESET_DURATIONS]
                    self._put(db, TIMERS_KEY, encode_timers(presets))
                    self._put(db, INITIALIZED_KEY, "true")
            except SQLAlchemyError as exc:
                raise StoreError(f"cannot seed presets: {exc}") from exc

        logger.info("Seeded %d preset timers", len(presets))
        self._notify(tuple(presets))
        return True

    # ══════════════════════════════════════════════════════════════════
    #  CHANGE FEED
    # ══════════════════════════════════════════════════════════════════

    def subscribe(self) -> Subscription:
        # Register under the store lock so no mutation slips between the
        # initial snapshot and the first pushed change.
        with self._lock:
            sub = Subscription(self, tuple(self.snapshot()))
            with self._subscribers_lock:
                self._subscribers.append(sub)
        return sub

    def _unsubscribe(self, sub: Subscription) -> None:
        with self._subscribers_lock:
            if sub in self._subscribers:
                self._subscribers.remove(sub)

    def _notify(self, snapshot: tuple[Timer, ...]) -> None:
        with self._subscribers_lock:
            subscribers = list(self._subscribers)
        for sub in subscribers:
            sub._push(snapshot)
        self.changed.emit(snapshot)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: key-value access
    # ══════════════════════════════════════════════════════════════════

    def _read_for_update(self, db: OrmSession) -> tuple[list[Timer], bool]:
        """Current collection plus whether the stored blob needs repair."""
        blob = self._get(db, TIMERS_KEY)
        if blob is None:
            return [], False
        try:
            return decode_timers(blob), False
        except StoreCorrupt as exc:
            logger.warning("Treating corrupted timer collection as empty: %s", exc)
            return [], True

    @staticmethod
    def _get(db: OrmSession, key: str) -> str | None:
        row = db.get(Preference, key)
        return row.value if row is not None else None

    @staticmethod
    def _put(db: OrmSession, key: str, value: str) -> None:
        row = db.get(Preference, key)
        if row is None:
            db.add(Preference(key=key, value=value))
        else:
            row.value = value
