"""Per-key rate limiter with a background decay thread."""

from __future__ import annotations

import math
import threading
import time
from enum import StrEnum

from keylimiter._log import Logger
from keylimiter.context import CancelScope
from keylimiter.errors import NotStartedError, TooManyRequestsError
from keylimiter.options import (
    LimiterSettings,
    Option,
    with_capacity,
    with_logger,
    with_refill_interval,
)
from keylimiter.schema import LimiterConfig
from keylimiter.store import CounterStore
from keylimiter.tokens import issue_token


def _next_deadline(previous: float, interval: float, now: float) -> float:
    """Return the first tick deadline after *now* on the grid started at *previous*.

    Ticks missed while a slow tick ran are dropped rather than fired back to back.
    """
    deadline = previous + interval
    if deadline <= now:
        deadline += (math.floor((now - deadline) / interval) + 1) * interval
    return deadline


class LimiterState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class Limiter:
    """Grants tokens per key up to ``capacity`` and decays usage once per ``refill_interval``.

    Tokens are only issued between :meth:`start` and :meth:`stop`. While
    running, a single daemon thread lowers every positive counter by one on
    each tick. A stopped limiter may be started again; each start gets a
    fresh cancel scope and thread.
    """

    def __init__(
        self,
        settings: LimiterSettings | None = None,
        *,
        store: CounterStore | None = None,
    ) -> None:
        settings = settings or LimiterSettings()
        settings.validate()
        self._capacity = settings.capacity
        self._refill_interval = settings.refill_interval
        self._log = settings.resolved_logger()
        self._store = store if store is not None else CounterStore()
        self._lifecycle_lock = threading.Lock()
        self._state = LimiterState.IDLE
        self._scope: CancelScope | None = None
        self._thread: threading.Thread | None = None

    @classmethod
    def new(cls, *options: Option) -> Limiter:
        """Build a limiter from defaults plus *options*, applied in order.

        The first option that fails validation aborts construction and its
        InvalidConfigurationError propagates.
        """
        settings = LimiterSettings()
        for option in options:
            option(settings)
        return cls(settings)

    @classmethod
    def from_config(cls, config: LimiterConfig, logger: Logger | None = None) -> Limiter:
        options = [
            with_capacity(config.capacity),
            with_refill_interval(config.refill_interval),
        ]
        if logger is not None:
            options.append(with_logger(logger))
        return cls.new(*options)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def refill_interval(self) -> float:
        return self._refill_interval

    @property
    def state(self) -> LimiterState:
        return self._state

    @property
    def is_running(self) -> bool:
        scope = self._scope
        return self._state is LimiterState.RUNNING and scope is not None and not scope.cancelled

    def count(self, key: str) -> int:
        """Return how much of its capacity *key* has currently used."""
        return self._store.get(key)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, parent: CancelScope | None = None) -> None:
        """Start the decay thread. Cancelling *parent* also ends it."""
        with self._lifecycle_lock:
            if self.is_running:
                self._log.error("limiter was already started")
                return

            # Parent scope was cancelled while running: reap the old thread first.
            if self._thread is not None:
                self._thread.join()

            scope = parent.child() if parent is not None else CancelScope()
            thread = threading.Thread(
                target=self._refill,
                args=(scope, self._log.bind(routine="refill")),
                daemon=True,
                name="keylimiter-refill",
            )
            self._scope = scope
            self._thread = thread
            self._state = LimiterState.RUNNING
            thread.start()

        self._log.debug("limiter was started")

    def stop(self) -> None:
        """Stop the decay thread and wait for it to exit."""
        with self._lifecycle_lock:
            if self._state is not LimiterState.RUNNING:
                self._log.error("limiter is not running", state=str(self._state))
                return

            if self._scope is not None:
                self._scope.cancel()
            if self._thread is not None:
                self._thread.join()
            self._scope = None
            self._thread = None
            self._state = LimiterState.STOPPED

        self._log.debug("limiter was stopped")

    def __enter__(self) -> Limiter:
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Admission
    # ------------------------------------------------------------------

    def request_token(self, key: str) -> str:
        """Admit one request for *key* and return an opaque receipt.

        Raises NotStartedError when the limiter is not running and
        TooManyRequestsError when *key* has no capacity left.
        """
        if not self.is_running:
            raise NotStartedError()

        self._log.debug("trying to get token", key=key)

        count, admitted = self._store.try_increment(key, self._capacity)
        if not admitted:
            self._log.info("too many requests", key=key, count=count)
            raise TooManyRequestsError(key, self._capacity)

        self._log.debug("token issued", key=key, count=count)
        return issue_token(key, time.time_ns())

    # ------------------------------------------------------------------
    # Decay
    # ------------------------------------------------------------------

    def tick(self, log: Logger | None = None) -> None:
        """Lower every positive counter by one."""
        log = log or self._log

        def _visit(key: str, count: int) -> None:
            if count == 0:
                log.debug("number of requests is zero", key=key)
                return
            remaining, _ = self._store.decrement_if_positive(key)
            log.debug("number of requests decreased", key=key, count=remaining)

        self._store.for_each(_visit)

    def _refill(self, scope: CancelScope, log: Logger) -> None:
        log.info("refill routine started")
        interval = self._refill_interval
        next_at = time.monotonic() + interval
        try:
            while not scope.wait(max(0.0, next_at - time.monotonic())):
                self.tick(log)
                next_at = _next_deadline(next_at, interval, time.monotonic())
        except Exception as e:
            log.error("refill routine terminated abnormally", error=repr(e))
            scope.cancel()
        finally:
            log.info("refill routine stopped")

    def __repr__(self) -> str:
        return (
            f"Limiter(capacity={self._capacity}, refill_interval={self._refill_interval}, "
            f"state={self._state})"
        )
