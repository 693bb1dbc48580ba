"""Constructor options for :class:`keylimiter.limiter.Limiter`."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from keylimiter._log import BoundLogger, Logger, get_logger
from keylimiter.errors import CapacityTooSmallError, NilLoggerError, RefillRateTooSmallError
from keylimiter.schema import DEFAULT_CAPACITY, DEFAULT_REFILL_INTERVAL, is_valid_refill_interval


def _default_logger() -> Logger:
    return BoundLogger(get_logger("limiter")).bind(service="limiter")


def _check_capacity(capacity: int) -> None:
    if capacity < 1:
        raise CapacityTooSmallError(capacity)


def _check_refill_interval(seconds: float) -> None:
    if not is_valid_refill_interval(seconds):
        raise RefillRateTooSmallError(seconds)


@dataclass
class LimiterSettings:
    """Resolved limiter settings. Invalid values raise on construction."""

    capacity: int = DEFAULT_CAPACITY
    refill_interval: float = DEFAULT_REFILL_INTERVAL
    logger: Logger | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        _check_capacity(self.capacity)
        _check_refill_interval(self.refill_interval)

    def resolved_logger(self) -> Logger:
        return self.logger if self.logger is not None else _default_logger()


Option = Callable[[LimiterSettings], None]


def with_capacity(capacity: int) -> Option:
    """Set the number of requests admitted per key between decay ticks.

    Raises CapacityTooSmallError when applied with a value below 1.
    """

    def _apply(settings: LimiterSettings) -> None:
        _check_capacity(capacity)
        settings.capacity = capacity

    return _apply


def with_refill_interval(seconds: float) -> Option:
    """Set the decay cadence in seconds.

    Raises RefillRateTooSmallError unless the value is finite, positive and
    no larger than ``MAX_REFILL_INTERVAL`` (one year).
    """

    def _apply(settings: LimiterSettings) -> None:
        _check_refill_interval(seconds)
        settings.refill_interval = seconds

    return _apply


def with_logger(logger: Logger | None) -> Option:
    """Replace the diagnostic sink. Raises NilLoggerError for None."""

    def _apply(settings: LimiterSettings) -> None:
        if logger is None:
            raise NilLoggerError()
        settings.logger = logger

    return _apply
