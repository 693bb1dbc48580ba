"""Exception types raised by the limiter."""

from __future__ import annotations


class LimiterError(Exception):
    """Base class for every error raised by keylimiter."""


class InvalidConfigurationError(LimiterError, ValueError):
    """Raised when a limiter is built with an invalid option."""


class CapacityTooSmallError(InvalidConfigurationError):
    def __init__(self, capacity: int) -> None:
        super().__init__(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity


class RefillRateTooSmallError(InvalidConfigurationError):
    def __init__(self, interval: float) -> None:
        super().__init__(
            "refill interval must be a finite number of seconds above 0 and at most "
            f"one year, got {interval}"
        )
        self.interval = interval


class NilLoggerError(InvalidConfigurationError):
    def __init__(self) -> None:
        super().__init__("provided logger is None")


class NotStartedError(LimiterError, RuntimeError):
    """Raised when a token is requested from a limiter that is not running."""

    def __init__(self) -> None:
        super().__init__("limiter is not started")


class CapacityExceededError(LimiterError):
    """Raised when a key has used up its capacity until the next decay tick."""

    def __init__(self, key: str, capacity: int) -> None:
        super().__init__(f"too many requests for key '{key}' (capacity {capacity})")
        self.key = key
        self.capacity = capacity


class TooManyRequestsError(CapacityExceededError):
    pass


class ConfigLoadError(LimiterError):
    """Raised when a limiter config file cannot be loaded or validated."""
