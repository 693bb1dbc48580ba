"""In-process per-key rate limiter with background decay."""

__version__ = "0.1.0"

from keylimiter._log import BoundLogger, Logger, get_logger, setup_logging  # noqa: E402
from keylimiter.context import CancelScope  # noqa: E402
from keylimiter.errors import (  # noqa: E402
    CapacityExceededError,
    CapacityTooSmallError,
    ConfigLoadError,
    InvalidConfigurationError,
    LimiterError,
    NilLoggerError,
    NotStartedError,
    RefillRateTooSmallError,
    TooManyRequestsError,
)
from keylimiter.limiter import Limiter, LimiterState  # noqa: E402
from keylimiter.options import with_capacity, with_logger, with_refill_interval  # noqa: E402
from keylimiter.schema import LimiterConfig  # noqa: E402
from keylimiter.store import CounterStore  # noqa: E402
from keylimiter.tokens import issue_token  # noqa: E402

__all__ = [
    "BoundLogger",
    "CancelScope",
    "CapacityExceededError",
    "CapacityTooSmallError",
    "ConfigLoadError",
    "CounterStore",
    "InvalidConfigurationError",
    "Limiter",
    "LimiterConfig",
    "LimiterError",
    "LimiterState",
    "Logger",
    "NilLoggerError",
    "NotStartedError",
    "RefillRateTooSmallError",
    "TooManyRequestsError",
    "__version__",
    "get_logger",
    "issue_token",
    "setup_logging",
    "with_capacity",
    "with_logger",
    "with_refill_interval",
]
