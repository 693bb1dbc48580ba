"""Declarative limiter configuration."""

from __future__ import annotations

import math
import threading
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CAPACITY = 10
DEFAULT_REFILL_INTERVAL = 1.0
# Event.wait converts timeouts to int64 nanoseconds, so stay far below
# threading.TIMEOUT_MAX.
MAX_REFILL_INTERVAL = min(threading.TIMEOUT_MAX, 365 * 24 * 3600.0)


def is_valid_refill_interval(seconds: float) -> bool:
    """Return True for a finite interval in ``(0, MAX_REFILL_INTERVAL]``."""
    return math.isfinite(seconds) and 0 < seconds <= MAX_REFILL_INTERVAL


class LimiterConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    capacity: Annotated[int, Field(ge=1)] = DEFAULT_CAPACITY
    refill_interval: Annotated[
        float, Field(gt=0, le=MAX_REFILL_INTERVAL, allow_inf_nan=False)
    ] = DEFAULT_REFILL_INTERVAL
