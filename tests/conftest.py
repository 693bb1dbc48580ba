"""Shared test fixtures and helpers."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from keylimiter.limiter import Limiter
from keylimiter.options import with_capacity, with_logger, with_refill_interval


def make_mock_logger() -> MagicMock:
    """Build a mock Logger whose ``bind`` returns itself."""
    log = MagicMock()
    log.bind.return_value = log
    return log


def make_limiter(
    *,
    capacity: int = 3,
    refill_interval: float = 60.0,
    logger: MagicMock | None = None,
) -> Limiter:
    """Build a Limiter with a long default interval so decay never fires mid-test."""
    return Limiter.new(
        with_capacity(capacity),
        with_refill_interval(refill_interval),
        with_logger(logger or make_mock_logger()),
    )


@pytest.fixture
def mock_logger():
    return make_mock_logger()


@pytest.fixture
def limiter(mock_logger):
    """Provide a started limiter that is stopped after the test."""
    lim = make_limiter(logger=mock_logger)
    lim.start()
    yield lim
    if lim.is_running:
        lim.stop()


@pytest.fixture()
def _caplog_keylimiter(caplog):
    """Attach caplog handler to the ``keylimiter`` logger so records are captured
    even though ``propagate=False``."""
    root = logging.getLogger("keylimiter")
    root.addHandler(caplog.handler)
    yield
    root.removeHandler(caplog.handler)
