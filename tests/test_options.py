"""Tests for limiter construction options."""

from __future__ import annotations

import pytest

from keylimiter._log import BoundLogger
from keylimiter.errors import (
    CapacityTooSmallError,
    InvalidConfigurationError,
    NilLoggerError,
    RefillRateTooSmallError,
)
from keylimiter.limiter import Limiter
from keylimiter.options import LimiterSettings, with_capacity, with_logger, with_refill_interval
from keylimiter.schema import MAX_REFILL_INTERVAL, LimiterConfig

from tests.conftest import make_mock_logger


class TestDefaults:
    def test_defaults(self):
        lim = Limiter.new()
        assert lim.capacity == 10
        assert lim.refill_interval == 1.0

    def test_default_logger_is_bound(self):
        logger = LimiterSettings().resolved_logger()
        assert isinstance(logger, BoundLogger)
        assert logger.fields == {"service": "limiter"}


class TestOptions:
    @pytest.mark.parametrize(
        ("interval", "capacity", "error"),
        [
            (0, 1, RefillRateTooSmallError),
            (-1.0, 1, RefillRateTooSmallError),
            (float("inf"), 1, RefillRateTooSmallError),
            (float("-inf"), 1, RefillRateTooSmallError),
            (float("nan"), 1, RefillRateTooSmallError),
            (1e12, 1, RefillRateTooSmallError),
            (MAX_REFILL_INTERVAL * 2, 1, RefillRateTooSmallError),
            (1, 0, CapacityTooSmallError),
            (1, -5, CapacityTooSmallError),
        ],
    )
    def test_invalid_values(self, interval, capacity, error):
        with pytest.raises(error):
            Limiter.new(with_refill_interval(interval), with_capacity(capacity))

    def test_largest_interval_accepted(self):
        lim = Limiter.new(with_refill_interval(MAX_REFILL_INTERVAL))
        assert lim.refill_interval == MAX_REFILL_INTERVAL

    def test_errors_are_invalid_configuration(self):
        for exc in (CapacityTooSmallError(0), RefillRateTooSmallError(0), NilLoggerError()):
            assert isinstance(exc, InvalidConfigurationError)
            assert isinstance(exc, ValueError)

    def test_nil_logger(self):
        with pytest.raises(NilLoggerError):
            Limiter.new(with_logger(None))

    def test_first_failure_wins(self):
        with pytest.raises(CapacityTooSmallError):
            Limiter.new(with_capacity(0), with_refill_interval(0))

    def test_valid_values_applied(self):
        logger = make_mock_logger()
        lim = Limiter.new(with_capacity(1), with_refill_interval(1), with_logger(logger))
        assert lim.capacity == 1
        assert lim.refill_interval == 1

    def test_later_option_overrides(self):
        lim = Limiter.new(with_capacity(2), with_capacity(7))
        assert lim.capacity == 7

    def test_custom_logger_used(self):
        logger = make_mock_logger()
        lim = Limiter.new(with_logger(logger))
        lim.stop()
        logger.error.assert_called_once()


class TestLimiterSettings:
    def test_defaults_are_valid(self):
        settings = LimiterSettings()
        assert settings.capacity == 10
        assert settings.refill_interval == 1.0

    @pytest.mark.parametrize(
        ("kwargs", "error"),
        [
            ({"capacity": 0}, CapacityTooSmallError),
            ({"refill_interval": 0}, RefillRateTooSmallError),
            ({"refill_interval": float("nan")}, RefillRateTooSmallError),
            ({"refill_interval": float("inf")}, RefillRateTooSmallError),
        ],
    )
    def test_invalid_settings_rejected(self, kwargs, error):
        with pytest.raises(error):
            LimiterSettings(**kwargs)

    def test_limiter_rechecks_mutated_settings(self):
        settings = LimiterSettings()
        settings.capacity = 0
        with pytest.raises(CapacityTooSmallError):
            Limiter(settings)


class TestFromConfig:
    def test_from_config(self):
        lim = Limiter.from_config(LimiterConfig(capacity=4, refill_interval=0.25))
        assert lim.capacity == 4
        assert lim.refill_interval == 0.25

    def test_from_config_with_logger(self):
        logger = make_mock_logger()
        lim = Limiter.from_config(LimiterConfig(), logger=logger)
        lim.stop()
        logger.error.assert_called_once()
