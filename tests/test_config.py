"""
Configuration Helper Tests
==========================
Numeric parsing for environment settings.
"""
import pytest

from app.core.config import CORS_ORIGINS, ensure_integer, ensure_temperature


class TestEnsureInteger:

    @pytest.mark.parametrize("value,expected", [
        ("2000", 2000),
        ("1500.9", 1500),
        (42, 42),
        (3.7, 3),
        ("-2.5", -3),
    ])
    def test_parsed(self, value, expected):
        assert ensure_integer(value, 10) == expected

    @pytest.mark.parametrize("value", [None, "", "lots", "nan", "inf", [1]])
    def test_default(self, value):
        assert ensure_integer(value, 10) == 10


class TestEnsureTemperature:

    @pytest.mark.parametrize("value,expected", [
        ("0.3", 0.3),
        ("0", 0.0),
        ("1.8", 1.0),
        ("-0.5", 0.0),
    ])
    def test_clamped(self, value, expected):
        assert ensure_temperature(value) == expected

    @pytest.mark.parametrize("value", [None, "", "warm", "nan"])
    def test_default(self, value):
        assert ensure_temperature(value, 0.4) == 0.4


def test_cors_origins_are_trimmed():
    assert all(origin == origin.strip() and origin for origin in CORS_ORIGINS)
