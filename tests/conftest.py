"""Shared test fixtures for nettoplan."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from nettoplan.financial.models import PricePoint


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "tax": {
            "church_tax_rate": "0.08",
        },
        "projection": {
            "years": 20,
            "scenario": "conservative",
        },
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


class FakeClock:
    """Manually advanced clock for cache tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def monthly_series(closes, start=date(2020, 1, 1)):
    """Build a monthly PricePoint series from a list of closes."""
    points = []
    for i, close in enumerate(closes):
        total = start.year * 12 + (start.month - 1) + i
        points.append(PricePoint(date(total // 12, total % 12 + 1, 1), Decimal(str(close))))
    return points


@pytest.fixture
def rising_series():
    """24 months of steady 1% monthly gains."""
    closes = [Decimal("100") * Decimal("1.01") ** i for i in range(24)]
    return monthly_series(closes)


@pytest.fixture
def make_series():
    """Factory fixture: ``make_series([100, 101, ...])``."""
    return monthly_series
