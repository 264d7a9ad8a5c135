# tests/conftest.py

import itertools
import shutil
import tempfile
from datetime import timezone
from pathlib import Path

import pytest

from fraudscope.detectors import FraudPatternCatalog
from fraudscope.entities import TransactionRecord
from fraudscope.generators import GeneratorConfig

# 2024-01-01 12:00:00 UTC
BASE_TIME = 1704110400


@pytest.fixture
def base_time():
    return BASE_TIME


@pytest.fixture
def make_txn():
    """Factory for TransactionRecord with sensible defaults."""
    counter = itertools.count()

    def _make(**overrides):
        data = {
            "id": f"txn_{next(counter)}",
            "amount": 2500,
            "currency": "usd",
            "status": "succeeded",
            "processor": "stripe",
            "created": BASE_TIME,
        }
        data.update(overrides)
        return TransactionRecord(**data)

    return _make


@pytest.fixture
def catalog():
    """Catalog pinned to UTC hours and a fixed 'now' just after BASE_TIME."""
    return FraudPatternCatalog(clock=lambda: BASE_TIME + 60, tz=timezone.utc)


@pytest.fixture
def make_config():
    """Factory for a valid GeneratorConfig, overridable per key."""

    def _make(**overrides):
        data = {
            "count": 100,
            "processors": ["stripe"],
            "dateRange": {
                "start": "2024-01-01T00:00:00Z",
                "end": "2024-12-31T00:00:00Z",
            },
            "fraudMix": {
                "cardTesting": 10,
                "velocityFraud": 10,
                "highRiskCountry": 10,
                "roundNumber": 5,
                "retryAttack": 5,
                "cryptoFraud": 5,
                "nightTime": 5,
                "highValue": 10,
                "legitimate": 40,
            },
            "statusDistribution": {
                "succeeded": 70,
                "failed": 20,
                "pending": 5,
                "canceled": 5,
            },
        }
        data.update(overrides)
        return GeneratorConfig.model_validate(data)

    return _make


@pytest.fixture
def only_mix():
    """fraudMix with every category at 0 except the ones given."""

    def _mix(**pcts):
        mix = {
            "cardTesting": 0,
            "velocityFraud": 0,
            "highRiskCountry": 0,
            "roundNumber": 0,
            "retryAttack": 0,
            "cryptoFraud": 0,
            "nightTime": 0,
            "highValue": 0,
            "legitimate": 0,
        }
        mix.update(pcts)
        return mix

    return _mix


@pytest.fixture(scope="function")
def temp_dir():
    """Temporary directory for test outputs."""
    path = tempfile.mkdtemp()
    yield Path(path)
    shutil.rmtree(path, ignore_errors=True)
