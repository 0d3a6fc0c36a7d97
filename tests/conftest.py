"""Shared fixtures for engine tests."""

from collections.abc import Callable
from datetime import date, timedelta
from typing import Any

import pytest

START = date(2025, 1, 1)


def observation(day: date, **overrides: Any) -> dict[str, Any]:
    """Build a raw observation in the analytics endpoint's format."""
    record: dict[str, Any] = {
        "kind": "historical",
        "date": day.isoformat(),
        "revenue": 100.0,
        "orders_count": 10,
        "conversion_rate": 2.0,
        "avg_order_value": 10.0,
    }
    record.update(overrides)
    return record


@pytest.fixture
def make_history() -> Callable[..., list[dict[str, Any]]]:
    """Factory for N consecutive days of historical observations."""

    def _make(days: int, start: date = START, **overrides: Any) -> list[dict[str, Any]]:
        return [observation(start + timedelta(days=i), **overrides) for i in range(days)]

    return _make


@pytest.fixture
def make_predictions() -> Callable[..., list[dict[str, Any]]]:
    """Factory for N consecutive days of predicted observations."""

    def _make(days: int, start: date = date(2025, 3, 1), **overrides: Any) -> list[dict[str, Any]]:
        values = {
            "kind": "prediction",
            "isPrediction": True,
            "confidence_score": 0.8,
            "confidence_interval": {
                "revenue_min": 70.0,
                "revenue_max": 130.0,
                "orders_min": 7,
                "orders_max": 13,
            },
        }
        values.update(overrides)
        return [observation(start + timedelta(days=i), **values) for i in range(days)]

    return _make
