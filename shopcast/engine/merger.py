"""Series merger.

Combines the historical and forecast feeds into one chronologically sorted
series, applying the caller's history window.
"""

import logging
from collections.abc import Iterable
from datetime import date
from typing import Any

from shopcast.core.config import DEFAULT_CONFIG, EngineConfig
from shopcast.core.exceptions import InvalidTimeRangeError
from shopcast.core.models import CanonicalPoint, MergedSeries, Provenance, TimeRange
from shopcast.engine.sanitizer import sanitize

logger = logging.getLogger(__name__)


def parse_time_range(value: TimeRange | str) -> TimeRange:
    """Validate a time range argument."""
    try:
        return TimeRange(value)
    except ValueError:
        valid = ", ".join(r.value for r in TimeRange)
        raise InvalidTimeRangeError(f"Unknown time range '{value}' (expected one of: {valid})") from None


def _sort_key(point: CanonicalPoint) -> tuple[date, int]:
    # Same-day actual sorts before forecast
    return (point.date, 0 if point.provenance == Provenance.HISTORICAL else 1)


def sanitize_all(
    records: Iterable[Any] | None,
    provenance: Provenance,
    today: date | None = None,
    config: EngineConfig | None = None,
) -> tuple[list[CanonicalPoint], int]:
    """Sanitize a batch of records.

    Args:
        records: Raw observations. None is treated as an empty batch.
        provenance: Provenance to stamp on every point.
        today: Substitute for unparseable dates.
        config: Ceilings to clamp against.

    Returns:
        (points, dropped) where dropped counts records with no usable date.
    """
    points: list[CanonicalPoint] = []
    dropped = 0
    for raw in records or ():
        point = sanitize(raw, provenance, today=today, config=config)
        if point is None:
            dropped += 1
        else:
            points.append(point)
    return points, dropped


def merge(
    historical: Iterable[Any] | None,
    predictions: Iterable[Any] | None,
    *,
    include_predictions: bool = True,
    time_range: TimeRange | str = TimeRange.ALL,
    today: date | None = None,
    config: EngineConfig | None = None,
) -> MergedSeries:
    """Merge historical and predicted observations into one series.

    The history window only limits how much history is shown: forecasts are
    never clipped, and the full sanitized history is kept as the trend base.
    With ``include_predictions`` off the forecast feed is not sanitized at all.

    Args:
        historical: Raw historical observations, any order.
        predictions: Raw predicted observations, any order.
        include_predictions: Whether to merge the forecast feed.
        time_range: History window for the display series.
        today: Substitute for unparseable dates.
        config: Ceilings and range sizes.

    Returns:
        MergedSeries sorted by date, actuals before forecasts on equal dates.
    """
    config = config or DEFAULT_CONFIG
    time_range = parse_time_range(time_range)
    if today is None:
        today = date.today()

    history, dropped = sanitize_all(historical, Provenance.HISTORICAL, today, config)
    history.sort(key=_sort_key)

    shown = history
    if time_range != TimeRange.ALL:
        shown = history[-config.range_days[time_range]:]

    forecast: list[CanonicalPoint] = []
    if include_predictions:
        forecast, dropped_forecast = sanitize_all(predictions, Provenance.PREDICTION, today, config)
        dropped += dropped_forecast

    if dropped:
        logger.warning("Dropped %d observation(s) without a usable date", dropped)

    points = sorted([*shown, *forecast], key=_sort_key)
    logger.debug(
        "Merged %d historical and %d predicted points (range=%s)",
        len(shown),
        len(forecast),
        time_range.value,
    )

    return MergedSeries(
        points=tuple(points),
        trend_base=tuple(history),
        time_range=time_range,
        include_predictions=include_predictions,
        dropped_count=dropped,
    )
