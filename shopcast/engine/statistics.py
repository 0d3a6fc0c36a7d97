"""Trend statistics calculator.

Derives week-over-week deltas and forecast aggregates from a merged series.
"""

from collections.abc import Sequence

from shopcast.core.config import DEFAULT_CONFIG, EngineConfig
from shopcast.core.models import (
    CanonicalPoint,
    ForecastWindow,
    HistoryTotals,
    MergedSeries,
    MetricChange,
    TrendStatistics,
    WindowSummary,
)


def percent_change(current: float, prior: float) -> float:
    """Calculate percent change from prior to current.

    A metric with no prior baseline reports 0% rather than +inf%: "no
    baseline" is not a growth rate.

    Args:
        current: Value for the current window.
        prior: Value for the prior window.

    Returns:
        Change in percent, rounded to 1 decimal place.
    """
    if prior == 0:
        return 0.0
    return round((current - prior) / prior * 100, 1)


def summarize_window(points: Sequence[CanonicalPoint]) -> WindowSummary:
    """Sum revenue and orders, average conversion over a block of points."""
    if not points:
        return WindowSummary()
    return WindowSummary(
        revenue=round(sum(p.revenue for p in points), 2),
        orders=sum(p.orders_count for p in points),
        conversion=round(sum(p.conversion_rate for p in points) / len(points), 2),
        point_count=len(points),
    )


def summarize_forecast(
    predictions: Sequence[CanonicalPoint],
    current: WindowSummary,
    horizon: int,
) -> ForecastWindow:
    """Aggregate the first ``horizon`` prediction points.

    Args:
        predictions: Prediction points in date order.
        current: Current historical window, the growth-rate baseline.
        horizon: Maximum number of prediction points to include.

    Returns:
        ForecastWindow (all zeros when there are no predictions).
    """
    window = list(predictions[:horizon])
    if not window:
        return ForecastWindow()

    revenue_sum = round(sum(p.revenue for p in window), 2)

    scores = [p.confidence_score for p in window if p.confidence_score is not None]
    average_confidence = round(sum(scores) / len(scores), 2) if scores else None

    intervals = [p.confidence_interval for p in window if p.confidence_interval is not None]

    baseline = current.revenue / current.point_count if current.point_count else 0.0
    growth_rate = percent_change(revenue_sum / len(window), baseline)

    return ForecastWindow(
        revenue_sum=revenue_sum,
        orders_sum=sum(p.orders_count for p in window),
        point_count=len(window),
        average_confidence=average_confidence,
        revenue_low=round(sum(i.revenue_min for i in intervals), 2),
        revenue_high=round(sum(i.revenue_max for i in intervals), 2),
        growth_rate=growth_rate,
    )


def compute_statistics(
    merged: MergedSeries | Sequence[CanonicalPoint],
    *,
    config: EngineConfig | None = None,
) -> TrendStatistics | None:
    """Compute trend statistics for a merged series.

    Comparison windows come from the full history (``trend_base``), not from
    the range-clipped display series, so narrowing the chart never shrinks the
    comparison base. The forecast window is a fixed horizon regardless of
    range.

    Args:
        merged: Merged series, or a plain sequence of canonical points.
        config: Window and horizon sizes.

    Returns:
        TrendStatistics, or None when there is no historical point at all.
    """
    config = config or DEFAULT_CONFIG

    if isinstance(merged, MergedSeries):
        history = list(merged.trend_base)
        predictions = list(merged.prediction_points)
    else:
        # Windows and horizon are defined by date, not by caller order
        points = sorted(merged, key=lambda p: p.date)
        history = [p for p in points if not p.is_prediction]
        predictions = [p for p in points if p.is_prediction]

    if not history:
        return None

    window = config.trend_window
    current = summarize_window(history[-window:])
    prior = summarize_window(history[-2 * window:-window])

    totals = HistoryTotals(
        revenue=round(sum(p.revenue for p in history), 2),
        orders=sum(p.orders_count for p in history),
        point_count=len(history),
    )

    return TrendStatistics(
        current_window=current,
        prior_window=prior,
        percent_change=MetricChange(
            revenue=percent_change(current.revenue, prior.revenue),
            orders=percent_change(current.orders, prior.orders),
            conversion=percent_change(current.conversion, prior.conversion),
        ),
        forecast_window=summarize_forecast(predictions, current, config.forecast_horizon),
        totals=totals,
    )
