"""Projection selector.

Maps a merged series and a chart type onto the series a renderer should draw.
Every chart type receives the same canonical data; only the declared series
differ, so switching chart type can never change the numbers shown.
"""

from collections.abc import Mapping

from shopcast.core.exceptions import InvalidChartTypeError, InvalidMetricError
from shopcast.core.models import (
    ChartProjection,
    ChartType,
    MergedSeries,
    Metric,
    SeriesSpec,
)

METRIC_LABELS = {
    Metric.REVENUE: "Revenue",
    Metric.ORDERS: "Orders",
    Metric.CONVERSION: "Conversion Rate",
}

# Chart type -> (metric, axis, mark) in draw order.
# Axis "revenue" is the primary axis; "orders" is the secondary one.
SERIES_LAYOUT: dict[ChartType, tuple[tuple[Metric, str, str], ...]] = {
    ChartType.COMBINED: (
        (Metric.REVENUE, "revenue", "area"),
        (Metric.ORDERS, "orders", "bar"),
        (Metric.CONVERSION, "orders", "line"),
    ),
    ChartType.COMPOSED: (
        (Metric.REVENUE, "revenue", "area"),
        (Metric.ORDERS, "orders", "bar"),
        (Metric.CONVERSION, "orders", "line"),
    ),
    ChartType.REVENUE_FOCUS: ((Metric.REVENUE, "revenue", "area"),),
    ChartType.LINE: (
        (Metric.REVENUE, "revenue", "line"),
        (Metric.ORDERS, "revenue", "line"),
    ),
    ChartType.AREA: ((Metric.REVENUE, "revenue", "area"),),
    ChartType.BAR: (
        (Metric.REVENUE, "revenue", "bar"),
        (Metric.ORDERS, "revenue", "bar"),
    ),
    ChartType.CANDLESTICK: (
        (Metric.REVENUE, "revenue", "bar"),
        (Metric.ORDERS, "revenue", "line"),
    ),
    ChartType.WATERFALL: (
        (Metric.REVENUE, "revenue", "bar"),
        (Metric.ORDERS, "revenue", "bar"),
    ),
    ChartType.STACKED: (
        (Metric.REVENUE, "revenue", "area"),
        (Metric.ORDERS, "revenue", "area"),
    ),
}


def parse_chart_type(value: ChartType | str) -> ChartType:
    """Validate a chart type argument."""
    try:
        return ChartType(value)
    except ValueError:
        valid = ", ".join(c.value for c in ChartType)
        raise InvalidChartTypeError(f"Unknown chart type '{value}' (expected one of: {valid})") from None


def resolve_visible_metrics(
    visible_metrics: Mapping[Metric | str, bool] | None,
) -> frozenset[Metric]:
    """Turn a visibility mapping into the set of shown metrics.

    None shows every metric. In a mapping, metrics that are not mentioned are
    hidden.

    Raises:
        InvalidMetricError: If the mapping names an unknown metric.
    """
    if visible_metrics is None:
        return frozenset(Metric)

    shown = set()
    for name, visible in visible_metrics.items():
        try:
            metric = Metric(name)
        except ValueError:
            valid = ", ".join(m.value for m in Metric)
            raise InvalidMetricError(f"Unknown metric '{name}' (expected one of: {valid})") from None
        if visible:
            shown.add(metric)
    return frozenset(shown)


def series_for(chart_type: ChartType, shown: frozenset[Metric]) -> tuple[SeriesSpec, ...]:
    """Series a chart type draws for the shown metrics."""
    return tuple(
        SeriesSpec(key=metric.series_key, label=METRIC_LABELS[metric], axis=axis, mark=mark)
        for metric, axis, mark in SERIES_LAYOUT[chart_type]
        if metric in shown
    )


def project(
    merged: MergedSeries,
    chart_type: ChartType | str,
    visible_metrics: Mapping[Metric | str, bool] | None = None,
) -> ChartProjection:
    """Select what a renderer needs to draw one chart type.

    Args:
        merged: Merged series from the merger.
        chart_type: Requested chart shape.
        visible_metrics: Metric toggles (see resolve_visible_metrics).

    Returns:
        ChartProjection with the untouched series, the visible series and the
        historical/forecast separator date (None without predictions). Hiding
        every metric yields no series but still returns the data.

    Raises:
        InvalidChartTypeError: If chart_type is unknown.
        InvalidMetricError: If visible_metrics names an unknown metric.
    """
    chart_type = parse_chart_type(chart_type)
    shown = resolve_visible_metrics(visible_metrics)

    separator = next((p.date for p in merged.points if p.is_prediction), None)

    return ChartProjection(
        chart_type=chart_type,
        data=merged.points,
        series=series_for(chart_type, shown),
        separator_date=separator,
    )
