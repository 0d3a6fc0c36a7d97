"""Domain models for shopcast.

Every value the engine hands back is defined here using Pydantic v2. Models
are frozen: a pipeline caches and shares them between calls, so nothing
downstream may patch them in place.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class FrozenModel(BaseModel):
    """Base model with frozen (immutable) configuration."""

    model_config = ConfigDict(frozen=True)


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------


class Provenance(str, Enum):
    """Origin of a point: an observed day or a forecast day."""

    HISTORICAL = "historical"
    PREDICTION = "prediction"


class TimeRange(str, Enum):
    """How much history is shown next to the forecast.

    ALL:    Every historical point.
    LAST7:  Trailing 7 historical entries.
    LAST30: Trailing 30 historical entries.
    """

    ALL = "all"
    LAST7 = "last7"
    LAST30 = "last30"


class ChartType(str, Enum):
    """Chart shapes a renderer may be asked to draw."""

    COMBINED = "combined"
    COMPOSED = "composed"
    REVENUE_FOCUS = "revenue_focus"
    LINE = "line"
    AREA = "area"
    BAR = "bar"
    CANDLESTICK = "candlestick"
    WATERFALL = "waterfall"
    STACKED = "stacked"


class Metric(str, Enum):
    """Toggleable metrics and the point field each one plots."""

    REVENUE = "revenue"
    ORDERS = "orders"
    CONVERSION = "conversion"

    @property
    def series_key(self) -> str:
        return _SERIES_KEYS[self]


_SERIES_KEYS = {
    Metric.REVENUE: "revenue",
    Metric.ORDERS: "orders_count",
    Metric.CONVERSION: "conversion_rate",
}


# -----------------------------------------------------------------------------
# Canonical Point
# -----------------------------------------------------------------------------


class ConfidenceInterval(FrozenModel):
    """Forecast bounds, sanitized like the fields they bracket."""

    revenue_min: float = 0.0
    revenue_max: float = 0.0
    orders_min: int = 0
    orders_max: int = 0


class CanonicalPoint(FrozenModel):
    """A single sanitized observation, historical or predicted.

    Attributes:
        date: Calendar date of the observation (never missing).
        revenue: Revenue, 0..max_revenue, 2 decimal places.
        orders_count: Orders, 0..max_orders, whole number.
        conversion_rate: Conversion percentage, 0..100, 1 decimal place.
        avg_order_value: Average order value, 0..max_avg_order_value, 2 decimal places.
        provenance: Whether the point was observed or forecast.
        confidence_score: Forecast confidence in [0, 1] (predictions only).
        confidence_interval: Forecast bounds (predictions only).

    Invariants:
        - Every numeric field is finite and non-negative.
        - Rounding has already been applied; consumers never re-round.
    """

    date: date
    revenue: float = Field(default=0.0, ge=0)
    orders_count: int = Field(default=0, ge=0)
    conversion_rate: float = Field(default=0.0, ge=0, le=100)
    avg_order_value: float = Field(default=0.0, ge=0)
    provenance: Provenance = Provenance.HISTORICAL
    confidence_score: float | None = Field(default=None, ge=0, le=1)
    confidence_interval: ConfidenceInterval | None = None

    @property
    def is_prediction(self) -> bool:
        return self.provenance == Provenance.PREDICTION


# -----------------------------------------------------------------------------
# Merged Series
# -----------------------------------------------------------------------------


class MergedSeries(FrozenModel):
    """Chronologically ordered series ready for projection.

    ``points`` is what gets drawn: the range-clipped history followed (by date)
    by the forecast. ``trend_base`` is the full sanitized history, kept so trend
    statistics never shrink with the display window.
    """

    points: tuple[CanonicalPoint, ...] = ()
    trend_base: tuple[CanonicalPoint, ...] = ()
    time_range: TimeRange = TimeRange.ALL
    include_predictions: bool = True
    dropped_count: int = Field(default=0, ge=0)

    @property
    def historical_points(self) -> tuple[CanonicalPoint, ...]:
        return tuple(p for p in self.points if not p.is_prediction)

    @property
    def prediction_points(self) -> tuple[CanonicalPoint, ...]:
        return tuple(p for p in self.points if p.is_prediction)

    @property
    def is_empty(self) -> bool:
        return not self.points


# -----------------------------------------------------------------------------
# Trend Statistics (output model)
# -----------------------------------------------------------------------------


class WindowSummary(FrozenModel):
    """Aggregates over one block of historical points.

    Revenue and orders are sums; conversion is the mean over the block.
    """

    revenue: float = 0.0
    orders: int = 0
    conversion: float = 0.0
    point_count: int = 0


class MetricChange(FrozenModel):
    """Percent change per metric, current window vs prior window."""

    revenue: float = 0.0
    orders: float = 0.0
    conversion: float = 0.0


class ForecastWindow(FrozenModel):
    """Aggregates over the fixed forecast horizon."""

    revenue_sum: float = 0.0
    orders_sum: int = 0
    point_count: int = 0
    average_confidence: float | None = None
    revenue_low: float = 0.0  # Sum of confidence_interval.revenue_min
    revenue_high: float = 0.0  # Sum of confidence_interval.revenue_max
    growth_rate: float = 0.0  # Forecast mean vs current-window mean, percent


class HistoryTotals(FrozenModel):
    """Totals over the full sanitized history."""

    revenue: float = 0.0
    orders: int = 0
    point_count: int = 0


class TrendStatistics(FrozenModel):
    """Week-over-week trend snapshot plus the forecast summary.

    Recomputed in full whenever inputs change; never patched.
    """

    current_window: WindowSummary
    prior_window: WindowSummary
    percent_change: MetricChange
    forecast_window: ForecastWindow
    totals: HistoryTotals


# -----------------------------------------------------------------------------
# Chart Projection (output model)
# -----------------------------------------------------------------------------


class SeriesSpec(FrozenModel):
    """How one visible series maps onto a chart."""

    key: str  # Field of CanonicalPoint to plot
    label: str
    axis: str  # "revenue" | "orders"
    mark: str  # "line" | "area" | "bar"


class ChartProjection(FrozenModel):
    """Everything a renderer needs for one chart type.

    ``data`` is the canonical series untouched: only the declared keys differ
    between chart types.
    """

    chart_type: ChartType
    data: tuple[CanonicalPoint, ...] = ()
    series: tuple[SeriesSpec, ...] = ()
    separator_date: date | None = None

    @computed_field  # type: ignore[misc]
    @property
    def visible_series_keys(self) -> tuple[str, ...]:
        """Point fields the renderer should draw, in draw order."""
        return tuple(s.key for s in self.series)


class DashboardView(FrozenModel):
    """Result of one pipeline run."""

    projection: ChartProjection
    statistics: TrendStatistics | None = None
    dropped_count: int = 0
