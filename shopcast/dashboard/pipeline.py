"""Memoized analytics pipeline.

Runs the four stages (sanitize, merge, statistics, projection) for the
dashboard, caching each stage on the inputs it actually depends on so an
unrelated re-render never recomputes sanitization or statistics.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from datetime import date
from functools import lru_cache
from typing import Any, NamedTuple

from shopcast.core.config import DEFAULT_CONFIG, EngineConfig
from shopcast.core.models import (
    ChartProjection,
    ChartType,
    DashboardView,
    MergedSeries,
    Metric,
    TimeRange,
    TrendStatistics,
)
from shopcast.engine.merger import merge, parse_time_range
from shopcast.engine.projection import parse_chart_type, project, resolve_visible_metrics
from shopcast.engine.statistics import compute_statistics

logger = logging.getLogger(__name__)


class MergeKey(NamedTuple):
    """Cache key for the merge stage (and the statistics derived from it)."""

    historical: str
    predictions: str  # Empty when predictions are disabled
    include_predictions: bool
    time_range: TimeRange
    today: date


def signature(records: Iterable[Any] | None) -> str | None:
    """Canonical JSON text for a raw observation array.

    Equal arrays give equal signatures regardless of key order. The cached
    merge runs on the decoded signature, so only JSON-native records are
    signed. Anything else (dates, bytes, custom objects, mixed key types)
    returns None and the caller skips the cache.
    """
    if records is None:
        return "[]"
    try:
        return json.dumps(list(records), sort_keys=True)
    except (TypeError, ValueError):
        return None


class AnalyticsPipeline:
    """Provides chart projections and trend statistics for the dashboard.

    Each instance owns its caches; there is no module-level state. Cached
    values are frozen models and are shared between callers.
    """

    def __init__(self, config: EngineConfig | None = None, today: date | None = None):
        """Initialize the pipeline.

        Args:
            config: Engine configuration (ceilings, windows, cache size).
            today: Fixed substitute for unparseable dates. Defaults to the
                current date at call time.
        """
        self.config = config or DEFAULT_CONFIG
        self._today = today

        size = self.config.cache_size
        self._merged = lru_cache(maxsize=size)(self._merge_signed)
        self._statistics = lru_cache(maxsize=size)(self._statistics_signed)
        self._projection = lru_cache(maxsize=size)(self._project_signed)

    # ------------------------------------------------------------------
    # Cached stages (keyed on signatures only)
    # ------------------------------------------------------------------

    def _merge_signed(self, key: MergeKey) -> MergedSeries:
        logger.debug("Merge cache miss (range=%s)", key.time_range.value)
        return merge(
            json.loads(key.historical),
            json.loads(key.predictions) if key.include_predictions else None,
            include_predictions=key.include_predictions,
            time_range=key.time_range,
            today=key.today,
            config=self.config,
        )

    def _statistics_signed(self, key: MergeKey) -> TrendStatistics | None:
        return compute_statistics(self._merged(key), config=self.config)

    def _project_signed(
        self, key: MergeKey, chart_type: ChartType, shown: frozenset[Metric]
    ) -> ChartProjection:
        return project(self._merged(key), chart_type, {m: True for m in shown})

    def _key(
        self,
        historical: Iterable[Any] | None,
        predictions: Iterable[Any] | None,
        include_predictions: bool,
        time_range: TimeRange,
    ) -> MergeKey | None:
        hist_sig = signature(historical)
        pred_sig = signature(predictions) if include_predictions else ""
        if hist_sig is None or pred_sig is None:
            logger.debug("Observations are not JSON-encodable, bypassing cache")
            return None
        return MergeKey(
            historical=hist_sig,
            predictions=pred_sig,
            include_predictions=include_predictions,
            time_range=time_range,
            today=self._today or date.today(),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_merged_series(
        self,
        historical: Iterable[Any] | None,
        predictions: Iterable[Any] | None,
        *,
        include_predictions: bool = True,
        time_range: TimeRange | str = TimeRange.ALL,
    ) -> MergedSeries:
        """Get the merged series for the given feeds and options."""
        historical, predictions = list(historical or ()), list(predictions or ())
        time_range = parse_time_range(time_range)
        key = self._key(historical, predictions, include_predictions, time_range)
        if key is None:
            return merge(
                historical,
                predictions,
                include_predictions=include_predictions,
                time_range=time_range,
                today=self._today,
                config=self.config,
            )
        return self._merged(key)

    def get_dashboard_view(
        self,
        historical: Iterable[Any] | None,
        predictions: Iterable[Any] | None,
        *,
        include_predictions: bool = True,
        time_range: TimeRange | str = TimeRange.ALL,
        chart_type: ChartType | str = ChartType.COMBINED,
        visible_metrics: Mapping[Metric | str, bool] | None = None,
    ) -> DashboardView:
        """Get the projection and statistics for one dashboard render.

        Call arguments are validated before any cache lookup, so an unknown
        chart type, range or metric always raises.

        Args:
            historical: Raw historical observations.
            predictions: Raw predicted observations.
            include_predictions: Whether to merge the forecast feed.
            time_range: History window for the display series.
            chart_type: Requested chart shape.
            visible_metrics: Metric toggles; None shows all.

        Returns:
            DashboardView with projection, statistics and dropped-point count.
        """
        historical, predictions = list(historical or ()), list(predictions or ())
        time_range = parse_time_range(time_range)
        chart_type = parse_chart_type(chart_type)
        shown = resolve_visible_metrics(visible_metrics)

        key = self._key(historical, predictions, include_predictions, time_range)
        if key is None:
            merged = self.get_merged_series(
                historical,
                predictions,
                include_predictions=include_predictions,
                time_range=time_range,
            )
            statistics = compute_statistics(merged, config=self.config)
            projection = project(merged, chart_type, {m: True for m in shown})
        else:
            merged = self._merged(key)
            statistics = self._statistics(key)
            projection = self._projection(key, chart_type, shown)

        return DashboardView(
            projection=projection,
            statistics=statistics,
            dropped_count=merged.dropped_count,
        )

    def cache_info(self) -> dict[str, Any]:
        """Hit/miss counters per cached stage."""
        return {
            "merge": self._merged.cache_info(),
            "statistics": self._statistics.cache_info(),
            "projection": self._projection.cache_info(),
        }

    def clear_cache(self) -> None:
        """Drop every cached stage result."""
        self._merged.cache_clear()
        self._statistics.cache_clear()
        self._projection.cache_clear()
