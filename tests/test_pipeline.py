"""Tests for the memoized analytics pipeline."""

from datetime import date
from decimal import Decimal

import pytest

from shopcast.core.config import EngineConfig
from shopcast.core.exceptions import InvalidChartTypeError
from shopcast.core.models import DashboardView, Provenance
from shopcast.dashboard import AnalyticsPipeline
from shopcast.dashboard.pipeline import signature
from shopcast.engine.merger import merge
from shopcast.engine.projection import project
from shopcast.engine.statistics import compute_statistics

TODAY = date(2025, 6, 1)


class Opaque:
    """Value with no JSON encoding and no date meaning."""

    def __str__(self) -> str:
        return "2025-01-01"


@pytest.fixture
def pipeline() -> AnalyticsPipeline:
    return AnalyticsPipeline(today=TODAY)


class TestSignature:
    """Tests for signature."""

    def test_key_order_does_not_matter(self) -> None:
        assert signature([{"a": 1, "b": 2}]) == signature([{"b": 2, "a": 1}])

    def test_none_is_empty(self) -> None:
        assert signature(None) == signature([])

    def test_unsortable_keys(self) -> None:
        assert signature([{1: "x", "date": "2025-01-01"}]) is None

    def test_non_json_values_are_not_signed(self) -> None:
        assert signature([{"date": date(2025, 1, 1)}]) is None
        assert signature([{"date": "2025-01-01", "revenue": b"5"}]) is None


class TestAnalyticsPipeline:
    """Tests for AnalyticsPipeline."""

    def test_matches_direct_stage_calls(self, pipeline, make_history, make_predictions) -> None:
        historical, predictions = make_history(20), make_predictions(10)
        view = pipeline.get_dashboard_view(
            historical, predictions, time_range="last7", chart_type="bar", visible_metrics={"revenue": True}
        )

        merged = merge(historical, predictions, time_range="last7", today=TODAY)
        assert isinstance(view, DashboardView)
        assert view.projection == project(merged, "bar", {"revenue": True})
        assert view.statistics == compute_statistics(merged)
        assert view.dropped_count == 0

    def test_chart_type_change_reuses_merge_and_statistics(self, pipeline, make_history, make_predictions) -> None:
        historical, predictions = make_history(14), make_predictions(5)

        first = pipeline.get_dashboard_view(historical, predictions, chart_type="line")
        second = pipeline.get_dashboard_view(historical, predictions, chart_type="stacked")

        info = pipeline.cache_info()
        assert info["merge"].misses == 1
        assert info["statistics"].misses == 1
        assert info["projection"].misses == 2
        assert first.statistics is second.statistics
        assert first.projection.data == second.projection.data

    def test_identical_call_is_served_from_cache(self, pipeline, make_history) -> None:
        historical = make_history(10)
        first = pipeline.get_dashboard_view(historical, [])
        second = pipeline.get_dashboard_view([dict(reversed(list(r.items()))) for r in historical], [])

        assert second.projection is first.projection
        assert pipeline.cache_info()["projection"].hits == 1

    def test_range_change_recomputes_merge(self, pipeline, make_history) -> None:
        historical = make_history(20)
        all_view = pipeline.get_dashboard_view(historical, [], time_range="all")
        week_view = pipeline.get_dashboard_view(historical, [], time_range="last7")

        assert len(all_view.projection.data) == 20
        assert len(week_view.projection.data) == 7
        assert week_view.statistics == all_view.statistics
        assert pipeline.cache_info()["merge"].misses == 2

    def test_predictions_disabled(self, pipeline, make_history, make_predictions) -> None:
        view = pipeline.get_dashboard_view(make_history(7), make_predictions(7), include_predictions=False)

        assert view.projection.separator_date is None
        assert all(p.provenance == Provenance.HISTORICAL for p in view.projection.data)
        assert view.statistics is not None
        assert view.statistics.forecast_window.point_count == 0

    def test_disabled_predictions_are_not_encoded(self, pipeline, make_history) -> None:
        # Unsortable keys would make the prediction feed unencodable
        view = pipeline.get_dashboard_view(make_history(3), [{1: "x", "b": 2}], include_predictions=False)

        assert len(view.projection.data) == 3
        assert pipeline.cache_info()["merge"].currsize == 1

    def test_unencodable_input_bypasses_cache(self, pipeline) -> None:
        historical = [{"date": "2025-01-01", "revenue": 5, 1: "x"}]
        view = pipeline.get_dashboard_view(historical, [])

        assert [p.revenue for p in view.projection.data] == [5.0]
        assert pipeline.cache_info()["merge"].currsize == 0

    @pytest.mark.parametrize(
        "historical",
        [
            [{"date": Opaque(), "revenue": 5}],
            [{"date": "2025-01-01", "revenue": b"5"}],
            [{"date": date(2025, 1, 2), "revenue": 7}],
            [{"date": "2025-01-03", "revenue": Decimal("9.5")}],
        ],
    )
    def test_non_json_values_match_direct_stages(self, pipeline, historical) -> None:
        view = pipeline.get_dashboard_view(historical, [], chart_type="line")

        merged = merge(historical, [], today=TODAY)
        assert view.projection == project(merged, "line")
        assert view.statistics == compute_statistics(merged)
        assert view.dropped_count == merged.dropped_count
        assert pipeline.cache_info()["merge"].currsize == 0

    def test_dropped_count_reported(self, pipeline, make_history) -> None:
        view = pipeline.get_dashboard_view([*make_history(3), {"revenue": 9}], [])
        assert view.dropped_count == 1
        assert len(view.projection.data) == 3

    def test_unparseable_date_uses_pipeline_today(self, pipeline) -> None:
        view = pipeline.get_dashboard_view([{"date": "garbage", "revenue": 1}], [])
        assert view.projection.data[0].date == TODAY

    def test_empty_feeds(self, pipeline) -> None:
        view = pipeline.get_dashboard_view([], [])

        assert view.projection.data == ()
        assert view.statistics is None

    def test_contract_errors_raise_before_caching(self, pipeline, make_history) -> None:
        with pytest.raises(InvalidChartTypeError):
            pipeline.get_dashboard_view(make_history(3), [], chart_type="radar")
        assert pipeline.cache_info()["merge"].currsize == 0

    def test_get_merged_series(self, pipeline, make_history, make_predictions) -> None:
        merged = pipeline.get_merged_series(make_history(10), make_predictions(2), time_range="last7")

        assert len(merged.points) == 9
        assert merged is pipeline.get_merged_series(make_history(10), make_predictions(2), time_range="last7")

    def test_accepts_generators(self, pipeline, make_history) -> None:
        view = pipeline.get_dashboard_view((r for r in make_history(4)), iter(()))
        assert len(view.projection.data) == 4

    def test_cache_size_from_config(self, make_history) -> None:
        pipeline = AnalyticsPipeline(EngineConfig(cache_size=1), today=TODAY)
        pipeline.get_dashboard_view(make_history(3), [])
        pipeline.get_dashboard_view(make_history(4), [])

        assert pipeline.cache_info()["merge"].currsize == 1

    def test_clear_cache(self, pipeline, make_history) -> None:
        pipeline.get_dashboard_view(make_history(3), [])
        pipeline.clear_cache()

        info = pipeline.cache_info()
        assert all(stage.currsize == 0 for stage in info.values())
