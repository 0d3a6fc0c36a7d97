"""Dashboard layer.

Wraps the engine stages in a memoized pipeline keyed on the raw feeds and the
dashboard controls (prediction toggle, time range, chart type, metric toggles).
"""

from shopcast.dashboard.pipeline import AnalyticsPipeline

__all__ = [
    "AnalyticsPipeline",
]
