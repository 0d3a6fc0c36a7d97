"""shopcast: merge, sanitize and summarize dashboard time series."""

from shopcast.core.config import DEFAULT_CONFIG, EngineConfig
from shopcast.core.exceptions import ShopcastError
from shopcast.dashboard import AnalyticsPipeline
from shopcast.engine import compute_statistics, merge, project, sanitize

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "AnalyticsPipeline",
    "EngineConfig",
    "ShopcastError",
    "compute_statistics",
    "merge",
    "project",
    "sanitize",
]
