"""Engine configuration.

Ceilings, window sizes and cache limits used by every pipeline stage. The
defaults match what the dashboard charts expect; callers only build their own
EngineConfig for tests or unusual feeds.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from shopcast.core.exceptions import ConfigError
from shopcast.core.models import TimeRange


class EngineConfig(BaseModel):
    """Configuration for the merge-and-sanitize engine.

    Attributes:
        max_revenue: Revenue ceiling per point (also applies to revenue bounds).
        max_orders: Orders ceiling per point (also applies to order bounds).
        max_conversion: Conversion rate ceiling, in percent.
        max_avg_order_value: Average order value ceiling.
        trend_window: Historical points per comparison window.
        forecast_horizon: Prediction points summarized by the forecast window.
        range_days: Trailing historical entries kept for each clipped TimeRange.
        cache_size: Entries kept per stage by AnalyticsPipeline.
    """

    model_config = ConfigDict(frozen=True)

    max_revenue: float = Field(default=1e9, gt=0)
    max_orders: int = Field(default=1_000_000, gt=0)
    max_conversion: float = Field(default=100.0, gt=0, le=100)
    max_avg_order_value: float = Field(default=1e6, gt=0)

    trend_window: int = Field(default=7, ge=1)
    forecast_horizon: int = Field(default=30, ge=1)
    range_days: dict[TimeRange, int] = Field(
        default_factory=lambda: {TimeRange.LAST7: 7, TimeRange.LAST30: 30}
    )

    cache_size: int = Field(default=32, ge=1)

    @model_validator(mode="after")
    def validate_range_days(self) -> "EngineConfig":
        """Ensure every clipped range has a positive entry count."""
        for time_range in TimeRange:
            if time_range == TimeRange.ALL:
                continue
            days = self.range_days.get(time_range)
            if days is None or days < 1:
                raise ValueError(f"range_days needs a positive count for '{time_range.value}'")
        if TimeRange.ALL in self.range_days:
            raise ValueError("range 'all' is never clipped and takes no day count")
        return self

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "EngineConfig":
        """Build a config from plain settings, raising ConfigError on bad values."""
        try:
            return cls.model_validate(dict(values))
        except ValidationError as e:
            raise ConfigError(str(e)) from e


DEFAULT_CONFIG = EngineConfig()
