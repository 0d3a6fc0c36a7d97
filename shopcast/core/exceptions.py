"""Exception hierarchy for shopcast.

Malformed *data* never raises: it is clamped, substituted or dropped by the
sanitizer. The exceptions below signal malformed *calls* (an unknown chart
type, a bad config value) and derive from :class:`ShopcastError` so callers can
catch them uniformly. They also derive from ``ValueError`` because every one of
them is an invalid argument.
"""


class ShopcastError(Exception):
    """Base class for shopcast errors."""


class ConfigError(ShopcastError, ValueError):
    """Raised when engine configuration values are invalid."""


class InvalidChartTypeError(ShopcastError, ValueError):
    """Raised when a chart type is not one of the known ChartType values."""


class InvalidTimeRangeError(ShopcastError, ValueError):
    """Raised when a time range is not one of the known TimeRange values."""


class InvalidMetricError(ShopcastError, ValueError):
    """Raised when a visible-metrics mapping names an unknown metric."""


class InputFileError(ShopcastError):
    """Raised by the CLI when an observation file cannot be read or decoded."""


__all__ = [
    "ShopcastError",
    "ConfigError",
    "InvalidChartTypeError",
    "InvalidTimeRangeError",
    "InvalidMetricError",
    "InputFileError",
]
