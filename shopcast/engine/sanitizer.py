"""Observation sanitizer.

Turns one untrusted observation (as received from the analytics endpoint)
into a CanonicalPoint. All clamping and rounding in the package happens here;
later stages trust their input.
"""

import logging
import math
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from shopcast.core.config import DEFAULT_CONFIG, EngineConfig
from shopcast.core.models import CanonicalPoint, ConfidenceInterval, Provenance

logger = logging.getLogger(__name__)

# Field name on the canonical point -> camelCase spelling accepted on input
_CAMEL_ALIASES = {
    "orders_count": "ordersCount",
    "conversion_rate": "conversionRate",
    "avg_order_value": "avgOrderValue",
    "confidence_interval": "confidenceInterval",
    "confidence_score": "confidenceScore",
    "revenue_min": "revenueMin",
    "revenue_max": "revenueMax",
    "orders_min": "ordersMin",
    "orders_max": "ordersMax",
}

_MISSING = object()


def _field(raw: Mapping[str, Any], name: str) -> Any:
    """Read a field by its snake_case name, falling back to camelCase."""
    value = raw.get(name, _MISSING)
    if value is _MISSING and name in _CAMEL_ALIASES:
        value = raw.get(_CAMEL_ALIASES[name], _MISSING)
    return value


def coerce_number(value: Any) -> float | None:
    """Convert a loosely-typed value to a finite float.

    Numeric strings are parsed. Returns None for anything that is not a finite
    number (None, booleans, non-numeric strings, NaN, infinities).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def clamp(value: Any, ceiling: float, places: int) -> float:
    """Clamp a raw value into [0, ceiling] and round it.

    Out-of-range values are handled per side: anything negative, missing or
    non-finite becomes 0, anything above the ceiling becomes the ceiling.

    Args:
        value: Raw field value.
        ceiling: Upper bound.
        places: Decimal places to keep (0 for counts).

    Returns:
        Clamped, rounded value.
    """
    number = coerce_number(value)
    if number is None or number < 0:
        return 0.0
    return round(max(0.0, min(ceiling, number)), places)


def clamp_count(value: Any, ceiling: int) -> int:
    """Clamp a raw count into [0, ceiling] as a whole number."""
    return int(clamp(value, ceiling, 0))


def parse_observation_date(value: Any, today: date | None = None) -> date | None:
    """Parse the date field of an observation.

    Date-like means a ``str``, a ``datetime.date`` or a ``datetime.datetime``
    (subclasses included; a datetime keeps only its date). Returns None when
    the field is missing, None, or of any other type (numbers, bytes, custom
    objects). A string that fails to parse is replaced with ``today``: a point
    drawn on the wrong day is less harmful to a chart than a silent gap.
    """
    if value is _MISSING or value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        logger.debug("Unparseable observation date %r, substituting today", value)
        return today or date.today()


def infer_provenance(raw: Mapping[str, Any]) -> Provenance:
    """Work out provenance from the tags the endpoint puts on a record."""
    for key in ("provenance", "kind"):
        tag = raw.get(key)
        if tag in (Provenance.PREDICTION, Provenance.PREDICTION.value):
            return Provenance.PREDICTION
    if raw.get("isPrediction") is True or raw.get("is_prediction") is True:
        return Provenance.PREDICTION
    return Provenance.HISTORICAL


def _sanitize_interval(raw: Mapping[str, Any], config: EngineConfig) -> ConfidenceInterval | None:
    interval = _field(raw, "confidence_interval")
    if not isinstance(interval, Mapping):
        # Older payloads flatten the bounds onto the point itself
        if all(_field(raw, key) is _MISSING for key in ("revenue_min", "revenue_max")):
            return None
        interval = raw

    return ConfidenceInterval(
        revenue_min=clamp(_field(interval, "revenue_min"), config.max_revenue, 2),
        revenue_max=clamp(_field(interval, "revenue_max"), config.max_revenue, 2),
        orders_min=clamp_count(_field(interval, "orders_min"), config.max_orders),
        orders_max=clamp_count(_field(interval, "orders_max"), config.max_orders),
    )


def sanitize(
    raw: Any,
    provenance: Provenance | str | None = None,
    *,
    today: date | None = None,
    config: EngineConfig | None = None,
) -> CanonicalPoint | None:
    """Sanitize a single raw observation.

    Each numeric field is clamped independently, so one bad field never costs
    the whole point. Sanitizing an already canonical point (or its
    ``model_dump()``) returns an equal point.

    Args:
        raw: Untrusted observation mapping.
        provenance: Origin of the record. Inferred from the record when None.
        today: Substitute for unparseable dates (defaults to today's date).
        config: Ceilings to clamp against.

    Returns:
        CanonicalPoint, or None when the record has no usable date field.
    """
    if isinstance(raw, CanonicalPoint):
        raw = raw.model_dump()
    if not isinstance(raw, Mapping):
        return None

    config = config or DEFAULT_CONFIG
    point_date = parse_observation_date(_field(raw, "date"), today)
    if point_date is None:
        return None

    origin = Provenance(provenance) if provenance is not None else infer_provenance(raw)

    confidence_score = None
    confidence_interval = None
    if origin == Provenance.PREDICTION:
        score = _field(raw, "confidence_score")
        if score is not _MISSING and score is not None:
            confidence_score = clamp(score, 1.0, 4)
        confidence_interval = _sanitize_interval(raw, config)

    return CanonicalPoint(
        date=point_date,
        revenue=clamp(_field(raw, "revenue"), config.max_revenue, 2),
        orders_count=clamp_count(_field(raw, "orders_count"), config.max_orders),
        conversion_rate=clamp(_field(raw, "conversion_rate"), config.max_conversion, 1),
        avg_order_value=clamp(_field(raw, "avg_order_value"), config.max_avg_order_value, 2),
        provenance=origin,
        confidence_score=confidence_score,
        confidence_interval=confidence_interval,
    )
