"""Shared helpers for CLI commands."""

import json
import logging
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from shopcast.core.exceptions import InputFileError


def format_currency(amount: float, symbol: str = "$") -> str:
    """Format an amount for display."""
    if amount < 0:
        return f"-{symbol}{abs(amount):,.2f}"
    return f"{symbol}{amount:,.2f}"


def format_percentage(value: float) -> str:
    """Format a percent change with an explicit sign."""
    if value > 0:
        return f"+{value:.1f}%"
    return f"{value:.1f}%"


def configure_logging(verbose: bool) -> None:
    """Route library log records through rich when --verbose is set."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_observations(path: Path, as_predictions: bool = False) -> tuple[list[Any], list[Any]]:
    """Load observations from a JSON file.

    The file holds either a bare list of observations (each tagged with
    ``kind`` or ``isPrediction`` as needed) or the analytics endpoint payload,
    an object with ``historical`` and ``predictions`` arrays.

    Args:
        path: JSON file to read.
        as_predictions: Treat every record of a bare list as a prediction
            (for a separate forecast file).

    Returns:
        (historical, predictions) raw arrays.

    Raises:
        InputFileError: If the file is unreadable, not JSON, or has another shape.
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise InputFileError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InputFileError(f"{path} is not valid JSON: {e}") from e

    if isinstance(payload, list):
        if as_predictions:
            return [], payload
        historical = [r for r in payload if not _tagged_prediction(r)]
        predictions = [r for r in payload if _tagged_prediction(r)]
        return historical, predictions

    if isinstance(payload, dict):
        historical = payload.get("historical") or []
        predictions = payload.get("predictions") or []
        if isinstance(historical, list) and isinstance(predictions, list):
            return historical, predictions

    raise InputFileError(
        f"{path} must contain a list of observations or an object with "
        "'historical' and 'predictions' arrays"
    )


def _tagged_prediction(record: Any) -> bool:
    if not isinstance(record, dict):
        return False
    return record.get("kind") == "prediction" or record.get("isPrediction") is True


def load_inputs(historical: Path, predictions: Path | None) -> tuple[list[Any], list[Any]]:
    """Load the historical file and the optional separate forecast file."""
    raw_historical, raw_predictions = load_observations(historical)
    if predictions is not None:
        _, extra = load_observations(predictions, as_predictions=True)
        raw_predictions = [*raw_predictions, *extra]
    return raw_historical, raw_predictions
