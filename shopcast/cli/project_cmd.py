"""Implementation of 'shopcast project' command.

Writes the chart projection and trend statistics as JSON, the same payload a
rendering component consumes.
"""

import json
from pathlib import Path

import typer
from rich.console import Console

from shopcast.cli.utils import configure_logging, load_inputs
from shopcast.core.exceptions import ShopcastError
from shopcast.core.models import ChartType, Metric, TimeRange
from shopcast.dashboard import AnalyticsPipeline

console = Console()


def save_projection(payload: str, output_path: Path) -> None:
    """Save projection JSON to file.

    Args:
        payload: JSON text.
        output_path: Output file path.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(payload, encoding="utf-8")


def project_command(
    historical: Path = typer.Argument(
        ...,
        help="JSON file with historical observations (or the full endpoint payload)",
    ),
    predictions: Path = typer.Argument(
        None,
        help="Optional JSON file with predicted observations",
    ),
    time_range: TimeRange = typer.Option(
        TimeRange.ALL,
        "--range",
        "-r",
        help="History window shown next to the forecast",
    ),
    chart_type: ChartType = typer.Option(
        ChartType.COMBINED,
        "--chart-type",
        "-c",
        help="Chart shape to project",
    ),
    no_predictions: bool = typer.Option(
        False,
        "--no-predictions",
        help="Leave the forecast feed out entirely",
    ),
    hide: list[Metric] = typer.Option(
        None,
        "--hide",
        help="Metric to hide (repeatable)",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path (default: print to stdout)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show engine log output",
    ),
) -> None:
    """Write the chart projection and trend statistics as JSON."""
    configure_logging(verbose)

    try:
        raw_historical, raw_predictions = load_inputs(historical, predictions)
        hidden = set(hide or [])
        view = AnalyticsPipeline().get_dashboard_view(
            raw_historical,
            raw_predictions,
            include_predictions=not no_predictions,
            time_range=time_range,
            chart_type=chart_type,
            visible_metrics={m: m not in hidden for m in Metric},
        )
    except ShopcastError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    payload = json.dumps(view.model_dump(mode="json"), indent=2)

    if output is None:
        typer.echo(payload)
        return

    save_projection(payload, output)
    console.print(f"[green]Projection written:[/green] {output}")
    console.print(f"{len(view.projection.data)} points, series: {', '.join(view.projection.visible_series_keys) or 'none'}")
