"""Implementation of 'shopcast preview' command.

Shows trend statistics and the chart projection for a pair of feeds.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from shopcast.cli.utils import configure_logging, format_currency, format_percentage, load_inputs
from shopcast.core.exceptions import ShopcastError
from shopcast.core.models import ChartType, DashboardView, Metric, TimeRange, TrendStatistics
from shopcast.dashboard import AnalyticsPipeline

console = Console()


def preview_command(
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
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show engine log output",
    ),
) -> None:
    """Preview trend statistics and the chart projection.

    Runs the full pipeline (sanitize, merge, statistics, projection) and
    prints what a dashboard chart would receive.
    """
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

    console.print()
    console.print(Panel(f"[bold]Preview: {chart_type.value} chart, range {time_range.value}[/bold]", style="cyan"))
    console.print()

    if view.statistics is None:
        console.print("[yellow]No historical observations: trend statistics unavailable[/yellow]")
    else:
        _print_statistics(view.statistics)

    _print_projection(view)


def _print_statistics(stats: TrendStatistics) -> None:
    table = Table(title="Trend (current vs prior window)")
    table.add_column("Metric")
    table.add_column("Current", justify="right")
    table.add_column("Prior", justify="right")
    table.add_column("Change", justify="right")

    rows = [
        (
            "Revenue",
            format_currency(stats.current_window.revenue),
            format_currency(stats.prior_window.revenue),
            stats.percent_change.revenue,
        ),
        ("Orders", str(stats.current_window.orders), str(stats.prior_window.orders), stats.percent_change.orders),
        (
            "Conversion",
            f"{stats.current_window.conversion:.2f}%",
            f"{stats.prior_window.conversion:.2f}%",
            stats.percent_change.conversion,
        ),
    ]
    for name, current, prior, change in rows:
        color = "green" if change > 0 else "red" if change < 0 else "dim"
        table.add_row(name, current, prior, f"[{color}]{format_percentage(change)}[/{color}]")
    console.print(table)
    console.print()

    forecast = stats.forecast_window
    console.print("[bold]Forecast[/bold]")
    if forecast.point_count == 0:
        console.print("  [dim]No prediction points[/dim]")
    else:
        console.print(f"  Revenue ({forecast.point_count} points): {format_currency(forecast.revenue_sum):>14}")
        if forecast.revenue_high > 0:
            console.print(
                f"  Range:   {format_currency(forecast.revenue_low)} - {format_currency(forecast.revenue_high)}"
            )
        console.print(f"  Orders:  {forecast.orders_sum}")
        console.print(f"  Growth vs current window: {format_percentage(forecast.growth_rate)}")
        if forecast.average_confidence is not None:
            console.print(f"  Confidence: {forecast.average_confidence * 100:.0f}%")
    console.print()

    totals = stats.totals
    console.print(
        f"[dim]History: {totals.point_count} points, "
        f"{format_currency(totals.revenue)} revenue, {totals.orders} orders[/dim]"
    )


def _print_projection(view: DashboardView) -> None:
    projection = view.projection
    console.print()
    console.print("[bold]Projection[/bold]")
    console.print(f"  Points:    {len(projection.data)}")
    if projection.series:
        for series in projection.series:
            console.print(f"  Series:    {series.label} [dim]({series.key}, {series.mark} on {series.axis} axis)[/dim]")
    else:
        console.print("  Series:    [yellow]none (every metric hidden)[/yellow]")
    if projection.separator_date is not None:
        console.print(f"  Forecast starts: {projection.separator_date.isoformat()}")
    if view.dropped_count:
        console.print(f"  [yellow]Dropped {view.dropped_count} observation(s) without a usable date[/yellow]")
