"""shopcast command-line entry point."""

import typer

from shopcast.cli.preview import preview_command
from shopcast.cli.project_cmd import project_command

app = typer.Typer(
    help="Inspect how the dashboard engine merges and summarizes analytics feeds.",
    no_args_is_help=True,
)

app.command(name="preview")(preview_command)
app.command(name="project")(project_command)


if __name__ == "__main__":
    app()
