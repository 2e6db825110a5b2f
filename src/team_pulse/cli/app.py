from __future__ import annotations

import typer

from team_pulse.cli.games import app as games_app
from team_pulse.core.config import settings
from team_pulse.core.logging import configure_logging

app = typer.Typer(no_args_is_help=True)
app.add_typer(games_app, name="games")


@app.callback()
def main(
    log_level: str = typer.Option(settings.log_level, "--log-level", help="Logging level."),
) -> None:
    configure_logging(log_level)
