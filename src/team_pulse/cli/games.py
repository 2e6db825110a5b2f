from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any

import typer

from team_pulse.cli.serialize import result_payload, team_payload
from team_pulse.core.config import settings
from team_pulse.domain.enums import ErrorKind
from team_pulse.domain.result import Err, ProviderResult
from team_pulse.domain.teams import TeamRegistry
from team_pulse.resolution.resolver import GameResolver

app = typer.Typer(help="Resolve games for followed teams from upstream providers.")

# Caller mistakes; everything else is an upstream or capability failure.
BOUNDARY_ERRORS = {ErrorKind.UNKNOWN_TEAM, ErrorKind.NOT_FOUND, ErrorKind.INVALID_REQUEST}


def _run(call: Callable[[GameResolver], Awaitable[ProviderResult[Any]]]) -> None:
    async def runner() -> ProviderResult[Any]:
        async with GameResolver.from_settings(settings) as resolver:
            return await call(resolver)

    result = asyncio.run(runner())
    typer.echo(json.dumps(result_payload(result), indent=2))

    if isinstance(result, Err):
        raise typer.Exit(code=1 if result.kind in BOUNDARY_ERRORS else 2)


@app.command("teams")
def teams_cmd() -> None:
    """List the featured teams and their upstream identifiers."""

    teams = TeamRegistry().all()
    typer.echo(json.dumps({"ok": True, "data": [team_payload(t) for t in teams]}, indent=2))


@app.command("team")
def team_games_cmd(
    team_id: str = typer.Option(..., "--team-id", help="Local team id (e.g. mlb-dodgers)."),
) -> None:
    """Today's games for a team, else the next ones within the lookahead window."""

    _run(lambda r: r.resolve_games_for_team(team_id))


@app.command("scores")
def scores_cmd(
    league: str = typer.Option(..., "--league", help="League prefix: mlb, nba, epl or nfl."),
    date: str = typer.Option(..., "--date", help="Calendar day (YYYY-MM-DD)."),
) -> None:
    """All games of a league on one day."""

    _run(lambda r: r.resolve_scores_for_date(league, date))


@app.command("live")
def live_cmd(
    league: str = typer.Option(..., "--league", help="League prefix: mlb, nba, epl or nfl."),
    game_id: str = typer.Option(..., "--game-id", help="Game id (e.g. mlb-745001)."),
) -> None:
    """Current state of a single game, where the league supports it."""

    _run(lambda r: r.resolve_live_game(league, game_id))
