from __future__ import annotations

import dataclasses
import logging
from datetime import UTC, tzinfo
from typing import Any

from team_pulse.core.text import as_text, team_names_match
from team_pulse.domain.enums import SportEnum
from team_pulse.domain.models import TBD, Game, Team
from team_pulse.providers.espn.adapter import team_from_competitor
from team_pulse.providers.espn.client import (
    MLB_PATH,
    EspnScoreboardClient,
    ScoreboardMatchup,
    iter_matchups,
)

logger = logging.getLogger(__name__)

ApiItem = dict[str, Any]

STITCH_ID_PREFIX = "mlb-espn"


def _is_team(competitor: ApiItem, team: Team) -> bool:
    item = competitor.get("team")
    if not isinstance(item, dict):
        return False
    return team_names_match(
        (as_text(item.get("displayName")),),
        (as_text(item.get("abbreviation")),),
        (team.name, team.short_name),
    )


def find_team_matchup(payload: ApiItem, team: Team) -> ScoreboardMatchup | None:
    """First scoreboard event with a competitor that names the team."""

    for matchup in iter_matchups(payload):
        if _is_team(matchup.home, team) or _is_team(matchup.away, team):
            return matchup
    return None


def _stitched_team(competitor: ApiItem) -> Team:
    return team_from_competitor(
        competitor, sport=SportEnum.BASEBALL, league="MLB", id_prefix=STITCH_ID_PREFIX
    )


def stitch_game(game: Game, matchup: ScoreboardMatchup, team: Team) -> Game:
    """
    Replace TBD side(s) of `game` with teams from a secondary scoreboard event.

    When exactly one competitor is the requested team, the other one is the
    opponent and fills whichever side is TBD; otherwise sides are aligned.
    """
    home_is_team = _is_team(matchup.home, team)
    away_is_team = _is_team(matchup.away, team)

    if home_is_team != away_is_team:
        opponent = matchup.away if home_is_team else matchup.home
        home_source = away_source = opponent
    else:
        home_source, away_source = matchup.home, matchup.away

    home, away = game.home, game.away
    if home.team.short_name == TBD:
        home = dataclasses.replace(home, team=_stitched_team(home_source))
    if away.team.short_name == TBD:
        away = dataclasses.replace(away, team=_stitched_team(away_source))

    return dataclasses.replace(game, home=home, away=away)


async def stitch_tbd_opponent(
    games: list[Game],
    team: Team,
    *,
    espn: EspnScoreboardClient,
    tz: tzinfo = UTC,
) -> list[Game]:
    """
    Best-effort: resolve a TBD opponent on the first game from the ESPN MLB
    scoreboard for that game's day. Any failure leaves the games unchanged.
    """
    if not games or not games[0].has_tbd_side():
        return games

    first = games[0]
    day = first.starts_at.astimezone(tz).date()
    try:
        payload = await espn.get_scoreboard(MLB_PATH, day)
        matchup = find_team_matchup(payload, team)
        if matchup is None:
            logger.info("No secondary MLB event for team=%s on %s", team.id, day)
            return games
        stitched = stitch_game(first, matchup, team)
    except Exception:
        logger.info("Opponent stitch failed for team=%s", team.id, exc_info=True)
        return games

    return [stitched, *games[1:]]
