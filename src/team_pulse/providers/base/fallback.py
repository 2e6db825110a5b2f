from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from team_pulse.core.text import slugify
from team_pulse.domain.enums import GameStatusEnum
from team_pulse.domain.models import TBD, Game, LiveGameInfo, ScoreSide, Team

# Curated opponents keyed by the followed team's short name: (name, short name).
CURATED_OPPONENTS: Mapping[str, tuple[str, str]] = {
    "Lakers": ("Golden State Warriors", "Warriors"),
    "Liverpool": ("Manchester United", "MUN"),
    "Chiefs": ("Denver Broncos", "Broncos"),
    "49ers": ("Los Angeles Rams", "Rams"),
    "Eagles": ("New York Giants", "Giants"),
    "Bills": ("New England Patriots", "Patriots"),
    "Cowboys": ("Washington Commanders", "Commanders"),
    "Ravens": ("Pittsburgh Steelers", "Steelers"),
}


CURATED_VENUES: Mapping[str, str] = {
    "Dodgers": "Dodger Stadium",
    "Lakers": "Crypto.com Arena",
    "Liverpool": "Anfield",
}


def fallback_venue(team: Team) -> str:
    return CURATED_VENUES.get(team.short_name, f"{team.short_name} Stadium")


def kickoff_today(now: datetime, hour: int, minute: int) -> datetime:
    return now.replace(hour=hour, minute=minute, second=0, microsecond=0)


def fallback_opponent(team: Team, *, curated: bool = True) -> Team:
    """Placeholder opponent for `team`: a curated rival when known, else TBD."""

    prefix = team.sport.league_prefix
    name, short_name = TBD, TBD
    if curated and team.short_name in CURATED_OPPONENTS:
        name, short_name = CURATED_OPPONENTS[team.short_name]

    return Team(
        id=f"{prefix}-opponent-{slugify(team.short_name)}",
        name=name,
        short_name=short_name,
        sport=team.sport,
        league=team.league,
    )


def build_fallback_game(
    team: Team,
    *,
    starts_at: datetime,
    venue: str | None = None,
    opponent: Team | None = None,
    game_id: str | None = None,
    status: GameStatusEnum = GameStatusEnum.SCHEDULED,
    home_score: int | None = None,
    away_score: int | None = None,
    url: str | None = None,
    live_info: LiveGameInfo | None = None,
) -> Game:
    """
    Synthesize a placeholder game with `team` at home.

    Pure: the same inputs always produce the same game.
    """
    prefix = team.sport.league_prefix
    return Game(
        id=game_id or f"{prefix}-fallback-{slugify(team.short_name)}",
        sport=team.sport,
        starts_at=starts_at,
        status=status,
        home=ScoreSide(team=team, score=home_score),
        away=ScoreSide(team=opponent or fallback_opponent(team), score=away_score),
        venue=venue,
        url=url,
        live_info=live_info,
    )
