from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from team_pulse.core.text import as_text
from team_pulse.domain.dates import DateRange, parse_day, parse_iso_datetime
from team_pulse.domain.enums import ErrorKind, GameStatusEnum, ProviderEnum, SportEnum
from team_pulse.domain.models import Game, ScoreSide, Team
from team_pulse.domain.result import Err, Ok, ProviderResult
from team_pulse.providers.base.errors import (
    ProviderError,
    ProviderResponseError,
    response_shape,
)
from team_pulse.providers.base.fallback import build_fallback_game, fallback_venue, kickoff_today
from team_pulse.providers.football_data.client import FootballDataClient

logger = logging.getLogger(__name__)

ApiItem = dict[str, Any]

LEAGUE_LABEL = "Premier League"


def map_football_data_status(status: Any) -> GameStatusEnum:
    s = as_text(status).upper()

    if s in {"FINISHED", "AWARDED"}:
        return GameStatusEnum.FINAL
    if s in {"IN_PLAY", "PAUSED", "LIVE"}:
        return GameStatusEnum.IN_PROGRESS
    if s in {"POSTPONED", "SUSPENDED"}:
        return GameStatusEnum.POSTPONED
    if s == "CANCELLED":
        return GameStatusEnum.CANCELED
    if s in {"SCHEDULED", "TIMED"}:
        return GameStatusEnum.SCHEDULED

    return GameStatusEnum.SCHEDULED


def build_fallback_games(team: Team, now: datetime) -> list[Game]:
    return [
        build_fallback_game(
            team,
            starts_at=kickoff_today(now, 12, 30),
            venue=fallback_venue(team),
        )
    ]


def _team_from_item(item: Any) -> Team:
    if not isinstance(item, dict) or item.get("id") is None:
        raise ProviderResponseError(f"football-data team entry missing id: {item!r}")

    team_id = str(item["id"])
    name = as_text(item.get("name")) or team_id
    return Team(
        id=f"epl-{team_id}",
        name=name,
        short_name=as_text(item.get("tla")) or name,
        sport=SportEnum.SOCCER,
        league=LEAGUE_LABEL,
        source_ids={ProviderEnum.FOOTBALL_DATA.value: team_id},
    )


def _full_time(item: ApiItem, side: str) -> int | None:
    score = item.get("score")
    if not isinstance(score, dict):
        return None
    full_time = score.get("fullTime")
    if not isinstance(full_time, dict):
        return None
    value = full_time.get(side)
    return value if isinstance(value, int) else None


def map_match(item: ApiItem) -> Game:
    match_id = item.get("id")
    if match_id is None:
        raise ProviderResponseError(f"football-data match missing id: {item!r}")

    starts_at = parse_iso_datetime(item.get("utcDate"))
    if starts_at is None:
        raise ProviderResponseError(f"football-data match {match_id} has no utcDate")

    return Game(
        id=f"epl-{match_id}",
        sport=SportEnum.SOCCER,
        starts_at=starts_at,
        status=map_football_data_status(item.get("status")),
        home=ScoreSide(team=_team_from_item(item.get("homeTeam")), score=_full_time(item, "home")),
        away=ScoreSide(team=_team_from_item(item.get("awayTeam")), score=_full_time(item, "away")),
        venue=as_text(item.get("venue")) or None,
    )


@dataclass
class FootballDataAdapter:
    """football-data.org adapter for the Premier League."""

    client: FootballDataClient
    competition: str = "2021"
    now: Callable[[], datetime] = field(default=lambda: datetime.now(UTC), repr=False)

    name: str = "football-data.org"
    sport: SportEnum = SportEnum.SOCCER

    def get_team_identifier(self, team: Team) -> str | None:
        return team.source_id(ProviderEnum.FOOTBALL_DATA.value)

    async def get_upcoming_games(
        self, team: Team, date_range: DateRange
    ) -> ProviderResult[list[Game]]:
        team_id = self.get_team_identifier(team)
        if not team_id:
            logger.info("No football-data id for team=%s; using fallback schedule", team.id)
            return Ok(build_fallback_games(team, self.now()))

        try:
            items = await self.client.get_team_matches(
                team_id=team_id, start=date_range.start_day, end=date_range.end_day
            )
            with response_shape("football-data matches"):
                games = [map_match(i) for i in items]
        except ProviderError as e:
            logger.warning("football-data schedule failed for team=%s: %s", team.id, e)
            return Ok(build_fallback_games(team, self.now()))

        return Ok(games)

    async def get_scores_by_date(self, date_iso: str) -> ProviderResult[list[Game]]:
        try:
            day = parse_day(date_iso)
        except ValueError:
            return Err("invalid-date", ErrorKind.INVALID_REQUEST)

        try:
            items = await self.client.get_competition_matches(
                competition=self.competition, day=day
            )
            with response_shape("football-data matches"):
                games = [map_match(i) for i in items]
        except ProviderError as e:
            logger.warning("football-data scores failed for %s: %s", day, e)
            return Err("epl-scores-failed")

        return Ok(games)

    async def get_live_game(self, game_id: str) -> ProviderResult[Game]:
        match_id = game_id.removeprefix("epl-")
        try:
            item = await self.client.get_match(match_id)
            # v2 wrapped the match object; v4 returns it at the top level.
            with response_shape("football-data match"):
                if isinstance(item.get("match"), dict):
                    item = item["match"]
                game = map_match(item)
        except ProviderError as e:
            logger.warning("football-data match lookup failed for game=%s: %s", game_id, e)
            return Err("epl-live-failed")

        return Ok(game)
