from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from team_pulse.core.text import as_text
from team_pulse.domain.dates import DateRange, parse_day, parse_iso_datetime
from team_pulse.domain.enums import ErrorKind, GameStatusEnum, ProviderEnum, SportEnum
from team_pulse.domain.models import Game, ScoreSide, Team
from team_pulse.domain.result import Err, Ok, ProviderResult
from team_pulse.providers.balldontlie.client import BalldontlieClient
from team_pulse.providers.base.errors import (
    ProviderError,
    ProviderResponseError,
    response_shape,
)
from team_pulse.providers.base.fallback import build_fallback_game, fallback_venue, kickoff_today

logger = logging.getLogger(__name__)

ApiItem = dict[str, Any]

_LIVE_MARKERS = ("in progress", "qtr", "half")
_OVERTIME_RE = re.compile(r"\b\d*ot\b")


def map_balldontlie_status(status: Any) -> GameStatusEnum:
    """
    balldontlie reports free text: "Final", "3rd Qtr", "Halftime", or the
    tip-off time for games that have not started.
    """
    s = as_text(status).strip().lower()
    if not s:
        return GameStatusEnum.SCHEDULED

    if s == "final":
        return GameStatusEnum.FINAL
    if "postponed" in s:
        return GameStatusEnum.POSTPONED
    if "cancel" in s:
        return GameStatusEnum.CANCELED
    if parse_iso_datetime(status) is not None:
        return GameStatusEnum.SCHEDULED
    if any(marker in s for marker in _LIVE_MARKERS) or _OVERTIME_RE.search(s):
        return GameStatusEnum.IN_PROGRESS

    return GameStatusEnum.SCHEDULED


def build_fallback_games(team: Team, now: datetime) -> list[Game]:
    return [
        build_fallback_game(
            team,
            starts_at=kickoff_today(now, 19, 30),
            venue=fallback_venue(team),
        )
    ]


def _team_from_item(item: Any) -> Team:
    if not isinstance(item, dict) or item.get("id") is None:
        raise ProviderResponseError(f"balldontlie team entry missing id: {item!r}")

    team_id = str(item["id"])
    name = as_text(item.get("full_name")) or as_text(item.get("name")) or team_id
    return Team(
        id=f"nba-{team_id}",
        name=name,
        short_name=as_text(item.get("abbreviation")) or name,
        sport=SportEnum.BASKETBALL,
        league="NBA",
        source_ids={ProviderEnum.BALLDONTLIE.value: team_id},
    )


def _score(value: Any) -> int | None:
    return value if isinstance(value, int) else None


def map_game(item: ApiItem) -> Game:
    game_id = item.get("id")
    if game_id is None:
        raise ProviderResponseError(f"balldontlie game missing id: {item!r}")

    starts_at = parse_iso_datetime(item.get("datetime")) or parse_iso_datetime(item.get("date"))
    if starts_at is None:
        raise ProviderResponseError(f"balldontlie game {game_id} has no date")

    status = map_balldontlie_status(item.get("status"))
    home_score = _score(item.get("home_team_score"))
    away_score = _score(item.get("visitor_team_score"))
    if status == GameStatusEnum.SCHEDULED and not home_score and not away_score:
        # Unplayed games report 0-0.
        home_score = away_score = None

    return Game(
        id=f"nba-{game_id}",
        sport=SportEnum.BASKETBALL,
        starts_at=starts_at,
        status=status,
        home=ScoreSide(team=_team_from_item(item.get("home_team")), score=home_score),
        away=ScoreSide(team=_team_from_item(item.get("visitor_team")), score=away_score),
    )


@dataclass
class BalldontlieAdapter:
    """balldontlie NBA adapter; live box scores are not offered upstream."""

    client: BalldontlieClient
    now: Callable[[], datetime] = field(default=lambda: datetime.now(UTC), repr=False)

    name: str = "balldontlie"
    sport: SportEnum = SportEnum.BASKETBALL

    def get_team_identifier(self, team: Team) -> str | None:
        return team.source_id(ProviderEnum.BALLDONTLIE.value)

    async def get_upcoming_games(
        self, team: Team, date_range: DateRange
    ) -> ProviderResult[list[Game]]:
        team_id = self.get_team_identifier(team)
        if not team_id:
            logger.info("No balldontlie id for team=%s; using fallback schedule", team.id)
            return Ok(build_fallback_games(team, self.now()))

        try:
            items = await self.client.get_team_games(
                team_id=team_id, start=date_range.start_day, end=date_range.end_day
            )
            with response_shape("balldontlie games"):
                games = [map_game(i) for i in items]
        except ProviderError as e:
            logger.warning("balldontlie schedule failed for team=%s: %s", team.id, e)
            return Ok(build_fallback_games(team, self.now()))

        return Ok(games)

    async def get_scores_by_date(self, date_iso: str) -> ProviderResult[list[Game]]:
        try:
            day = parse_day(date_iso)
        except ValueError:
            return Err("invalid-date", ErrorKind.INVALID_REQUEST)

        try:
            items = await self.client.get_games_on(day)
            with response_shape("balldontlie games"):
                games = [map_game(i) for i in items]
        except ProviderError as e:
            logger.warning("balldontlie scores failed for %s: %s", day, e)
            return Err("nba-scores-failed")

        return Ok(games)

    async def get_live_game(self, game_id: str) -> ProviderResult[Game]:
        return Err("nba-live-not-supported", ErrorKind.UNSUPPORTED_OPERATION)
