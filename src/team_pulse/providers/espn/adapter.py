from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from team_pulse.core.text import as_text, team_names_match
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
from team_pulse.providers.espn.client import (
    NFL_PATH,
    SCORES_MAX_AGE_S,
    EspnScoreboardClient,
    ScoreboardMatchup,
    iter_matchups,
)

logger = logging.getLogger(__name__)

ApiItem = dict[str, Any]


def map_espn_status(state: Any, name: Any = None) -> GameStatusEnum:
    n = as_text(name).upper()
    if n == "STATUS_POSTPONED":
        return GameStatusEnum.POSTPONED
    if n in {"STATUS_CANCELED", "STATUS_CANCELLED"}:
        return GameStatusEnum.CANCELED

    s = as_text(state).lower()
    if s == "post":
        return GameStatusEnum.FINAL
    if s == "in":
        return GameStatusEnum.IN_PROGRESS
    if s == "pre":
        return GameStatusEnum.SCHEDULED

    return GameStatusEnum.SCHEDULED


def build_fallback_games(team: Team, now: datetime) -> list[Game]:
    return [
        build_fallback_game(
            team,
            starts_at=kickoff_today(now, 13, 0),
            venue=fallback_venue(team),
        )
    ]


def team_from_competitor(competitor: ApiItem, *, sport: SportEnum, league: str, id_prefix: str) -> Team:
    item = competitor.get("team")
    if not isinstance(item, dict) or item.get("id") is None:
        raise ProviderResponseError(f"ESPN competitor missing team id: {competitor!r}")

    team_id = str(item["id"])
    name = as_text(item.get("displayName")) or as_text(item.get("name")) or team_id
    return Team(
        id=f"{id_prefix}-{team_id}",
        name=name,
        short_name=as_text(item.get("abbreviation")) or name,
        sport=sport,
        league=league,
        source_ids={ProviderEnum.ESPN.value: team_id},
    )


def _dict(value: Any) -> ApiItem:
    return value if isinstance(value, dict) else {}


def _score(competitor: ApiItem, status: GameStatusEnum) -> int | None:
    if status == GameStatusEnum.SCHEDULED:
        return None
    value = competitor.get("score")
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def map_matchup(matchup: ScoreboardMatchup) -> Game:
    event_id = matchup.event_id
    if event_id is None:
        raise ProviderResponseError("ESPN event missing id")

    comp = matchup.competition
    starts_at = parse_iso_datetime(comp.get("date")) or parse_iso_datetime(
        matchup.event.get("date")
    )
    if starts_at is None:
        raise ProviderResponseError(f"ESPN event {event_id} has no date")

    status_type = _dict(_dict(comp.get("status")).get("type"))
    status = map_espn_status(status_type.get("state"), status_type.get("name"))

    venue = _dict(comp.get("venue"))
    links = matchup.event.get("links")
    url = None
    if isinstance(links, list) and links and isinstance(links[0], dict):
        url = as_text(links[0].get("href")) or None

    return Game(
        id=f"nfl-{event_id}",
        sport=SportEnum.FOOTBALL,
        starts_at=starts_at,
        status=status,
        home=ScoreSide(
            team=team_from_competitor(
                matchup.home, sport=SportEnum.FOOTBALL, league="NFL", id_prefix="nfl"
            ),
            score=_score(matchup.home, status),
        ),
        away=ScoreSide(
            team=team_from_competitor(
                matchup.away, sport=SportEnum.FOOTBALL, league="NFL", id_prefix="nfl"
            ),
            score=_score(matchup.away, status),
        ),
        venue=as_text(venue.get("fullName")) or None,
        url=url,
    )


def involves_team(game: Game, team: Team) -> bool:
    targets = (team.name, team.short_name)
    return any(
        team_names_match((side.team.name,), (side.team.short_name,), targets)
        for side in (game.home, game.away)
    )


@dataclass
class EspnNflAdapter:
    """
    NFL adapter over the ESPN public scoreboard.

    The scoreboard is league-wide and date based, so upcoming games are found by
    fetching one scoreboard per day and filtering on team names.
    """

    client: EspnScoreboardClient
    now: Callable[[], datetime] = field(default=lambda: datetime.now(UTC), repr=False)

    name: str = "espn-scoreboard-public"
    sport: SportEnum = SportEnum.FOOTBALL

    def get_team_identifier(self, team: Team) -> str | None:
        return team.source_id(ProviderEnum.ESPN.value)

    async def get_upcoming_games(
        self, team: Team, date_range: DateRange
    ) -> ProviderResult[list[Game]]:
        if not self.get_team_identifier(team):
            logger.info("No ESPN id for team=%s; using fallback schedule", team.id)
            return Ok(build_fallback_games(team, self.now()))

        games: list[Game] = []
        try:
            for day in date_range.days():
                payload = await self.client.get_scoreboard(NFL_PATH, day)
                with response_shape("ESPN scoreboard"):
                    for matchup in iter_matchups(payload):
                        game = map_matchup(matchup)
                        if involves_team(game, team):
                            games.append(game)
        except ProviderError as e:
            logger.warning("ESPN NFL scoreboard failed for team=%s: %s", team.id, e)
            return Ok(build_fallback_games(team, self.now()))

        return Ok(games)

    async def get_scores_by_date(self, date_iso: str) -> ProviderResult[list[Game]]:
        try:
            day = parse_day(date_iso)
        except ValueError:
            return Err("invalid-date", ErrorKind.INVALID_REQUEST)

        try:
            payload = await self.client.get_scoreboard(NFL_PATH, day, max_age_s=SCORES_MAX_AGE_S)
            with response_shape("ESPN scoreboard"):
                games = [map_matchup(m) for m in iter_matchups(payload)]
        except ProviderError as e:
            logger.warning("ESPN NFL scores failed for %s: %s", day, e)
            return Err("nfl-scores-failed")

        return Ok(games)

    async def get_live_game(self, game_id: str) -> ProviderResult[Game]:
        return Err("nfl-live-not-supported", ErrorKind.UNSUPPORTED_OPERATION)
