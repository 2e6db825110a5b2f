from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from team_pulse.core.text import as_text
from team_pulse.domain.dates import DateRange, parse_day, parse_iso_datetime
from team_pulse.domain.enums import ErrorKind, GameStatusEnum, ProviderEnum, SportEnum
from team_pulse.domain.models import Game, LiveGameInfo, ScoreSide, Team
from team_pulse.domain.result import Err, Ok, ProviderResult
from team_pulse.providers.base.errors import (
    ProviderError,
    ProviderResponseError,
    response_shape,
)
from team_pulse.providers.base.fallback import (
    build_fallback_game,
    fallback_opponent,
    fallback_venue,
    kickoff_today,
)
from team_pulse.providers.mlb_stats.client import MlbStatsClient, iter_schedule_games
from team_pulse.providers.mlb_stats.live_feed import DEMO_LIVE_INFO, LiveFeedEnricher

logger = logging.getLogger(__name__)

ApiItem = dict[str, Any]

GAMEDAY_URL = "https://www.mlb.com/gameday"


def map_mlb_status(abstract_state: Any, coded_state: Any) -> GameStatusEnum:
    abstract_state = as_text(abstract_state)
    coded = as_text(coded_state).upper()

    if coded == "D":
        return GameStatusEnum.POSTPONED
    if coded == "C":
        return GameStatusEnum.CANCELED
    if coded in {"F", "O"} or abstract_state == "Final":
        return GameStatusEnum.FINAL
    if abstract_state == "Live" or coded == "I":
        return GameStatusEnum.IN_PROGRESS
    if abstract_state == "Preview":
        return GameStatusEnum.SCHEDULED

    return GameStatusEnum.SCHEDULED


def to_game_id(game_pk: Any) -> str:
    return f"mlb-{game_pk}"


def build_fallback_games(team: Team, now: datetime, *, demo_live: bool = True) -> list[Game]:
    """
    Placeholder schedule for a team the schedule endpoint could not serve.

    With demo live data enabled this is an in-progress game started two hours
    ago, so the live view has something to render.
    """
    opponent = fallback_opponent(team, curated=False)

    if not demo_live:
        return [
            build_fallback_game(
                team,
                starts_at=kickoff_today(now, 19, 10),
                venue=fallback_venue(team),
                opponent=opponent,
            )
        ]

    return [
        build_fallback_game(
            team,
            game_id="mlb-demo-live",
            starts_at=now - timedelta(hours=2),
            status=GameStatusEnum.IN_PROGRESS,
            home_score=3,
            away_score=2,
            venue=fallback_venue(team),
            opponent=opponent,
            url=f"{GAMEDAY_URL}/demo",
            live_info=DEMO_LIVE_INFO,
        )
    ]


def _team_from_item(item: Any) -> Team:
    if not isinstance(item, dict) or item.get("id") is None:
        raise ProviderResponseError(f"MLB team entry missing id: {item!r}")

    team_id = str(item["id"])
    name = as_text(item.get("name")) or team_id
    return Team(
        id=f"mlb-{team_id}",
        name=name,
        short_name=as_text(item.get("teamName")) or name,
        sport=SportEnum.BASEBALL,
        league="MLB",
        source_ids={ProviderEnum.MLB_STATS.value: team_id},
    )


def _dict(value: Any) -> ApiItem:
    return value if isinstance(value, dict) else {}


def _score(value: Any) -> int | None:
    return value if isinstance(value, int) else None


@dataclass
class MlbStatsAdapter:
    """MLB Stats API adapter (schedule, live feed, boxscore)."""

    client: MlbStatsClient
    enricher: LiveFeedEnricher
    demo_live_data: bool = True
    now: Callable[[], datetime] = field(default=lambda: datetime.now(UTC), repr=False)

    name: str = "mlb-statsapi"
    sport: SportEnum = SportEnum.BASEBALL

    def get_team_identifier(self, team: Team) -> str | None:
        return team.source_id(ProviderEnum.MLB_STATS.value)

    async def get_upcoming_games(
        self, team: Team, date_range: DateRange
    ) -> ProviderResult[list[Game]]:
        team_id = self.get_team_identifier(team)
        if not team_id:
            logger.info("No MLB id for team=%s; using fallback schedule", team.id)
            return Ok(build_fallback_games(team, self.now(), demo_live=self.demo_live_data))

        try:
            payload = await self.client.get_team_schedule(
                team_id=team_id, start=date_range.start_day, end=date_range.end_day
            )
            games: list[Game] = []
            with response_shape("MLB schedule"):
                for item in iter_schedule_games(payload):
                    games.append(await self._map_game(item, team=team, team_id=team_id))
        except ProviderError as e:
            logger.warning("MLB schedule failed for team=%s: %s", team.id, e)
            return Ok(build_fallback_games(team, self.now(), demo_live=self.demo_live_data))

        return Ok(games)

    async def get_scores_by_date(self, date_iso: str) -> ProviderResult[list[Game]]:
        try:
            day = parse_day(date_iso)
        except ValueError:
            return Err("invalid-date", ErrorKind.INVALID_REQUEST)

        try:
            payload = await self.client.get_schedule_for_date(day)
            with response_shape("MLB schedule"):
                games = [
                    await self._map_game(item, enrich=False)
                    for item in iter_schedule_games(payload)
                ]
        except ProviderError as e:
            logger.warning("MLB scores failed for %s: %s", day, e)
            return Err("mlb-scores-failed")

        return Ok(games)

    async def get_live_game(self, game_id: str) -> ProviderResult[Game]:
        """
        Boxscore for teams and runs; the live feed for status, first pitch and
        the snapshot. Without a feed the status maps from nothing (scheduled).
        """
        game_pk = game_id.removeprefix("mlb-")
        try:
            box = await self.client.get_boxscore(game_pk)
            with response_shape("MLB boxscore"):
                teams = box.get("teams")
                if not isinstance(teams, dict):
                    raise ProviderResponseError("MLB boxscore missing teams")

                home_item = _dict(teams.get("home"))
                away_item = _dict(teams.get("away"))
                home_team = _team_from_item(home_item.get("team"))
                away_team = _team_from_item(away_item.get("team"))
        except ProviderError as e:
            logger.warning("MLB live lookup failed for game=%s: %s", game_id, e)
            return Err("mlb-live-failed")

        feed = await self.enricher.fetch_feed(game_pk)
        game_data = _dict((feed or {}).get("gameData"))
        status_item = _dict(game_data.get("status"))
        status = map_mlb_status(
            status_item.get("abstractGameState"), status_item.get("codedGameState")
        )
        starts_at = parse_iso_datetime(_dict(game_data.get("datetime")).get("dateTime"))

        live_info: LiveGameInfo | None = None
        if status == GameStatusEnum.IN_PROGRESS:
            live_info = self.enricher.snapshot(
                feed,
                home_team_id=home_team.source_id(ProviderEnum.MLB_STATS.value),
                away_team_id=away_team.source_id(ProviderEnum.MLB_STATS.value),
            )

        home_runs = _batting_runs(home_item)
        away_runs = _batting_runs(away_item)
        if status == GameStatusEnum.SCHEDULED:
            home_runs = away_runs = None

        venue = _dict(_dict(home_item.get("team")).get("venue"))
        return Ok(
            Game(
                id=to_game_id(game_pk),
                sport=SportEnum.BASEBALL,
                starts_at=starts_at or self.now(),
                status=status,
                home=ScoreSide(team=home_team, score=home_runs),
                away=ScoreSide(team=away_team, score=away_runs),
                venue=as_text(venue.get("name")) or None,
                url=f"{GAMEDAY_URL}/{game_pk}",
                live_info=live_info,
            )
        )

    async def _map_game(
        self,
        item: ApiItem,
        *,
        team: Team | None = None,
        team_id: str | None = None,
        enrich: bool = True,
    ) -> Game:
        game_pk = item.get("gamePk")
        teams = item.get("teams")
        if game_pk is None or not isinstance(teams, dict):
            raise ProviderResponseError(f"MLB schedule entry missing gamePk/teams: {item!r}")

        home_item = _dict(teams.get("home"))
        away_item = _dict(teams.get("away"))
        home_upstream = _team_from_item(home_item.get("team"))
        away_upstream = _team_from_item(away_item.get("team"))
        home_upstream_id = home_upstream.source_id(ProviderEnum.MLB_STATS.value)
        away_upstream_id = away_upstream.source_id(ProviderEnum.MLB_STATS.value)

        home_team, away_team = home_upstream, away_upstream
        if team is not None and team_id is not None:
            if home_upstream_id == team_id:
                home_team = team
            elif away_upstream_id == team_id:
                away_team = team

        starts_at = parse_iso_datetime(item.get("gameDate"))
        if starts_at is None:
            raise ProviderResponseError(f"MLB game {game_pk} has no gameDate")

        status_item = _dict(item.get("status"))
        status = map_mlb_status(
            status_item.get("abstractGameState"), status_item.get("codedGameState")
        )

        live_info: LiveGameInfo | None = None
        if enrich and status == GameStatusEnum.IN_PROGRESS:
            live_info = await self.enricher.fetch_live_info(
                game_pk, home_team_id=home_upstream_id, away_team_id=away_upstream_id
            )

        venue = _dict(item.get("venue"))
        return Game(
            id=to_game_id(game_pk),
            sport=SportEnum.BASEBALL,
            starts_at=starts_at,
            status=status,
            home=ScoreSide(team=home_team, score=_score(home_item.get("score"))),
            away=ScoreSide(team=away_team, score=_score(away_item.get("score"))),
            venue=as_text(venue.get("name")) or None,
            url=f"{GAMEDAY_URL}/{game_pk}",
            live_info=live_info,
        )


def _batting_runs(side_item: ApiItem) -> int | None:
    batting = _dict(_dict(side_item.get("teamStats")).get("batting"))
    return _score(batting.get("runs"))
