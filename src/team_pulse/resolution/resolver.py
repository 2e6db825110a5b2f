from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo

import httpx

from team_pulse.core.config import Settings
from team_pulse.domain.dates import DateRange, parse_day
from team_pulse.domain.enums import ErrorKind, SportEnum
from team_pulse.domain.models import Game, Team
from team_pulse.domain.result import Err, Ok, ProviderResult
from team_pulse.domain.teams import TeamRegistry
from team_pulse.providers.base.adapter import LeagueAdapter
from team_pulse.providers.base.registry import AdapterRegistry
from team_pulse.providers.espn.client import EspnScoreboardClient
from team_pulse.providers.setup import ProviderStack, build_provider_stack
from team_pulse.resolution.stitch import stitch_tbd_opponent

logger = logging.getLogger(__name__)


class GameResolver:
    """
    Entry points for callers (CLI, route handlers).

    Picks the adapter for a team's sport, applies the today / lookahead policy
    and, for baseball, the secondary-source opponent stitch.
    """

    def __init__(
        self,
        *,
        registry: AdapterRegistry,
        espn: EspnScoreboardClient,
        teams: TeamRegistry | None = None,
        lookahead_days: int = 30,
        tz: tzinfo | None = None,
        now: Callable[[], datetime] | None = None,
        stack: ProviderStack | None = None,
    ) -> None:
        self.registry = registry
        self.espn = espn
        self.teams = teams or TeamRegistry()
        self.lookahead_days = lookahead_days
        self.tz = tz or ZoneInfo("UTC")
        self._now = now or (lambda: datetime.now(self.tz))
        self._stack = stack

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        now: Callable[[], datetime] | None = None,
        teams: TeamRegistry | None = None,
    ) -> GameResolver:
        tz = ZoneInfo(settings.local_timezone)
        clock = now or (lambda: datetime.now(tz))
        stack = build_provider_stack(settings, transport=transport, now=clock)
        return cls(
            registry=stack.registry,
            espn=stack.espn,
            teams=teams,
            lookahead_days=settings.lookahead_days,
            tz=tz,
            now=clock,
            stack=stack,
        )

    async def aclose(self) -> None:
        if self._stack is not None:
            await self._stack.aclose()

    async def __aenter__(self) -> GameResolver:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def list_teams(self) -> list[Team]:
        return self.teams.all()

    async def resolve_games_for_team(self, team_id: str | None) -> ProviderResult[list[Game]]:
        if not team_id or not team_id.strip():
            return Err("missing-team-id", ErrorKind.INVALID_REQUEST)

        team = self.teams.get(team_id.strip())
        if team is None:
            return Err("unknown-team", ErrorKind.UNKNOWN_TEAM)

        if not self.registry.supports(team.sport):
            return Err("unsupported-sport", ErrorKind.UNSUPPORTED_OPERATION)
        adapter = self.registry.get(team.sport)

        now = self._now()
        result = await adapter.get_upcoming_games(team, DateRange.for_day(now.date(), self.tz))
        if result.ok and not result.data:
            window = DateRange.lookahead(now, days=self.lookahead_days)
            logger.info(
                "No games today for team=%s; looking ahead %s..%s",
                team.id,
                window.from_iso,
                window.to_iso,
            )
            result = await adapter.get_upcoming_games(team, window)

        if team.sport == SportEnum.BASEBALL and result.ok and result.data:
            games = await stitch_tbd_opponent(result.data, team, espn=self.espn, tz=self.tz)
            result = Ok(games)

        return result

    async def resolve_scores_for_date(self, league: str, date_iso: str) -> ProviderResult[list[Game]]:
        adapter = self._adapter_for_league(league)
        if isinstance(adapter, Err):
            return adapter

        try:
            day = parse_day(date_iso)
        except (AttributeError, ValueError):
            return Err("invalid-date", ErrorKind.INVALID_REQUEST)

        return await adapter.get_scores_by_date(day.isoformat())

    async def resolve_live_game(self, league: str, game_id: str) -> ProviderResult[Game]:
        adapter = self._adapter_for_league(league)
        if isinstance(adapter, Err):
            return adapter

        if not game_id or not game_id.strip():
            return Err("missing-game-id", ErrorKind.INVALID_REQUEST)

        return await adapter.get_live_game(game_id.strip())

    def _adapter_for_league(self, league: str) -> LeagueAdapter | Err:
        sport = SportEnum.from_league(league or "")
        if sport is None or not self.registry.supports(sport):
            return Err("unknown-league", ErrorKind.NOT_FOUND)
        return self.registry.get(sport)
