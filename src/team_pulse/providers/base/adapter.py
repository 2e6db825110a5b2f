from __future__ import annotations

from typing import Protocol

from team_pulse.domain.dates import DateRange
from team_pulse.domain.enums import SportEnum
from team_pulse.domain.models import Game, Team
from team_pulse.domain.result import ProviderResult


class LeagueAdapter(Protocol):
    """
    Orchestration depends on this, not on any HTTP client.

    Every coroutine resolves to Ok/Err; nothing raises past the adapter.
    `get_upcoming_games` degrades to fallback data instead of failing.
    """

    name: str
    sport: SportEnum

    def get_team_identifier(self, team: Team) -> str | None:
        """Upstream id for `team` on this provider, if it has one."""
        ...

    async def get_upcoming_games(
        self, team: Team, date_range: DateRange
    ) -> ProviderResult[list[Game]]: ...

    async def get_scores_by_date(self, date_iso: str) -> ProviderResult[list[Game]]: ...

    async def get_live_game(self, game_id: str) -> ProviderResult[Game]: ...
