from __future__ import annotations

from datetime import date
from typing import Any

from team_pulse.providers.base.client import BaseHttpClient

ApiItem = dict[str, Any]

# Freshness windows (seconds) handed to the transport cache.
SCHEDULE_MAX_AGE_S = 60.0
SCORES_MAX_AGE_S = 30.0
LIVE_MAX_AGE_S = 10.0

MLB_SPORT_ID = 1


class MlbStatsClient:
    """Endpoints of statsapi.mlb.com used by the baseball adapter."""

    def __init__(self, *, http: BaseHttpClient) -> None:
        self.http = http

    async def get_team_schedule(self, *, team_id: str, start: date, end: date) -> ApiItem:
        return await self.http.get_json(
            "/schedule",
            params={
                "sportId": MLB_SPORT_ID,
                "teamId": team_id,
                "startDate": start.isoformat(),
                "endDate": end.isoformat(),
            },
            max_age_s=SCHEDULE_MAX_AGE_S,
        )

    async def get_schedule_for_date(self, day: date) -> ApiItem:
        return await self.http.get_json(
            "/schedule",
            params={"sportId": MLB_SPORT_ID, "date": day.isoformat()},
            max_age_s=SCORES_MAX_AGE_S,
        )

    async def get_live_feed(self, game_pk: str | int) -> ApiItem:
        return await self.http.get_json(f"/game/{game_pk}/feed/live", max_age_s=LIVE_MAX_AGE_S)

    async def get_boxscore(self, game_pk: str | int) -> ApiItem:
        return await self.http.get_json(f"/game/{game_pk}/boxscore", max_age_s=LIVE_MAX_AGE_S)


def iter_schedule_games(payload: ApiItem) -> list[ApiItem]:
    """Flatten `dates[].games[]` from a schedule response."""

    games: list[ApiItem] = []
    dates = payload.get("dates") or []
    if not isinstance(dates, list):
        return games

    for d in dates:
        if not isinstance(d, dict):
            continue
        day_games = d.get("games")
        if not isinstance(day_games, list):
            continue
        games.extend(g for g in day_games if isinstance(g, dict))
    return games
