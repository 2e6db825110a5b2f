from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

from team_pulse.providers.base.client import BaseHttpClient
from team_pulse.providers.base.errors import ProviderResponseError

ApiItem = dict[str, Any]

MATCHES_MAX_AGE_S = 120.0
LIVE_MAX_AGE_S = 10.0


class FootballDataClient:
    """
    football-data.org v4.

    Works without a key at reduced access; `headers` carries X-Auth-Token when
    one is configured.
    """

    def __init__(self, *, http: BaseHttpClient, headers: Mapping[str, str] | None = None) -> None:
        self.http = http
        self.headers = dict(headers or {})

    async def get_team_matches(self, *, team_id: str, start: date, end: date) -> list[ApiItem]:
        payload = await self.http.get_json(
            f"/teams/{team_id}/matches",
            params={"dateFrom": start.isoformat(), "dateTo": end.isoformat()},
            headers=self.headers,
            max_age_s=MATCHES_MAX_AGE_S,
        )
        return _matches(payload)

    async def get_competition_matches(self, *, competition: str, day: date) -> list[ApiItem]:
        payload = await self.http.get_json(
            f"/competitions/{competition}/matches",
            params={"dateFrom": day.isoformat(), "dateTo": day.isoformat()},
            headers=self.headers,
            max_age_s=MATCHES_MAX_AGE_S,
        )
        return _matches(payload)

    async def get_match(self, match_id: str) -> ApiItem:
        return await self.http.get_json(
            f"/matches/{match_id}", headers=self.headers, max_age_s=LIVE_MAX_AGE_S
        )


def _matches(payload: ApiItem) -> list[ApiItem]:
    items = payload.get("matches", [])
    if not isinstance(items, list):
        raise ProviderResponseError(f"Expected 'matches' list, got: {type(items)}")
    return [i for i in items if isinstance(i, dict)]
