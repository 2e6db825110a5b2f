from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

from team_pulse.providers.base.client import BaseHttpClient
from team_pulse.providers.base.errors import ProviderResponseError

ApiItem = dict[str, Any]

SCHEDULE_MAX_AGE_S = 60.0
SCORES_MAX_AGE_S = 30.0

# The games endpoint is paginated; one generous page covers the windows we ask for.
PAGE_SIZE = 100


class BalldontlieClient:
    def __init__(self, *, http: BaseHttpClient, headers: Mapping[str, str] | None = None) -> None:
        self.http = http
        self.headers = dict(headers or {})

    async def get_team_games(self, *, team_id: str, start: date, end: date) -> list[ApiItem]:
        payload = await self.http.get_json(
            "/games",
            params={
                "team_ids[]": team_id,
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "per_page": PAGE_SIZE,
            },
            headers=self.headers,
            max_age_s=SCHEDULE_MAX_AGE_S,
        )
        return _data_items(payload)

    async def get_games_on(self, day: date) -> list[ApiItem]:
        payload = await self.http.get_json(
            "/games",
            params={"dates[]": day.isoformat(), "per_page": PAGE_SIZE},
            headers=self.headers,
            max_age_s=SCORES_MAX_AGE_S,
        )
        return _data_items(payload)


def _data_items(payload: ApiItem) -> list[ApiItem]:
    items = payload.get("data", [])
    if not isinstance(items, list):
        raise ProviderResponseError(f"Expected 'data' list, got: {type(items)}")
    return [i for i in items if isinstance(i, dict)]
