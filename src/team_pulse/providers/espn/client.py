from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date
from typing import Any

from team_pulse.providers.base.client import BaseHttpClient

ApiItem = dict[str, Any]

SCOREBOARD_MAX_AGE_S = 120.0
SCORES_MAX_AGE_S = 60.0

NFL_PATH = "football/nfl"
MLB_PATH = "baseball/mlb"


def espn_day(day: date) -> str:
    return day.strftime("%Y%m%d")


@dataclass(frozen=True)
class ScoreboardMatchup:
    """One event from a scoreboard with its home/away competitors resolved."""

    event: ApiItem
    competition: ApiItem
    home: ApiItem
    away: ApiItem

    @property
    def event_id(self) -> str | None:
        value = self.event.get("id")
        return str(value) if value is not None else None


class EspnScoreboardClient:
    """ESPN public scoreboard (site.api.espn.com); unauthenticated."""

    def __init__(self, *, http: BaseHttpClient) -> None:
        self.http = http

    async def get_scoreboard(
        self, sport_path: str, day: date, *, max_age_s: float = SCOREBOARD_MAX_AGE_S
    ) -> ApiItem:
        return await self.http.get_json(
            f"/{sport_path}/scoreboard",
            params={"dates": espn_day(day)},
            max_age_s=max_age_s,
        )


def iter_matchups(payload: ApiItem) -> Iterator[ScoreboardMatchup]:
    """Yield events whose first competition has both a home and an away competitor."""

    events = payload.get("events") or []
    if not isinstance(events, list):
        return

    for event in events:
        if not isinstance(event, dict):
            continue
        competitions = event.get("competitions") or []
        if not isinstance(competitions, list) or not competitions:
            continue
        comp = competitions[0]
        if not isinstance(comp, dict):
            continue

        competitors = comp.get("competitors")
        if not isinstance(competitors, list):
            continue

        home = away = None
        for c in competitors:
            if not isinstance(c, dict) or not isinstance(c.get("team"), dict):
                continue
            if c.get("homeAway") == "home":
                home = c
            elif c.get("homeAway") == "away":
                away = c

        if home is None or away is None:
            continue
        yield ScoreboardMatchup(event=event, competition=comp, home=home, away=away)
