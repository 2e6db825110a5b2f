from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Any

import httpx
import pytest
from conftest import failing_handler, fixed_now, json_handler, make_http

from team_pulse.domain.dates import DateRange
from team_pulse.domain.enums import ErrorKind, GameStatusEnum
from team_pulse.domain.teams import LAKERS
from team_pulse.providers.balldontlie.adapter import BalldontlieAdapter, map_balldontlie_status
from team_pulse.providers.balldontlie.client import BalldontlieClient

WEEK = DateRange.lookahead(datetime(2025, 1, 10, tzinfo=UTC), days=6)


def _adapter(handler: Any, headers: dict[str, str] | None = None) -> BalldontlieAdapter:
    client = BalldontlieClient(http=make_http(handler), headers=headers)
    return BalldontlieAdapter(client=client, now=fixed_now)


def _game(game_id: int, status: str, home_score: int = 0, away_score: int = 0) -> dict[str, Any]:
    return {
        "id": game_id,
        "date": "2025-01-12",
        "datetime": "2025-01-13T03:30:00.000Z",
        "status": status,
        "home_team": {"id": 14, "full_name": "Los Angeles Lakers", "abbreviation": "LAL"},
        "visitor_team": {"id": 10, "full_name": "Golden State Warriors", "abbreviation": "GSW"},
        "home_team_score": home_score,
        "visitor_team_score": away_score,
    }


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Final", GameStatusEnum.FINAL),
        ("3rd Qtr", GameStatusEnum.IN_PROGRESS),
        ("Halftime", GameStatusEnum.IN_PROGRESS),
        ("OT", GameStatusEnum.IN_PROGRESS),
        ("2OT", GameStatusEnum.IN_PROGRESS),
        ("In Progress", GameStatusEnum.IN_PROGRESS),
        ("Postponed", GameStatusEnum.POSTPONED),
        ("Cancelled", GameStatusEnum.CANCELED),
        ("2025-01-13T03:30:00Z", GameStatusEnum.SCHEDULED),
        ("Not Started", GameStatusEnum.SCHEDULED),
        ("", GameStatusEnum.SCHEDULED),
        (None, GameStatusEnum.SCHEDULED),
        ({"long": "Final"}, GameStatusEnum.SCHEDULED),
    ],
)
def test_status_mapping(raw: Any, expected: GameStatusEnum) -> None:
    assert map_balldontlie_status(raw) == expected


@pytest.mark.asyncio
async def test_upcoming_games_query_and_mapping() -> None:
    calls: list[httpx.Request] = []
    routes = {
        "/games": {
            "data": [
                _game(1001, "2025-01-13T03:30:00Z"),
                _game(1002, "Final", home_score=118, away_score=109),
            ]
        }
    }
    adapter = _adapter(json_handler(routes, calls), headers={"Authorization": "secret"})

    result = await adapter.get_upcoming_games(LAKERS, WEEK)

    assert result.ok
    scheduled, final = result.data
    assert scheduled.id == "nba-1001"
    assert scheduled.starts_at == datetime(2025, 1, 13, 3, 30, tzinfo=UTC)
    assert scheduled.home.score is None and scheduled.away.score is None
    assert scheduled.home.team.short_name == "LAL"
    assert final.status == GameStatusEnum.FINAL
    assert (final.home.score, final.away.score) == (118, 109)

    request = calls[0]
    assert request.headers["Authorization"] == "secret"
    assert request.url.params["team_ids[]"] == "14"
    assert request.url.params["start_date"] == "2025-01-10"
    assert request.url.params["end_date"] == "2025-01-16"


@pytest.mark.asyncio
async def test_upstream_failure_uses_curated_fallback() -> None:
    result = await _adapter(failing_handler(401)).get_upcoming_games(LAKERS, WEEK)

    assert result.ok
    [game] = result.data
    assert game.id == "nba-fallback-lakers"
    assert game.status == GameStatusEnum.SCHEDULED
    assert game.home.team is LAKERS
    assert game.away.team.name == "Golden State Warriors"
    assert game.venue == "Crypto.com Arena"
    assert game.starts_at == datetime(2025, 6, 1, 19, 30, tzinfo=UTC)


@pytest.mark.asyncio
async def test_malformed_data_uses_fallback() -> None:
    result = await _adapter(json_handler({"/games": {"data": "oops"}})).get_upcoming_games(
        LAKERS, WEEK
    )
    assert result.ok
    assert [g.id for g in result.data] == ["nba-fallback-lakers"]


@pytest.mark.asyncio
async def test_unexpected_field_types_map_without_escaping() -> None:
    item = _game(8, "Final", home_score=101, away_score=99)
    item["status"] = {"long": "Final"}
    item["home_team"] = {"id": 14, "full_name": ["Los Angeles Lakers"], "abbreviation": 7}
    routes = {"/games": {"data": [item]}}

    result = await _adapter(json_handler(routes)).get_scores_by_date("2025-01-12")

    assert result.ok
    [game] = result.data
    assert game.status == GameStatusEnum.SCHEDULED
    assert game.home.team.name == "14"
    assert game.home.team.short_name == "14"
    assert game.away.team.short_name == "GSW"

    broken = {"/games": {"data": [{**item, "visitor_team": "GSW"}]}}
    upcoming = await _adapter(json_handler(broken)).get_upcoming_games(LAKERS, WEEK)
    assert [g.id for g in upcoming.data] == ["nba-fallback-lakers"]
    scores = await _adapter(json_handler(broken)).get_scores_by_date("2025-01-12")
    assert scores.error == "nba-scores-failed"


@pytest.mark.asyncio
async def test_scores_by_date() -> None:
    calls: list[httpx.Request] = []
    routes = {"/games": {"data": [_game(7, "4th Qtr", home_score=90, away_score=88)]}}

    result = await _adapter(json_handler(routes, calls)).get_scores_by_date("2025-01-12")

    assert result.ok
    [game] = result.data
    assert game.status == GameStatusEnum.IN_PROGRESS
    assert game.home.score == 90
    assert calls[0].url.params["dates[]"] == "2025-01-12"

    down = await _adapter(failing_handler()).get_scores_by_date("2025-01-12")
    assert not down.ok
    assert down.error == "nba-scores-failed"


@pytest.mark.asyncio
async def test_live_game_is_unsupported() -> None:
    calls: list[httpx.Request] = []
    result = await _adapter(json_handler({}, calls)).get_live_game("nba-1")

    assert not result.ok
    assert result.error == "nba-live-not-supported"
    assert result.kind == ErrorKind.UNSUPPORTED_OPERATION
    assert calls == []
