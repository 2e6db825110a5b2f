from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import Any

import httpx
import pytest
from conftest import FIXED_NOW, exploding_handler, failing_handler, fixed_now, json_handler, make_http

from team_pulse.domain.dates import DateRange
from team_pulse.domain.enums import ErrorKind, GameStatusEnum, SportEnum
from team_pulse.domain.models import Team
from team_pulse.domain.teams import DODGERS
from team_pulse.providers.mlb_stats.adapter import (
    MlbStatsAdapter,
    build_fallback_games,
    map_mlb_status,
)
from team_pulse.providers.mlb_stats.client import MlbStatsClient
from team_pulse.providers.mlb_stats.live_feed import DEMO_LIVE_INFO, LiveFeedEnricher


def _adapter(handler: Any, *, demo_live_data: bool = True) -> MlbStatsAdapter:
    client = MlbStatsClient(http=make_http(handler))
    return MlbStatsAdapter(
        client=client,
        enricher=LiveFeedEnricher(client=client, demo_enabled=demo_live_data),
        demo_live_data=demo_live_data,
        now=fixed_now,
    )


def _schedule_game(
    game_pk: int,
    *,
    home: tuple[int, str, str],
    away: tuple[int, str, str],
    abstract: str = "Preview",
    coded: str = "S",
    home_score: int | None = None,
    away_score: int | None = None,
) -> dict[str, Any]:
    def side(team: tuple[int, str, str], score: int | None) -> dict[str, Any]:
        out: dict[str, Any] = {"team": {"id": team[0], "name": team[1], "teamName": team[2]}}
        if score is not None:
            out["score"] = score
        return out

    return {
        "gamePk": game_pk,
        "gameDate": "2025-06-01T02:10:00Z",
        "status": {"abstractGameState": abstract, "codedGameState": coded},
        "teams": {"home": side(home, home_score), "away": side(away, away_score)},
        "venue": {"name": "Dodger Stadium"},
    }


LAD = (119, "Los Angeles Dodgers", "Dodgers")
SFG = (137, "San Francisco Giants", "Giants")

TODAY = DateRange.for_day(date(2025, 6, 1))


@pytest.mark.asyncio
async def test_upcoming_games_place_requested_team_by_id() -> None:
    calls: list[httpx.Request] = []
    routes = {"/schedule": {"dates": [{"games": [_schedule_game(745001, home=LAD, away=SFG)]}]}}
    adapter = _adapter(json_handler(routes, calls))

    result = await adapter.get_upcoming_games(DODGERS, TODAY)

    assert result.ok
    [game] = result.data
    assert game.id == "mlb-745001"
    assert game.home.team is DODGERS
    assert game.away.team.name == "San Francisco Giants"
    assert game.away.team.short_name == "Giants"
    assert game.status == GameStatusEnum.SCHEDULED
    assert game.live_info is None
    assert game.venue == "Dodger Stadium"
    assert game.url == "https://www.mlb.com/gameday/745001"

    params = calls[0].url.params
    assert params["teamId"] == "119"
    assert params["startDate"] == "2025-06-01"
    assert params["endDate"] == "2025-06-01"


@pytest.mark.asyncio
async def test_upcoming_games_away_side_and_empty_schedule() -> None:
    routes = {
        "/schedule": {"dates": [{"games": [_schedule_game(9, home=SFG, away=LAD)]}, {"games": []}]}
    }
    result = await _adapter(json_handler(routes)).get_upcoming_games(DODGERS, TODAY)
    assert result.ok
    assert result.data[0].away.team is DODGERS

    empty = await _adapter(json_handler({"/schedule": {"dates": []}})).get_upcoming_games(
        DODGERS, TODAY
    )
    assert empty.ok
    assert empty.data == []


@pytest.mark.asyncio
async def test_in_progress_games_are_enriched_from_live_feed() -> None:
    live = _schedule_game(
        745002, home=LAD, away=SFG, abstract="Live", coded="I", home_score=4, away_score=1
    )
    feed = {
        "liveData": {
            "plays": {
                "currentPlay": {
                    "matchup": {
                        "pitcher": {"id": 1, "fullName": "Logan Webb"},
                        "batter": {"id": 2, "fullName": "Freddie Freeman"},
                    },
                    "about": {"inning": 3, "halfInning": "bottom"},
                    "count": {"outs": 2, "balls": 1, "strikes": 2},
                }
            }
        }
    }
    routes = {"/schedule": {"dates": [{"games": [live]}]}, "/game/745002/feed/live": feed}

    result = await _adapter(json_handler(routes)).get_upcoming_games(DODGERS, TODAY)

    [game] = result.data
    assert game.status == GameStatusEnum.IN_PROGRESS
    assert (game.home.score, game.away.score) == (4, 1)
    assert game.live_info is not None
    assert game.live_info.current_pitcher.name == "Logan Webb"
    assert game.live_info.current_batter.name == "Freddie Freeman"
    assert game.live_info.inning == "3"
    assert game.live_info.inning_state == "Bottom"


@pytest.mark.asyncio
async def test_missing_identifier_uses_demo_fallback() -> None:
    calls: list[httpx.Request] = []
    team = Team(id="mlb-mystery", name="Mystery Club", short_name="Mystery", sport=SportEnum.BASEBALL)

    result = await _adapter(json_handler({}, calls)).get_upcoming_games(team, TODAY)

    assert calls == []
    assert result.ok
    [game] = result.data
    assert game.id == "mlb-demo-live"
    assert game.status == GameStatusEnum.IN_PROGRESS
    assert game.starts_at == FIXED_NOW - timedelta(hours=2)
    assert game.live_info == DEMO_LIVE_INFO
    assert game.away.team.name == "TBD"
    assert game.home.team is team


@pytest.mark.asyncio
@pytest.mark.parametrize("handler", [failing_handler(503), exploding_handler])
async def test_upstream_failure_uses_fallback(handler: Any) -> None:
    result = await _adapter(handler).get_upcoming_games(DODGERS, TODAY)
    assert result.ok
    assert [g.id for g in result.data] == ["mlb-demo-live"]


def test_fallback_without_demo_is_a_scheduled_evening_game() -> None:
    [game] = build_fallback_games(DODGERS, FIXED_NOW, demo_live=False)
    assert game.id == "mlb-fallback-dodgers"
    assert game.status == GameStatusEnum.SCHEDULED
    assert game.starts_at == datetime(2025, 6, 1, 19, 10, tzinfo=UTC)
    assert game.live_info is None
    assert game.venue == "Dodger Stadium"


@pytest.mark.asyncio
async def test_upcoming_games_are_repeatable() -> None:
    routes = {"/schedule": {"dates": [{"games": [_schedule_game(745001, home=LAD, away=SFG)]}]}}
    adapter = _adapter(json_handler(routes))
    first = await adapter.get_upcoming_games(DODGERS, TODAY)
    second = await adapter.get_upcoming_games(DODGERS, TODAY)
    assert first.data == second.data


@pytest.mark.asyncio
async def test_scores_by_date_maps_all_games_without_enrichment() -> None:
    calls: list[httpx.Request] = []
    routes = {
        "/schedule": {
            "dates": [
                {
                    "games": [
                        _schedule_game(
                            1, home=LAD, away=SFG, abstract="Final", coded="F",
                            home_score=5, away_score=3,
                        ),
                        _schedule_game(2, home=SFG, away=LAD, abstract="Live", coded="I"),
                    ]
                }
            ]
        }
    }
    result = await _adapter(json_handler(routes, calls)).get_scores_by_date("2025-06-01")

    assert result.ok
    final, live = result.data
    assert final.status == GameStatusEnum.FINAL
    assert (final.home.score, final.away.score) == (5, 3)
    assert live.status == GameStatusEnum.IN_PROGRESS
    assert live.live_info is None
    assert [c.url.path for c in calls] == ["/schedule"]
    assert calls[0].url.params["date"] == "2025-06-01"


@pytest.mark.asyncio
async def test_scores_by_date_errors() -> None:
    bad = await _adapter(json_handler({})).get_scores_by_date("yesterday")
    assert not bad.ok
    assert bad.error == "invalid-date"
    assert bad.kind == ErrorKind.INVALID_REQUEST

    down = await _adapter(failing_handler()).get_scores_by_date("2025-06-01")
    assert not down.ok
    assert down.error == "mlb-scores-failed"
    assert down.kind == ErrorKind.UPSTREAM_UNAVAILABLE


BOX = {
    "teams": {
        "home": {
            "team": {"id": 119, "name": "Los Angeles Dodgers", "venue": {"name": "Dodger Stadium"}},
            "teamStats": {"batting": {"runs": 6}},
        },
        "away": {
            "team": {"id": 137, "name": "San Francisco Giants"},
            "teamStats": {"batting": {"runs": 2}},
        },
    }
}


def _feed(abstract: str, coded: str, **live_data: Any) -> dict[str, Any]:
    return {
        "gameData": {
            "status": {"abstractGameState": abstract, "codedGameState": coded},
            "datetime": {"dateTime": "2025-06-01T02:10:00Z"},
        },
        "liveData": live_data,
    }


@pytest.mark.asyncio
async def test_live_game_from_boxscore() -> None:
    play = {
        "matchup": {"pitcher": {"id": 1, "fullName": "Logan Webb"}},
        "about": {"inning": 7, "halfInning": "top"},
        "count": {"outs": 1},
    }
    routes = {
        "/game/745001/boxscore": BOX,
        "/game/745001/feed/live": _feed("Live", "I", plays={"currentPlay": play}),
    }

    result = await _adapter(json_handler(routes), demo_live_data=False).get_live_game("mlb-745001")

    assert result.ok
    game = result.data
    assert game.id == "mlb-745001"
    assert game.status == GameStatusEnum.IN_PROGRESS
    assert (game.home.score, game.away.score) == (6, 2)
    assert game.venue == "Dodger Stadium"
    assert game.starts_at == datetime(2025, 6, 1, 2, 10, tzinfo=UTC)
    assert game.live_info is not None
    assert game.live_info.inning == "7"
    assert game.live_info.inning_state == "Top"


@pytest.mark.asyncio
async def test_live_game_that_has_ended_is_final() -> None:
    routes = {"/game/745001/boxscore": BOX, "/game/745001/feed/live": _feed("Final", "F")}

    result = await _adapter(json_handler(routes)).get_live_game("mlb-745001")

    assert result.ok
    game = result.data
    assert game.status == GameStatusEnum.FINAL
    assert (game.home.score, game.away.score) == (6, 2)
    assert game.starts_at == datetime(2025, 6, 1, 2, 10, tzinfo=UTC)
    assert game.live_info is None


@pytest.mark.asyncio
async def test_live_game_without_feed_is_scheduled() -> None:
    routes = {"/game/745001/boxscore": BOX, "/game/745001/feed/live": 503}

    result = await _adapter(json_handler(routes)).get_live_game("mlb-745001")

    assert result.ok
    game = result.data
    assert game.status == GameStatusEnum.SCHEDULED
    assert (game.home.score, game.away.score) == (None, None)
    assert game.starts_at == FIXED_NOW
    assert game.live_info is None


@pytest.mark.parametrize(
    ("abstract", "coded", "expected"),
    [
        ("Final", "D", GameStatusEnum.POSTPONED),
        ("Final", "C", GameStatusEnum.CANCELED),
        (None, "O", GameStatusEnum.FINAL),
        ("Final", "F", GameStatusEnum.FINAL),
        ("Live", "I", GameStatusEnum.IN_PROGRESS),
        ("Live", "M", GameStatusEnum.IN_PROGRESS),
        ("Preview", "S", GameStatusEnum.SCHEDULED),
        ("Weird", "Z", GameStatusEnum.SCHEDULED),
        (None, None, GameStatusEnum.SCHEDULED),
        (5, 7, GameStatusEnum.SCHEDULED),
    ],
)
def test_status_mapping(abstract: Any, coded: Any, expected: GameStatusEnum) -> None:
    assert map_mlb_status(abstract, coded) == expected


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"dates": [{"games": 5}]},
        {"dates": [{"games": [{"gamePk": 1, "gameDate": "2025-06-01T02:10:00Z", "teams": "x"}]}]},
        {
            "dates": [
                {
                    "games": [
                        {
                            "gamePk": 1,
                            "gameDate": "2025-06-01T02:10:00Z",
                            "status": "Final",
                            "teams": {
                                "home": {"team": {"id": 119, "name": 42}},
                                "away": {"team": {"id": 137, "name": ["Giants"]}},
                            },
                        }
                    ]
                }
            ]
        },
    ],
)
async def test_malformed_schedule_never_escapes_the_adapter(body: dict[str, Any]) -> None:
    result = await _adapter(json_handler({"/schedule": body})).get_upcoming_games(DODGERS, TODAY)
    assert result.ok
    assert all(g.sport == SportEnum.BASEBALL for g in result.data)

    scores = await _adapter(json_handler({"/schedule": body})).get_scores_by_date("2025-06-01")
    assert scores.ok or scores.error == "mlb-scores-failed"

@pytest.mark.asyncio
async def test_live_game_failure_is_stable_error() -> None:
    result = await _adapter(failing_handler(500)).get_live_game("mlb-1")
    assert not result.ok
    assert result.error == "mlb-live-failed"

    malformed = await _adapter(json_handler({"/game/1/boxscore": {"teams": "nope"}})).get_live_game("1")
    assert not malformed.ok
    assert malformed.error == "mlb-live-failed"
