from __future__ import annotations

from typing import Any

from team_pulse.domain.dates import iso_z
from team_pulse.domain.models import Game, LiveGameInfo, ScoreSide, Team
from team_pulse.domain.result import Err, ProviderResult


def _drop_none(d: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


def team_payload(team: Team) -> dict[str, Any]:
    return _drop_none(
        {
            "id": team.id,
            "name": team.name,
            "shortName": team.short_name,
            "sport": team.sport.value,
            "league": team.league,
            "sourceIds": dict(team.source_ids) or None,
        }
    )


def side_payload(side: ScoreSide) -> dict[str, Any]:
    return {"team": team_payload(side.team), "score": side.score}


def live_info_payload(info: LiveGameInfo) -> dict[str, Any]:
    pitcher = info.current_pitcher
    batter = info.current_batter
    return _drop_none(
        {
            "currentPitcher": (
                {"name": pitcher.name, "team": pitcher.side.value} if pitcher else None
            ),
            "currentBatter": (
                {
                    "name": batter.name,
                    "team": batter.side.value,
                    "inning": batter.inning,
                    "outs": batter.outs,
                    "balls": batter.balls,
                    "strikes": batter.strikes,
                }
                if batter
                else None
            ),
            "inning": info.inning,
            "inningState": info.inning_state,
        }
    )


def game_payload(game: Game) -> dict[str, Any]:
    return _drop_none(
        {
            "id": game.id,
            "sport": game.sport.value,
            "startsAtISO": iso_z(game.starts_at),
            "status": game.status.value,
            "home": side_payload(game.home),
            "away": side_payload(game.away),
            "venue": game.venue,
            "url": game.url,
            "liveInfo": live_info_payload(game.live_info) if game.live_info else None,
        }
    )


def result_payload(result: ProviderResult[Any]) -> dict[str, Any]:
    """JSON envelope: {"ok": true, "data": ...} or {"ok": false, "error": "..."}."""

    if isinstance(result, Err):
        return {"ok": False, "error": result.error}

    data = result.data
    if isinstance(data, Game):
        return {"ok": True, "data": game_payload(data)}
    return {"ok": True, "data": [game_payload(g) for g in data]}
