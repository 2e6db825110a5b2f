from __future__ import annotations

import logging
from typing import Any

from team_pulse.domain.enums import SideEnum
from team_pulse.domain.models import BatterInfo, LiveGameInfo, PitcherInfo
from team_pulse.providers.base.errors import ProviderError
from team_pulse.providers.mlb_stats.client import MlbStatsClient

logger = logging.getLogger(__name__)

ApiItem = dict[str, Any]

# Illustrative snapshot used when no real live data can be fetched.
DEMO_LIVE_INFO = LiveGameInfo(
    current_pitcher=PitcherInfo(name="Walker Buehler", side=SideEnum.HOME),
    current_batter=BatterInfo(
        name="Mookie Betts",
        side=SideEnum.AWAY,
        inning="7",
        outs=1,
        balls=2,
        strikes=1,
    ),
    inning="7",
    inning_state="Bottom",
)

BETWEEN_INNINGS = LiveGameInfo(inning="Between innings", inning_state="Break")


def _dict(value: Any) -> ApiItem:
    return value if isinstance(value, dict) else {}


def _int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _half_label(about: ApiItem) -> str | None:
    half = about.get("halfInning") or about.get("inningHalf")
    if not isinstance(half, str) or not half:
        return None
    return half.capitalize()


def _player_side(
    feed: ApiItem,
    player: ApiItem,
    *,
    home_team_id: str | None,
    away_team_id: str | None,
    default: SideEnum,
) -> SideEnum:
    players = _dict(_dict(feed.get("gameData")).get("players"))
    entry = _dict(players.get(f"ID{player.get('id')}"))
    team_id = _dict(entry.get("currentTeam")).get("id")

    if team_id is not None:
        if home_team_id is not None and str(team_id) == home_team_id:
            return SideEnum.HOME
        if away_team_id is not None and str(team_id) == away_team_id:
            return SideEnum.AWAY
    return default


def parse_live_feed(
    feed: ApiItem,
    *,
    home_team_id: str | None = None,
    away_team_id: str | None = None,
) -> LiveGameInfo | None:
    """
    Map a `/game/{pk}/feed/live` document into a LiveGameInfo snapshot.

    Player sides come from each player's current team id; when that is not
    available the inning half decides (top: home pitching, away batting).
    Returns None when nothing useful is present.
    """
    current_play = _dict(_dict(_dict(feed.get("liveData")).get("plays")).get("currentPlay"))

    if not current_play:
        status = _dict(_dict(feed.get("gameData")).get("status"))
        if status.get("detailedState") == "In Progress":
            return BETWEEN_INNINGS
        return None

    matchup = _dict(current_play.get("matchup"))
    about = _dict(current_play.get("about"))
    count = _dict(current_play.get("count"))

    half = _half_label(about)
    pitching_side = SideEnum.AWAY if half == "Bottom" else SideEnum.HOME
    batting_side = SideEnum.HOME if pitching_side == SideEnum.AWAY else SideEnum.AWAY

    pitcher_info: PitcherInfo | None = None
    pitcher = _dict(matchup.get("pitcher"))
    if isinstance(pitcher.get("fullName"), str):
        pitcher_info = PitcherInfo(
            name=pitcher["fullName"],
            side=_player_side(
                feed,
                pitcher,
                home_team_id=home_team_id,
                away_team_id=away_team_id,
                default=pitching_side,
            ),
        )

    inning = about.get("inning")
    inning_label = str(inning) if inning is not None else None

    batter_info: BatterInfo | None = None
    batter = _dict(matchup.get("batter"))
    if isinstance(batter.get("fullName"), str):
        batter_info = BatterInfo(
            name=batter["fullName"],
            side=_player_side(
                feed,
                batter,
                home_team_id=home_team_id,
                away_team_id=away_team_id,
                default=batting_side,
            ),
            inning=inning_label or "?",
            outs=_int(count.get("outs")),
            balls=_int(count.get("balls")),
            strikes=_int(count.get("strikes")),
        )

    info = LiveGameInfo(
        current_pitcher=pitcher_info,
        current_batter=batter_info,
        inning=inning_label,
        inning_state=half,
    )
    return None if info.is_empty() else info


class LiveFeedEnricher:
    """Best-effort live snapshot lookup for in-progress baseball games."""

    def __init__(self, *, client: MlbStatsClient, demo_enabled: bool = True) -> None:
        self.client = client
        self.demo_enabled = demo_enabled

    async def fetch_feed(self, game_pk: str | int) -> ApiItem | None:
        """The raw live feed, or None when it cannot be fetched."""

        try:
            return await self.client.get_live_feed(game_pk)
        except ProviderError as e:
            logger.debug("Live feed not available for game %s: %s", game_pk, e)
            return None

    def snapshot(
        self,
        feed: ApiItem | None,
        *,
        home_team_id: str | None = None,
        away_team_id: str | None = None,
    ) -> LiveGameInfo | None:
        info = None
        if feed is not None:
            info = parse_live_feed(feed, home_team_id=home_team_id, away_team_id=away_team_id)

        if info is None and self.demo_enabled:
            return DEMO_LIVE_INFO
        return info

    async def fetch_live_info(
        self,
        game_pk: str | int,
        *,
        home_team_id: str | None = None,
        away_team_id: str | None = None,
    ) -> LiveGameInfo | None:
        feed = await self.fetch_feed(game_pk)
        return self.snapshot(feed, home_team_id=home_team_id, away_team_id=away_team_id)
