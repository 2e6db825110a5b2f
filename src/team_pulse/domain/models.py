from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime

from team_pulse.domain.enums import GameStatusEnum, SideEnum, SportEnum


@dataclass(frozen=True)
class Team:
    """
    A team as seen by this system.

    `id` is process-local and namespaced by league prefix ("mlb-dodgers").
    `source_ids` maps an upstream provider name to that provider's own id.
    """

    id: str
    name: str
    short_name: str
    sport: SportEnum
    league: str | None = None
    source_ids: Mapping[str, str] = field(default_factory=dict)

    def source_id(self, provider: str) -> str | None:
        value = self.source_ids.get(provider)
        return value or None


@dataclass(frozen=True)
class ScoreSide:
    team: Team
    # None means not started / unknown, never zero.
    score: int | None = None


@dataclass(frozen=True)
class PitcherInfo:
    name: str
    side: SideEnum


@dataclass(frozen=True)
class BatterInfo:
    name: str
    side: SideEnum
    inning: str
    outs: int = 0
    balls: int = 0
    strikes: int = 0


@dataclass(frozen=True)
class LiveGameInfo:
    current_pitcher: PitcherInfo | None = None
    current_batter: BatterInfo | None = None
    inning: str | None = None
    inning_state: str | None = None

    def is_empty(self) -> bool:
        return (
            self.current_pitcher is None
            and self.current_batter is None
            and self.inning is None
            and self.inning_state is None
        )


@dataclass(frozen=True)
class Game:
    id: str
    sport: SportEnum
    starts_at: datetime
    status: GameStatusEnum
    home: ScoreSide
    away: ScoreSide
    venue: str | None = None
    url: str | None = None
    live_info: LiveGameInfo | None = None

    def __post_init__(self) -> None:
        if self.live_info is not None and self.live_info.is_empty():
            object.__setattr__(self, "live_info", None)

        if self.live_info is not None and self.status != GameStatusEnum.IN_PROGRESS:
            raise ValueError(
                f"Game {self.id} has status={self.status.value} but carries live info"
            )

    def has_tbd_side(self) -> bool:
        return self.home.team.short_name == TBD or self.away.team.short_name == TBD


TBD = "TBD"
