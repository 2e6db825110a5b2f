from __future__ import annotations

from enum import Enum, StrEnum


class ProviderEnum(StrEnum):
    MLB_STATS = "mlb"
    BALLDONTLIE = "balldontlie"
    FOOTBALL_DATA = "football_data"
    ESPN = "espn"


class SportEnum(StrEnum):
    BASEBALL = "baseball"
    BASKETBALL = "basketball"
    SOCCER = "soccer"
    FOOTBALL = "football"

    @property
    def league_prefix(self) -> str:
        return _LEAGUE_PREFIX[self]

    @classmethod
    def from_league(cls, value: str) -> SportEnum | None:
        """Accept a league prefix (mlb, nba, epl, nfl) or a sport name."""
        v = value.strip().lower()
        for sport, prefix in _LEAGUE_PREFIX.items():
            if v in (prefix, sport.value):
                return sport
        return None


_LEAGUE_PREFIX: dict[SportEnum, str] = {
    SportEnum.BASEBALL: "mlb",
    SportEnum.BASKETBALL: "nba",
    SportEnum.SOCCER: "epl",
    SportEnum.FOOTBALL: "nfl",
}


class GameStatusEnum(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    FINAL = "final"
    POSTPONED = "postponed"
    CANCELED = "canceled"


class SideEnum(str, Enum):
    HOME = "Home"
    AWAY = "Away"


class ErrorKind(str, Enum):
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"
    MISSING_IDENTIFIER = "MISSING_IDENTIFIER"
    UNKNOWN_TEAM = "UNKNOWN_TEAM"
    NOT_FOUND = "NOT_FOUND"
    INVALID_REQUEST = "INVALID_REQUEST"
