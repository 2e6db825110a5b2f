from __future__ import annotations

from team_pulse.domain.enums import ProviderEnum, SportEnum
from team_pulse.domain.models import Team

DODGERS = Team(
    id="mlb-dodgers",
    name="Los Angeles Dodgers",
    short_name="Dodgers",
    sport=SportEnum.BASEBALL,
    league="MLB",
    source_ids={ProviderEnum.MLB_STATS.value: "119"},
)

LAKERS = Team(
    id="nba-lakers",
    name="Los Angeles Lakers",
    short_name="Lakers",
    sport=SportEnum.BASKETBALL,
    league="NBA",
    source_ids={ProviderEnum.BALLDONTLIE.value: "14"},
)

LIVERPOOL = Team(
    id="epl-liverpool",
    name="Liverpool FC",
    short_name="Liverpool",
    sport=SportEnum.SOCCER,
    league="Premier League",
    source_ids={ProviderEnum.FOOTBALL_DATA.value: "64"},
)


def _nfl(slug: str, name: str, short_name: str, espn_id: str) -> Team:
    return Team(
        id=f"nfl-{slug}",
        name=name,
        short_name=short_name,
        sport=SportEnum.FOOTBALL,
        league="NFL",
        source_ids={ProviderEnum.ESPN.value: espn_id},
    )


NFL_TEAMS: list[Team] = [
    _nfl("chiefs", "Kansas City Chiefs", "Chiefs", "12"),
    _nfl("49ers", "San Francisco 49ers", "49ers", "25"),
    _nfl("eagles", "Philadelphia Eagles", "Eagles", "21"),
    _nfl("bills", "Buffalo Bills", "Bills", "4"),
    _nfl("cowboys", "Dallas Cowboys", "Cowboys", "6"),
    _nfl("ravens", "Baltimore Ravens", "Ravens", "33"),
]

FEATURED_TEAMS: list[Team] = [DODGERS, LAKERS, LIVERPOOL, *NFL_TEAMS]


class TeamRegistry:
    """Lookup over the static featured-team table."""

    def __init__(self, teams: list[Team] | None = None) -> None:
        self._teams = list(FEATURED_TEAMS if teams is None else teams)
        self._by_id = {t.id: t for t in self._teams}
        if len(self._by_id) != len(self._teams):
            raise ValueError("Duplicate team id in registry")

    def get(self, team_id: str) -> Team | None:
        return self._by_id.get(team_id)

    def all(self) -> list[Team]:
        return list(self._teams)
