from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from zoneinfo import ZoneInfo

import httpx

from team_pulse.core.config import Settings
from team_pulse.domain.enums import SportEnum
from team_pulse.providers.balldontlie.adapter import BalldontlieAdapter
from team_pulse.providers.balldontlie.client import BalldontlieClient
from team_pulse.providers.base.cache import ResponseCache
from team_pulse.providers.base.client import BaseHttpClient
from team_pulse.providers.base.registry import AdapterRegistry
from team_pulse.providers.espn.adapter import EspnNflAdapter
from team_pulse.providers.espn.client import EspnScoreboardClient
from team_pulse.providers.football_data.adapter import FootballDataAdapter
from team_pulse.providers.football_data.client import FootballDataClient
from team_pulse.providers.mlb_stats.adapter import MlbStatsAdapter
from team_pulse.providers.mlb_stats.client import MlbStatsClient
from team_pulse.providers.mlb_stats.live_feed import LiveFeedEnricher


@dataclass
class ProviderStack:
    """Registry plus the shared clients the resolver needs, with their HTTP pools."""

    registry: AdapterRegistry
    espn: EspnScoreboardClient
    http_clients: list[BaseHttpClient] = field(default_factory=list)

    async def aclose(self) -> None:
        for http in self.http_clients:
            await http.aclose()


def build_provider_stack(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    now: Callable[[], datetime] | None = None,
) -> ProviderStack:
    """
    Wire one adapter per sport.

    `transport` is passed to every HTTP client (tests use httpx.MockTransport).
    """
    tz = ZoneInfo(settings.local_timezone)
    clock = now or (lambda: datetime.now(tz))
    cache = ResponseCache() if settings.http_cache_enabled else None
    http_clients: list[BaseHttpClient] = []

    def make_http(base_url: str) -> BaseHttpClient:
        http = BaseHttpClient(
            base_url=base_url,
            timeout_s=settings.http_timeout_s,
            connect_timeout_s=settings.http_connect_timeout_s,
            cache=cache,
            transport=transport,
        )
        http_clients.append(http)
        return http

    mlb_client = MlbStatsClient(http=make_http(settings.mlb_stats_base_url))
    espn_client = EspnScoreboardClient(http=make_http(settings.espn_base_url))
    nba_client = BalldontlieClient(
        http=make_http(settings.balldontlie_base_url),
        headers=settings.balldontlie_headers(),
    )
    fd_client = FootballDataClient(
        http=make_http(settings.football_data_base_url),
        headers=settings.football_data_headers(),
    )

    registry = AdapterRegistry()
    registry.register(
        SportEnum.BASEBALL,
        factory=lambda: MlbStatsAdapter(
            client=mlb_client,
            enricher=LiveFeedEnricher(client=mlb_client, demo_enabled=settings.demo_live_data),
            demo_live_data=settings.demo_live_data,
            now=clock,
        ),
    )
    registry.register(
        SportEnum.BASKETBALL,
        factory=lambda: BalldontlieAdapter(client=nba_client, now=clock),
    )
    registry.register(
        SportEnum.SOCCER,
        factory=lambda: FootballDataAdapter(
            client=fd_client, competition=settings.football_data_competition, now=clock
        ),
    )
    registry.register(
        SportEnum.FOOTBALL,
        factory=lambda: EspnNflAdapter(client=espn_client, now=clock),
    )

    return ProviderStack(registry=registry, espn=espn_client, http_clients=http_clients)
