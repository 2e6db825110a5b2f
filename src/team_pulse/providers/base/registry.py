from __future__ import annotations

from typing import Callable

from team_pulse.domain.enums import SportEnum

from .adapter import LeagueAdapter
from .errors import ProviderCapabilityError

AdapterFactory = Callable[[], LeagueAdapter]


class AdapterRegistry:
    """Dispatch table from sport to adapter; adapters are built lazily and reused."""

    def __init__(self) -> None:
        self._factories: dict[SportEnum, AdapterFactory] = {}
        self._instances: dict[SportEnum, LeagueAdapter] = {}

    def register(self, sport: SportEnum, factory: AdapterFactory) -> None:
        if sport in self._factories:
            raise ValueError(f"Duplicate adapter registration: {sport}")
        self._factories[sport] = factory

    def supports(self, sport: SportEnum) -> bool:
        return sport in self._factories

    def get(self, sport: SportEnum) -> LeagueAdapter:
        adapter = self._instances.get(sport)
        if adapter is not None:
            return adapter

        factory = self._factories.get(sport)
        if factory is None:
            raise ProviderCapabilityError(f"No adapter registered for sport={sport}")

        adapter = factory()
        self._instances[sport] = adapter
        return adapter
