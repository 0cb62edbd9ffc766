# apps/heroes/services/roster.py
# ==============================================================================
"""
Battle-ready hero lookups on top of a `HeroDataProvider`.

Every hero leaving this module has gone through the normalizer, so callers
never see the provider's raw, untrusted power stats.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

import structlog
from django.conf import settings

from apps.core.exceptions import HeroNotFoundError, InvalidBattleRequest, OpponentAssemblyError, ProviderUnavailableError
from apps.heroes.conf import (
    DEFAULT_ATTEMPTS_PER_SLOT,
    MIN_HERO_ID,
    RANDOM_HEROES_MAX_COUNT,
    HeroAttributes,
    HeroData,
    SuperheroApiConfig,
)
from apps.heroes.services.normalizer import HeroStatsNormalizer

if TYPE_CHECKING:
    from collections.abc import Sequence

    from apps.heroes.services.provider import HeroDataProvider

log = structlog.get_logger(__name__).bind(component="HeroRoster")


class HeroRoster:
    """Fetches heroes by id, by name, or at random, and normalizes their stats."""

    def __init__(
        self,
        provider: HeroDataProvider,
        *,
        normalizer: HeroStatsNormalizer | None = None,
        rng: random.Random | None = None,
        max_hero_id: int | None = None,
        attempts_per_slot: int | None = None,
    ) -> None:
        self._provider = provider
        self._rng = rng or random.Random()
        self._normalizer = normalizer or HeroStatsNormalizer(self._rng)
        self._max_hero_id = max_hero_id or SuperheroApiConfig.from_settings().max_hero_id
        self._attempts_per_slot = attempts_per_slot or getattr(
            settings,
            "RANDOM_HERO_ATTEMPTS_PER_SLOT",
            DEFAULT_ATTEMPTS_PER_SLOT,
        )

    def to_hero_data(self, attrs: HeroAttributes) -> HeroData:
        return HeroData(
            id=attrs.id,
            name=attrs.name,
            image_url=attrs.image_url,
            stats=self._normalizer.normalize(attrs.raw_power_stats),
        )

    async def get_hero(self, hero_id: str) -> HeroData:
        return self.to_hero_data(await self._provider.fetch_hero(str(hero_id)))

    async def fetch_team(self, hero_ids: Sequence[str]) -> list[HeroData]:
        """Fetch heroes one by one, preserving the caller's order. Failures propagate."""
        return [await self.get_hero(hero_id) for hero_id in hero_ids]

    async def search(self, name: str) -> list[HeroData]:
        return [self.to_hero_data(attrs) for attrs in await self._provider.search(name)]

    async def random_team(self, size: int) -> list[HeroData]:
        """
        Draw `size` heroes from random ids.

        Failed draws are retried with a fresh id, but the whole call gets at
        most `size * attempts_per_slot` draws before giving up.
        """
        if size < 1:
            msg = "A random team needs at least one hero."
            raise InvalidBattleRequest(msg)

        budget = size * self._attempts_per_slot
        team: list[HeroData] = []
        attempts = 0
        while len(team) < size and attempts < budget:
            attempts += 1
            hero_id = str(self._rng.randint(MIN_HERO_ID, self._max_hero_id))
            try:
                team.append(await self.get_hero(hero_id))
            except (HeroNotFoundError, ProviderUnavailableError) as exc:
                log.warning("random hero draw failed", hero_id=hero_id, attempt=attempts, budget=budget, kind=exc.kind)

        if len(team) < size:
            msg = f"Could not assemble {size} random heroes within {budget} attempts (got {len(team)})."
            raise OpponentAssemblyError(msg)

        log.debug("random team assembled", size=size, attempts=attempts, heroes=[h.id for h in team])
        return team

    async def random_heroes(self, count: int) -> list[HeroData]:
        if not 1 <= count <= RANDOM_HEROES_MAX_COUNT:
            msg = f"count must be between 1 and {RANDOM_HEROES_MAX_COUNT}."
            raise InvalidBattleRequest(msg)
        return await self.random_team(count)
