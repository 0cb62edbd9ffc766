# apps/heroes/views.py
# ======================================================================
"""Async read-only proxy views over the hero-data provider."""

from __future__ import annotations

from typing import Any

import structlog
from django.http import HttpRequest

from apps.heroes.services.provider import get_provider
from apps.heroes.services.roster import HeroRoster
from common.views_utils import BaseAppView

from .conf import HERO_TIMEOUTS, RANDOM_HEROES_DEFAULT_COUNT, RANDOM_HEROES_MAX_COUNT

log = structlog.get_logger(__name__).bind(component="HeroesViews")


class HeroDetailView(BaseAppView):
    """GET /api/v1/heroes/{hero_id} – one normalized hero."""

    CACHE_TTL = HERO_TIMEOUTS["detail"]

    def _get_params(self, request: HttpRequest, **kwargs) -> dict[str, Any]:
        return {"hero_id": kwargs["hero_id"]}

    async def _produce_payload(self, p: dict[str, Any]) -> dict[str, Any]:
        async with get_provider() as provider:
            hero = await HeroRoster(provider).get_hero(p["hero_id"])
        return hero.to_json()


class HeroSearchView(BaseAppView):
    """GET /api/v1/heroes/search/{name} – heroes whose name matches."""

    CACHE_TTL = HERO_TIMEOUTS["search"]

    def _get_params(self, request: HttpRequest, **kwargs) -> dict[str, Any]:
        return {"name": kwargs["name"].strip()}

    async def _produce_payload(self, p: dict[str, Any]) -> list[dict[str, Any]]:
        async with get_provider() as provider:
            heroes = await HeroRoster(provider).search(p["name"])
        return [hero.to_json() for hero in heroes]


class RandomHeroesView(BaseAppView):
    """GET /api/v1/heroes/random?count=3 – a fresh random pick, never cached."""

    def _get_params(self, request: HttpRequest, **kwargs) -> dict[str, Any]:
        count = self.get_int_param(
            request,
            "count",
            default=RANDOM_HEROES_DEFAULT_COUNT,
            min_val=1,
            max_val=RANDOM_HEROES_MAX_COUNT,
        )
        return {"count": count}

    async def _produce_payload(self, p: dict[str, Any]) -> list[dict[str, Any]]:
        async with get_provider() as provider:
            heroes = await HeroRoster(provider).random_heroes(p["count"])
        return [hero.to_json() for hero in heroes]
