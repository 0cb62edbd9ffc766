from __future__ import annotations

import random
from collections.abc import Iterable
from typing import Self

import pytest
from django.core.cache import cache

from apps.core.exceptions import HeroNotFoundError, ProviderUnavailableError
from apps.heroes.conf import HeroAttributes, HeroData
from apps.heroes.datatype import HeroCombatStats


class StaticHeroProvider:
    """In-memory `HeroDataProvider` over a fixed roster; records every fetched id."""

    def __init__(self, heroes: Iterable[HeroAttributes], *, unavailable: Iterable[str] = ()) -> None:
        self._heroes = {hero.id: hero for hero in heroes}
        self._unavailable = set(unavailable)
        self.calls: list[str] = []

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc) -> None:
        return None

    async def fetch_hero(self, hero_id: str) -> HeroAttributes:
        hero_id = str(hero_id)
        self.calls.append(hero_id)
        if hero_id in self._unavailable:
            msg = f"Hero {hero_id!r} is temporarily unavailable."
            raise ProviderUnavailableError(msg)
        try:
            return self._heroes[hero_id]
        except KeyError as exc:
            raise HeroNotFoundError(hero_id) from exc

    async def search(self, name: str) -> list[HeroAttributes]:
        needle = name.casefold()
        return [hero for hero in self._heroes.values() if needle in hero.name.casefold()]


def make_attributes(hero_id: str, name: str | None = None, **stats) -> HeroAttributes:
    raw = {"strength": "50", "power": "50", "speed": "50", "intelligence": "50", "durability": "50"}
    raw.update(stats)
    return HeroAttributes(
        id=hero_id,
        name=name or f"Hero {hero_id}",
        image_url=f"https://img.example/{hero_id}.jpg",
        raw_power_stats=raw,
    )


def make_hero(hero_id: str, *, strength=10, power=10, speed=10, intelligence=10, durability=10) -> HeroData:
    return HeroData(
        id=hero_id,
        name=f"Hero {hero_id}",
        stats=HeroCombatStats(
            strength=strength,
            power=power,
            speed=speed,
            intelligence=intelligence,
            durability=durability,
        ),
    )


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def roster_heroes() -> list[HeroAttributes]:
    return [
        make_attributes("1", "A-Bomb", strength="100", power="24", speed="17", intelligence="38", durability="80"),
        make_attributes("70", "Batman", strength="26", power="47", speed="27", intelligence="100", durability="50"),
        make_attributes("149", "Captain America", strength="19", power="25", speed="38", intelligence="69"),
        make_attributes("644", "Superman", strength="100", power="94", speed="100", intelligence="94", durability="100"),
        make_attributes("720", "Wonder Woman", strength="100", power="100", speed="79", intelligence="88"),
    ]


@pytest.fixture
def static_provider(roster_heroes) -> StaticHeroProvider:
    return StaticHeroProvider(roster_heroes)
