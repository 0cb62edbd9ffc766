# /apps/heroes/conf.py
# ================================================================================
"""Configuration, constants, and Pydantic models for the 'heroes' app."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Final, Self

from django.conf import settings
from pydantic import ConfigDict, Field

from apps.core.conf import CamelModel
from apps.heroes.datatype import HeroCombatStats

# ─── Stat normalization ────────────────────────────────────────────────────────
# Malformed stats are replaced by 5 + floor(random() * 70), i.e. uniform in [5, 75).
FALLBACK_STAT_MIN: Final[int] = 5
FALLBACK_STAT_SPAN: Final[int] = 70

# ─── Random hero selection ─────────────────────────────────────────────────────
MIN_HERO_ID: Final[int] = 1
DEFAULT_MAX_HERO_ID: Final[int] = 731
RANDOM_HEROES_DEFAULT_COUNT: Final[int] = 3
RANDOM_HEROES_MAX_COUNT: Final[int] = 10
DEFAULT_ATTEMPTS_PER_SLOT: Final[int] = 5

# ─── Cache Timeouts ────────────────────────────────────────────────────────────
HERO_TIMEOUTS: Final[dict[str, int]] = {
    "detail": 60 * 60,
    "search": 60 * 10,
}


# ─── Provider configuration ────────────────────────────────────────────────────
@dataclass(slots=True, frozen=True)
class RetryConfig:
    """Config for exponential-backoff retries."""

    max_retries: int = 2
    base_delay_s: float = 0.5
    max_delay_s: float = 5.0
    jitter_factor: float = 0.5

    def backoff(self, attempt: int) -> float:
        base = min(self.base_delay_s * (2**attempt), self.max_delay_s)
        jitter = base * self.jitter_factor * random.uniform(-1, 1)
        return max(0.0, base + jitter)


@dataclass(slots=True, frozen=True)
class SuperheroApiConfig:
    base_url: str
    api_key: str
    timeout_s: float
    max_hero_id: int = DEFAULT_MAX_HERO_ID
    retry: RetryConfig = field(default_factory=RetryConfig)

    @classmethod
    def from_settings(cls) -> Self:
        cfg = settings.SUPERHERO_API_CONFIG
        return cls(
            base_url=cfg.BASE_URL.rstrip("/"),
            api_key=cfg.API_KEY,
            timeout_s=cfg.TIMEOUT_S,
            max_hero_id=cfg.MAX_HERO_ID,
            retry=RetryConfig(**cfg.RETRY_CONFIG),
        )


# ─── Pydantic Validation Models ────────────────────────────────────────────────


class HeroAttributes(CamelModel):
    """
    Raw hero record as the provider returns it. Power stats are kept verbatim
    (strings, "null", numbers...) and only trusted after normalization.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, coerce_numbers_to_str=True)

    id: str
    name: str
    image_url: str | None = Field(default=None, alias="imageUrl")
    raw_power_stats: dict[str, str | int | None] = Field(default_factory=dict, alias="rawPowerStats")


class HeroData(CamelModel):
    """A hero ready for battle: identity plus normalized combat stats."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, coerce_numbers_to_str=True)

    id: str
    name: str
    image_url: str | None = Field(default=None, alias="imageUrl")
    stats: HeroCombatStats
