# apps/heroes/services/normalizer.py
# ==============================================================================
"""
Turns the provider's raw power stats into validated `HeroCombatStats`.

The upstream API is unreliable: fields go missing, come back as "null", or hold
garbage. Rather than failing a battle over it, each bad field is replaced by a
plausible random value drawn from an injected RNG.
"""

from __future__ import annotations

import math
import random
import re
from typing import TYPE_CHECKING, Any, Protocol

import structlog

from apps.core.exceptions import DataQualityError
from apps.heroes.conf import FALLBACK_STAT_MIN, FALLBACK_STAT_SPAN
from apps.heroes.datatype import STAT_FIELDS, HeroCombatStats

if TYPE_CHECKING:
    from collections.abc import Mapping

log = structlog.get_logger(__name__).bind(component="HeroStatsNormalizer")

_INT_RE = re.compile(r"[+-]?\d+")


class RandomSource(Protocol):
    """Anything with a `random()` returning a float in [0.0, 1.0)."""

    def random(self) -> float: ...


def parse_stat(value: Any) -> int:
    """Parse one raw stat as a non-negative base-10 integer or raise DataQualityError."""
    if value is None:
        msg = "missing value"
        raise DataQualityError(msg)
    if isinstance(value, bool):
        msg = "boolean is not a stat"
        raise DataQualityError(msg)
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and _INT_RE.fullmatch(value.strip()):
        parsed = int(value.strip())
    else:
        msg = f"not an integer: {value!r}"
        raise DataQualityError(msg)
    if parsed < 0:
        msg = f"negative value: {parsed}"
        raise DataQualityError(msg)
    return parsed


class HeroStatsNormalizer:
    """Never raises: every field comes out as a non-negative int."""

    def __init__(self, rng: RandomSource | None = None) -> None:
        self._rng = rng or random.Random()

    def normalize(self, raw_attributes: Mapping[str, Any] | None) -> HeroCombatStats:
        raw = raw_attributes or {}
        return HeroCombatStats(**{name: self._parse_or_fallback(name, raw.get(name)) for name in STAT_FIELDS})

    def fallback(self) -> int:
        return FALLBACK_STAT_MIN + math.floor(self._rng.random() * FALLBACK_STAT_SPAN)

    def _parse_or_fallback(self, name: str, value: Any) -> int:
        try:
            return parse_stat(value)
        except DataQualityError as exc:
            substitute = self.fallback()
            log.debug("stat substituted", stat=name, raw=value, substitute=substitute, reason=str(exc))
            return substitute
