"""Value types for a hero's combat attributes."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Final

# Order matters: it is the order the provider lists its power stats in the UI.
STAT_FIELDS: Final[tuple[str, ...]] = ("strength", "power", "speed", "intelligence", "durability")


@dataclass(slots=True, frozen=True)
class HeroCombatStats:
    """Validated, non-negative combat stats for one hero in one battle."""

    strength: int
    power: int
    speed: int
    intelligence: int
    durability: int

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int):
                msg = f"{f.name} must be an int, got {type(value).__name__}"
                raise TypeError(msg)
            if value < 0:
                msg = f"{f.name} must be non-negative, got {value}"
                raise ValueError(msg)

    @property
    def offensive_score(self) -> int:
        return self.strength + self.power

    @property
    def defensive_score(self) -> int:
        return self.intelligence + self.durability

    def to_json(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in STAT_FIELDS}
