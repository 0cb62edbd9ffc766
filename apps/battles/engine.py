# apps/battles/engine.py
# ==============================================================================
"""
Pure battle arithmetic: team aggregation and combat resolution.

Nothing here touches the network or the database, so every function is safe
to call from any thread and trivially testable.

    damage_per_second = total_offense * avg_speed / DPS_SCALE
    survival_time     = own defense / opponent damage_per_second
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from apps.core.exceptions import EmptyTeamError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from apps.heroes.datatype import HeroCombatStats

DPS_SCALE: Final[int] = 100


@dataclass(slots=True, frozen=True)
class TeamProfile:
    """Aggregated combat numbers for one team in one battle."""

    damage_per_second: float
    defense: int

    def __post_init__(self) -> None:
        if self.damage_per_second < 0 or self.defense < 0:
            msg = f"Team profile must be non-negative, got {self}"
            raise ValueError(msg)

    def survival_time(self, opponent: TeamProfile) -> float:
        """Seconds this team lasts against *opponent*; unbounded when it deals no damage."""
        if opponent.damage_per_second == 0:
            return math.inf
        return self.defense / opponent.damage_per_second

    def to_json(self) -> dict[str, float | int]:
        return {"offensiveScore": self.damage_per_second, "defensiveScore": self.defense}


@dataclass(slots=True, frozen=True)
class BattleOutcome:
    victory: bool
    team1_survival_time: float
    team2_survival_time: float

    def to_json(self) -> dict[str, bool | float]:
        return {
            "victory": self.victory,
            "team1SurvivalTime": self.team1_survival_time,
            "team2SurvivalTime": self.team2_survival_time,
        }


class TeamAggregator:
    @staticmethod
    def aggregate(team: Sequence[HeroCombatStats]) -> TeamProfile:
        if not team:
            msg = "Cannot aggregate an empty team."
            raise EmptyTeamError(msg)

        total_offense = sum(hero.offensive_score for hero in team)
        total_defense = sum(hero.defensive_score for hero in team)
        avg_speed = sum(hero.speed for hero in team) / len(team)
        return TeamProfile(
            damage_per_second=total_offense * avg_speed / DPS_SCALE,
            defense=int(total_defense),
        )


class CombatResolver:
    @staticmethod
    def resolve(team_a: TeamProfile, team_b: TeamProfile) -> BattleOutcome:
        """
        Team A wins only if it strictly outlasts team B. A tie, including two
        teams that cannot hurt each other, is a loss for team A.
        """
        survival_a = team_a.survival_time(team_b)
        survival_b = team_b.survival_time(team_a)
        return BattleOutcome(
            victory=survival_a > survival_b,
            team1_survival_time=survival_a,
            team2_survival_time=survival_b,
        )


def resolve_teams(
    team_a: Sequence[HeroCombatStats],
    team_b: Sequence[HeroCombatStats],
) -> tuple[TeamProfile, TeamProfile, BattleOutcome]:
    """Aggregate both teams and resolve the battle between them."""
    profile_a = TeamAggregator.aggregate(team_a)
    profile_b = TeamAggregator.aggregate(team_b)
    return profile_a, profile_b, CombatResolver.resolve(profile_a, profile_b)
