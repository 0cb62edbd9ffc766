# apps/players/services/dashboard.py
# ================================================================================
"""Read-only dashboard summary for one player."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from asgiref.sync import sync_to_async

from apps.battles.models import Match
from apps.core.conf import NO_MATCHES_PLACEHOLDER
from apps.players.services.stats_tracker import PlayerStatsTracker

if TYPE_CHECKING:
    from collections.abc import Iterable

_TWO_PLACES = Decimal("0.01")


@dataclass(slots=True, frozen=True)
class DashboardStats:
    matches_played: int
    wins: int
    win_ratio: str
    most_used_hero: str
    current_streak: int
    total_losses: int

    def to_json(self) -> dict[str, int | str]:
        return {
            "matchesPlayed": self.matches_played,
            "wins": self.wins,
            "winRatio": self.win_ratio,
            "mostUsedHero": self.most_used_hero,
            "currentStreak": self.current_streak,
            "totalLosses": self.total_losses,
        }


def format_win_ratio(wins: int, losses: int) -> str:
    """wins / (wins + losses) to two decimals, halves rounded up; "0.00" with no games."""
    total = wins + losses
    if total == 0:
        return "0.00"
    return str((Decimal(wins) / Decimal(total)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def most_used_hero(teams: Iterable[Iterable[str]]) -> str | None:
    """
    The hero id used most often across *teams*, scanned in order.

    On equal counts the hero that reached the top count first keeps it.
    """
    counts: Counter[str] = Counter()
    best: str | None = None
    for team in teams:
        for hero_id in team:
            counts[hero_id] += 1
            if best is None or counts[hero_id] > counts[best]:
                best = hero_id
    return best


class DashboardAggregator:
    def __init__(self, tracker: PlayerStatsTracker | None = None) -> None:
        self._tracker = tracker or PlayerStatsTracker()

    def compute_dashboard(self, player_id: int) -> DashboardStats:
        stats = self._tracker.get_or_create_stats(player_id)
        teams = list(Match.objects.for_player(player_id).chronological().values_list("player_hero_ids", flat=True))
        return DashboardStats(
            matches_played=len(teams),
            wins=stats.wins,
            win_ratio=format_win_ratio(stats.wins, stats.losses),
            most_used_hero=most_used_hero(teams) or NO_MATCHES_PLACEHOLDER,
            current_streak=stats.current_streak,
            total_losses=stats.losses,
        )

    async def acompute_dashboard(self, player_id: int) -> DashboardStats:
        return await sync_to_async(self.compute_dashboard, thread_sensitive=True)(player_id)
