# apps/players/models/player_stats.py
# ================================================================================
"""Running win/loss counters for one player."""

from __future__ import annotations

from django.db import models
from django.db.models import Q

__all__ = ("PlayerStats",)


class PlayerStats(models.Model):
    """
    Per-player tallies, created lazily on first lookup.

    Only `PlayerStatsTracker` writes these counters, always through a single
    atomic UPDATE on a locked row.
    """

    player_id = models.BigIntegerField(unique=True)
    wins = models.PositiveIntegerField(default=0)
    losses = models.PositiveIntegerField(default=0)
    current_streak = models.PositiveIntegerField(default=0, help_text="Consecutive wins since the last loss.")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "player_stats"
        verbose_name = "Player stats"
        verbose_name_plural = "Player stats"
        constraints = [
            models.CheckConstraint(condition=Q(wins__gte=0), name="player_stats_wins_non_negative"),
            models.CheckConstraint(condition=Q(losses__gte=0), name="player_stats_losses_non_negative"),
            models.CheckConstraint(
                condition=Q(current_streak__gte=0),
                name="player_stats_streak_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"Player {self.player_id}: {self.wins}W/{self.losses}L"

    @property
    def matches_recorded(self) -> int:
        return self.wins + self.losses

    def to_json(self) -> dict:
        return {
            "playerId": self.player_id,
            "wins": self.wins,
            "losses": self.losses,
            "currentStreak": self.current_streak,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
