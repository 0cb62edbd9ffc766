# apps/players/services/stats_tracker.py
# ================================================================================
"""
Per-player win/loss counters.

Updates are serialized per player: the row is locked with `SELECT ... FOR
UPDATE` and changed with one UPDATE built from `F()` expressions, so two
battles finishing at once for the same player never lose an increment.
Different players never wait on each other.
"""

from __future__ import annotations

import structlog
from asgiref.sync import sync_to_async
from django.db import transaction
from django.db.models import F, Value
from django.utils import timezone

from apps.players.models import PlayerStats

log = structlog.get_logger(__name__).bind(component="PlayerStatsTracker")


class PlayerStatsTracker:
    """Owns every write to `PlayerStats`."""

    @staticmethod
    def get_or_create_stats(player_id: int) -> PlayerStats:
        stats, created = PlayerStats.objects.get_or_create(player_id=player_id)
        if created:
            log.info("player stats created", player_id=player_id)
        return stats

    def update_stats(self, player_id: int, *, victory: bool) -> PlayerStats:
        """
        Count one finished battle for *player_id*.

        Joins the caller's transaction when there is one (MatchRecorder relies
        on this to commit the match and the counters together).
        """
        with transaction.atomic():
            self.get_or_create_stats(player_id)
            locked = PlayerStats.objects.select_for_update().filter(player_id=player_id)
            if victory:
                locked.update(
                    wins=F("wins") + 1,
                    current_streak=F("current_streak") + 1,
                    updated_at=timezone.now(),
                )
            else:
                locked.update(
                    losses=F("losses") + 1,
                    current_streak=Value(0),
                    updated_at=timezone.now(),
                )
            stats = locked.get()

        log.debug(
            "player stats updated",
            player_id=player_id,
            victory=victory,
            wins=stats.wins,
            losses=stats.losses,
            streak=stats.current_streak,
        )
        return stats

    async def aget_or_create_stats(self, player_id: int) -> PlayerStats:
        return await sync_to_async(self.get_or_create_stats, thread_sensitive=True)(player_id)

    async def aupdate_stats(self, player_id: int, *, victory: bool) -> PlayerStats:
        return await sync_to_async(self.update_stats, thread_sensitive=True)(player_id, victory=victory)
