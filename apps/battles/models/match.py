# apps/battles/models/match.py
# ================================================================================
"""The immutable record of one resolved battle."""

from __future__ import annotations

import math
import uuid
from typing import Self

from django.db import models
from django.utils import timezone

from apps.core.exceptions import ImmutableMatchError


class MatchQuerySet(models.QuerySet["Match"]):
    """Custom queryset for the Match model with chainable filter methods."""

    def for_player(self, player_id: int) -> Self:
        return self.filter(player_id=player_id)

    def wins(self) -> Self:
        return self.filter(victory=True)

    def losses(self) -> Self:
        return self.filter(victory=False)

    def chronological(self) -> Self:
        """Oldest first; ties on `match_date` broken by insertion time, then id."""
        return self.order_by("match_date", "created_at", "id")

    def newest_first(self) -> Self:
        return self.order_by("-match_date", "-created_at", "-id")


class Match(models.Model):
    """
    One battle between a player's team and an opponent team.

    Rows are written once by `MatchRecorder` and never updated. A NULL
    survival time stands for an unbounded one (the opposing team dealt no
    damage).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    player_id = models.BigIntegerField(
        db_index=True,
        db_comment="Caller-supplied player identifier; not a foreign key.",
    )
    player_hero_ids = models.JSONField(default=list, help_text="Hero ids of the player's team, in team order.")
    opponent_hero_ids = models.JSONField(default=list, help_text="Hero ids of the opposing team, in team order.")
    match_date = models.DateTimeField(default=timezone.now, db_index=True)
    survival_time_player = models.FloatField(null=True, blank=True)
    survival_time_opponent = models.FloatField(null=True, blank=True)
    victory = models.BooleanField()
    created_at = models.DateTimeField(auto_now_add=True)

    objects = MatchQuerySet.as_manager()

    class Meta:
        db_table = "battle_matches"
        ordering = ["-match_date"]
        verbose_name = "Match"
        verbose_name_plural = "Matches"
        indexes = [models.Index(fields=["player_id", "match_date"], name="battle_match_player_date_idx")]

    def __str__(self) -> str:
        outcome = "won" if self.victory else "lost"
        return f"Match {self.id} (player {self.player_id} {outcome})"

    def save(self, *args, **kwargs) -> None:
        if not self._state.adding:
            msg = f"Match {self.id} is already recorded and cannot be changed."
            raise ImmutableMatchError(msg)
        super().save(*args, **kwargs)

    @staticmethod
    def to_db_survival(value: float) -> float | None:
        return None if math.isinf(value) else value

    @property
    def player_survival(self) -> float:
        return math.inf if self.survival_time_player is None else self.survival_time_player

    @property
    def opponent_survival(self) -> float:
        return math.inf if self.survival_time_opponent is None else self.survival_time_opponent

    def to_json(self) -> dict:
        return {
            "matchId": str(self.id),
            "playerId": self.player_id,
            "playerTeam": list(self.player_hero_ids),
            "opponentTeam": list(self.opponent_hero_ids),
            "matchDate": self.match_date.isoformat(),
            "victory": self.victory,
            "survivalTimePlayer": self.survival_time_player,
            "survivalTimeOpponent": self.survival_time_opponent,
        }
