# apps/battles/services/match_recorder.py
# ================================================================================
"""
Writes finished battles to the match log.

The match row and the player's stats update share one transaction: either
both are committed or neither is.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import structlog
from asgiref.sync import sync_to_async
from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.battles.engine import resolve_teams
from apps.battles.models import Match
from apps.core.exceptions import MatchPersistenceError
from apps.players.services.stats_tracker import PlayerStatsTracker

if TYPE_CHECKING:
    from collections.abc import Sequence

    from apps.heroes.conf import HeroData

log = structlog.get_logger(__name__).bind(component="MatchRecorder")


class MatchRecorder:
    def __init__(self, tracker: PlayerStatsTracker | None = None) -> None:
        self._tracker = tracker or PlayerStatsTracker()

    def create_match(
        self,
        player_id: int,
        player_team: Sequence[HeroData],
        ai_team: Sequence[HeroData],
        victory: bool,
        *,
        match_id: uuid.UUID | str | None = None,
    ) -> Match:
        """
        Record one battle and count it towards the player's stats.

        Survival times are recomputed from the teams; *victory* is stored as
        given. Raises `EmptyTeamError` for an empty team and
        `MatchPersistenceError` when the write fails (nothing is committed).
        """
        _, _, outcome = resolve_teams([h.stats for h in player_team], [h.stats for h in ai_team])
        match_uuid = uuid.UUID(str(match_id)) if match_id else uuid.uuid4()

        try:
            with transaction.atomic():
                match = Match.objects.create(
                    id=match_uuid,
                    player_id=player_id,
                    player_hero_ids=[h.id for h in player_team],
                    opponent_hero_ids=[h.id for h in ai_team],
                    match_date=timezone.now(),
                    survival_time_player=Match.to_db_survival(outcome.team1_survival_time),
                    survival_time_opponent=Match.to_db_survival(outcome.team2_survival_time),
                    victory=victory,
                )
                self._tracker.update_stats(player_id, victory=victory)
        except DatabaseError as exc:
            log.exception("match persistence failed", player_id=player_id, match_id=str(match_uuid))
            msg = f"Could not record match {match_uuid} for player {player_id}."
            raise MatchPersistenceError(msg) from exc

        log.info("match recorded", player_id=player_id, match_id=str(match.id), victory=victory)
        return match

    async def acreate_match(
        self,
        player_id: int,
        player_team: Sequence[HeroData],
        ai_team: Sequence[HeroData],
        victory: bool,
        *,
        match_id: uuid.UUID | str | None = None,
    ) -> Match:
        return await sync_to_async(self.create_match, thread_sensitive=True)(
            player_id,
            player_team,
            ai_team,
            victory,
            match_id=match_id,
        )

    @staticmethod
    def history(player_id: int, limit: int | None = None, offset: int = 0) -> list[Match]:
        """A player's matches, newest first."""
        qs = Match.objects.for_player(player_id).newest_first()
        if limit is not None:
            return list(qs[offset : offset + limit])
        return list(qs[offset:])

    async def ahistory(self, player_id: int, limit: int | None = None, offset: int = 0) -> list[Match]:
        return await sync_to_async(self.history, thread_sensitive=True)(player_id, limit, offset)
