# apps/battles/services/battle_service.py
# ================================================================================
"""
Battle orchestration: assemble teams, resolve the fight, record the result.

    roster ──► normalizer ──► TeamAggregator ──► CombatResolver
                                                      │
                                 MatchRecorder ◄──────┘ (submit only)
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import structlog
from django.conf import settings

from apps.battles.conf import DEFAULT_AI_TEAM_SIZE
from apps.battles.engine import resolve_teams
from apps.battles.services.match_recorder import MatchRecorder

if TYPE_CHECKING:
    from collections.abc import Sequence

    from apps.battles.datatype import BattleResultPayload, GeneratedBattle
    from apps.heroes.conf import HeroData
    from apps.heroes.services.roster import HeroRoster

log = structlog.get_logger(__name__).bind(component="BattleService")


class BattleService:
    def __init__(
        self,
        roster: HeroRoster,
        *,
        recorder: MatchRecorder | None = None,
        ai_team_size: int | None = None,
    ) -> None:
        self._roster = roster
        self._recorder = recorder or MatchRecorder()
        self._ai_team_size = ai_team_size or getattr(settings, "AI_TEAM_SIZE", DEFAULT_AI_TEAM_SIZE)

    async def fetch_team(self, hero_ids: Sequence[str]) -> list[HeroData]:
        return await self._roster.fetch_team(hero_ids)

    async def generate_battle(self, player_team_ids: Sequence[str]) -> GeneratedBattle:
        """
        Fetch the player's heroes (in order) and draw a random AI team.

        Any failure fetching a player hero propagates; the AI draw gives up
        with `OpponentAssemblyError` once its attempt budget is spent.
        """
        player_team = await self.fetch_team(player_team_ids)
        ai_team = await self._roster.random_team(self._ai_team_size)
        log.info(
            "battle generated",
            player_team=[h.id for h in player_team],
            ai_team=[h.id for h in ai_team],
        )
        return {
            "playerTeam": [h.to_json() for h in player_team],
            "aiTeam": [h.to_json() for h in ai_team],
        }

    @staticmethod
    def simulate_battle(
        player_team: Sequence[HeroData],
        ai_team: Sequence[HeroData],
        *,
        match_id: uuid.UUID | None = None,
    ) -> BattleResultPayload:
        """Resolve a battle without persisting it; the player's team is team 1."""
        player, ai, outcome = resolve_teams([h.stats for h in player_team], [h.stats for h in ai_team])
        return {
            "matchId": str(match_id or uuid.uuid4()),
            "result": {
                "victory": outcome.victory,
                "team1SurvivalTime": outcome.team1_survival_time,
                "team2SurvivalTime": outcome.team2_survival_time,
            },
            "teamStats": {
                "player": {"offensiveScore": player.damage_per_second, "defensiveScore": player.defense},
                "ai": {"offensiveScore": ai.damage_per_second, "defensiveScore": ai.defense},
            },
        }

    async def submit_battle(
        self,
        player_id: int,
        player_team_ids: Sequence[str],
        ai_team_ids: Sequence[str],
    ) -> BattleResultPayload:
        """Fetch both teams, resolve the battle, and record it under the payload's match id."""
        player_team = await self.fetch_team(player_team_ids)
        ai_team = await self.fetch_team(ai_team_ids)
        payload = self.simulate_battle(player_team, ai_team)
        await self._recorder.acreate_match(
            player_id,
            player_team,
            ai_team,
            payload["result"]["victory"],
            match_id=payload["matchId"],
        )
        log.info(
            "battle submitted",
            player_id=player_id,
            match_id=payload["matchId"],
            victory=payload["result"]["victory"],
        )
        return payload
