"""Typed shapes of the JSON produced by the battle endpoints."""

from __future__ import annotations

from typing import TypedDict


class TeamScores(TypedDict):
    offensiveScore: float
    defensiveScore: int


class BattleResult(TypedDict):
    victory: bool
    team1SurvivalTime: float
    team2SurvivalTime: float


class TeamStatsPair(TypedDict):
    player: TeamScores
    ai: TeamScores


class BattleResultPayload(TypedDict):
    matchId: str
    result: BattleResult
    teamStats: TeamStatsPair


class GeneratedBattle(TypedDict):
    playerTeam: list[dict]
    aiTeam: list[dict]
