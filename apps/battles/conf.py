# /apps/battles/conf.py
# ================================================================================
"""Configuration, constants, and request models for the 'battles' app."""

from __future__ import annotations

from typing import Annotated, Final

from pydantic import ConfigDict, Field, StringConstraints

from apps.core.conf import CamelModel

# ─── Team sizes ────────────────────────────────────────────────────────────────
DEFAULT_AI_TEAM_SIZE: Final[int] = 2
MAX_TEAM_SIZE: Final[int] = 10

HeroId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# ─── Request bodies ────────────────────────────────────────────────────────────


class _BattleRequest(CamelModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, coerce_numbers_to_str=True, extra="ignore")


class StartBattleRequest(_BattleRequest):
    """Body of POST /battles/start."""

    player_team: list[HeroId] = Field(alias="playerTeam", min_length=1, max_length=MAX_TEAM_SIZE)


class SimulateBattleRequest(_BattleRequest):
    """Body of POST /battles/simulate."""

    player_id: int = Field(alias="playerId", ge=0)
    player_team: list[HeroId] = Field(alias="playerTeam", min_length=1, max_length=MAX_TEAM_SIZE)
    ai_team: list[HeroId] = Field(alias="aiTeam", min_length=1, max_length=MAX_TEAM_SIZE)
