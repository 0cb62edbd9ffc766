# apps/battles/views.py
# ======================================================================
"""Asynchronous API views for the 'battles' application."""

from __future__ import annotations

import structlog
from django.http import HttpRequest

from apps.battles.conf import SimulateBattleRequest, StartBattleRequest
from apps.battles.services.battle_service import BattleService
from apps.heroes.services.provider import get_provider
from apps.heroes.services.roster import HeroRoster
from common.views_utils import BaseAsyncView, OrjsonResponse

log = structlog.get_logger(__name__).bind(component="BattlesViews")


class BattleStartView(BaseAsyncView):
    """POST /api/v1/battles/start – the player's heroes plus a random AI team."""

    async def post(self, request: HttpRequest) -> OrjsonResponse:
        body = self.parse_body(request, StartBattleRequest)
        async with get_provider() as provider:
            battle = await BattleService(HeroRoster(provider)).generate_battle(body.player_team)
        return OrjsonResponse(battle)


class BattleSimulateView(BaseAsyncView):
    """POST /api/v1/battles/simulate – resolve a battle and record it for the player."""

    async def post(self, request: HttpRequest) -> OrjsonResponse:
        body = self.parse_body(request, SimulateBattleRequest)
        async with get_provider() as provider:
            payload = await BattleService(HeroRoster(provider)).submit_battle(
                body.player_id,
                body.player_team,
                body.ai_team,
            )
        return OrjsonResponse(payload, status=201)
