# apps/players/views.py
# ======================================================================
"""Asynchronous API views for the 'players' application."""

from __future__ import annotations

from typing import Any

import structlog
from django.http import HttpRequest

from apps.battles.models import Match
from apps.battles.services.match_recorder import MatchRecorder
from apps.players.services.dashboard import DashboardAggregator
from apps.players.services.stats_tracker import PlayerStatsTracker
from common.views_utils import BaseAppView, Page

from . import conf

log = structlog.get_logger(__name__).bind(component="PlayersViews")


class DashboardView(BaseAppView):
    """GET /api/v1/players/{player_id}/dashboard – summary for the player's home screen."""

    def _get_params(self, request: HttpRequest, **kwargs) -> dict[str, Any]:
        return {"player_id": kwargs["player_id"]}

    async def _produce_payload(self, p: dict[str, Any]) -> dict[str, Any]:
        dashboard = await DashboardAggregator().acompute_dashboard(p["player_id"])
        return dashboard.to_json()


class PlayerStatsView(BaseAppView):
    """GET /api/v1/players/{player_id}/stats – raw win/loss counters."""

    def _get_params(self, request: HttpRequest, **kwargs) -> dict[str, Any]:
        return {"player_id": kwargs["player_id"]}

    async def _produce_payload(self, p: dict[str, Any]) -> dict[str, Any]:
        stats = await PlayerStatsTracker().aget_or_create_stats(p["player_id"])
        return stats.to_json()


class MatchHistoryView(BaseAppView):
    """GET /api/v1/players/{player_id}/matches – recorded battles, newest first."""

    def _get_params(self, request: HttpRequest, **kwargs) -> dict[str, Any]:
        page = Page.from_request(
            request,
            max_size=conf.MATCH_HISTORY_MAX_PAGE_SIZE,
            default_size=conf.MATCH_HISTORY_DEFAULT_PAGE_SIZE,
        )
        return {
            "player_id": kwargs["player_id"],
            "page_num": page.number,
            "page_size": page.size,
            "offset": page.offset,
        }

    async def _produce_payload(self, p: dict[str, Any]) -> dict[str, Any]:
        total = await Match.objects.for_player(p["player_id"]).acount()
        matches = await MatchRecorder().ahistory(p["player_id"], limit=p["page_size"], offset=p["offset"])
        return {
            "count": total,
            "page": p["page_num"],
            "page_size": p["page_size"],
            "total_pages": -(-total // p["page_size"]) if p["page_size"] else 0,
            "data": [match.to_json() for match in matches],
        }
