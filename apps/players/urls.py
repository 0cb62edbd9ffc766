from __future__ import annotations

from django.urls import include, path

from .views import DashboardView, MatchHistoryView, PlayerStatsView

app_name = "players"

player_id_patterns = [
    path("/dashboard", DashboardView.as_view(), name="player-dashboard"),
    path("/stats", PlayerStatsView.as_view(), name="player-stats"),
    path("/matches", MatchHistoryView.as_view(), name="player-matches"),
]

urlpatterns = [
    path("/<int:player_id>", include(player_id_patterns)),
]
