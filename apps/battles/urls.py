from __future__ import annotations

from django.urls import path

from .views import BattleSimulateView, BattleStartView

app_name = "battles"

urlpatterns = [
    path("/start", BattleStartView.as_view(), name="battle-start"),
    path("/simulate", BattleSimulateView.as_view(), name="battle-simulate"),
]
