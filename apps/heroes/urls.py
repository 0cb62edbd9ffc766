from __future__ import annotations

from django.urls import path

from .views import HeroDetailView, HeroSearchView, RandomHeroesView

app_name = "heroes"

# Literal segments first so "random" and "search" are never taken as hero ids.
urlpatterns = [
    path("/random", RandomHeroesView.as_view(), name="hero-random"),
    path("/search/<str:name>", HeroSearchView.as_view(), name="hero-search"),
    path("/<str:hero_id>", HeroDetailView.as_view(), name="hero-detail"),
]
