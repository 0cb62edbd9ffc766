import pytest
from django.urls import reverse

from apps.core.exceptions import ProviderUnavailableError
from conftest import StaticHeroProvider, make_attributes


@pytest.fixture
def patched_provider(monkeypatch, static_provider):
    monkeypatch.setattr("apps.heroes.views.get_provider", lambda: static_provider)
    return static_provider


async def test_hero_detail(async_client, patched_provider):
    response = await async_client.get(reverse("heroes:hero-detail", args=["644"]))

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Superman"
    assert body["stats"]["speed"] == 100
    assert response["X-Cache-Status"] == "MISS"


async def test_hero_detail_cached_then_bypassed(async_client, patched_provider):
    url = reverse("heroes:hero-detail", args=["70"])
    await async_client.get(url)
    cached = await async_client.get(url)
    bypass = await async_client.get(url, {"nocache": "true"})

    assert cached["X-Cache-Status"] == "HIT"
    assert bypass["X-Cache-Status"] == "BYPASS"
    assert patched_provider.calls == ["70", "70"]


async def test_unknown_hero_is_404(async_client, patched_provider):
    response = await async_client.get(reverse("heroes:hero-detail", args=["4242"]))
    assert response.status_code == 404
    assert response.json()["kind"] == "hero_not_found"


async def test_provider_outage_is_503(async_client, monkeypatch):
    provider = StaticHeroProvider([], unavailable={"1"})
    monkeypatch.setattr("apps.heroes.views.get_provider", lambda: provider)

    response = await async_client.get(reverse("heroes:hero-detail", args=["1"]))

    assert response.status_code == 503
    assert response.json()["kind"] == ProviderUnavailableError.kind


async def test_search(async_client, patched_provider):
    response = await async_client.get(reverse("heroes:hero-search", args=["man"]))
    assert response.status_code == 200
    assert {hero["name"] for hero in response.json()} == {"Batman", "Superman", "Wonder Woman"}


async def test_random_heroes_not_cached(async_client, monkeypatch):
    provider = StaticHeroProvider([])
    monkeypatch.setattr("apps.heroes.views.get_provider", lambda: provider)
    monkeypatch.setattr("apps.heroes.services.roster.HeroRoster.random_team", _fake_random_team)

    response = await async_client.get(reverse("heroes:hero-random"), {"count": "2"})

    assert response.status_code == 200
    assert len(response.json()) == 2
    assert "X-Cache-Status" not in response


async def _fake_random_team(self, size):
    return [self.to_hero_data(make_attributes(str(i))) for i in range(size)]
