import pytest
from django.urls import reverse

from apps.battles.services.match_recorder import MatchRecorder
from apps.players.services.dashboard import DashboardAggregator, format_win_ratio, most_used_hero
from conftest import make_hero


@pytest.mark.django_db
def test_dashboard_without_matches():
    dashboard = DashboardAggregator().compute_dashboard(404)

    assert dashboard.matches_played == 0
    assert dashboard.win_ratio == "0.00"
    assert dashboard.most_used_hero == "No matches yet"
    assert dashboard.current_streak == 0
    assert dashboard.to_json() == {
        "matchesPlayed": 0,
        "wins": 0,
        "winRatio": "0.00",
        "mostUsedHero": "No matches yet",
        "currentStreak": 0,
        "totalLosses": 0,
    }


@pytest.mark.parametrize(
    ("wins", "losses", "expected"),
    [(0, 0, "0.00"), (1, 0, "1.00"), (0, 3, "0.00"), (2, 1, "0.67"), (1, 2, "0.33"), (1, 7, "0.13")],
)
def test_format_win_ratio(wins, losses, expected):
    assert format_win_ratio(wins, losses) == expected


def test_most_used_hero_first_to_reach_top_count_wins_ties():
    assert most_used_hero([["2", "1"], ["2", "1"]]) == "2"
    assert most_used_hero([["2", "1"], ["1", "2"]]) == "1"
    assert most_used_hero([["2"], ["1"], ["1"]]) == "1"
    assert most_used_hero([]) is None


@pytest.mark.django_db
def test_dashboard_after_matches():
    recorder = MatchRecorder()
    opponent = [make_hero("900")]
    recorder.create_match(6, [make_hero("70"), make_hero("1")], opponent, True)
    recorder.create_match(6, [make_hero("1")], opponent, False)
    recorder.create_match(6, [make_hero("70")], opponent, True)
    recorder.create_match(6, [make_hero("644")], opponent, True)

    dashboard = DashboardAggregator().compute_dashboard(6)

    assert dashboard.matches_played == 4
    assert dashboard.wins == 3
    assert dashboard.total_losses == 1
    assert dashboard.win_ratio == "0.75"
    assert dashboard.current_streak == 2
    assert dashboard.most_used_hero == "1"


@pytest.mark.django_db(transaction=True)
async def test_dashboard_endpoint(async_client):
    await MatchRecorder().acreate_match(8, [make_hero("70")], [make_hero("1")], True)

    response = await async_client.get(reverse("players:player-dashboard", args=[8]))

    assert response.status_code == 200
    assert response.json()["mostUsedHero"] == "70"
    assert response.json()["winRatio"] == "1.00"


@pytest.mark.django_db(transaction=True)
async def test_stats_and_history_endpoints(async_client):
    recorder = MatchRecorder()
    for victory in (True, False, True):
        await recorder.acreate_match(9, [make_hero("70")], [make_hero("1")], victory)

    stats = (await async_client.get(reverse("players:player-stats", args=[9]))).json()
    page = (await async_client.get(reverse("players:player-matches", args=[9]), {"page_size": 2})).json()

    assert (stats["wins"], stats["losses"], stats["currentStreak"]) == (2, 1, 1)
    assert page["count"] == 3
    assert page["total_pages"] == 2
    assert len(page["data"]) == 2
    assert page["data"][0]["victory"] is True
    assert page["data"][0]["playerTeam"] == ["70"]


@pytest.mark.django_db(transaction=True)
async def test_history_endpoint_pages_through_recorded_matches(async_client):
    recorder = MatchRecorder()
    first = await recorder.acreate_match(12, [make_hero("1")], [make_hero("2")], True)
    await recorder.acreate_match(12, [make_hero("3")], [make_hero("2")], False)
    await recorder.acreate_match(12, [make_hero("5")], [make_hero("2")], True)

    url = reverse("players:player-matches", args=[12])
    last_page = (await async_client.get(url, {"page_size": 2, "page": 2})).json()

    assert [m["matchId"] for m in last_page["data"]] == [str(first.id)]
    assert [m.id for m in await recorder.ahistory(12, limit=1, offset=2)] == [first.id]
