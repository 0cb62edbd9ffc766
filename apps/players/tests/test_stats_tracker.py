from concurrent.futures import ThreadPoolExecutor

import pytest
from django.db import connection

from apps.players.models import PlayerStats
from apps.players.services.stats_tracker import PlayerStatsTracker


@pytest.mark.django_db
def test_get_or_create_is_idempotent():
    tracker = PlayerStatsTracker()
    first = tracker.get_or_create_stats(10)
    second = tracker.get_or_create_stats(10)

    assert first.pk == second.pk
    assert (second.wins, second.losses, second.current_streak) == (0, 0, 0)
    assert PlayerStats.objects.filter(player_id=10).count() == 1


@pytest.mark.django_db
def test_defeat_resets_streak():
    tracker = PlayerStatsTracker()
    for victory in (True, True, False, True):
        stats = tracker.update_stats(1, victory=victory)

    assert (stats.wins, stats.losses, stats.current_streak) == (3, 1, 1)


@pytest.mark.django_db
def test_players_are_independent():
    tracker = PlayerStatsTracker()
    tracker.update_stats(1, victory=True)
    tracker.update_stats(2, victory=False)

    assert PlayerStats.objects.get(player_id=1).wins == 1
    assert PlayerStats.objects.get(player_id=2).losses == 1
    assert PlayerStats.objects.get(player_id=1).losses == 0


@pytest.mark.django_db(transaction=True)
def test_concurrent_wins_are_all_counted():
    tracker = PlayerStatsTracker()
    n = 25

    def win(_):
        try:
            return tracker.update_stats(77, victory=True)
        finally:
            connection.close()

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(win, range(n)))

    stats = PlayerStats.objects.get(player_id=77)
    assert stats.wins == n
    assert stats.current_streak == n
    assert stats.losses == 0
