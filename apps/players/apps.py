from django.apps import AppConfig


class PlayersConfig(AppConfig):
    """
    App configuration for the 'players' app.
    Player win/loss tallies and the dashboard built from them.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.players"
    verbose_name = "Players"
