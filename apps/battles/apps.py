from django.apps import AppConfig


class BattlesConfig(AppConfig):
    """
    App configuration for the 'battles' app.
    Team aggregation, combat resolution and the immutable match log.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.battles"
    verbose_name = "Battles"
