from django.apps import AppConfig


class HeroesConfig(AppConfig):
    """
    App configuration for the 'heroes' app.
    Hero lookups against the upstream provider and stat normalization; no models.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.heroes"
    verbose_name = "Heroes"
