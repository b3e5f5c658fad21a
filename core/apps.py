# core/apps.py

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """App configuration for the reservations core."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'
    verbose_name = "Reservations"

    def ready(self):
        """Bind signal receivers once the app registry is loaded."""
        import core.signals  # noqa: F401  # Import solely for side effects
