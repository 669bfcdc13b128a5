from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backend.core'
    verbose_name = 'Accounts'

    def ready(self):
        """Hook up dashboard cache invalidation on customer/order writes"""
        import backend.core.cache_signals  # noqa: F401
