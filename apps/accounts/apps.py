from django.apps import AppConfig


class AccountsConfig(AppConfig):
    name = 'apps.accounts'
    label = 'accounts'
    default_auto_field = 'django.db.models.BigAutoField'

    def ready(self):
        # Connect lifecycle email receivers
        from . import notifications  # noqa: F401
