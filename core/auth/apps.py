from django.apps import AppConfig


class AuthConfig(AppConfig):
    name = "auth"
    # "auth" is taken by django.contrib.auth
    label = "stackwave_auth"
    verbose_name = "Authentication"
