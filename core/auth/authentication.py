from rest_framework import authentication, exceptions
from django.conf import settings
from django.contrib.auth.models import User
from drf_spectacular.extensions import OpenApiAuthenticationExtension

from .utils import ACCESS, decode_token


class JWTAuthentication(authentication.BaseAuthentication):
    """
    Resolves the acting user for every API request.

    Reads 'Authorization: Bearer <token>' first and falls back to the HttpOnly
    access cookie. Returns None (anonymous) when no token is present, so views
    decide whether identity is required; a bad header token is a hard 401.
    """

    def authenticate(self, request):
        token, token_source = self._get_token(request)
        if not token:
            return None

        # Refresh tokens are rejected here; only the refresh endpoint takes them
        payload = decode_token(token, expected_type=ACCESS)

        # Stale cookies must not block AllowAny endpoints such as signup or login.
        if not payload:
            if token_source == "cookie":
                return None
            raise exceptions.AuthenticationFailed("Invalid or expired token")

        try:
            user = User.objects.select_related("profile").get(id=payload["user_id"])
        except (User.DoesNotExist, KeyError):
            if token_source == "cookie":
                return None
            raise exceptions.AuthenticationFailed("User not found")

        if not user.is_active:
            raise exceptions.AuthenticationFailed("User account is disabled.")

        # DRF sets request.user and request.auth from this tuple
        return (user, token)

    def authenticate_header(self, request):
        return "Bearer"

    @staticmethod
    def _get_token(request):
        auth_header = request.headers.get("Authorization")
        if auth_header:
            try:
                prefix, token = auth_header.split(" ")
            except ValueError:
                # Malformed header, e.g. missing the space
                prefix, token = "", None
            if prefix.lower() == "bearer" and token:
                return token, "header"

        token = request.COOKIES.get(settings.JWT_ACCESS_COOKIE_NAME)
        if token:
            return token, "cookie"
        return None, None


class JWTAuthenticationScheme(OpenApiAuthenticationExtension):
    # OpenAPI schema adapter for the custom JWT authentication class

    target_class = "auth.authentication.JWTAuthentication"
    name = "JWTAuth"  # Name shown in Swagger's Authorize dialog

    def get_security_definition(self, auto_schema):
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
