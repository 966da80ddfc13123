from rest_framework import serializers
from users.serializers import UserSerializer


class AuthTokenSerializer(serializers.Serializer):
    """
    Response serializer for successful authentication.
    Bundles tokens with user data so the frontend can render right away.
    """

    # Short-lived token for authenticated API access
    access_token = serializers.CharField(help_text="JWT access token")

    # Long-lived token used to refresh access tokens
    refresh_token = serializers.CharField(help_text="JWT refresh token")

    user = UserSerializer(read_only=True)
    message = serializers.CharField(read_only=True)


# Request fields are optional at this layer: AuthService owns the
# "All fields are required" rule so every missing-field case reads the same.

class SignupSerializer(serializers.Serializer):
    username = serializers.CharField(required=False, allow_blank=True, max_length=150)
    email = serializers.CharField(required=False, allow_blank=True, max_length=254)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)


class OTPVerifySerializer(serializers.Serializer):
    """Serializer for verifying the signup OTP."""
    otp = serializers.CharField(required=False, allow_blank=True, max_length=6)


class RefreshTokenSerializer(serializers.Serializer):
    """
    Request serializer for refreshing access tokens.
    Only refresh_token is required; user context is inferred server-side.
    """

    refresh_token = serializers.CharField(required=False)
