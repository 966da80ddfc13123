import hmac
import secrets
import string
from datetime import datetime, timedelta, timezone
from hashlib import sha256

import jwt
from django.conf import settings

ACCESS = "access"
REFRESH = "refresh"


def generate_otp_code(length=6):
    return "".join(secrets.choice(string.digits) for _ in range(length))


def hash_otp(email: str, otp: str) -> str:
    """Digest stored on the profile; the clear code only ever leaves by email."""
    normalized = f"{email.lower().strip()}:{otp.strip()}".encode("utf-8")
    return hmac.new(settings.SECRET_KEY.encode("utf-8"), normalized, sha256).hexdigest()


def _encode(user, token_type: str, lifetime_seconds: int, **claims) -> str:
    issued_at = datetime.now(timezone.utc)
    payload = {
        "user_id": user.pk,
        "type": token_type,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=lifetime_seconds),
        **claims,
    }
    return jwt.encode(payload, settings.JWT_PRIVATE_KEY, algorithm=settings.JWT_ALGORITHM)


def generate_access_token(user):
    """
    Short-lived token sent with every API call.
    `verified` mirrors the profile at issue time so clients can prompt for the OTP.
    """
    profile = getattr(user, "profile", None)
    return _encode(
        user,
        ACCESS,
        settings.JWT_ACCESS_TOKEN_LIFETIME,
        verified=bool(profile and profile.is_verified),
    )


def generate_refresh_token(user):
    return _encode(user, REFRESH, settings.JWT_REFRESH_TOKEN_LIFETIME)


def decode_token(token, expected_type=None):
    """Payload of a valid token, or None when it is expired, forged or of the wrong type."""
    try:
        payload = jwt.decode(
            token, settings.JWT_PUBLIC_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
    except jwt.InvalidTokenError:
        return None

    if expected_type and payload.get("type") != expected_type:
        return None
    return payload


def generate_tokens(user):
    return {
        "access_token": generate_access_token(user),
        "refresh_token": generate_refresh_token(user),
    }
