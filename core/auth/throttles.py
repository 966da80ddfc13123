"""
Custom throttle classes for rate limiting different types of operations.

These throttles work with Django REST Framework's built-in throttling system
and store their counters in the default cache (Redis in deployment).
"""

from rest_framework.throttling import SimpleRateThrottle


class _UserOrIPThrottle(SimpleRateThrottle):
    """Keys on the user id when authenticated, on the client IP otherwise."""

    def get_cache_key(self, request, view):
        if request.user and request.user.is_authenticated:
            ident = request.user.pk
        else:
            ident = self.get_ident(request)

        return self.cache_format % {
            "scope": self.scope,
            "ident": ident
        }


class AuthRateThrottle(SimpleRateThrottle):
    """
    Strict throttle for authentication endpoints (signup, login).
    Prevents brute force attacks on user credentials.

    Rate: Configured in settings.DEFAULT_THROTTLE_RATES['auth']
    """
    scope = "auth"

    def get_cache_key(self, request, view):
        # For auth, use IP address since user might not be authenticated
        return self.cache_format % {
            "scope": self.scope,
            "ident": self.get_ident(request)
        }


class SensitiveOperationThrottle(_UserOrIPThrottle):
    """
    Throttle for OTP verification.
    Very strict to make guessing a 6-digit code impractical.

    Rate: Configured in settings.DEFAULT_THROTTLE_RATES['sensitive']
    """
    scope = "sensitive"


class OTPRequestThrottle(_UserOrIPThrottle):
    """
    Throttle for OTP (re)sends. Every call costs an outgoing email.

    Rate: Configured in settings.DEFAULT_THROTTLE_RATES['otp']
    """
    scope = "otp"


class VoteRateThrottle(_UserOrIPThrottle):
    """
    Throttle for answer up/down votes.

    Rate: Configured in settings.DEFAULT_THROTTLE_RATES['vote']
    """
    scope = "vote"
