import logging
import hmac
from datetime import timedelta

from django.conf import settings
from django.contrib.auth.models import User
from django.contrib.auth.password_validation import validate_password
from django.core.cache import cache
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import transaction
from django.utils import timezone

from project.exceptions import (
    AuthError,
    ConflictError,
    TooManyRequests,
    ValidationError,
)
from .utils import generate_tokens, generate_otp_code, hash_otp
from .tasks import send_otp_email_task
from .emails import send_otp_email

logger = logging.getLogger(__name__)


class AuthService:
    OTP_VERIFY_MAX_ATTEMPTS = 5
    OTP_VERIFY_WINDOW_SECONDS = 10 * 60
    OTP_VERIFY_LOCK_SECONDS = 15 * 60
    OTP_REQUEST_WINDOW_SECONDS = 10 * 60
    OTP_REQUEST_MAX = 5

    @staticmethod
    def _otp_attempts_key(user_id) -> str:
        return f"auth:otp:verify_attempts:{user_id}"

    @staticmethod
    def _otp_lock_key(user_id) -> str:
        return f"auth:otp:verify_lock:{user_id}"

    @staticmethod
    def _otp_request_key(user_id) -> str:
        return f"auth:otp:request_count:{user_id}"

    @staticmethod
    def signup(username, email, password):
        """
        Registers a new, unverified user and emails them a verification OTP.

        Returns:
            tuple: (User, tokens_dict). The user can act right away; verification
            only flips `profile.is_verified`.
        """
        username = (username or "").strip()
        email = (email or "").lower().strip()

        if not username or not email or not password:
            raise ValidationError("All fields are required")

        try:
            validate_email(email)
        except DjangoValidationError:
            raise ValidationError("Enter a valid email address.")

        if User.objects.filter(email__iexact=email).exists():
            logger.warning("Signup rejected: email %s already registered", email)
            raise ConflictError("User already exists")

        if User.objects.filter(username__iexact=username).exists():
            raise ConflictError("Username is already taken")

        try:
            validate_password(password, user=User(username=username, email=email))
        except DjangoValidationError as exc:
            raise ValidationError(exc.messages[0])

        with transaction.atomic():
            user = User.objects.create_user(
                username=username, email=email, password=password
            )
            otp_code = AuthService._issue_otp(user)

        logger.info("User %s created for %s", user.pk, email)
        AuthService._deliver_otp(email, otp_code)

        return user, generate_tokens(user)

    @staticmethod
    def login(email, password):
        """Authenticates by email + password. Returns (User, tokens_dict)."""
        email = (email or "").lower().strip()
        if not email or not password:
            raise ValidationError("All fields are required")

        user = User.objects.select_related("profile").filter(email__iexact=email).first()
        if user is None or not user.check_password(password):
            logger.warning("Login failed for %s", email)
            raise AuthError("Invalid email or password")

        if not user.is_active:
            raise AuthError("User account is disabled.")

        logger.info("Login successful for user %s", user.pk)
        return user, generate_tokens(user)

    @staticmethod
    def verify_otp(user, otp):
        """Checks the submitted OTP against the pending one and marks the user verified."""
        otp = (otp or "").strip()
        if not otp:
            raise ValidationError("OTP is required")

        profile = user.profile
        if profile.is_verified:
            raise ValidationError("User is already verified")

        lock_key = AuthService._otp_lock_key(user.pk)
        attempts_key = AuthService._otp_attempts_key(user.pk)

        if cache.get(lock_key):
            logger.warning(f"OTP verification locked for user {user.pk}")
            raise TooManyRequests("Too many invalid attempts. Try again later.")

        if not profile.otp or not profile.otp_expires_at or timezone.now() > profile.otp_expires_at:
            logger.info("Expired OTP submitted by user %s", user.pk)
            raise ValidationError("Otp is expired")

        if not hmac.compare_digest(profile.otp, hash_otp(user.email, otp)):
            attempts = cache.get(attempts_key, 0) + 1
            cache.set(
                attempts_key, attempts, timeout=AuthService.OTP_VERIFY_WINDOW_SECONDS
            )
            if attempts >= AuthService.OTP_VERIFY_MAX_ATTEMPTS:
                cache.set(lock_key, 1, timeout=AuthService.OTP_VERIFY_LOCK_SECONDS)
            logger.warning(f"Invalid OTP for user {user.pk} (attempt {attempts})")
            raise ValidationError("Invalid OTP")

        profile.is_verified = True
        profile.clear_otp()
        profile.save(update_fields=["is_verified", "otp", "otp_expires_at", "updated_at"])

        cache.delete(attempts_key)
        cache.delete(lock_key)

        logger.info("User %s verified their email", user.pk)
        return user

    @staticmethod
    def resend_otp(user):
        """Issues a fresh OTP (invalidating the previous one) and emails it."""
        if user.profile.is_verified:
            raise ValidationError("User is already verified")

        request_key = AuthService._otp_request_key(user.pk)
        request_count = cache.get(request_key, 0)
        if request_count >= AuthService.OTP_REQUEST_MAX:
            raise TooManyRequests("Too many OTP requests. Please try again later.")

        otp_code = AuthService._issue_otp(user)
        AuthService._deliver_otp(user.email, otp_code)

        cache.set(
            request_key,
            request_count + 1,
            timeout=AuthService.OTP_REQUEST_WINDOW_SECONDS,
        )
        return True

    @staticmethod
    def _issue_otp(user):
        """Stores the digest of a new OTP on the profile and returns the clear code."""
        otp_code = generate_otp_code()
        profile = user.profile
        profile.otp = hash_otp(user.email, otp_code)
        profile.otp_expires_at = timezone.now() + timedelta(
            minutes=settings.OTP_EXPIRY_MINUTES
        )
        profile.save(update_fields=["otp", "otp_expires_at", "updated_at"])
        return otp_code

    @staticmethod
    def _deliver_otp(email, otp_code):
        if settings.OTP_EMAIL_ASYNC:
            try:
                send_otp_email_task.delay(email, otp_code)
                return
            except Exception:
                logger.exception(
                    "Failed to enqueue OTP email task. Falling back to sync send for %s",
                    email,
                )
        send_otp_email(email, otp_code)
