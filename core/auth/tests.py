from datetime import timedelta
from unittest import mock

from django.conf import settings
from django.contrib.auth.models import User
from django.core import mail
from django.core.cache import cache
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from auth.services import AuthService
from auth.utils import (
    ACCESS,
    REFRESH,
    decode_token,
    generate_access_token,
    generate_refresh_token,
)

STRONG_PASSWORD = "Quiet-Harbor-42"


class SignupTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.url = reverse("signup")

    def test_signup_creates_unverified_user_and_emails_otp(self):
        response = self.client.post(
            self.url,
            {"username": "alice", "email": "Alice@Example.com", "password": STRONG_PASSWORD},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["message"], "user created successfully")
        self.assertIn("access_token", response.data)
        self.assertIn("refresh_token", response.data)
        self.assertIn(settings.JWT_ACCESS_COOKIE_NAME, response.cookies)

        user = User.objects.get(username="alice")
        self.assertEqual(user.email, "alice@example.com")
        self.assertFalse(user.profile.is_verified)
        self.assertIsNotNone(user.profile.otp)

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["alice@example.com"])
        self.assertNotIn("otp", response.data["user"]["profile"])

    def test_signup_requires_all_fields(self):
        response = self.client.post(self.url, {"username": "alice"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "All fields are required")

    def test_signup_duplicate_email_conflicts(self):
        User.objects.create_user(username="first", email="alice@example.com", password="x")

        response = self.client.post(
            self.url,
            {"username": "alice", "email": "alice@example.com", "password": STRONG_PASSWORD},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["message"], "User already exists")

    def test_signup_rejects_weak_password(self):
        response = self.client.post(
            self.url,
            {"username": "alice", "email": "alice@example.com", "password": "123"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(User.objects.filter(username="alice").exists())


class LoginTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.user = User.objects.create_user(
            username="alice", email="alice@example.com", password=STRONG_PASSWORD
        )
        self.url = reverse("login")

    def test_login_returns_tokens(self):
        response = self.client.post(
            self.url, {"email": "alice@example.com", "password": STRONG_PASSWORD}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["user"]["id"], self.user.pk)
        self.assertIn(settings.JWT_REFRESH_COOKIE_NAME, response.cookies)

    def test_login_with_wrong_password(self):
        response = self.client.post(
            self.url, {"email": "alice@example.com", "password": "nope"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["message"], "Invalid email or password")

    def test_bearer_token_authenticates_profile_request(self):
        login = self.client.post(
            self.url, {"email": "alice@example.com", "password": STRONG_PASSWORD}, format="json"
        )
        self.client.cookies.clear()

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access_token']}")
        response = self.client.get(reverse("profile"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["user"]["username"], "alice")

    def test_invalid_bearer_token_is_rejected(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
        response = self.client.get(reverse("profile"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_profile_requires_identity(self):
        response = self.client.get(reverse("profile"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class OTPTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.user = User.objects.create_user(
            username="alice", email="alice@example.com", password=STRONG_PASSWORD
        )
        with mock.patch("auth.services.generate_otp_code", return_value="123456"):
            AuthService._issue_otp(self.user)
        self.client.force_authenticate(user=self.user)
        self.url = reverse("otp_verify")

    def test_valid_otp_verifies_user(self):
        response = self.client.post(self.url, {"otp": "123456"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "User verified successfully")
        self.assertTrue(decode_token(response.data["access_token"], expected_type=ACCESS)["verified"])
        self.user.profile.refresh_from_db()
        self.assertTrue(self.user.profile.is_verified)
        self.assertIsNone(self.user.profile.otp)

    def test_wrong_otp_is_rejected(self):
        response = self.client.post(self.url, {"otp": "000000"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Invalid OTP")

    def test_expired_otp_is_rejected(self):
        profile = self.user.profile
        profile.otp_expires_at = timezone.now() - timedelta(minutes=1)
        profile.save()

        response = self.client.post(self.url, {"otp": "123456"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Otp is expired")

    def test_repeated_failures_lock_verification(self):
        for _ in range(AuthService.OTP_VERIFY_MAX_ATTEMPTS):
            self.client.post(self.url, {"otp": "000000"}, format="json")

        response = self.client.post(self.url, {"otp": "123456"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.user.profile.refresh_from_db()
        self.assertFalse(self.user.profile.is_verified)

    def test_already_verified_user_cannot_verify_again(self):
        self.client.post(self.url, {"otp": "123456"}, format="json")
        response = self.client.post(self.url, {"otp": "123456"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "User is already verified")

    def test_resend_replaces_otp_and_is_rate_limited(self):
        resend_url = reverse("otp_resend")

        with mock.patch("auth.services.generate_otp_code", return_value="654321"):
            response = self.client.post(resend_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(mail.outbox), 1)

        old = self.client.post(self.url, {"otp": "123456"}, format="json")
        self.assertEqual(old.status_code, status.HTTP_400_BAD_REQUEST)

        for _ in range(AuthService.OTP_REQUEST_MAX - 1):
            self.client.post(resend_url)
        limited = self.client.post(resend_url)
        self.assertEqual(limited.status_code, status.HTTP_429_TOO_MANY_REQUESTS)


class TokenTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.user = User.objects.create_user(username="alice", password="password")

    def test_refresh_issues_new_access_token(self):
        response = self.client.post(
            reverse("refresh_token"),
            {"refresh_token": generate_refresh_token(self.user)},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access_token", response.data)

    def test_refresh_rejects_garbage(self):
        response = self.client.post(
            reverse("refresh_token"), {"refresh_token": "garbage"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_clears_cookies(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.post(reverse("logout"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.cookies[settings.JWT_ACCESS_COOKIE_NAME].value, "")

    def test_access_token_claims(self):
        payload = decode_token(generate_access_token(self.user), expected_type=ACCESS)

        self.assertEqual(payload["user_id"], self.user.pk)
        self.assertFalse(payload["verified"])
        self.assertNotIn("email", payload)
        self.assertNotIn("username", payload)

    def test_token_type_is_enforced(self):
        refresh = generate_refresh_token(self.user)

        self.assertIsNone(decode_token(refresh, expected_type=ACCESS))
        self.assertEqual(decode_token(refresh, expected_type=REFRESH)["user_id"], self.user.pk)
        self.assertIsNone(decode_token("garbage"))

    def test_refresh_token_cannot_be_used_as_bearer(self):
        self.client.credentials(
            HTTP_AUTHORIZATION=f"Bearer {generate_refresh_token(self.user)}"
        )
        response = self.client.get(reverse("profile"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_access_token_is_not_a_refresh_token(self):
        response = self.client.post(
            reverse("refresh_token"),
            {"refresh_token": generate_access_token(self.user)},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
