from django.contrib.auth.models import User
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from users.models import UserProfile


class CurrentUserTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="alice",
            email="alice@example.com",
            password="password",
        )

    def test_profile_is_created_with_user(self):
        self.assertTrue(UserProfile.objects.filter(user=self.user).exists())
        self.assertFalse(self.user.profile.is_verified)
        self.assertEqual(self.user.profile.answer_given_count, 0)

    def test_current_user_hides_otp(self):
        self.user.profile.otp = "digest"
        self.user.profile.save()
        self.client.force_authenticate(user=self.user)

        response = self.client.get(reverse("get_current_user"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["email"], "alice@example.com")
        self.assertNotIn("otp", response.data["profile"])
        self.assertNotIn("password", response.data)

    def test_current_user_requires_identity(self):
        response = self.client.get(reverse("get_current_user"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class ProfileUpdateTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="alice", password="password")
        User.objects.create_user(username="bob", password="password")
        self.url = reverse("update_profile")
        self.client.force_authenticate(user=self.user)

    def test_update_username_and_bio(self):
        response = self.client.patch(
            self.url, {"username": "alice_w", "bio": "Answers SQL questions"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.username, "alice_w")
        self.assertEqual(self.user.profile.bio, "Answers SQL questions")

    def test_taken_username_is_rejected(self):
        response = self.client.patch(self.url, {"username": "BOB"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Username is already taken.")

    def test_invalid_username_is_rejected(self):
        response = self.client.patch(self.url, {"username": "has space"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class PublicProfileTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="alice", email="alice@example.com", password="password"
        )
        UserProfile.adjust_answer_count(self.user.pk, 3)

    def test_public_profile_hides_email(self):
        response = self.client.get(reverse("profile_detail", args=["alice"]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["answer_given_count"], 3)
        self.assertNotIn("email", response.data)

    def test_unknown_username_returns_404(self):
        response = self.client.get(reverse("profile_detail", args=["nobody"]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class AnswerCountTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="alice", password="password")

    def test_decrement_is_clamped_at_zero(self):
        UserProfile.adjust_answer_count(self.user.pk, 1)
        UserProfile.adjust_answer_count(self.user.pk, -5)

        self.user.profile.refresh_from_db()
        self.assertEqual(self.user.profile.answer_given_count, 0)

    def test_unknown_user_touches_nothing(self):
        self.assertEqual(UserProfile.adjust_answer_count(999999, 1), 0)
