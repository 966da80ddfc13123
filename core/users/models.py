from django.db import models
from django.db.models import F
from django.db.models.functions import Greatest
from django.contrib.auth.models import User
from django.db.models.signals import post_save
from django.dispatch import receiver


class UserProfile(models.Model):
    """
    Forum-specific data attached to Django's built-in User.

    Responsibilities:
    1.  **Email Verification**: Tracks whether the signup email was confirmed and
        holds the pending OTP (stored as an HMAC digest, never in clear text).
    2.  **Reputation Counters**: Keeps the denormalized number of answers the user
        has written. Only ever changed through `adjust_answer_count`.
    3.  **Profile Data**: Short public biography.

    Relationships:
    - OneToOne with Django's built-in User model.
    """

    # One-to-one link insures strict 1:1 relationship between auth user and profile
    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='profile',
        help_text="The associated Django User account."
    )

    # Email verification
    is_verified = models.BooleanField(default=False, help_text="Whether the signup email was confirmed with an OTP.")
    otp = models.CharField(max_length=128, blank=True, null=True, help_text="HMAC digest of the pending OTP.")
    otp_expires_at = models.DateTimeField(blank=True, null=True)

    bio = models.TextField(max_length=500, blank=True, null=True, help_text="Short user biography.")

    answer_given_count = models.PositiveIntegerField(default=0, help_text="Number of answers authored.")

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'User Profile'
        verbose_name_plural = 'User Profiles'

    @classmethod
    def adjust_answer_count(cls, user_id, delta):
        """
        Add `delta` to a user's answer counter in a single UPDATE statement.

        Decrements are clamped so the counter never drops below zero.
        Returns the number of profile rows touched (0 or 1).
        """
        if delta >= 0:
            expression = F('answer_given_count') + delta
        else:
            expression = Greatest(
                F('answer_given_count') + delta,
                0,
                output_field=models.IntegerField(),
            )
        return cls.objects.filter(user_id=user_id).update(answer_given_count=expression)

    def clear_otp(self):
        self.otp = None
        self.otp_expires_at = None

    def __str__(self):
        return f"{self.user.username} ({'verified' if self.is_verified else 'unverified'})"


@receiver(post_save, sender=User)
def create_user_profile(sender, instance, created, **kwargs):
    # Automatically create profile when a user is created
    if created and not hasattr(instance, 'profile'):
        UserProfile.objects.create(user=instance)
