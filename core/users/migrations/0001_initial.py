from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="UserProfile",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "is_verified",
                    models.BooleanField(
                        default=False,
                        help_text="Whether the signup email was confirmed with an OTP.",
                    ),
                ),
                (
                    "otp",
                    models.CharField(
                        blank=True,
                        help_text="HMAC digest of the pending OTP.",
                        max_length=128,
                        null=True,
                    ),
                ),
                ("otp_expires_at", models.DateTimeField(blank=True, null=True)),
                (
                    "bio",
                    models.TextField(
                        blank=True,
                        help_text="Short user biography.",
                        max_length=500,
                        null=True,
                    ),
                ),
                (
                    "answer_given_count",
                    models.PositiveIntegerField(
                        default=0, help_text="Number of answers authored."
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        help_text="The associated Django User account.",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "User Profile",
                "verbose_name_plural": "User Profiles",
            },
        ),
    ]
