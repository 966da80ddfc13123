from rest_framework import serializers
from django.contrib.auth.models import User
from drf_spectacular.utils import extend_schema_field
from .models import UserProfile


class UserProfileSerializer(serializers.ModelSerializer):

    class Meta:
        model = UserProfile

        # OTP digest and expiry are intentionally excluded
        fields = [
            "is_verified",
            "answer_given_count",
            "bio",
            "created_at",
        ]


class UserSerializer(serializers.ModelSerializer):

    # Profile is injected manually to tolerate users created without one
    profile = serializers.SerializerMethodField()

    class Meta:
        model = User

        fields = [
            "id",
            "username",
            "email",
            "profile",
            "date_joined",
        ]

    @extend_schema_field(UserProfileSerializer)
    def get_profile(self, obj):
        profile = getattr(obj, "profile", None)
        if profile is None:
            return None
        return UserProfileSerializer(profile, context=self.context).data


class PublicUserSerializer(serializers.ModelSerializer):
    """Profile data safe to show to anyone, no email."""

    bio = serializers.CharField(source="profile.bio", read_only=True, allow_null=True)
    is_verified = serializers.BooleanField(source="profile.is_verified", read_only=True)
    answer_given_count = serializers.IntegerField(source="profile.answer_given_count", read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "bio", "is_verified", "answer_given_count", "date_joined"]


class UserSummarySerializer(serializers.Serializer):
    """Compact author block embedded in questions, answers and comments."""

    id = serializers.IntegerField()
    username = serializers.CharField()


class ProfileUpdateSerializer(serializers.Serializer):
    username = serializers.CharField(required=False, max_length=150)
    bio = serializers.CharField(required=False, allow_blank=True, max_length=500)
