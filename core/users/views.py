import logging

from django.contrib.auth.models import User
from django.contrib.auth.validators import UnicodeUsernameValidator
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction, IntegrityError
from django.shortcuts import get_object_or_404
from django.utils.decorators import method_decorator
from django.views.decorators.cache import never_cache
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiTypes, OpenApiParameter

from project.exceptions import ValidationError
from .serializers import UserSerializer, PublicUserSerializer, ProfileUpdateSerializer

logger = logging.getLogger(__name__)


@method_decorator(never_cache, name="dispatch")
class CurrentUserView(APIView):
    """Get the currently authenticated user."""

    permission_classes = [IsAuthenticated]
    serializer_class = UserSerializer

    def get(self, request):
        return Response(
            UserSerializer(request.user, context={"request": request}).data,
            status=status.HTTP_200_OK,
        )


class ProfileUpdateView(APIView):
    """
    Updates the authenticated user's `username` and/or `bio`.

    Returns the updated user object.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ProfileUpdateSerializer

    @extend_schema(
        request=ProfileUpdateSerializer,
        responses={200: UserSerializer},
        description="Update current user profile and identity details.",
    )
    def patch(self, request):
        serializer = ProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = request.user
        profile = user.profile

        if "username" in data:
            requested_username = data["username"].strip()
            if not requested_username:
                raise ValidationError("Username cannot be empty.")

            try:
                UnicodeUsernameValidator()(requested_username)
            except DjangoValidationError:
                raise ValidationError(
                    "Username can only contain letters, numbers, and @/./+/-/_ characters."
                )

            username_taken = (
                User.objects.filter(username__iexact=requested_username)
                .exclude(pk=user.pk)
                .exists()
            )
            if username_taken:
                raise ValidationError("Username is already taken.")

            user.username = requested_username

        if "bio" in data:
            profile.bio = data["bio"]

        try:
            with transaction.atomic():
                user.save()
                profile.save()
        except IntegrityError:
            raise ValidationError("Username is already taken.")

        logger.info("Profile updated for user %s", user.pk)
        return Response(
            UserSerializer(user, context={"request": request}).data,
            status=status.HTTP_200_OK,
        )


class ProfileDetailView(APIView):
    """View to get public profile details."""

    permission_classes = [AllowAny]
    serializer_class = PublicUserSerializer

    @extend_schema(
        parameters=[OpenApiParameter("username", str, OpenApiParameter.PATH)],
        responses={200: PublicUserSerializer, 404: OpenApiTypes.OBJECT},
        description="Get public profile details by username.",
    )
    def get(self, request, username):
        user = get_object_or_404(
            User.objects.select_related("profile"), username=username
        )
        return Response(PublicUserSerializer(user).data, status=status.HTTP_200_OK)
