from drf_spectacular.utils import extend_schema, OpenApiTypes
from django.conf import settings
from django.contrib.auth.models import User
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from project.exceptions import AuthError, ValidationError
from users.serializers import UserSerializer
from .serializers import (
    AuthTokenSerializer,
    LoginSerializer,
    OTPVerifySerializer,
    RefreshTokenSerializer,
    SignupSerializer,
)
from .services import AuthService
from .throttles import AuthRateThrottle, OTPRequestThrottle, SensitiveOperationThrottle
from .utils import REFRESH, decode_token, generate_access_token


def _set_auth_cookies(response, access_token: str, refresh_token: str | None = None):
    response.set_cookie(
        settings.JWT_ACCESS_COOKIE_NAME,
        access_token,
        httponly=True,
        secure=settings.JWT_COOKIE_SECURE,
        samesite=settings.JWT_COOKIE_SAMESITE,
        max_age=settings.JWT_ACCESS_TOKEN_LIFETIME,
        path="/",
    )
    if refresh_token:
        response.set_cookie(
            settings.JWT_REFRESH_COOKIE_NAME,
            refresh_token,
            httponly=True,
            secure=settings.JWT_COOKIE_SECURE,
            samesite=settings.JWT_COOKIE_SAMESITE,
            max_age=settings.JWT_REFRESH_TOKEN_LIFETIME,
            path="/",
        )


def _clear_auth_cookies(response):
    response.delete_cookie(settings.JWT_ACCESS_COOKIE_NAME, path="/")
    response.delete_cookie(settings.JWT_REFRESH_COOKIE_NAME, path="/")


def _auth_success_response(request, user, tokens, message, status_code=status.HTTP_200_OK):
    payload = {
        "message": message,
        "access_token": tokens["access_token"],
        "refresh_token": tokens["refresh_token"],
        "user": UserSerializer(user, context={"request": request}).data,
    }
    response = Response(payload, status=status_code)
    _set_auth_cookies(
        response,
        access_token=tokens["access_token"],
        refresh_token=tokens["refresh_token"],
    )
    return response


class SignupView(APIView):
    """
    Register with username, email and password.
    Accepts: { "username": "...", "email": "...", "password": "..." }
    Returns: { "access_token": "...", "refresh_token": "...", "user": {...} }

    A verification OTP is emailed; the account starts unverified.
    """

    permission_classes = [AllowAny]
    throttle_classes = [AuthRateThrottle]
    serializer_class = SignupSerializer

    @extend_schema(request=SignupSerializer, responses={201: AuthTokenSerializer})
    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user, tokens = AuthService.signup(
            data.get("username"), data.get("email"), data.get("password")
        )
        return _auth_success_response(
            request,
            user,
            tokens,
            "user created successfully",
            status_code=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    """Log in with email + password."""

    permission_classes = [AllowAny]
    throttle_classes = [AuthRateThrottle]
    serializer_class = LoginSerializer

    @extend_schema(request=LoginSerializer, responses={200: AuthTokenSerializer})
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user, tokens = AuthService.login(data.get("email"), data.get("password"))
        return _auth_success_response(request, user, tokens, "User logged in successfully")


class ProfileView(APIView):
    """Return the authenticated user."""

    permission_classes = [IsAuthenticated]
    serializer_class = UserSerializer

    def get(self, request):
        return Response(
            {"user": UserSerializer(request.user, context={"request": request}).data},
            status=status.HTTP_200_OK,
        )


class OTPVerifyView(APIView):
    """
    Confirm the signup email.
    Accepts: { "otp": "123456" }
    """

    permission_classes = [IsAuthenticated]
    throttle_classes = [SensitiveOperationThrottle]
    serializer_class = OTPVerifySerializer

    @extend_schema(request=OTPVerifySerializer, responses={200: OpenApiTypes.OBJECT})
    def post(self, request):
        serializer = OTPVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = AuthService.verify_otp(request.user, serializer.validated_data.get("otp"))

        # Reissue the access token so its `verified` claim is current
        access_token = generate_access_token(user)
        response = Response(
            {
                "message": "User verified successfully",
                "access_token": access_token,
                "user": UserSerializer(user, context={"request": request}).data,
            },
            status=status.HTTP_200_OK,
        )
        _set_auth_cookies(response, access_token=access_token)
        return response


class OTPResendView(APIView):
    """Email a fresh verification OTP to the authenticated user."""

    permission_classes = [IsAuthenticated]
    throttle_classes = [OTPRequestThrottle]

    @extend_schema(request=None, responses={200: OpenApiTypes.OBJECT})
    def post(self, request):
        AuthService.resend_otp(request.user)
        return Response({"message": "OTP sent successfully"}, status=status.HTTP_200_OK)


class RefreshTokenView(APIView):
    """Refresh the access token using a refresh token."""

    permission_classes = [AllowAny]
    serializer_class = RefreshTokenSerializer

    def post(self, request):
        token = request.data.get("refresh_token") or request.COOKIES.get(
            settings.JWT_REFRESH_COOKIE_NAME
        )
        if not token:
            raise ValidationError("Refresh token is required")

        payload = decode_token(token, expected_type=REFRESH)
        if not payload:
            raise AuthError("Invalid or expired refresh token")

        user = (
            User.objects.select_related("profile")
            .filter(id=payload.get("user_id"), is_active=True)
            .first()
        )
        if user is None:
            raise AuthError("Invalid or expired refresh token")

        new_access_token = generate_access_token(user)

        response = Response(
            {
                "access_token": new_access_token,
                "user": UserSerializer(user, context={"request": request}).data,
            },
            status=status.HTTP_200_OK,
        )
        _set_auth_cookies(response, access_token=new_access_token)
        return response


class LogoutView(APIView):
    """Logout the user (client should delete tokens)."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=None,
        responses={200: OpenApiTypes.OBJECT},
        description="Logout the user. Client should discard tokens.",
    )
    def post(self, request):
        # Stateless JWT: logging out means dropping the cookies.
        response = Response(
            {"message": "Successfully logged out"}, status=status.HTTP_200_OK
        )
        _clear_auth_cookies(response)
        return response
