from django.urls import path
from .views import (
    SignupView,
    LoginView,
    ProfileView,
    OTPVerifyView,
    OTPResendView,
    RefreshTokenView,
    LogoutView,
)

urlpatterns = [
    # Account endpoints
    path('signup/', SignupView.as_view(), name='signup'),
    path('login/', LoginView.as_view(), name='login'),
    path('profile/', ProfileView.as_view(), name='profile'),

    # Email OTP endpoints
    path('verify/', OTPVerifyView.as_view(), name='otp_verify'),
    path('otp/resend/', OTPResendView.as_view(), name='otp_resend'),

    # Token endpoints
    path('refresh/', RefreshTokenView.as_view(), name='refresh_token'),
    path('logout/', LogoutView.as_view(), name='logout'),
]
