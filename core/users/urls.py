from django.urls import path
from .views import (
    CurrentUserView,
    ProfileUpdateView,
    ProfileDetailView,
)

urlpatterns = [
    path("user/", CurrentUserView.as_view(), name="get_current_user"),
    path("user/update/", ProfileUpdateView.as_view(), name="update_profile"),
    path("users/<str:username>/", ProfileDetailView.as_view(), name="profile_detail"),
]
