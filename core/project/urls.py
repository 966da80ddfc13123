from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)
from project.health import HealthCheckView

urlpatterns = [
    # Health check
    path("health/", HealthCheckView.as_view(), name="health-check"),
    path("admin/", admin.site.urls),
    path("api/auth/", include("auth.urls")),
    path("api/profiles/", include("users.urls")),
    path("api/", include("questions.urls")),
    path("api/", include("answers.urls")),
    path("api/", include("comments.urls")),
    # Swagger Documentation routes
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
]

handler404 = "project.exceptions.json_not_found"
handler500 = "project.exceptions.json_server_error"
