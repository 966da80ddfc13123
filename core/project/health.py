import logging

from django.conf import settings
from django.core.cache import cache
from django.db import connection
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from project.celery import app as celery_app

logger = logging.getLogger(__name__)


def _check_database():
    connection.ensure_connection()


def _check_cache():
    # OTP lockouts and throttles live in the cache
    cache.set("health:ping", "pong", 10)
    if cache.get("health:ping") != "pong":
        raise RuntimeError("cache read/write failed")


def _check_broker():
    with celery_app.connection_for_write() as conn:
        conn.ensure_connection(max_retries=1)


class HealthCheckView(APIView):
    """
    Liveness for the forum API.

    Reports the database, the cache and, when OTP mail is queued through
    Celery, the broker. Any failure turns the response into a 503.
    """

    permission_classes = []
    authentication_classes = []
    throttle_classes = []

    def get(self, request):
        checks = {"database": _check_database, "cache": _check_cache}
        if settings.OTP_EMAIL_ASYNC:
            checks["broker"] = _check_broker

        results = {}
        for name, check in checks.items():
            try:
                check()
                results[name] = "ok"
            except Exception as exc:
                logger.error("Health check %s failed: %s", name, exc)
                results[name] = f"error: {exc}"

        healthy = all(value == "ok" for value in results.values())
        return Response(
            {
                "status": "healthy" if healthy else "unhealthy",
                "service": "stackwave-api",
                "checks": results,
            },
            status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        )
