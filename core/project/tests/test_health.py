from unittest import mock

import pytest


@pytest.mark.django_db
def test_health_check_reports_database_and_cache(client):
    response = client.get("/health/")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["checks"] == {"database": "ok", "cache": "ok"}


@pytest.mark.django_db
def test_broker_is_checked_when_otp_mail_is_queued(client, settings):
    settings.OTP_EMAIL_ASYNC = True

    with mock.patch("project.health._check_broker") as check_broker:
        response = client.get("/health/")

    check_broker.assert_called_once_with()
    assert response.json()["checks"]["broker"] == "ok"


@pytest.mark.django_db
def test_failing_dependency_returns_503(client):
    with mock.patch("project.health._check_cache", side_effect=RuntimeError("redis down")):
        response = client.get("/health/")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"
    assert response.json()["checks"]["cache"] == "error: redis down"
