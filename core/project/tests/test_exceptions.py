import pytest
from rest_framework import exceptions, status

from project.exceptions import (
    AuthError,
    NotFoundError,
    SelfVoteError,
    api_exception_handler,
)


def test_service_errors_render_as_message():
    response = api_exception_handler(NotFoundError("Answer not found"), {})

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.data == {"message": "Answer not found"}


def test_self_vote_is_forbidden_with_default_message():
    response = api_exception_handler(SelfVoteError(), {})

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.data == {"message": "User cannot vote on their own answer"}


def test_auth_error_is_unauthenticated():
    response = api_exception_handler(AuthError(), {})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.data["message"] == "User not authenticated"


def test_field_errors_keep_details():
    exc = exceptions.ValidationError({"title": ["This field may not be blank."]})

    response = api_exception_handler(exc, {})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["message"] == "This field may not be blank."
    assert response.data["errors"] == {"title": ["This field may not be blank."]}


def test_unexpected_error_becomes_500_with_raw_message(db):
    response = api_exception_handler(RuntimeError("database went away"), {})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.data == {"message": "database went away"}


@pytest.mark.django_db
@pytest.mark.parametrize(
    "path",
    ["/api/answers/abc/", "/api/answers/abc/upvote/", "/api/comments/abc/", "/no-such-route/"],
)
def test_unmatched_routes_answer_with_json_message(client, path):
    response = client.get(path)

    assert response.status_code == 404
    assert response["Content-Type"] == "application/json"
    assert response.json() == {"message": "Not found."}
