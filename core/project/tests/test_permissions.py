from types import SimpleNamespace

from django.contrib.auth.models import AnonymousUser

from project.permissions import can_mutate, is_author


def _actor(pk):
    return SimpleNamespace(pk=pk, is_authenticated=True)


def test_author_can_mutate_own_resource():
    resource = SimpleNamespace(author_id=7)

    assert can_mutate(_actor(7), resource)
    assert is_author(_actor(7), resource)


def test_other_user_cannot_mutate():
    assert not can_mutate(_actor(8), SimpleNamespace(author_id=7))


def test_anonymous_or_missing_actor_cannot_mutate():
    resource = SimpleNamespace(author_id=7)

    assert not can_mutate(None, resource)
    assert not can_mutate(AnonymousUser(), resource)


def test_resource_without_author_cannot_be_mutated():
    assert not can_mutate(_actor(7), SimpleNamespace(author_id=None))
    assert not can_mutate(_actor(7), object())
