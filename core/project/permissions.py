from rest_framework.permissions import BasePermission, SAFE_METHODS


def is_author(actor, resource):
    """True when ``resource.author_id`` is the authenticated ``actor``."""
    if actor is None or not getattr(actor, "is_authenticated", False):
        return False

    author_id = getattr(resource, "author_id", None)
    return author_id is not None and author_id == actor.pk


def can_mutate(actor, resource):
    """
    Return True when ``actor`` may edit or delete ``resource``.

    Ownership is the only capability: questions, answers and comments can be
    changed by their author and nobody else.
    """
    return is_author(actor, resource)


class IsOwnerOrReadOnly(BasePermission):
    """Read access for everyone, write access for the object's author only."""

    message = "You can only modify your own content."

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        return can_mutate(request.user, obj)
