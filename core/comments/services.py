import logging

from django.db import transaction

from answers.models import Answer
from project.exceptions import (
    AuthError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from project.permissions import can_mutate
from .models import Comment

logger = logging.getLogger(__name__)


def _removed_comments(delete_result):
    # QuerySet.delete() returns (total, {"app_label.Model": count, ...})
    _, per_model = delete_result
    return per_model.get(Comment._meta.label, 0)


class CommentService:
    """
    Service layer for comments on answers.
    Comment trees live under a single answer; deleting a comment removes its replies.
    """

    @staticmethod
    def delete_all_for_answer(answer_id):
        """
        Remove every comment attached to ``answer_id`` and return how many went.
        Safe to call repeatedly: once the answer has no comments it returns 0.
        """
        comments = Comment.objects.filter(answer_id=answer_id)
        if not comments.exists():
            return 0

        removed = _removed_comments(comments.delete())
        logger.info("Removed %s comments of answer %s", removed, answer_id)
        return removed

    @staticmethod
    def list_for_answer(answer_id):
        if not Answer.objects.filter(pk=answer_id).exists():
            raise NotFoundError("Answer not found")
        return (
            Comment.objects.filter(answer_id=answer_id)
            .select_related("author")
            .order_by("created_at", "id")
        )

    @staticmethod
    def create(answer_id, author, content, parent_comment_id=None):
        CommentService._require_identity(author)

        try:
            answer = Answer.objects.get(pk=answer_id)
        except (Answer.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Answer not found")

        content = CommentService._clean_content(content)

        parent = None
        if parent_comment_id:
            try:
                parent = Comment.objects.get(pk=parent_comment_id)
            except (Comment.DoesNotExist, ValueError, TypeError):
                raise NotFoundError("Parent comment not found")
            if parent.answer_id != answer.pk:
                raise ValidationError("Parent comment belongs to a different answer")

        comment = Comment.objects.create(
            answer=answer,
            author=author,
            content=content,
            parent_comment=parent,
        )
        logger.info(
            "User %s commented on answer %s (comment %s)", author.pk, answer.pk, comment.pk
        )
        return comment

    @staticmethod
    def edit(comment_id, actor, content):
        CommentService._require_identity(actor)
        comment = CommentService._get_comment(comment_id)

        if not can_mutate(actor, comment):
            logger.warning("User %s tried to edit comment %s", actor.pk, comment.pk)
            raise AuthorizationError("User is not authorized to edit this comment")

        comment.content = CommentService._clean_content(content)
        comment.save(update_fields=["content", "updated_at"])
        return comment

    @staticmethod
    def delete(comment_id, actor):
        """Delete a comment together with all of its replies. Returns the number removed."""
        CommentService._require_identity(actor)

        with transaction.atomic():
            comment = CommentService._get_comment(comment_id)

            if not can_mutate(actor, comment):
                logger.warning("User %s tried to delete comment %s", actor.pk, comment.pk)
                raise AuthorizationError("User is not authorized to delete this comment")

            removed = _removed_comments(comment.delete())

        logger.info("User %s deleted comment %s (%s removed)", actor.pk, comment_id, removed)
        return removed

    @staticmethod
    def _get_comment(comment_id):
        try:
            return Comment.objects.get(pk=comment_id)
        except (Comment.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Comment not found")

    @staticmethod
    def _require_identity(actor):
        if actor is None or not actor.is_authenticated:
            raise AuthError("User not authenticated")

    @staticmethod
    def _clean_content(content):
        content = content.strip() if isinstance(content, str) else ""
        if not content:
            raise ValidationError("Content is required")
        if len(content) > Comment.CONTENT_MAX_LENGTH:
            raise ValidationError(
                f"Content must be at most {Comment.CONTENT_MAX_LENGTH} characters"
            )
        return content
