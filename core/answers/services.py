import logging

from django.db import transaction
from django.db.models import Count, F

from comments.services import CommentService
from project.exceptions import (
    AuthError,
    AuthorizationError,
    NotFoundError,
    SelfVoteError,
    ValidationError,
)
from project.permissions import can_mutate, is_author
from questions.models import Question
from users.models import UserProfile
from .models import Answer

logger = logging.getLogger(__name__)


class AnswerService:
    """
    Service layer for answers: submission, edits, deletion and voting.

    Every operation checks identity, existence and ownership before it writes.
    Counters (`Answer.vote`, `UserProfile.answer_given_count`) are only touched
    with single-statement F() updates so concurrent requests cannot lose writes.
    """

    UP = "up"
    DOWN = "down"
    VOTE_DELTAS = {UP: 1, DOWN: -1}

    @staticmethod
    def submit(question_id, author, content):
        """Create an answer with a zero tally and count it for the author."""
        if not question_id:
            raise ValidationError("Question not found")

        AnswerService._require_identity(author)
        content = AnswerService._clean_content(content)

        try:
            question = Question.objects.get(pk=question_id)
        except (Question.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Question not found")

        with transaction.atomic():
            answer = Answer.objects.create(
                question=question,
                author=author,
                content=content,
            )
            UserProfile.adjust_answer_count(author.pk, 1)

        logger.info(
            "User %s answered question %s (answer %s)", author.pk, question.pk, answer.pk
        )
        return answer

    @staticmethod
    def edit(answer_id, actor, content):
        AnswerService._require_identity(actor)
        answer = AnswerService._get_answer(answer_id)

        # Ownership first: a stranger gets 403 whatever the content looks like
        if not can_mutate(actor, answer):
            logger.warning("User %s tried to edit answer %s", actor.pk, answer.pk)
            raise AuthorizationError("User is not authorized to edit this answer")

        answer.content = AnswerService._clean_content(content)
        answer.save(update_fields=["content", "updated_at"])

        logger.info("User %s edited answer %s", actor.pk, answer.pk)
        return answer

    @staticmethod
    def delete(answer_id, actor):
        """
        Delete an answer, its comments and one unit of the author's answer count.

        All three writes share one transaction: either everything is gone or
        nothing changed. Returns the number of comments removed.
        """
        AnswerService._require_identity(actor)

        with transaction.atomic():
            answer = AnswerService._get_answer(answer_id, for_update=True)

            if not can_mutate(actor, answer):
                logger.warning("User %s tried to delete answer %s", actor.pk, answer.pk)
                raise AuthorizationError("User is not authorized to delete this answer")

            author_id = answer.author_id
            comments_removed = CommentService.delete_all_for_answer(answer.pk)
            answer.delete()
            UserProfile.adjust_answer_count(author_id, -1)

        logger.info(
            "User %s deleted answer %s (%s comments removed)",
            actor.pk,
            answer_id,
            comments_removed,
        )
        return comments_removed

    @staticmethod
    def vote(answer_id, actor, direction):
        """
        Move an answer's tally by one and return the new value.

        Each call counts: the same user voting twice moves the tally twice.
        """
        AnswerService._require_identity(actor)

        delta = AnswerService.VOTE_DELTAS.get(direction)
        if delta is None:
            raise ValidationError("Vote direction must be 'up' or 'down'")

        with transaction.atomic():
            answer = AnswerService._get_answer(answer_id)

            if is_author(actor, answer):
                logger.warning("User %s tried to vote on own answer %s", actor.pk, answer.pk)
                raise SelfVoteError()

            Answer.objects.filter(pk=answer.pk).update(vote=F("vote") + delta)
            new_vote_count = Answer.objects.values_list("vote", flat=True).get(pk=answer.pk)

        logger.info(
            "User %s voted %s on answer %s (now %s)", actor.pk, direction, answer.pk, new_vote_count
        )
        return new_vote_count

    @staticmethod
    def list_for_question(question_id):
        if not Question.objects.filter(pk=question_id).exists():
            raise NotFoundError("Question not found")
        return (
            Answer.objects.filter(question_id=question_id)
            .select_related("author")
            .annotate(comments_count=Count("comments"))
            .order_by("-vote", "created_at", "id")
        )

    @staticmethod
    def get(answer_id):
        return AnswerService._get_answer(answer_id)

    @staticmethod
    def release_counts_for_question(question):
        """
        Take back the answer counts of everyone who answered ``question``.
        Call inside the transaction that deletes the question.
        """
        per_author = (
            Answer.objects.filter(question=question)
            .order_by()
            .values("author_id")
            .annotate(total=Count("id"))
        )
        for row in per_author:
            UserProfile.adjust_answer_count(row["author_id"], -row["total"])

    @staticmethod
    def _get_answer(answer_id, for_update=False):
        if not answer_id:
            raise ValidationError("AnswerId is required")

        queryset = Answer.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(pk=answer_id)
        except (Answer.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Answer not found")

    @staticmethod
    def _require_identity(actor):
        if actor is None or not actor.is_authenticated:
            raise AuthError("User not authenticated")

    @staticmethod
    def _clean_content(content):
        content = content.strip() if isinstance(content, str) else ""
        if not content:
            raise ValidationError("Content is required")
        if len(content) > Answer.CONTENT_MAX_LENGTH:
            raise ValidationError(
                f"Content must be at most {Answer.CONTENT_MAX_LENGTH} characters"
            )
        return content
