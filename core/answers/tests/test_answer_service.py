from unittest import mock

from django.contrib.auth.models import AnonymousUser, User
from django.test import TestCase

from answers.models import Answer
from answers.services import AnswerService
from comments.models import Comment
from project.exceptions import AuthError, NotFoundError, ValidationError
from questions.models import Question


class AnswerServiceTests(TestCase):
    def setUp(self):
        self.author = User.objects.create_user(username="alice", password="password")
        self.voter = User.objects.create_user(username="bob", password="password")
        self.question = Question.objects.create(author=self.voter, title="Q", content="?")

    def test_operations_require_identity(self):
        answer = Answer.objects.create(question=self.question, author=self.author, content="a")

        with self.assertRaises(AuthError):
            AnswerService.submit(self.question.pk, AnonymousUser(), "content")
        with self.assertRaises(AuthError):
            AnswerService.edit(answer.pk, None, "content")
        with self.assertRaises(AuthError):
            AnswerService.delete(answer.pk, AnonymousUser())
        with self.assertRaises(AuthError):
            AnswerService.vote(answer.pk, None, AnswerService.UP)

    def test_missing_ids_are_validation_errors(self):
        with self.assertRaises(ValidationError):
            AnswerService.submit(None, self.author, "content")
        with self.assertRaises(ValidationError):
            AnswerService.vote(None, self.voter, AnswerService.UP)

    def test_unknown_vote_direction_is_rejected(self):
        answer = Answer.objects.create(question=self.question, author=self.author, content="a")

        with self.assertRaises(ValidationError):
            AnswerService.vote(answer.pk, self.voter, "sideways")

    def test_failed_cascade_rolls_back_delete(self):
        answer = AnswerService.submit(self.question.pk, self.author, "answer")
        Comment.objects.create(answer=answer, author=self.voter, content="c")

        with mock.patch(
            "answers.services.CommentService.delete_all_for_answer",
            side_effect=RuntimeError("comment store unavailable"),
        ):
            with self.assertRaises(RuntimeError):
                AnswerService.delete(answer.pk, self.author)

        self.assertTrue(Answer.objects.filter(pk=answer.pk).exists())
        self.assertEqual(Comment.objects.filter(answer=answer).count(), 1)
        self.author.profile.refresh_from_db()
        self.assertEqual(self.author.profile.answer_given_count, 1)

    def test_second_delete_is_not_found(self):
        answer = AnswerService.submit(self.question.pk, self.author, "answer")
        AnswerService.delete(answer.pk, self.author)

        with self.assertRaises(NotFoundError):
            AnswerService.delete(answer.pk, self.author)

    def test_release_counts_for_question(self):
        AnswerService.submit(self.question.pk, self.author, "one")
        AnswerService.submit(self.question.pk, self.author, "two")
        other_question = Question.objects.create(author=self.voter, title="Q2", content="?")
        AnswerService.submit(other_question.pk, self.author, "three")

        AnswerService.release_counts_for_question(self.question)

        self.author.profile.refresh_from_db()
        self.assertEqual(self.author.profile.answer_given_count, 1)
