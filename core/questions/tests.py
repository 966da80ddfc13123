from django.contrib.auth.models import User
from django.db import connection
from django.test.utils import CaptureQueriesContext
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from answers.models import Answer
from answers.services import AnswerService
from comments.models import Comment
from questions.models import Question


class QuestionAPITests(APITestCase):
    def setUp(self):
        self.asker = User.objects.create_user(username="alice", password="password")
        self.answerer = User.objects.create_user(username="bob", password="password")
        self.list_url = reverse("question-list")

    def test_create_question_sets_author(self):
        self.client.force_authenticate(user=self.asker)
        response = self.client.post(
            self.list_url,
            {"title": "Why is my counter negative?", "content": "Details inside."},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["author"]["username"], "alice")
        self.assertEqual(response.data["answers_count"], 0)

    def test_create_requires_authentication(self):
        response = self.client.post(
            self.list_url, {"title": "T", "content": "C"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_title_is_required_and_bounded(self):
        self.client.force_authenticate(user=self.asker)

        blank = self.client.post(self.list_url, {"title": "  ", "content": "C"}, format="json")
        too_long = self.client.post(
            self.list_url, {"title": "t" * 301, "content": "C"}, format="json"
        )

        self.assertEqual(blank.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("title", blank.data["errors"])
        self.assertEqual(too_long.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters_by_username(self):
        Question.objects.create(author=self.asker, title="mine", content="c")
        Question.objects.create(author=self.answerer, title="theirs", content="c")

        response = self.client.get(self.list_url, {"username": "alice"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([q["title"] for q in response.data], ["mine"])

    def test_only_author_can_update(self):
        question = Question.objects.create(author=self.asker, title="T", content="C")
        url = reverse("question-detail", args=[question.pk])

        self.client.force_authenticate(user=self.answerer)
        self.assertEqual(
            self.client.patch(url, {"title": "hijacked"}, format="json").status_code,
            status.HTTP_403_FORBIDDEN,
        )

        self.client.force_authenticate(user=self.asker)
        response = self.client.patch(url, {"title": "Better title"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["title"], "Better title")

    def test_delete_question_removes_answers_and_releases_counts(self):
        question = Question.objects.create(author=self.asker, title="T", content="C")
        answer = AnswerService.submit(question.pk, self.answerer, "an answer")
        Comment.objects.create(answer=answer, author=self.asker, content="thanks")

        self.client.force_authenticate(user=self.asker)
        response = self.client.delete(reverse("question-detail", args=[question.pk]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Answer.objects.exists())
        self.assertFalse(Comment.objects.exists())
        self.answerer.profile.refresh_from_db()
        self.assertEqual(self.answerer.profile.answer_given_count, 0)

    def test_list_query_count_does_not_grow_with_questions(self):
        def list_queries():
            with CaptureQueriesContext(connection) as ctx:
                response = self.client.get(self.list_url)
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            return len(ctx.captured_queries), response

        first = Question.objects.create(author=self.asker, title="one", content="c")
        AnswerService.submit(first.pk, self.answerer, "an answer")
        baseline, _ = list_queries()

        for index in range(5):
            Question.objects.create(author=self.asker, title=f"more {index}", content="c")
        after, response = list_queries()

        self.assertEqual(after, baseline)
        counts = {row["title"]: row["answers_count"] for row in response.data}
        self.assertEqual(counts["one"], 1)
        self.assertEqual(counts["more 0"], 0)

    def test_deleting_asker_account_releases_answerer_counts(self):
        question = Question.objects.create(author=self.asker, title="T", content="C")
        AnswerService.submit(question.pk, self.answerer, "first")
        AnswerService.submit(question.pk, self.answerer, "second")
        kept = Question.objects.create(author=self.answerer, title="mine", content="C")
        AnswerService.submit(kept.pk, self.answerer, "self answer")

        self.asker.delete()

        self.assertFalse(Question.objects.filter(pk=question.pk).exists())
        self.answerer.profile.refresh_from_db()
        self.assertEqual(self.answerer.profile.answer_given_count, 1)
