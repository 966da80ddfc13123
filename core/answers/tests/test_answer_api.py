from django.contrib.auth.models import User
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from answers.models import Answer
from comments.models import Comment
from questions.models import Question


class AnswerAPITestBase(APITestCase):
    def setUp(self):
        self.author = User.objects.create_user(
            username="alice", email="alice@example.com", password="password"
        )
        self.other = User.objects.create_user(
            username="bob", email="bob@example.com", password="password"
        )
        self.third = User.objects.create_user(
            username="carol", email="carol@example.com", password="password"
        )
        self.question = Question.objects.create(
            author=self.other, title="How do F() expressions work?", content="Details"
        )

    def submit(self, user, content="Use an UPDATE statement.", question_id=None):
        self.client.force_authenticate(user=user)
        return self.client.post(
            reverse("question_answers", args=[question_id or self.question.pk]),
            {"content": content},
            format="json",
        )

    def vote(self, user, answer_id, direction="up"):
        self.client.force_authenticate(user=user)
        url_name = "answer_upvote" if direction == "up" else "answer_downvote"
        return self.client.post(reverse(url_name, args=[answer_id]))


class SubmitAnswerTests(AnswerAPITestBase):
    def test_submit_creates_answer_with_zero_votes_and_counts_it(self):
        response = self.submit(self.author, content="  Use an UPDATE statement.  ")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["message"], "answer created successfully")
        self.assertEqual(response.data["answer"]["vote"], 0)
        self.assertEqual(response.data["answer"]["content"], "Use an UPDATE statement.")
        self.assertEqual(response.data["answer"]["author"]["id"], self.author.pk)
        self.assertEqual(response.data["answer"]["question"], self.question.pk)

        self.author.profile.refresh_from_db()
        self.assertEqual(self.author.profile.answer_given_count, 1)

    def test_submit_requires_authentication(self):
        response = self.client.post(
            reverse("question_answers", args=[self.question.pk]),
            {"content": "anonymous"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn("message", response.data)
        self.assertFalse(Answer.objects.exists())

    def test_submit_rejects_blank_content(self):
        response = self.submit(self.author, content="   ")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Content is required")

        self.author.profile.refresh_from_db()
        self.assertEqual(self.author.profile.answer_given_count, 0)

    def test_submit_rejects_missing_content(self):
        self.client.force_authenticate(user=self.author)
        response = self.client.post(
            reverse("question_answers", args=[self.question.pk]), {}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_submit_rejects_content_over_limit(self):
        response = self.submit(self.author, content="x" * (Answer.CONTENT_MAX_LENGTH + 1))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Answer.objects.exists())

    def test_submit_accepts_content_at_limit(self):
        response = self.submit(self.author, content="x" * Answer.CONTENT_MAX_LENGTH)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_submit_on_unknown_question_returns_404(self):
        response = self.submit(self.author, question_id=999999)

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["message"], "Question not found")

        self.author.profile.refresh_from_db()
        self.assertEqual(self.author.profile.answer_given_count, 0)


class ListAnswersTests(AnswerAPITestBase):
    def test_list_orders_by_vote_then_age(self):
        first = Answer.objects.create(question=self.question, author=self.author, content="first")
        second = Answer.objects.create(question=self.question, author=self.third, content="second")
        Answer.objects.filter(pk=second.pk).update(vote=3)
        Comment.objects.create(answer=first, author=self.other, content="nice")

        response = self.client.get(reverse("question_answers", args=[self.question.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["id"] for row in response.data], [second.pk, first.pk])
        self.assertEqual(response.data[1]["comments_count"], 1)

    def test_list_unknown_question_returns_404(self):
        response = self.client.get(reverse("question_answers", args=[999999]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class EditAnswerTests(AnswerAPITestBase):
    def setUp(self):
        super().setUp()
        self.answer = Answer.objects.create(
            question=self.question, author=self.author, content="original"
        )
        self.url = reverse("answer_detail", args=[self.answer.pk])

    def test_author_can_edit(self):
        self.client.force_authenticate(user=self.author)
        response = self.client.put(self.url, {"content": "revised"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.answer.refresh_from_db()
        self.assertEqual(self.answer.content, "revised")

    def test_non_author_gets_403_even_with_invalid_content(self):
        self.client.force_authenticate(user=self.other)

        invalid_contents = [
            "revised",
            "",
            "x" * (Answer.CONTENT_MAX_LENGTH + 1),
            ["x"],
            {"k": 1},
        ]
        for content in invalid_contents:
            response = self.client.put(self.url, {"content": content}, format="json")
            self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.answer.refresh_from_db()
        self.assertEqual(self.answer.content, "original")

    def test_author_non_string_edit_is_rejected(self):
        self.client.force_authenticate(user=self.author)
        response = self.client.put(self.url, {"content": ["x"]}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Content is required")

    def test_author_blank_edit_is_rejected(self):
        self.client.force_authenticate(user=self.author)
        response = self.client.put(self.url, {"content": "  "}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_edit_unknown_answer_returns_404(self):
        self.client.force_authenticate(user=self.author)
        response = self.client.put(
            reverse("answer_detail", args=[999999]), {"content": "x"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_edit_requires_authentication(self):
        response = self.client.put(self.url, {"content": "x"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class DeleteAnswerTests(AnswerAPITestBase):
    def setUp(self):
        super().setUp()
        response = self.submit(self.author)
        self.answer = Answer.objects.get(pk=response.data["answer"]["id"])
        self.url = reverse("answer_detail", args=[self.answer.pk])

    def test_delete_removes_answer_comments_and_count(self):
        parent = Comment.objects.create(answer=self.answer, author=self.other, content="a")
        Comment.objects.create(
            answer=self.answer, author=self.third, content="b", parent_comment=parent
        )

        self.client.force_authenticate(user=self.author)
        response = self.client.delete(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "answer deleted successfully")
        self.assertEqual(response.data["comments_deleted"], 2)
        self.assertFalse(Answer.objects.filter(pk=self.answer.pk).exists())
        self.assertFalse(Comment.objects.filter(answer_id=self.answer.pk).exists())

        self.author.profile.refresh_from_db()
        self.assertEqual(self.author.profile.answer_given_count, 0)

    def test_delete_without_comments_reports_zero(self):
        self.client.force_authenticate(user=self.author)
        response = self.client.delete(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["comments_deleted"], 0)

    def test_non_author_cannot_delete(self):
        Comment.objects.create(answer=self.answer, author=self.other, content="keep me")

        self.client.force_authenticate(user=self.other)
        response = self.client.delete(self.url)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Answer.objects.filter(pk=self.answer.pk).exists())
        self.assertEqual(Comment.objects.filter(answer=self.answer).count(), 1)

        self.author.profile.refresh_from_db()
        self.assertEqual(self.author.profile.answer_given_count, 1)

    def test_delete_unknown_answer_has_no_side_effects(self):
        self.client.force_authenticate(user=self.author)
        response = self.client.delete(reverse("answer_detail", args=[999999]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(Answer.objects.count(), 1)

        self.author.profile.refresh_from_db()
        self.assertEqual(self.author.profile.answer_given_count, 1)

    def test_count_never_goes_negative(self):
        self.author.profile.answer_given_count = 0
        self.author.profile.save()

        self.client.force_authenticate(user=self.author)
        response = self.client.delete(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.author.profile.refresh_from_db()
        self.assertEqual(self.author.profile.answer_given_count, 0)


class VoteAnswerTests(AnswerAPITestBase):
    def setUp(self):
        super().setUp()
        self.answer = Answer.objects.create(
            question=self.question, author=self.author, content="vote on me"
        )

    def test_upvote_and_downvote_by_different_users_net_zero(self):
        up = self.vote(self.other, self.answer.pk, "up")
        down = self.vote(self.third, self.answer.pk, "down")

        self.assertEqual(up.status_code, status.HTTP_200_OK)
        self.assertEqual(up.data["new_vote_count"], 1)
        self.assertEqual(down.status_code, status.HTTP_200_OK)
        self.assertEqual(down.data["new_vote_count"], 0)

        self.answer.refresh_from_db()
        self.assertEqual(self.answer.vote, 0)

    def test_repeat_votes_each_count(self):
        self.vote(self.other, self.answer.pk, "up")
        response = self.vote(self.other, self.answer.pk, "up")

        self.assertEqual(response.data["new_vote_count"], 2)

    def test_tally_can_go_negative(self):
        response = self.vote(self.other, self.answer.pk, "down")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["new_vote_count"], -1)

    def test_self_vote_is_rejected_both_ways(self):
        for direction in ("up", "down"):
            response = self.vote(self.author, self.answer.pk, direction)
            self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
            self.assertEqual(response.data["message"], "User cannot vote on their own answer")

        self.answer.refresh_from_db()
        self.assertEqual(self.answer.vote, 0)

    def test_vote_on_unknown_answer_returns_404(self):
        for direction in ("up", "down"):
            response = self.vote(self.other, 999999, direction)
            self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
            self.assertEqual(response.data["message"], "Answer not found")

    def test_vote_requires_authentication(self):
        response = self.client.post(reverse("answer_upvote", args=[self.answer.pk]))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class AnswerLifecycleTests(AnswerAPITestBase):
    def test_submit_vote_and_delete_flow(self):
        submitted = self.submit(self.author)
        self.assertEqual(submitted.status_code, status.HTTP_201_CREATED)
        self.assertEqual(submitted.data["answer"]["vote"], 0)
        answer_id = submitted.data["answer"]["id"]

        self.assertEqual(self.vote(self.other, answer_id).data["new_vote_count"], 1)
        self.assertEqual(self.vote(self.other, answer_id).data["new_vote_count"], 2)

        self.client.force_authenticate(user=self.other)
        comment = self.client.post(
            reverse("answer_comments", args=[answer_id]), {"content": "thanks"}, format="json"
        )
        self.assertEqual(comment.status_code, status.HTTP_201_CREATED)

        forbidden = self.client.delete(reverse("answer_detail", args=[answer_id]))
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.author)
        deleted = self.client.delete(reverse("answer_detail", args=[answer_id]))
        self.assertEqual(deleted.status_code, status.HTTP_200_OK)
        self.assertEqual(deleted.data["comments_deleted"], 1)
        self.assertFalse(Comment.objects.filter(answer_id=answer_id).exists())
