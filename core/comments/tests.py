from django.contrib.auth.models import User
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from answers.models import Answer
from comments.models import Comment
from comments.services import CommentService
from questions.models import Question


class CommentTestBase(APITestCase):
    def setUp(self):
        self.answerer = User.objects.create_user(username="alice", password="password")
        self.commenter = User.objects.create_user(username="bob", password="password")
        self.stranger = User.objects.create_user(username="carol", password="password")
        question = Question.objects.create(author=self.stranger, title="Q", content="?")
        self.answer = Answer.objects.create(question=question, author=self.answerer, content="A")
        self.other_answer = Answer.objects.create(question=question, author=self.stranger, content="B")


class CascadeTests(CommentTestBase):
    def test_delete_all_for_answer_without_comments_returns_zero(self):
        self.assertEqual(CommentService.delete_all_for_answer(self.answer.pk), 0)

    def test_delete_all_for_answer_is_idempotent(self):
        parent = Comment.objects.create(answer=self.answer, author=self.commenter, content="1")
        Comment.objects.create(
            answer=self.answer, author=self.stranger, content="2", parent_comment=parent
        )
        Comment.objects.create(answer=self.answer, author=self.stranger, content="3")
        untouched = Comment.objects.create(
            answer=self.other_answer, author=self.commenter, content="elsewhere"
        )

        self.assertEqual(CommentService.delete_all_for_answer(self.answer.pk), 3)
        self.assertEqual(CommentService.delete_all_for_answer(self.answer.pk), 0)
        self.assertTrue(Comment.objects.filter(pk=untouched.pk).exists())


class CommentAPITests(CommentTestBase):
    def test_create_and_list_comments(self):
        self.client.force_authenticate(user=self.commenter)
        url = reverse("answer_comments", args=[self.answer.pk])

        created = self.client.post(url, {"content": " first! "}, format="json")
        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        self.assertEqual(created.data["comment"]["content"], "first!")
        self.assertIsNone(created.data["comment"]["parent_comment"])

        reply = self.client.post(
            url,
            {"content": "reply", "parent_comment": created.data["comment"]["id"]},
            format="json",
        )
        self.assertEqual(reply.status_code, status.HTTP_201_CREATED)

        self.client.force_authenticate(user=None)
        listed = self.client.get(url)
        self.assertEqual(listed.status_code, status.HTTP_200_OK)
        self.assertEqual(len(listed.data), 2)
        self.assertEqual(listed.data[1]["parent_comment"], created.data["comment"]["id"])

    def test_create_requires_authentication(self):
        response = self.client.post(
            reverse("answer_comments", args=[self.answer.pk]), {"content": "hi"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_on_unknown_answer_returns_404(self):
        self.client.force_authenticate(user=self.commenter)
        response = self.client.post(
            reverse("answer_comments", args=[999999]), {"content": "hi"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_blank_comment_is_rejected(self):
        self.client.force_authenticate(user=self.commenter)
        response = self.client.post(
            reverse("answer_comments", args=[self.answer.pk]), {"content": ""}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Content is required")

    def test_reply_must_stay_on_the_same_answer(self):
        parent = Comment.objects.create(
            answer=self.other_answer, author=self.stranger, content="elsewhere"
        )
        self.client.force_authenticate(user=self.commenter)

        response = self.client.post(
            reverse("answer_comments", args=[self.answer.pk]),
            {"content": "reply", "parent_comment": parent.pk},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_only_author_can_edit(self):
        comment = Comment.objects.create(answer=self.answer, author=self.commenter, content="x")
        url = reverse("comment_detail", args=[comment.pk])

        self.client.force_authenticate(user=self.stranger)
        for content in ["hijack", "", ["x"], {"k": 1}]:
            self.assertEqual(
                self.client.put(url, {"content": content}, format="json").status_code,
                status.HTTP_403_FORBIDDEN,
            )

        self.client.force_authenticate(user=self.commenter)
        response = self.client.put(url, {"content": "edited"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        comment.refresh_from_db()
        self.assertEqual(comment.content, "edited")

    def test_deleting_comment_removes_its_replies(self):
        parent = Comment.objects.create(answer=self.answer, author=self.commenter, content="p")
        child = Comment.objects.create(
            answer=self.answer, author=self.stranger, content="c", parent_comment=parent
        )
        Comment.objects.create(
            answer=self.answer, author=self.answerer, content="gc", parent_comment=child
        )
        sibling = Comment.objects.create(answer=self.answer, author=self.stranger, content="s")

        self.client.force_authenticate(user=self.stranger)
        forbidden = self.client.delete(reverse("comment_detail", args=[parent.pk]))
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.commenter)
        response = self.client.delete(reverse("comment_detail", args=[parent.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["comments_deleted"], 3)
        self.assertEqual(list(Comment.objects.values_list("pk", flat=True)), [sibling.pk])

    def test_delete_unknown_comment_returns_404(self):
        self.client.force_authenticate(user=self.commenter)
        response = self.client.delete(reverse("comment_detail", args=[999999]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
