from django.db import models
from django.contrib.auth.models import User

from questions.models import Question


class Answer(models.Model):
    """
    A response to a Question, owned by its author.

    `vote` is a running tally that may go negative. It is only changed through
    single-statement F() updates in AnswerService.vote.
    """

    CONTENT_MAX_LENGTH = 2000

    question = models.ForeignKey(Question, on_delete=models.CASCADE, related_name='answers')
    # Never reassigned after creation
    author = models.ForeignKey(User, on_delete=models.CASCADE, related_name='answers')
    content = models.TextField(max_length=CONTENT_MAX_LENGTH)
    vote = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-vote', 'created_at']

    def __str__(self):
        return f"Answer {self.pk} by {self.author_id} on question {self.question_id}"
