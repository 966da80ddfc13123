from django.db import models
from django.contrib.auth.models import User

from answers.models import Answer


class Comment(models.Model):
    """
    A comment on an Answer. `parent_comment` makes it a reply, which gives a
    tree of comments per answer. Replies go away with their parent.
    """

    CONTENT_MAX_LENGTH = 1000

    answer = models.ForeignKey(Answer, on_delete=models.CASCADE, related_name='comments')
    author = models.ForeignKey(User, on_delete=models.CASCADE, related_name='comments')
    content = models.TextField(max_length=CONTENT_MAX_LENGTH)
    parent_comment = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='replies',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at']

    def __str__(self):
        return f"Comment {self.pk} on answer {self.answer_id}"
