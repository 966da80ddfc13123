from django.db.models.signals import pre_delete
from django.dispatch import receiver

from answers.services import AnswerService
from .models import Question


@receiver(pre_delete, sender=Question)
def release_answer_counts(sender, instance, **kwargs):
    # Also fires when the question goes away through its author's cascade
    AnswerService.release_counts_for_question(instance)
