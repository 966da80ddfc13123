import logging

from django.db import transaction

logger = logging.getLogger(__name__)


class QuestionService:

    @staticmethod
    def delete(question):
        """
        Delete a question with its answers and their comments.
        The pre_delete receiver in questions.signals takes each answerer's
        answers back off their count inside the same transaction.
        """
        question_id = question.pk
        with transaction.atomic():
            question.delete()

        logger.info("Question %s deleted", question_id)
