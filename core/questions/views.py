import logging

from django.db.models import Count
from rest_framework import viewsets, permissions

from project.permissions import IsOwnerOrReadOnly
from .models import Question
from .serializers import QuestionSerializer
from .services import QuestionService

logger = logging.getLogger(__name__)


class QuestionViewSet(viewsets.ModelViewSet):
    queryset = (
        Question.objects.all()
        .select_related('author')
        .annotate(answers_count=Count('answers'))
    )
    serializer_class = QuestionSerializer
    permission_classes = [permissions.IsAuthenticatedOrReadOnly, IsOwnerOrReadOnly]

    def get_queryset(self):
        queryset = super().get_queryset()
        username = self.request.query_params.get('username')
        if username:
            queryset = queryset.filter(author__username=username)
        return queryset

    def perform_create(self, serializer):
        question = serializer.save(author=self.request.user)
        logger.info("User %s asked question %s", self.request.user.pk, question.pk)

    def perform_destroy(self, instance):
        QuestionService.delete(instance)
