from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers
from users.serializers import UserSummarySerializer
from .models import Question


class QuestionSerializer(serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)
    answers_count = serializers.SerializerMethodField()

    class Meta:
        model = Question
        fields = ['id', 'author', 'title', 'content', 'answers_count', 'created_at', 'updated_at']
        read_only_fields = ['author', 'answers_count', 'created_at', 'updated_at']

    @extend_schema_field(int)
    def get_answers_count(self, obj):
        # Annotated by QuestionViewSet; freshly created questions have none yet
        count = getattr(obj, 'answers_count', None)
        if count is None:
            count = obj.answers.count()
        return count
