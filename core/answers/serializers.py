from rest_framework import serializers
from drf_spectacular.utils import extend_schema_field

from users.serializers import UserSummarySerializer
from .models import Answer


class AnswerSerializer(serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)
    question = serializers.PrimaryKeyRelatedField(read_only=True)
    comments_count = serializers.SerializerMethodField()

    class Meta:
        model = Answer
        fields = [
            'id',
            'question',
            'author',
            'content',
            'vote',
            'comments_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    @extend_schema_field(int)
    def get_comments_count(self, obj):
        # Annotated on list queries, counted on single objects
        count = getattr(obj, 'comments_count', None)
        if count is None:
            count = obj.comments.count()
        return count


class AnswerContentSerializer(serializers.Serializer):
    """Request body for submitting or editing an answer."""

    # Emptiness and length are enforced by AnswerService
    content = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)


class AnswerWriteResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    answer = AnswerSerializer()


class AnswerDeleteResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    comments_deleted = serializers.IntegerField()


class VoteResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    new_vote_count = serializers.IntegerField()
