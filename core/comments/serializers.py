from rest_framework import serializers
from users.serializers import UserSummarySerializer
from .models import Comment


class CommentSerializer(serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)
    answer = serializers.PrimaryKeyRelatedField(read_only=True)
    parent_comment = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Comment
        fields = ['id', 'answer', 'author', 'content', 'parent_comment', 'created_at', 'updated_at']
        read_only_fields = fields


class CommentWriteSerializer(serializers.Serializer):
    # Emptiness and length are enforced by CommentService
    content = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    parent_comment = serializers.IntegerField(required=False, allow_null=True)


class CommentDeleteResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    comments_deleted = serializers.IntegerField()
