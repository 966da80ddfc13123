from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import CommentDeleteResponseSerializer, CommentSerializer, CommentWriteSerializer
from .services import CommentService


def _raw_content(request):
    data = request.data
    return data.get("content") if isinstance(data, dict) else None


class AnswerCommentsView(APIView):
    """
    Comments of one answer, oldest first.
    POST accepts { "content": "...", "parent_comment": <id or null> }.
    """

    permission_classes = [IsAuthenticatedOrReadOnly]
    serializer_class = CommentSerializer

    def get(self, request, answer_id):
        comments = CommentService.list_for_answer(answer_id)
        return Response(CommentSerializer(comments, many=True).data)

    @extend_schema(request=CommentWriteSerializer, responses={201: CommentSerializer})
    def post(self, request, answer_id):
        serializer = CommentWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        comment = CommentService.create(
            answer_id,
            request.user,
            data.get("content"),
            parent_comment_id=data.get("parent_comment"),
        )
        return Response(
            {
                "message": "comment created successfully",
                "comment": CommentSerializer(comment).data,
            },
            status=status.HTTP_201_CREATED,
        )


class CommentDetailView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]
    serializer_class = CommentSerializer

    @extend_schema(request=CommentWriteSerializer, responses={200: CommentSerializer})
    def put(self, request, comment_id):
        # Raw value: a stranger gets 403 whatever the body holds
        comment = CommentService.edit(comment_id, request.user, _raw_content(request))
        return Response(
            {
                "message": "comment updated successfully",
                "comment": CommentSerializer(comment).data,
            }
        )

    @extend_schema(request=None, responses={200: CommentDeleteResponseSerializer})
    def delete(self, request, comment_id):
        removed = CommentService.delete(comment_id, request.user)
        return Response(
            {"message": "comment deleted successfully", "comments_deleted": removed}
        )
