from drf_spectacular.utils import extend_schema, OpenApiTypes
from rest_framework import status
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.views import APIView

from auth.throttles import VoteRateThrottle
from .serializers import (
    AnswerContentSerializer,
    AnswerDeleteResponseSerializer,
    AnswerSerializer,
    AnswerWriteResponseSerializer,
    VoteResponseSerializer,
)
from .services import AnswerService


def _raw_content(request):
    data = request.data
    return data.get("content") if isinstance(data, dict) else None


class QuestionAnswersView(APIView):
    """
    Answers of one question.

    GET lists them (highest vote first), POST submits a new one for the
    authenticated user.
    """

    permission_classes = [IsAuthenticatedOrReadOnly]
    serializer_class = AnswerSerializer

    @extend_schema(responses={200: AnswerSerializer(many=True), 404: OpenApiTypes.OBJECT})
    def get(self, request, question_id):
        answers = AnswerService.list_for_question(question_id)
        return Response(AnswerSerializer(answers, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        request=AnswerContentSerializer,
        responses={201: AnswerWriteResponseSerializer, 400: OpenApiTypes.OBJECT},
    )
    def post(self, request, question_id):
        serializer = AnswerContentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        answer = AnswerService.submit(
            question_id, request.user, serializer.validated_data.get("content")
        )
        return Response(
            {
                "message": "answer created successfully",
                "answer": AnswerSerializer(answer).data,
            },
            status=status.HTTP_201_CREATED,
        )


class AnswerDetailView(APIView):
    """Read, edit (owner) or delete (owner) a single answer."""

    permission_classes = [IsAuthenticatedOrReadOnly]
    serializer_class = AnswerSerializer

    def get(self, request, answer_id):
        answer = AnswerService.get(answer_id)
        return Response(AnswerSerializer(answer).data, status=status.HTTP_200_OK)

    @extend_schema(
        request=AnswerContentSerializer,
        responses={200: AnswerWriteResponseSerializer},
    )
    def put(self, request, answer_id):
        # Ownership is checked before the body is looked at, so the raw
        # value goes straight to the service
        answer = AnswerService.edit(answer_id, request.user, _raw_content(request))
        return Response(
            {
                "message": "answer updated successfully",
                "answer": AnswerSerializer(answer).data,
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(request=None, responses={200: AnswerDeleteResponseSerializer})
    def delete(self, request, answer_id):
        comments_deleted = AnswerService.delete(answer_id, request.user)
        return Response(
            {
                "message": "answer deleted successfully",
                "comments_deleted": comments_deleted,
            },
            status=status.HTTP_200_OK,
        )


class AnswerVoteView(APIView):
    """
    Up- or downvote someone else's answer.
    The direction comes from the route (`upvote/` or `downvote/`).
    """

    permission_classes = [IsAuthenticated]
    throttle_classes = [VoteRateThrottle]

    @extend_schema(request=None, responses={200: VoteResponseSerializer})
    def post(self, request, answer_id, direction):
        new_vote_count = AnswerService.vote(answer_id, request.user, direction)
        return Response(
            {
                "message": f"answer {direction}voted successfully",
                "new_vote_count": new_vote_count,
            },
            status=status.HTTP_200_OK,
        )
