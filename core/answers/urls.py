from django.urls import path
from .services import AnswerService
from .views import QuestionAnswersView, AnswerDetailView, AnswerVoteView

urlpatterns = [
    path(
        "questions/<int:question_id>/answers/",
        QuestionAnswersView.as_view(),
        name="question_answers",
    ),
    path("answers/<int:answer_id>/", AnswerDetailView.as_view(), name="answer_detail"),
    path(
        "answers/<int:answer_id>/upvote/",
        AnswerVoteView.as_view(),
        {"direction": AnswerService.UP},
        name="answer_upvote",
    ),
    path(
        "answers/<int:answer_id>/downvote/",
        AnswerVoteView.as_view(),
        {"direction": AnswerService.DOWN},
        name="answer_downvote",
    ),
]
