from django.urls import path
from .views import AnswerCommentsView, CommentDetailView

urlpatterns = [
    path("answers/<int:answer_id>/comments/", AnswerCommentsView.as_view(), name="answer_comments"),
    path("comments/<int:comment_id>/", CommentDetailView.as_view(), name="comment_detail"),
]
