from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework import status

from events.models import Feedback
from events.serializers import FeedbackSerializer
from .generics import get_event_or_404, parse_pagination


class EventFeedbackView(APIView):
    """
    GET  /api/events/<event_id>/feedback/   public list
    POST /api/events/<event_id>/feedback/   Body: { "rating": 1-5, "comment": "..." }
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]

    def get(self, request, event_id):
        event = get_event_or_404(event_id)

        feedback_qs = (
            Feedback.objects
            .select_related("user")
            .filter(event=event)
            .order_by("-created_at", "-id")
        )

        total_count = feedback_qs.count()
        try:
            limit, offset = parse_pagination(request)
        except ValueError:
            return Response({"error": "Invalid pagination params"}, status=400)

        serializer = FeedbackSerializer(feedback_qs[offset : offset + limit], many=True)
        return Response({
            "count": total_count,
            "results": serializer.data,
            "limit": limit,
            "offset": offset,
        })

    def post(self, request, event_id):
        event = get_event_or_404(event_id)

        serializer = FeedbackSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        feedback = serializer.save(event=event, user=request.user)

        return Response(FeedbackSerializer(feedback).data, status=status.HTTP_201_CREATED)
