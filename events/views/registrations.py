from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import status

from core.exceptions import PermissionDenied
from events.admission import register
from events.models import Attendee
from events.serializers import AttendeeSerializer, EventSerializer, RegisterSerializer
from .generics import get_event_or_404, parse_pagination, user_can_edit_event


class RegisterEventView(APIView):
    """
    POST /api/events/<event_id>/register/
    Body: { "college_name": "..." }
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, event_id):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        attendee = register(
            event_id,
            request.user,
            college_name=serializer.validated_data["college_name"],
        )

        return Response(
            {
                "message": "Registered successfully!",
                "attendee": AttendeeSerializer(attendee).data,
                "event": EventSerializer(attendee.event, context={"request": request}).data,
            },
            status=status.HTTP_201_CREATED,
        )


class EventAttendeesView(APIView):
    """
    GET /api/events/<event_id>/attendees/
    Roster for the creating club and admins.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, event_id):
        event = get_event_or_404(event_id)

        if not user_can_edit_event(request.user, event):
            raise PermissionDenied("You do not have permission to view registrations for this event.")

        attendees = (
            Attendee.objects
            .filter(event=event)
            .select_related("user")
            .order_by("id")
        )

        attended_param = request.query_params.get("attended")
        if attended_param in ("true", "false"):
            attendees = attendees.filter(is_attended=(attended_param == "true"))

        total_count = attendees.count()
        try:
            limit, offset = parse_pagination(request, default_limit=100, max_limit=500)
        except ValueError:
            return Response({"error": "Invalid pagination params"}, status=400)

        serializer = AttendeeSerializer(attendees[offset : offset + limit], many=True)
        return Response({
            "count": total_count,
            "attended": Attendee.objects.filter(event=event, is_attended=True).count(),
            "results": serializer.data,
            "limit": limit,
            "offset": offset,
        })
