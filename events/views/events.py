import logging

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework import status
from django.db.models import Count, Q

from core.exceptions import NotFound, PermissionDenied
from core.uploads import FOLDER_POSTERS, KIND_IMAGE, save_upload
from events import lifecycle
from events.models import Event
from events.recommendations import recommend_events
from events.serializers import EventSerializer
from .generics import get_event_or_404, parse_pagination, user_can_edit_event, user_is_system_admin

logger = logging.getLogger("cos.events")

TRUTHY = ("1", "true", "yes")


class EventListCreateView(APIView):
    """
    GET  /api/events/          list (public)
    POST /api/events/          create (club), multipart with optional "poster"
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]

    def get(self, request):
        qs = Event.objects.all()
        user = request.user

        # Moderation queue is only visible to admins and to the creating club
        if not user_is_system_admin(user):
            visible = Q(status=Event.STATUS_APPROVED)
            if user.is_authenticated:
                visible |= Q(created_by=user)
            qs = qs.filter(visible)

        status_param = request.query_params.get("status")
        if status_param in dict(Event.STATUS_CHOICES):
            qs = qs.filter(status=status_param)

        type_param = request.query_params.get("type")
        if type_param:
            qs = qs.filter(event_type=type_param)

        mine_param = request.query_params.get("mine")
        if mine_param and mine_param.lower() in TRUTHY and user.is_authenticated:
            qs = qs.filter(Q(created_by=user) | Q(attendees__user=user)).distinct()

        search = request.query_params.get("search")
        if search:
            qs = qs.filter(Q(title__icontains=search) | Q(description__icontains=search))

        total_count = qs.count()

        try:
            limit_val, offset_val = parse_pagination(request)
        except ValueError:
            return Response({"error": "Invalid pagination params"}, status=400)

        qs = (
            qs.select_related("created_by")
            .annotate(_annotated_attendees_count=Count("attendees", distinct=True))
            .order_by("-date", "-id")[offset_val : offset_val + limit_val]
        )

        serializer = EventSerializer(qs, many=True, context={"request": request})
        return Response({
            "count": total_count,
            "results": serializer.data,
            "limit": limit_val,
            "offset": offset_val,
        })

    def post(self, request):
        if not request.user.is_club:
            raise PermissionDenied("Forbidden")

        serializer = EventSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)

        poster_url = ""
        poster = request.FILES.get("poster")
        if poster is not None:
            poster_url = save_upload(poster, FOLDER_POSTERS, KIND_IMAGE, field_name="poster")

        event = serializer.save(
            created_by=request.user,
            status=Event.STATUS_PENDING,
            poster_url=poster_url,
        )
        logger.info(f"Event created: event={event.id}, club={request.user.id}")

        return Response(
            EventSerializer(event, context={"request": request}).data,
            status=status.HTTP_201_CREATED,
        )


class EventDetailView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, event_id):
        event = get_event_or_404(event_id)
        if event.status != Event.STATUS_APPROVED and not user_can_edit_event(request.user, event):
            raise NotFound("Event not found.")
        return Response(EventSerializer(event, context={"request": request}).data)


class EventStatusView(APIView):
    """
    PATCH /api/events/<event_id>/status/
    Body: { "status": "pending" | "approved" | "rejected" }
    """
    permission_classes = [IsAuthenticated]

    def patch(self, request, event_id):
        event = lifecycle.set_status(event_id, request.data.get("status"), request.user)
        return Response(EventSerializer(event, context={"request": request}).data)


class RecommendedEventsView(APIView):
    """
    GET /api/events/recommended/
    Up to five upcoming events in the categories the student has attended.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        if not request.user.is_student:
            raise PermissionDenied("Access denied")

        events = recommend_events(request.user)
        serializer = EventSerializer(events, many=True, context={"request": request})
        return Response(serializer.data)
