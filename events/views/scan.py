from io import BytesIO

import qrcode
from django.http import HttpResponse
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.throttling import ScopedRateThrottle

from core.exceptions import PermissionDenied
from events.attendance import mark_attendance, resolve_checkin_event, self_check_in
from events.emails import build_checkin_url
from events.serializers import (
    AttendeeSerializer,
    CheckInEventSerializer,
    ManualAttendanceSerializer,
    SelfCheckInSerializer,
)
from .generics import get_event_or_404, user_can_edit_event


class SelfCheckInView(APIView):
    """
    GET  /api/events/checkin/<qr_code_id>/   what the check-in page shows
    POST /api/events/checkin/<qr_code_id>/   mark attendance
         Body: { "email": "...", "name": "...", "answer": "..." }

    Public: the attendee proves presence with the QR token (+ challenge).
    """
    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "qr-attendance"

    def get(self, request, qr_code_id):
        event = resolve_checkin_event(qr_code_id)
        return Response(CheckInEventSerializer(event).data)

    def post(self, request, qr_code_id):
        serializer = SelfCheckInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        self_check_in(
            qr_code_id,
            email=data["email"],
            name=data.get("name"),
            answer=data.get("answer"),
        )
        return Response({"message": "Attendance marked successfully!"})


class ManualAttendanceView(APIView):
    """
    POST /api/events/<event_id>/manual-attendance/
    Body: { "student_id": 12 }
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, event_id):
        serializer = ManualAttendanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        attendee = mark_attendance(event_id, serializer.validated_data["student_id"], request.user)
        return Response({
            "message": "Attendance marked successfully.",
            "attendee": AttendeeSerializer(attendee).data,
        })


class EventQRImageView(APIView):
    """
    GET /api/events/<event_id>/qr/
    PNG QR code pointing at the public check-in page, for the organizer
    to display at the venue.
    """
    permission_classes = [IsAuthenticated]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "qr-image"

    def get(self, request, event_id):
        event = get_event_or_404(event_id)
        if not user_can_edit_event(request.user, event):
            raise PermissionDenied("Not authorized to view the check-in code for this event.")

        qr_img = qrcode.make(build_checkin_url(event))
        buffer = BytesIO()
        qr_img.save(buffer, format="PNG")
        buffer.seek(0)

        response = HttpResponse(buffer.getvalue(), content_type="image/png")
        response["Cache-Control"] = "no-store"
        return response
