from django.urls import path

from .views import (
    EventListCreateView,
    EventDetailView,
    EventStatusView,
    RecommendedEventsView,
    RegisterEventView,
    EventAttendeesView,
    SelfCheckInView,
    ManualAttendanceView,
    EventQRImageView,
    CertificateTemplateUploadView,
    EventFeedbackView,
)

urlpatterns = [
    path("", EventListCreateView.as_view(), name="event-list-create"),

    # Literal prefixes before the <int:event_id> routes
    path("recommended/", RecommendedEventsView.as_view(), name="event-recommended"),
    path("checkin/<str:qr_code_id>/", SelfCheckInView.as_view(), name="event-checkin"),

    path("<int:event_id>/", EventDetailView.as_view(), name="event-detail"),
    path("<int:event_id>/status/", EventStatusView.as_view(), name="event-status"),

    # Registrations
    path("<int:event_id>/register/", RegisterEventView.as_view(), name="event-register"),
    path("<int:event_id>/attendees/", EventAttendeesView.as_view(), name="event-attendees"),

    # QR + attendance
    path("<int:event_id>/qr/", EventQRImageView.as_view(), name="event-qr-image"),
    path("<int:event_id>/manual-attendance/", ManualAttendanceView.as_view(), name="event-manual-attendance"),

    # Certificates
    path(
        "<int:event_id>/certificate-template/",
        CertificateTemplateUploadView.as_view(),
        name="event-certificate-template",
    ),

    path("<int:event_id>/feedback/", EventFeedbackView.as_view(), name="event-feedback"),
]
