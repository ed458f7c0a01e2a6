from .events import (
    EventListCreateView,
    EventDetailView,
    EventStatusView,
    RecommendedEventsView,
)
from .registrations import RegisterEventView, EventAttendeesView
from .scan import SelfCheckInView, ManualAttendanceView, EventQRImageView
from .certificates import CertificateDownloadView, CertificateTemplateUploadView
from .feedback import EventFeedbackView
