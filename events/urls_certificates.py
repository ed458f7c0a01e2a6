from django.urls import path

from .views import CertificateDownloadView

urlpatterns = [
    path(
        "download/<int:event_id>/<int:student_id>/",
        CertificateDownloadView.as_view(),
        name="certificate-download",
    ),
]
