import logging

from django.http import HttpResponse
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from core.exceptions import NotFound, PermissionDenied, ValidationError
from core.uploads import FOLDER_CERT_TEMPLATES, KIND_PDF, save_upload
from events.certificates import issue_certificate
from events.models import Event

logger = logging.getLogger("cos.events")


class CertificateDownloadView(APIView):
    """
    GET /api/certificates/download/<event_id>/<student_id>/
    The student themself (or an admin) downloads the rendered PDF.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, event_id, student_id):
        document = issue_certificate(event_id, student_id, request.user)

        response = HttpResponse(document.content, content_type=document.content_type)
        response["Content-Disposition"] = f'attachment; filename="{document.filename}"'
        return response


class CertificateTemplateUploadView(APIView):
    """
    POST /api/events/<event_id>/certificate-template/
    multipart: "certificateTemplate" (PDF)
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, event_id):
        if not request.user.is_club:
            raise PermissionDenied("Forbidden")

        if not Event.objects.filter(pk=event_id, created_by=request.user).exists():
            raise NotFound("Event not found or you are not the owner.")

        upload = request.FILES.get("certificateTemplate") or request.FILES.get("file")
        if upload is None:
            raise ValidationError("No PDF file was uploaded.")

        name = save_upload(upload, FOLDER_CERT_TEMPLATES, KIND_PDF, field_name="certificateTemplate")
        Event.objects.filter(pk=event_id).update(certificate_template_url=name)
        logger.info(f"Certificate template uploaded: event={event_id}, path={name}")

        return Response({
            "message": "Certificate template uploaded successfully.",
            "certificate_template_url": name,
        })
