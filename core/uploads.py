# core/uploads.py
"""
Binary storage for posters, profile images and certificate templates.

Files go through Django's default storage (local MEDIA_ROOT or S3); callers
only keep the returned storage name.
"""
import os
import uuid

from django.conf import settings
from django.core.files.storage import default_storage
from rest_framework.exceptions import ValidationError

FOLDER_POSTERS = "posters"
FOLDER_PROFILES = "profiles"
FOLDER_CERT_TEMPLATES = "cert_templates"

KIND_IMAGE = "image"
KIND_PDF = "pdf"

PDF_MAGIC = b"%PDF"


def _check_kind(upload, kind):
    content_type = getattr(upload, "content_type", "") or ""
    if kind == KIND_IMAGE and not content_type.startswith("image/"):
        raise ValidationError("Not an image! Please upload an image file.")
    if kind == KIND_PDF:
        head = upload.read(len(PDF_MAGIC))
        upload.seek(0)
        if content_type != "application/pdf" or head != PDF_MAGIC:
            raise ValidationError("Not a PDF! Please upload a PDF file.")


def unique_name(folder, field_name, original_name):
    _, ext = os.path.splitext(original_name or "")
    return f"{folder}/{field_name}-{uuid.uuid4().hex}{ext.lower()}"


def save_upload(upload, folder, kind, field_name="file"):
    """
    Validate and store an uploaded file. Returns the storage name.
    """
    max_size = getattr(settings, "MAX_UPLOAD_SIZE", 5 * 1024 * 1024)
    if upload.size > max_size:
        raise ValidationError(f"File too large. Max size is {max_size // (1024 * 1024)}MB.")

    _check_kind(upload, kind)

    name = unique_name(folder, field_name, upload.name)
    return default_storage.save(name, upload)


def storage_url(name, request=None):
    """Public URL for a stored name, absolute when a request is available."""
    if not name:
        return None
    url = default_storage.url(name)
    return request.build_absolute_uri(url) if request is not None else url
