# events/certificate_generator.py

from io import BytesIO

from django.core.files.storage import default_storage

from pypdf import PdfReader, PdfWriter
from reportlab.pdfgen import canvas
from reportlab.lib import colors


NAME_FONT = "Helvetica-Bold"
BODY_FONT = "Helvetica"


def load_template(template_path):
    """
    Read the uploaded template bytes through Django's default storage
    (local filesystem or S3).
    """
    with default_storage.open(template_path, "rb") as fh:
        return fh.read()


def _overlay(width, height, student_name, event_title, event_date):
    """
    Draw the personalised text on a transparent page the size of the template.
    """
    buffer = BytesIO()
    p = canvas.Canvas(buffer, pagesize=(width, height))

    # ---------- Name ----------
    p.setFillColor(colors.Color(0.1, 0.1, 0.1))
    p.setFont(NAME_FONT, 36)
    p.drawCentredString(width / 2.0, height / 2.0, student_name)

    # ---------- Event line ----------
    p.setFillColor(colors.Color(0.2, 0.2, 0.2))
    p.setFont(BODY_FONT, 20)
    p.drawCentredString(width / 2.0, height / 2.0 - 50, f"for participating in {event_title}")

    # ---------- Date ----------
    p.setFillColor(colors.Color(0.3, 0.3, 0.3))
    p.setFont(BODY_FONT, 16)
    p.drawCentredString(width / 2.0, height / 2.0 - 80, f"on {event_date}")

    p.showPage()
    p.save()
    buffer.seek(0)
    return PdfReader(buffer).pages[0]


def render_certificate(template_bytes, student_name, event_title, event_date):
    """
    Stamp student name, event title and date onto the first page of a PDF
    template and return the resulting PDF bytes.

    Raises whatever pypdf / ReportLab raise on a malformed template;
    callers translate that into RenderFailed.
    """
    reader = PdfReader(BytesIO(template_bytes))
    if not reader.pages:
        raise ValueError("Certificate template has no pages")

    writer = PdfWriter()
    for page in reader.pages:
        writer.add_page(page)

    first = writer.pages[0]
    width = float(first.mediabox.width)
    height = float(first.mediabox.height)
    first.merge_page(_overlay(width, height, student_name, event_title, event_date))

    out = BytesIO()
    writer.write(out)
    return out.getvalue()


def generate_certificate(student_name, event_title, event_date, template_path):
    """
    Template-rendering collaborator: load the stored template and fill it.
    """
    return render_certificate(load_template(template_path), student_name, event_title, event_date)
