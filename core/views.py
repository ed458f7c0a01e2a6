import time

from django.conf import settings
from django.core.files.storage import default_storage
from django.db import DatabaseError, connection
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from events.models import Event


def _check_database():
    """Round trip through the events table; fails if the DB is down or unmigrated."""
    try:
        Event.objects.exists()
    except DatabaseError:
        return False
    return True


class HealthCheckView(APIView):
    """
    GET /api/health/

    Uptime check for the deployment. Only the database decides the status
    code; storage and task mode are reported so operators can spot a
    misconfigured media backend or a worker-less deploy.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        started = time.perf_counter()
        db_ok = _check_database()
        latency_ms = round((time.perf_counter() - started) * 1000, 1)

        return Response(
            {
                "status": "ok" if db_ok else "degraded",
                "env": settings.ENV,
                "database": {
                    "ok": db_ok,
                    "vendor": connection.vendor,
                    "latency_ms": latency_ms,
                },
                "storage": default_storage.__class__.__name__,
                "tasks": "eager" if settings.CELERY_TASK_ALWAYS_EAGER else "queued",
            },
            status=200 if db_ok else 503,
        )
