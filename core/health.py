"""
Health Check Endpoints
======================

Provides:
1. /api/health/ - Liveness check (Docker HEALTHCHECK, load balancers)
2. /api/health/ready/ - Readiness check (database, cache)
"""

import logging
import time

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET

logger = logging.getLogger('parcel_core.monitoring')

SERVICE_NAME = 'parcel-core'


@csrf_exempt
@require_GET
def health_check(request):
    """Returns 200 while the Django process is alive."""
    return JsonResponse({
        'status': 'OK',
        'service': SERVICE_NAME,
        'timestamp': timezone.now().isoformat(),
    })


@csrf_exempt
@require_GET
def readiness_check(request):
    """
    Readiness probe.
    Returns 200 only if the database answers, 503 otherwise.
    The cache is reported but not required.
    """
    checks = {}
    all_healthy = True

    try:
        start = time.time()
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        checks['database'] = {
            'status': 'healthy',
            'response_time_ms': round((time.time() - start) * 1000, 2),
            'engine': connection.vendor,
        }
    except DatabaseError as e:
        checks['database'] = {'status': 'unhealthy', 'error': str(e)}
        all_healthy = False
        logger.error(f"Health check - Database unhealthy: {e}")

    start = time.time()
    cache.set('_healthcheck_ping', 'pong', 10)
    cache_ok = cache.get('_healthcheck_ping') == 'pong'
    checks['cache'] = {
        'status': 'healthy' if cache_ok else 'degraded',
        'response_time_ms': round((time.time() - start) * 1000, 2),
    }
    if not cache_ok:
        logger.warning("Health check - Cache read/write mismatch")

    return JsonResponse({
        'status': 'OK' if all_healthy else 'unhealthy',
        'service': SERVICE_NAME,
        'timestamp': timezone.now().isoformat(),
        'checks': checks,
    }, status=200 if all_healthy else 503)
