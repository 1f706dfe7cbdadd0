"""
Parcel Platform Request Middleware
==================================

Provides:
1. Request logging (method, path, origin) while developing
2. Rate limiting of the login and password endpoints using the Django cache
3. Request audit logging for write operations and failed requests
"""

import hashlib
import logging

from django.conf import settings
from django.core.cache import cache
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger('parcel_core.security')


def get_client_ip(request):
    """Extract real client IP, considering proxy headers."""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR', '0.0.0.0')


class RequestLoggingMiddleware(MiddlewareMixin):
    """Logs every API request with its Origin header when DEBUG is on."""

    def process_request(self, request):
        if settings.DEBUG and request.path.startswith('/api/'):
            logger.debug(
                f"{request.method} {request.path} - Origin: {request.META.get('HTTP_ORIGIN', '-')}"
            )
        return None


class RateLimitMiddleware(MiddlewareMixin):
    """
    Rate limiting of brute-forceable endpoints.

    Configurable rates per endpoint pattern:
    - Login: 10 requests/minute per IP
    - Token refresh: 20 requests/minute per IP
    - Forgot password: 5 requests/5 minutes per IP
    """

    # Rate limit configurations: (max_requests, time_window_seconds)
    RATE_LIMITS = {
        '/api/auth/login/': (10, 60),
        '/api/auth/token/refresh/': (20, 60),
        '/api/forgot-password/': (5, 300),
    }

    def _get_rate_limit(self, path):
        for pattern, limits in self.RATE_LIMITS.items():
            if path.startswith(pattern):
                return limits
        return None

    def process_request(self, request):
        if settings.DEBUG and not getattr(settings, 'RATE_LIMIT_IN_DEBUG', False):
            return None

        rate_limit = self._get_rate_limit(request.path)
        if rate_limit is None or request.method != 'POST':
            return None

        max_requests, window = rate_limit
        client_ip = get_client_ip(request)
        path_hash = hashlib.md5(request.path.encode()).hexdigest()[:8]
        cache_key = f"rl:{client_ip}:{path_hash}"

        request_count = cache.get(cache_key, 0)

        if request_count >= max_requests:
            logger.warning(
                f"Rate limit exceeded: IP={client_ip} path={request.path} "
                f"count={request_count}/{max_requests} window={window}s"
            )
            ttl = cache.ttl(cache_key) if hasattr(cache, 'ttl') else window

            return JsonResponse({
                'error': 'rate_limit_exceeded',
                'message': 'Too many requests. Please try again later.',
                'retry_after': ttl,
            }, status=429, headers={
                'Retry-After': str(ttl),
                'X-RateLimit-Limit': str(max_requests),
                'X-RateLimit-Remaining': '0',
            })

        try:
            new_count = cache.incr(cache_key)
        except ValueError:
            cache.set(cache_key, 1, window)
            new_count = 1

        request._rate_limit_remaining = max(0, max_requests - new_count)
        request._rate_limit_limit = max_requests
        return None

    def process_response(self, request, response):
        if hasattr(request, '_rate_limit_limit'):
            response['X-RateLimit-Limit'] = str(request._rate_limit_limit)
            response['X-RateLimit-Remaining'] = str(request._rate_limit_remaining)
        return response


class RequestAuditMiddleware(MiddlewareMixin):
    """
    Audit logging for sensitive API operations.

    Logs:
    - Write operations (POST, PUT, PATCH, DELETE) on sensitive paths
    - Failed requests (4xx on the API, any 5xx)
    """

    SENSITIVE_PATHS = [
        '/api/auth/',
        '/api/parcels/',
        '/api/admin/',
        '/api/settings/',
        '/api/email/',
        '/api/upload/',
        '/admin/',
    ]

    def _should_log(self, request, response):
        path = request.path

        if request.method in ('POST', 'PUT', 'PATCH', 'DELETE'):
            if any(path.startswith(p) for p in self.SENSITIVE_PATHS):
                return True

        if response.status_code >= 500:
            return True

        if response.status_code >= 400 and path.startswith('/api/'):
            return True

        return False

    def process_response(self, request, response):
        if self._should_log(request, response):
            user = getattr(request, 'user', None)
            user_info = str(user) if user and user.is_authenticated else 'anonymous'

            log_data = {
                'method': request.method,
                'path': request.path,
                'status': response.status_code,
                'user': user_info,
                'ip': get_client_ip(request),
            }

            if response.status_code >= 500:
                logger.error(f"AUDIT [ERROR] {log_data}")
            elif response.status_code >= 400:
                logger.warning(f"AUDIT [WARN] {log_data}")
            else:
                logger.info(f"AUDIT [OK] {log_data}")

        return response
