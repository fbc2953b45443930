"""
Request logging middleware for the API.
"""
import logging
import time

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware:
    """
    Logs method, path, status and duration of every ``/api/`` request,
    along with whether an access token cookie was present.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not request.path.startswith('/api/'):
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        elapsed_ms = (time.monotonic() - started) * 1000

        logger.info(
            f"{request.method} {request.path} -> {response.status_code} "
            f"({elapsed_ms:.1f}ms, has_access_token={bool(request.COOKIES.get('access_token'))})"
        )
        return response
