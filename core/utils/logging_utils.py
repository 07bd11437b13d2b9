"""
Structured Logging with Request Correlation IDs.

Provides middleware and utilities for production-ready logging:
- Request ID correlation across log entries
- Structured JSON logging format
- Per-request timing
"""
import json
import logging
import time
import uuid
import threading

logger = logging.getLogger(__name__)

# Thread-local storage for request context
_request_context = threading.local()

# LogRecord attributes that are not user-supplied "extra" fields
_RESERVED_ATTRS = frozenset((
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'pathname', 'process',
    'processName', 'relativeCreated', 'stack_info', 'thread', 'threadName',
    'exc_info', 'exc_text', 'message', 'taskName',
))


# ============================================================================
# REQUEST ID MANAGEMENT
# ============================================================================

def get_request_id() -> str:
    """Get current request ID, or '-' outside of a request."""
    return getattr(_request_context, 'request_id', None) or '-'


def set_request_id(request_id: str):
    _request_context.request_id = request_id


def clear_request_context():
    if hasattr(_request_context, 'request_id'):
        delattr(_request_context, 'request_id')


# ============================================================================
# STRUCTURED LOG FORMATTER
# ============================================================================

class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs in format:
    {"timestamp": "...", "level": "INFO", "request_id": "abc123", "message": "..."}
    """

    def format(self, record):
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'request_id': get_request_id(),
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith('_'):
                log_data[key] = value

        return json.dumps(log_data, default=str)


# ============================================================================
# MIDDLEWARE
# ============================================================================

def log_api_request(request, response_status: int, duration_ms: float):
    """Log one finished API request with standard fields."""
    user = getattr(request, 'user', None)
    logger.info(
        f'{request.method} {request.path} {response_status}',
        extra={
            'method': request.method,
            'path': request.path,
            'status': response_status,
            'duration_ms': round(duration_ms, 2),
            'user_id': getattr(user, 'id', None),
        }
    )


class RequestIDMiddleware:
    """
    Django middleware to add request ID correlation.

    Add to MIDDLEWARE in settings.py:
        'core.utils.logging_utils.RequestIDMiddleware',
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.META.get('HTTP_X_REQUEST_ID') or str(uuid.uuid4())[:8]
        set_request_id(request_id)

        start_time = time.time()

        try:
            response = self.get_response(request)
            response['X-Request-ID'] = request_id

            if request.path.startswith('/api/'):
                duration_ms = (time.time() - start_time) * 1000
                log_api_request(request, response.status_code, duration_ms)

            return response
        finally:
            clear_request_context()
