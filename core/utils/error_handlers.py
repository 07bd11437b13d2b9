"""
Error Handling Utilities

Provides the decorator that turns service-layer exceptions into
consistent UXResponse errors for the JSON API.
"""
from functools import wraps
from django.core.exceptions import ObjectDoesNotExist
from django.http import Http404
import json
import logging

from core.exceptions import (
    WellnessException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    InvalidStateError,
    ConflictError,
)
from core.utils.response_helpers import UXResponse

logger = logging.getLogger(__name__)


def handle_service_errors(view_func):
    """
    Decorator for API views to handle exceptions and return consistent UXResponses.

    Status mapping:
        ValidationError -> 400, UnauthorizedError -> 403, NotFoundError -> 404,
        InvalidStateError -> 409, ConflictError -> 409 (retryable)
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)

        # --- Not Found Errors ---
        except (NotFoundError, Http404, ObjectDoesNotExist) as e:
            return UXResponse.error(
                message=str(e),
                error_code="NOT_FOUND",
                status=404
            )

        # --- Permission Errors ---
        except UnauthorizedError as e:
            logger.warning(f"Unauthorized {request.method} {request.path}: {e}")
            return UXResponse.error(
                message=str(e),
                error_code="PERMISSION_DENIED",
                status=403
            )

        # --- Validation Errors ---
        except ValidationError as e:
            return UXResponse.error(
                message=e.message,
                error_code="VALIDATION_ERROR",
                status=400,
                details={'field': e.field}
            )

        except json.JSONDecodeError:
            return UXResponse.error(
                message="Invalid JSON body",
                error_code="VALIDATION_ERROR",
                status=400
            )

        # --- State Errors ---
        except ConflictError as e:
            return UXResponse.error(
                message=str(e),
                error_code="CONFLICT",
                retry=True,
                status=409,
                details=e.details
            )

        except InvalidStateError as e:
            return UXResponse.error(
                message=str(e),
                error_code="INVALID_STATE",
                status=409
            )

        # --- Generic Service Errors ---
        except WellnessException as e:
            return UXResponse.error(
                message=str(e),
                error_code="SERVICE_ERROR",
                status=400
            )

        # --- Unexpected Errors ---
        except Exception:
            logger.exception(f"Unhandled error in {view_func.__name__}")
            return UXResponse.error(
                message="An unexpected error occurred",
                error_code="INTERNAL_ERROR",
                retry=True,
                status=500
            )

    return wrapper
