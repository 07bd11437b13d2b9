"""
Utilities package for Wellness Goals.

Common utility functions:
- time_utils: Timezone-aware day calculations
- constants: Application constants
- response_helpers: UX-optimized API responses
- error_handlers: Service exception to HTTP response mapping
- logging_utils: Structured logging and request IDs
"""
from .response_helpers import UXResponse, badge_feedback
