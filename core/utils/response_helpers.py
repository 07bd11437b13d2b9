"""
API Response Helpers for UX-Optimized Responses
Provides consistent response format with feedback metadata for mobile and Web.
"""
from django.http import JsonResponse
from typing import Dict, List, Optional

from core.utils.constants import HAPTIC_FEEDBACK


class UXResponse:
    """Helper for creating UX-optimized API responses with feedback metadata."""

    @staticmethod
    def success(
        message: str = "Action completed",
        data: Optional[Dict] = None,
        feedback: Optional[Dict] = None,
        status: int = 200
    ) -> JsonResponse:
        """
        Success response with UX metadata.

        Args:
            message: User-friendly success message
            data: Response data
            feedback: Visual feedback configuration (haptic, animation, etc.)
            status: HTTP status code

        Returns:
            JsonResponse with standardized success format
        """
        response = {
            'success': True,
            'message': message,
            'data': data if data is not None else {},
            'feedback': feedback or {
                'type': 'success',
                'haptic': HAPTIC_FEEDBACK['success'],
                'toast': True,
                'message': message
            }
        }

        return JsonResponse(response, status=status)

    @staticmethod
    def error(
        message: str = "An error occurred",
        error_code: str = "GENERAL_ERROR",
        retry: bool = False,
        status: int = 400,
        details: Optional[Dict] = None
    ) -> JsonResponse:
        """
        Error response with helpful messaging.

        Args:
            message: Clear, actionable error message
            error_code: Error code for debugging
            retry: Whether user should retry
            status: HTTP status code
            details: Extra machine-readable context (e.g. offending field)

        Returns:
            JsonResponse with standardized error format
        """
        response = {
            'success': False,
            'error': {
                'message': message,
                'code': error_code,
                'retry': retry
            },
            'feedback': {
                'type': 'error',
                'haptic': HAPTIC_FEEDBACK['error'],
                'toast': True,
                'message': message
            }
        }

        if details:
            response['error']['details'] = details

        return JsonResponse(response, status=status)

    @staticmethod
    def celebration(
        achievement: str,
        animation: str = "confetti",
        sound: str = "celebration"
    ) -> Dict:
        """
        Celebration feedback for milestones.

        Args:
            achievement: What was achieved
            animation: Animation type (confetti, fireworks, checkmark)
            sound: Sound effect to play

        Returns:
            Dict with celebration metadata
        """
        return {
            'type': 'celebration',
            'message': achievement,
            'animation': animation,
            'haptic': HAPTIC_FEEDBACK['celebration'],
            'sound': sound,
            'toast': True
        }


def badge_feedback(new_badges: List[Dict]) -> Optional[Dict]:
    """
    Celebration feedback for newly earned badges, or None if there are none.

    Examples:
        >>> badge_feedback([{'code': 'FIRST_TASK', 'name': 'Task Taker'}])['message']
        'Badge earned: Task Taker 🏅'
    """
    if not new_badges:
        return None

    names = ', '.join(badge['name'] for badge in new_badges)
    label = 'Badge' if len(new_badges) == 1 else 'Badges'
    return UXResponse.celebration(achievement=f"{label} earned: {names} 🏅")
