"""
Wellness Goals - JSON API Views
Endpoints for goals, collaboration, activities and achievements
"""
import json
import logging
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods, require_POST, require_GET
from django.views.decorators.csrf import csrf_exempt
from functools import wraps

from .exceptions import ValidationError
from .serializers import InviteSerializer, CollaborationRequestSerializer, validate_or_raise
from .services.task_service import TaskLifecycleService
from .services.dashboard_service import DashboardService
from .services.achievement_service import AchievementService
from .services.activity_service import ActivityService
from .utils.response_helpers import UXResponse, badge_feedback
from .utils.constants import HAPTIC_FEEDBACK
from .utils.error_handlers import handle_service_errors

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError, AuthenticationFailed

# Initialize logger for this module
logger = logging.getLogger(__name__)


def require_auth(view_func):
    """
    Decorator to ensure user is logged in for API endpoints.
    Supports both Session (Browser) and JWT (Mobile) authentication.
    Returns 401 JSON instead of redirecting to login page.

    Note: This decorator also exempts the view from CSRF checks since
    mobile/API clients use JWT tokens instead of CSRF tokens.
    """
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        # 1. Session auth (Django middleware)
        if request.user.is_authenticated:
            return view_func(request, *args, **kwargs)

        # 2. JWT bearer token
        auth_header = request.headers.get('Authorization')
        if auth_header and auth_header.startswith('Bearer '):
            try:
                auth_result = JWTAuthentication().authenticate(request)
                if auth_result:
                    request.user, _ = auth_result
                    return view_func(request, *args, **kwargs)
            except (InvalidToken, TokenError, AuthenticationFailed) as e:
                return JsonResponse({
                    'success': False,
                    'error': {
                        'message': f'Invalid token: {str(e)}',
                        'code': 'INVALID_TOKEN',
                        'retry': False
                    }
                }, status=401)

        # 3. No valid auth found
        return JsonResponse({
            'success': False,
            'error': {
                'message': 'Authentication required',
                'code': 'UNAUTHORIZED',
                'retry': True
            }
        }, status=401)

    return csrf_exempt(_wrapped_view)


def _json_body(request) -> dict:
    """Parse a JSON object body; an empty body is an empty object."""
    if not request.body:
        return {}
    data = json.loads(request.body)
    if not isinstance(data, dict):
        raise ValidationError('body', 'Expected a JSON object')
    return data


def _activity_fields(request) -> dict:
    """JSON body as keyword fields; the acting user always comes from auth."""
    data = _json_body(request)
    data.pop('user_id', None)
    return data


def _success_with_badges(message, data, new_badges, status=200):
    return UXResponse.success(
        message=message,
        data=data,
        feedback=badge_feedback(new_badges),
        status=status
    )


# Initialize Services
task_service = TaskLifecycleService()


# ============================================================================
# TASK ENDPOINTS
# ============================================================================

@require_auth
@require_GET
@handle_service_errors
def api_dashboard(request):
    """Owned, collaborating, invited and discoverable public tasks"""
    data = DashboardService(request.user.pk).get_dashboard()
    return UXResponse.success(message="Dashboard loaded", data=data)


@require_auth
@require_POST
@handle_service_errors
def api_task_create(request):
    """Create a goal; visibility defaults to private"""
    data = _json_body(request)
    task = task_service.create_task(
        request.user.pk,
        data.get('content'),
        data.get('visibility')
    )
    return UXResponse.success(message="Goal created", data=task, status=201)


@require_auth
@require_http_methods(['PUT', 'PATCH', 'DELETE'])
@handle_service_errors
def api_task_detail(request, task_id):
    """Update (owner edits content, members toggle completion) or delete a goal"""
    if request.method == 'DELETE':
        result = task_service.delete_task(task_id, request.user.pk)
        return UXResponse.success(
            message=result['message'],
            data=result,
            feedback={
                'type': 'warning',
                'message': result['message'],
                'haptic': HAPTIC_FEEDBACK['warning'],
                'toast': True
            }
        )

    result = task_service.update_task(task_id, request.user.pk, _json_body(request))
    message = "Goal completed! 🎉" if result['task']['is_completed'] else "Goal updated"
    return _success_with_badges(message, result, result['new_badges'])


# ============================================================================
# COLLABORATION ENDPOINTS
# ============================================================================

@require_auth
@require_POST
@handle_service_errors
def api_task_invite(request, task_id):
    """Owner invites a user by username"""
    data = validate_or_raise(InviteSerializer, _json_body(request))
    task = task_service.invite_collaborator(task_id, request.user.pk, data['username'])
    return UXResponse.success(
        message=task.pop('message'),
        data=task,
        feedback={
            'type': 'success',
            'message': f"Invitation sent to {data['username']}",
            'haptic': HAPTIC_FEEDBACK['invite_sent'],
            'toast': True
        }
    )


@require_auth
@require_POST
@handle_service_errors
def api_task_accept(request, task_id):
    task = task_service.accept_invite(task_id, request.user.pk)
    return UXResponse.success(message="Invitation accepted", data=task)


@require_auth
@require_POST
@handle_service_errors
def api_task_reject(request, task_id):
    result = task_service.reject_invite(task_id, request.user.pk)
    return UXResponse.success(message=result['message'], data=result)


@require_auth
@require_POST
@handle_service_errors
def api_task_request_join(request, task_id):
    """Join a public goal directly as a collaborator"""
    result = task_service.request_join_public_task(task_id, request.user.pk)
    return UXResponse.success(message=result['message'], data=result['task'])


@require_auth
@require_POST
@handle_service_errors
def api_task_accept_collab(request, task_id):
    """Owner approves a pending collaboration entry"""
    data = validate_or_raise(CollaborationRequestSerializer, _json_body(request))
    task = task_service.accept_collaboration_request(task_id, request.user.pk, data['user_id'])
    return UXResponse.success(message="Collaborator added", data=task)


# ============================================================================
# ACTIVITY ENDPOINTS
# ============================================================================

@require_auth
@require_POST
@handle_service_errors
def api_post_create(request):
    data = _json_body(request)
    result = ActivityService.create_post(request.user.pk, data.get('content'))
    return _success_with_badges("Post published", result, result['new_badges'], status=201)


@require_auth
@require_POST
@handle_service_errors
def api_food_log(request):
    result = ActivityService.log_food(request.user.pk, **_activity_fields(request))
    return _success_with_badges("Food logged", result, result['new_badges'], status=201)


@require_auth
@require_POST
@handle_service_errors
def api_meditation_progress(request):
    result = ActivityService.log_meditation(request.user.pk, **_activity_fields(request))
    return _success_with_badges("Session recorded", result, result['new_badges'], status=201)


# ============================================================================
# ACHIEVEMENTS
# ============================================================================

@require_auth
@require_GET
@handle_service_errors
def api_my_achievements(request):
    """XP, streaks and earned badges for the current user"""
    data = AchievementService.get_summary(request.user.pk)
    return UXResponse.success(message="Achievements loaded", data=data)


# ============================================================================
# PROFILE & NUTRITION
# ============================================================================

@require_auth
@require_GET
@handle_service_errors
def api_my_profile(request):
    data = ActivityService.get_profile(request.user.pk)
    return UXResponse.success(message="Profile loaded", data=data)


@require_auth
@require_http_methods(['PUT'])
@handle_service_errors
def api_calorie_goal(request):
    """Set the daily calorie goal (and optionally timezone) for the calorie streak"""
    result = ActivityService.set_daily_calorie_goal(request.user.pk, **_activity_fields(request))
    return UXResponse.success(message=result['message'], data=result)


@require_auth
@require_GET
@handle_service_errors
def api_food_today(request):
    data = ActivityService.get_todays_food(request.user.pk)
    return UXResponse.success(message="Today's food loaded", data=data)


@require_auth
@require_GET
@handle_service_errors
def api_food_leaderboard(request):
    """Top users by calorie streak"""
    data = ActivityService.get_leaderboard()
    return UXResponse.success(message="Leaderboard loaded", data=data)
