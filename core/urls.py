from django.urls import path
from django.http import JsonResponse
from . import views_api


def root_info(request):
    """API index for clients probing the root URL."""
    return JsonResponse({
        'success': True,
        'message': 'Wellness Goals API',
        'version': '1.0',
        'endpoints': {
            'dashboard': '/api/tasks/dashboard/',
            'tasks': '/api/tasks/',
            'achievements': '/api/me/achievements/',
            'profile': '/api/users/profile/me/',
        },
        'authenticated': request.user.is_authenticated
    })


urlpatterns = [
    path('', root_info, name='root'),

    # =========================================================================
    # API ENDPOINTS
    # =========================================================================

    # Task API
    path('api/tasks/dashboard/', views_api.api_dashboard, name='api_dashboard'),
    path('api/tasks/', views_api.api_task_create, name='api_task_create'),
    path('api/tasks/<str:task_id>/', views_api.api_task_detail, name='api_task_detail'),

    # Collaboration API
    path('api/tasks/<str:task_id>/invite/', views_api.api_task_invite, name='api_task_invite'),
    path('api/tasks/<str:task_id>/accept/', views_api.api_task_accept, name='api_task_accept'),
    path('api/tasks/<str:task_id>/reject/', views_api.api_task_reject, name='api_task_reject'),
    path('api/tasks/<str:task_id>/request-join/', views_api.api_task_request_join, name='api_task_request_join'),
    path('api/tasks/<str:task_id>/accept-collab/', views_api.api_task_accept_collab, name='api_task_accept_collab'),

    # Activity API
    path('api/posts/', views_api.api_post_create, name='api_post_create'),
    path('api/food/', views_api.api_food_log, name='api_food_log'),
    path('api/food/today/', views_api.api_food_today, name='api_food_today'),
    path('api/food/leaderboard/', views_api.api_food_leaderboard, name='api_food_leaderboard'),
    path('api/meditation/progress/', views_api.api_meditation_progress, name='api_meditation_progress'),

    # Profile API
    path('api/users/profile/me/', views_api.api_my_profile, name='api_my_profile'),
    path('api/users/goal/', views_api.api_calorie_goal, name='api_calorie_goal'),

    # Achievements API
    path('api/me/achievements/', views_api.api_my_achievements, name='api_my_achievements'),
]
