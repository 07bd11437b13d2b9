"""
Services package for Wellness Goals.

Business logic layer containing domain services:

- task_service: Task CRUD and the collaborator membership state machine
- dashboard_service: Owned / collaborating / invited / public task lists
- achievement_service: XP awards and badge evaluation
- streak_service: Daily streaks for calorie goals and meditation
- activity_service: Posts, food logs and meditation sessions
"""

# Explicit imports for convenience
from .task_service import TaskLifecycleService
from .dashboard_service import DashboardService
from .achievement_service import AchievementService
from .streak_service import StreakService
from .activity_service import ActivityService

__all__ = [
    'TaskLifecycleService',
    'DashboardService',
    'AchievementService',
    'StreakService',
    'ActivityService',
]
