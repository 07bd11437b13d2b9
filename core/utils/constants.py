# core/utils/constants.py
"""
Central constants file for consistent values across the application.
Use these constants instead of hardcoded strings and numbers.
"""

# ============================================
# TASK VISIBILITY VALUES
# ============================================
VISIBILITY_PRIVATE = "private"
VISIBILITY_PUBLIC = "public"

VISIBILITY_CHOICES = [
    VISIBILITY_PRIVATE,
    VISIBILITY_PUBLIC,
]

# ============================================
# XP AWARDS
# ============================================
XP_POST_CREATED = 15
XP_FOOD_LOGGED = 5
XP_TASK_COMPLETED_OWNER = 10
XP_TASK_COMPLETED_COLLABORATOR = 5
XP_MEDITATION_LOGGED = 20

# ============================================
# BADGE THRESHOLDS
# ============================================
TASK_MASTER_THRESHOLD = 10
STREAK_WEEK_THRESHOLD = 7
STREAK_MONTH_THRESHOLD = 30
MINDFUL_WEEK_THRESHOLD = 7

# ============================================
# DASHBOARD
# ============================================
DEFAULT_PUBLIC_TASK_LIMIT = 10

# ============================================
# LEADERBOARD
# ============================================
LEADERBOARD_LIMIT = 100

# ============================================
# NUTRITION / MEDITATION
# ============================================
DEFAULT_DAILY_CALORIE_GOAL = 2000

MEAL_TYPE_CHOICES = [
    'breakfast',
    'lunch',
    'dinner',
    'snack',
]

MEDITATION_CONTENT_TYPES = [
    'Meditation',
    'SleepContent',
]

# ============================================
# UI FEEDBACK
# ============================================
HAPTIC_FEEDBACK = {
    'success': 'success',
    'invite_sent': 'light',
    'celebration': 'heavy',
    'warning': 'warning',
    'error': 'error',
}


# ============================================
# HELPER FUNCTIONS
# ============================================

def normalize_visibility(visibility) -> str:
    """
    Normalize visibility to lowercase.
    Handles common input variations; None means the default (private).
    """
    if visibility is None:
        return VISIBILITY_PRIVATE
    return str(visibility).strip().lower()
