"""
Activity Service

XP-producing activities outside the task lifecycle: social posts, food
logging (drives the calorie streak) and meditation sessions (drives the
meditation streak). Each one awards XP and then re-evaluates badges.

Also owns the calorie goal settings and the read side of food logging:
today's log and the streak leaderboard.
"""
from typing import Dict, List
from django.db import transaction
from django.db.models import Sum
import logging

from core.models import Post, FoodLog, MeditationSession
from core.repositories import user_repository
from core.serializers import (
    PostCreateSerializer, FoodLogSerializer, MeditationLogSerializer, CalorieGoalSerializer,
    PostSerializer, FoodLogReadSerializer, MeditationSessionSerializer,
    validate_or_raise
)
from core.services.achievement_service import AchievementService
from core.services.streak_service import StreakService
from core.utils.constants import LEADERBOARD_LIMIT
from core.utils.time_utils import get_day_bounds, get_today_in_timezone

logger = logging.getLogger(__name__)


class ActivityService:
    """Service for posts, food logs and meditation sessions."""

    @staticmethod
    def create_post(user_id, content: str) -> Dict:
        """
        Publish a post. +15 XP.

        Returns:
            {'post': dict, 'new_badges': list}

        Raises:
            ValidationError: If content is empty
        """
        data = validate_or_raise(PostCreateSerializer, {'content': content})
        author = user_repository.get_user(user_id)

        with transaction.atomic():
            post = Post.objects.create(author=author, content=data['content'])
            AchievementService.award_post_created(author.pk)

        logger.info(f"Post {post.post_id} created by user {author.pk}")

        return {
            'post': PostSerializer(post).data,
            'new_badges': AchievementService.check_and_award_badges(author.pk),
        }

    @staticmethod
    def log_food(user_id, **fields) -> Dict:
        """
        Log a food entry. +5 XP.

        When today's calorie total reaches the user's daily goal the
        calorie streak is credited (at most once per day).

        Returns:
            {'food_log': dict, 'streak': dict, 'new_badges': list}

        Raises:
            ValidationError: If food_name or calories are missing or invalid
        """
        data = validate_or_raise(FoodLogSerializer, fields)
        user = user_repository.get_user(user_id)

        with transaction.atomic():
            food_log = FoodLog.objects.create(user=user, **data)
            AchievementService.award_food_logged(user.pk)

        profile = user_repository.get_profile(user.pk)
        today = get_today_in_timezone(profile.timezone)
        start, end = get_day_bounds(today, profile.timezone)

        total = FoodLog.objects.filter(
            user=user, created_at__gte=start, created_at__lt=end
        ).aggregate(total=Sum('calories'))['total'] or 0

        goal_met = total >= profile.daily_calorie_goal
        streak = StreakService.update_calorie_streak(user.pk, goal_met, today)

        logger.info(
            f"User {user.pk} logged {data['calories']} kcal "
            f"({total}/{profile.daily_calorie_goal} today)"
        )

        return {
            'food_log': FoodLogReadSerializer(food_log).data,
            'streak': {
                'current': streak.streak,
                'credited_today': streak.last_credited == today,
                'calories_today': total,
                'daily_goal': profile.daily_calorie_goal,
            },
            'new_badges': AchievementService.check_and_award_badges(user.pk),
        }

    @staticmethod
    def log_meditation(user_id, **fields) -> Dict:
        """
        Record a completed meditation or sleep session. +20 XP.

        Any session credits the day for the meditation streak.

        Returns:
            {'session': dict, 'stats': dict, 'new_badges': list}

        Raises:
            ValidationError: If required fields are missing or duration < 1
        """
        data = validate_or_raise(MeditationLogSerializer, fields)
        user = user_repository.get_user(user_id)

        with transaction.atomic():
            session = MeditationSession.objects.create(
                user=user,
                meditation_ref=data['meditation_id'],
                content_type=data['content_type'],
                duration=data['duration'],
                mood=data['mood'],
                mood_after=data.get('mood_after', ''),
                notes=data.get('notes', ''),
            )
            user_repository.increment_meditation_totals(user.pk, data['duration'])
            StreakService.update_meditation_streak(user.pk)
            AchievementService.award_meditation_logged(user.pk)

        profile = user_repository.get_profile(user.pk)
        logger.info(
            f"User {user.pk} meditated {data['duration']} min "
            f"(streak {profile.meditation_current_streak})"
        )

        return {
            'session': MeditationSessionSerializer(session).data,
            'stats': {
                'total_sessions': profile.meditation_total_sessions,
                'total_minutes': profile.meditation_total_minutes,
                'current_streak': profile.meditation_current_streak,
                'longest_streak': profile.meditation_longest_streak,
            },
            'new_badges': AchievementService.check_and_award_badges(user.pk),
        }

    # ------------------------------------------------------------------
    # Profile and nutrition reads
    # ------------------------------------------------------------------

    @staticmethod
    def get_profile(user_id) -> Dict:
        """The current user's profile: goal settings, XP, streak and badge codes."""
        user = user_repository.get_user(user_id)
        profile = user_repository.get_profile(user.pk)
        return {
            'id': user.pk,
            'username': user.username,
            'email': user.email,
            'daily_calorie_goal': profile.daily_calorie_goal,
            'timezone': profile.timezone,
            'xp': profile.xp,
            'streak': profile.streak,
            'badges': sorted(user_repository.get_badge_codes(user.pk)),
        }

    @staticmethod
    def set_daily_calorie_goal(user_id, **fields) -> Dict:
        """
        Change the calorie goal (and optionally the timezone) the calorie
        streak is measured against. Does not re-evaluate today's streak.

        Returns:
            {'message': str, 'daily_calorie_goal': int, 'timezone': str}

        Raises:
            ValidationError: If the goal is missing or negative, or the timezone is unknown
        """
        data = validate_or_raise(CalorieGoalSerializer, fields)
        user = user_repository.get_user(user_id)

        profile = user_repository.update_profile_fields(user.pk, **data)
        logger.info(f"User {user.pk} set daily calorie goal to {profile.daily_calorie_goal}")

        return {
            'message': 'Goal updated successfully',
            'daily_calorie_goal': profile.daily_calorie_goal,
            'timezone': profile.timezone,
        }

    @staticmethod
    def get_todays_food(user_id) -> Dict:
        """
        Food logged during the user's local today, newest first.

        Returns:
            {'food_logs': list, 'calories_today': int, 'daily_goal': int}
        """
        profile = user_repository.get_profile(user_id)
        today = StreakService.get_today_for_user(user_id)
        start, end = get_day_bounds(today, profile.timezone)

        logs = list(FoodLog.objects.filter(
            user_id=user_id, created_at__gte=start, created_at__lt=end
        ).order_by('-created_at'))

        return {
            'food_logs': FoodLogReadSerializer(logs, many=True).data,
            'calories_today': sum(log.calories for log in logs),
            'daily_goal': profile.daily_calorie_goal,
        }

    @staticmethod
    def get_leaderboard(limit: int = LEADERBOARD_LIMIT) -> List[Dict]:
        """Users with an active calorie streak, longest streak first."""
        return [
            {'username': profile.user.username, 'streak': profile.streak}
            for profile in user_repository.get_streak_leaderboard(limit)
        ]
