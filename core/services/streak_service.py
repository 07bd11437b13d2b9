from datetime import date
from typing import NamedTuple, Optional
from django.db import transaction
import logging

from core.repositories import user_repository
from core.utils.time_utils import get_today_in_timezone, is_yesterday

logger = logging.getLogger(__name__)


class StreakUpdate(NamedTuple):
    streak: int
    last_credited: Optional[date]
    changed: bool


class StreakService:
    """Daily streak bookkeeping for calorie goals and meditation."""

    @staticmethod
    def advance(
        streak: int,
        last_credited: Optional[date],
        goal_met_today: bool,
        today: date
    ) -> StreakUpdate:
        """
        Apply one day's result to a streak.

        - goal not met: unchanged
        - already credited today: unchanged
        - last credited yesterday: streak + 1
        - otherwise (gap or never credited): streak = 1

        Args:
            streak: Current streak value
            last_credited: Last day the streak was credited (None if never)
            goal_met_today: Whether today's goal is met
            today: Today in the user's timezone

        Returns:
            StreakUpdate with the new value and whether it changed
        """
        if not goal_met_today:
            return StreakUpdate(streak, last_credited, False)

        if last_credited == today:
            return StreakUpdate(streak, last_credited, False)

        if is_yesterday(last_credited, today):
            return StreakUpdate((streak or 0) + 1, today, True)

        return StreakUpdate(1, today, True)

    @staticmethod
    def get_today_for_user(user_id) -> date:
        profile = user_repository.get_profile(user_id)
        return get_today_in_timezone(profile.timezone)

    @staticmethod
    def update_calorie_streak(user_id, goal_met_today: bool, today: date = None) -> StreakUpdate:
        """
        Credit today's calorie goal to the user's streak.

        The profile row is locked so two food logs on the same day
        cannot both increment the streak.
        """
        with transaction.atomic():
            profile = user_repository.get_profile(user_id, for_update=True)
            today = today or get_today_in_timezone(profile.timezone)

            result = StreakService.advance(
                profile.streak, profile.last_streak_update, goal_met_today, today
            )
            if result.changed:
                profile.streak = result.streak
                profile.last_streak_update = result.last_credited
                profile.save(update_fields=['streak', 'last_streak_update', 'updated_at'])
                logger.info(f"Calorie streak for user {user_id} is now {result.streak}")

        return result

    @staticmethod
    def update_meditation_streak(user_id, today: date = None) -> StreakUpdate:
        """
        Credit a meditation session to the meditation streak.

        Any logged session meets the day's goal. Longest streak is kept
        as a running maximum.
        """
        with transaction.atomic():
            profile = user_repository.get_profile(user_id, for_update=True)
            today = today or get_today_in_timezone(profile.timezone)

            result = StreakService.advance(
                profile.meditation_current_streak, profile.last_meditation_date, True, today
            )
            if result.changed:
                profile.meditation_current_streak = result.streak
                profile.last_meditation_date = result.last_credited
                profile.meditation_longest_streak = max(
                    profile.meditation_longest_streak, result.streak
                )
                profile.save(update_fields=[
                    'meditation_current_streak', 'last_meditation_date',
                    'meditation_longest_streak', 'updated_at'
                ])

        return result
