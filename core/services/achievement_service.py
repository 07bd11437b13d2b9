"""
Achievement Service

Central service for XP accrual and badge evaluation.

Every qualifying mutation (task completion, post, food log, meditation
session) awards XP here and then calls check_and_award_badges. Badge
predicates read counts from the stores at evaluation time rather than
from anything cached on the user.
"""
from typing import Dict, List
import logging

from core.badges import BADGE_CATALOG, AchievementFacts
from core.models import Post
from core.repositories import task_repository, user_repository
from core.utils.constants import (
    XP_TASK_COMPLETED_OWNER, XP_TASK_COMPLETED_COLLABORATOR,
    XP_POST_CREATED, XP_FOOD_LOGGED, XP_MEDITATION_LOGGED
)

logger = logging.getLogger(__name__)


class AchievementService:
    """
    Service for awarding XP and badges.

    Responsibilities:
    - Flat, uncapped XP awards for qualifying actions
    - Gather aggregate facts for a user
    - Grant each newly qualifying badge at most once
    """

    @staticmethod
    def award_xp(user_ids, amount: int) -> int:
        """
        Add XP to one or more users.

        Returns:
            Number of users credited
        """
        updated = user_repository.increment_xp(user_ids, amount)
        if updated:
            logger.debug(f"Awarded {amount} XP to {updated} user(s)")
        return updated

    @staticmethod
    def award_task_completion(owner_id, collaborator_ids) -> None:
        """+10 XP to the owner and +5 XP to each current collaborator."""
        AchievementService.award_xp(owner_id, XP_TASK_COMPLETED_OWNER)
        if collaborator_ids:
            AchievementService.award_xp(list(collaborator_ids), XP_TASK_COMPLETED_COLLABORATOR)

    @staticmethod
    def award_post_created(user_id) -> None:
        AchievementService.award_xp(user_id, XP_POST_CREATED)

    @staticmethod
    def award_food_logged(user_id) -> None:
        AchievementService.award_xp(user_id, XP_FOOD_LOGGED)

    @staticmethod
    def award_meditation_logged(user_id) -> None:
        AchievementService.award_xp(user_id, XP_MEDITATION_LOGGED)

    @staticmethod
    def get_facts(user_id) -> AchievementFacts:
        """Aggregate the current state badge predicates are evaluated against."""
        profile = user_repository.get_profile(user_id)
        return AchievementFacts(
            completed_owned_tasks=task_repository.count_completed_owned_tasks(user_id),
            completed_collaborative_tasks=task_repository.count_completed_collaborative_tasks(user_id),
            post_count=Post.objects.filter(author_id=user_id).count(),
            streak=profile.streak,
            meditation_streak=profile.meditation_current_streak,
        )

    @staticmethod
    def check_and_award_badges(user) -> List[Dict]:
        """
        Evaluate the badge catalog for a user and grant new badges.

        Safe to call repeatedly: badges already held are skipped, and a
        grant that loses a race to a concurrent grant is not reported.

        Args:
            user: User instance or user id

        Returns:
            List of newly awarded badges as dicts (code, name, description)
        """
        user_id = getattr(user, 'pk', user)
        held = user_repository.get_badge_codes(user_id)

        candidates = [badge for badge in BADGE_CATALOG if badge.code not in held]
        if not candidates:
            return []

        facts = AchievementService.get_facts(user_id)

        new_badges = []
        for badge in candidates:
            if not badge.predicate(facts):
                continue
            if user_repository.add_badge_if_absent(user_id, badge.code):
                new_badges.append(badge.to_dict())

        if new_badges:
            logger.info(
                f"User {user_id} earned badges: {', '.join(b['code'] for b in new_badges)}"
            )

        return new_badges

    @staticmethod
    def get_summary(user_id) -> Dict:
        """XP, streaks and earned badges for a user."""
        profile = user_repository.get_profile(user_id)
        held = user_repository.get_badge_codes(user_id)
        badges = [badge.to_dict() for badge in BADGE_CATALOG if badge.code in held]

        return {
            'xp': profile.xp,
            'streak': profile.streak,
            'last_streak_update': profile.last_streak_update.isoformat() if profile.last_streak_update else None,
            'meditation': {
                'total_sessions': profile.meditation_total_sessions,
                'total_minutes': profile.meditation_total_minutes,
                'current_streak': profile.meditation_current_streak,
                'longest_streak': profile.meditation_longest_streak,
            },
            'badges': badges,
        }
