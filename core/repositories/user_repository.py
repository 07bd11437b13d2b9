"""
User, profile and badge data access.

XP changes are F() increments and badge grants are conditional inserts
guarded by the (user, code) unique constraint, so concurrent rewards for
the same user never lose XP or duplicate a badge.
"""
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone
import logging

from core.models import UserProfile, UserBadge
from core.exceptions import UserNotFoundError

logger = logging.getLogger(__name__)


def get_user(user_id):
    """Fetch a user by primary key or raise UserNotFoundError"""
    User = get_user_model()
    try:
        return User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(user_id)


def find_user_by_username(username: str):
    """Case-insensitive username lookup. Returns None if absent."""
    if not username:
        return None
    User = get_user_model()
    return User.objects.filter(username__iexact=username.strip()).first()


def get_or_create_profile(user_id) -> UserProfile:
    profile, created = UserProfile.objects.get_or_create(user_id=user_id)
    if created:
        logger.debug(f"Created profile for user {user_id}")
    return profile


def get_profile(user_id, for_update: bool = False) -> UserProfile:
    """
    Fetch a user's profile, creating it if missing.

    Args:
        for_update: Lock the row; must be called inside transaction.atomic()
    """
    get_or_create_profile(user_id)
    queryset = UserProfile.objects.select_for_update() if for_update else UserProfile.objects
    return queryset.get(user_id=user_id)


def increment_xp(user_ids, amount: int) -> int:
    """
    Add XP to one or more users atomically.

    Returns:
        Number of profiles updated
    """
    if amount < 0:
        raise ValueError("XP can only increase")
    if not isinstance(user_ids, (list, tuple, set)):
        user_ids = [user_ids]
    if not user_ids or amount == 0:
        return 0

    for user_id in user_ids:
        get_or_create_profile(user_id)

    return UserProfile.objects.filter(user_id__in=user_ids).update(xp=F('xp') + amount)


def increment_meditation_totals(user_id, minutes: int) -> None:
    """Count one more session and its minutes"""
    get_or_create_profile(user_id)
    UserProfile.objects.filter(user_id=user_id).update(
        meditation_total_sessions=F('meditation_total_sessions') + 1,
        meditation_total_minutes=F('meditation_total_minutes') + minutes,
    )


def get_badge_codes(user_id) -> set:
    return set(UserBadge.objects.filter(user_id=user_id).values_list('code', flat=True))


def add_badge_if_absent(user_id, code: str) -> bool:
    """
    Grant a badge unless the user already holds it.

    Returns:
        True if this call granted the badge, False if it was already held
    """
    try:
        with transaction.atomic():
            _, created = UserBadge.objects.get_or_create(user_id=user_id, code=code)
    except IntegrityError:
        # Lost a race with a concurrent grant of the same badge
        return False
    return created


def update_profile_fields(user_id, **fields) -> UserProfile:
    """Write the given profile fields and return the fresh profile"""
    get_or_create_profile(user_id)
    UserProfile.objects.filter(user_id=user_id).update(updated_at=timezone.now(), **fields)
    return get_profile(user_id)


def get_streak_leaderboard(limit: int):
    """Profiles with an active calorie streak, longest first"""
    return (
        UserProfile.objects.select_related('user')
        .filter(streak__gt=0)
        .order_by('-streak', 'user__username')[:limit]
    )
