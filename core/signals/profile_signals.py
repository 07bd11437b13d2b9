"""
Profile Signals - every user gets a UserProfile row on creation.

XP, streak and meditation counters live on the profile, so it must exist
before any reward is applied.
"""
from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver
import logging

from core.models import UserProfile

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_profile_for_new_user(sender, instance, created, **kwargs):
    if not created:
        return
    UserProfile.objects.get_or_create(user=instance)
    logger.debug(f"Profile created for user {instance.pk}")
