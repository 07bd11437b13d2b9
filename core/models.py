from django.db import models
from django.utils import timezone
import uuid

from core.utils.constants import DEFAULT_DAILY_CALORIE_GOAL


class UserProfile(models.Model):
    """Gamification state for a user: XP, streaks and daily goals."""

    user = models.OneToOneField('auth.User', on_delete=models.CASCADE, primary_key=True, related_name='profile')

    # XP only ever grows; use F() increments, never read-modify-write
    xp = models.PositiveIntegerField(default=0)

    # Calorie-goal streak
    streak = models.PositiveIntegerField(default=0)
    last_streak_update = models.DateField(null=True, blank=True)
    daily_calorie_goal = models.PositiveIntegerField(
        default=DEFAULT_DAILY_CALORIE_GOAL,
        help_text="Calories that must be logged in a day to extend the streak"
    )

    # Meditation stats
    meditation_total_sessions = models.PositiveIntegerField(default=0)
    meditation_total_minutes = models.PositiveIntegerField(default=0)
    meditation_current_streak = models.PositiveIntegerField(default=0)
    meditation_longest_streak = models.PositiveIntegerField(default=0)
    last_meditation_date = models.DateField(null=True, blank=True)

    timezone = models.CharField(max_length=50, default='UTC')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user_profiles'

    def __str__(self):
        return f"Profile for {self.user.username} ({self.xp} XP)"


class UserBadge(models.Model):
    """A badge granted to a user. Append-only; one row per (user, code)."""

    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='badges')
    code = models.CharField(max_length=50)
    awarded_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'user_badges'
        ordering = ['awarded_at']
        constraints = [
            models.UniqueConstraint(fields=['user', 'code'], name='unique_user_badge'),
        ]

    def __str__(self):
        return f"{self.user.username}: {self.code}"


class Task(models.Model):
    """
    A collaborative goal.

    Membership is kept as two unordered sets. Invariants:
    owner is never in either set, and the sets never overlap.
    """

    VISIBILITY_PRIVATE = 'private'
    VISIBILITY_PUBLIC = 'public'

    VISIBILITY_CHOICES = [
        (VISIBILITY_PRIVATE, 'Private'),
        (VISIBILITY_PUBLIC, 'Public'),
    ]

    task_id = models.CharField(max_length=36, primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='owned_tasks')
    collaborators = models.ManyToManyField(
        'auth.User',
        related_name='collaborating_tasks',
        blank=True,
        db_table='task_collaborators'
    )
    pending_invitations = models.ManyToManyField(
        'auth.User',
        related_name='task_invitations',
        blank=True,
        db_table='task_pending_invitations'
    )
    content = models.TextField()
    is_completed = models.BooleanField(default=False)
    visibility = models.CharField(max_length=10, choices=VISIBILITY_CHOICES, default=VISIBILITY_PRIVATE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tasks'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['owner', '-created_at'], name='task_owner_recent'),
            models.Index(fields=['visibility', '-created_at'], name='task_visibility_recent'),
            models.Index(fields=['owner', 'is_completed'], name='task_owner_completed'),
        ]

    def __str__(self):
        return f"{self.content[:50]} ({self.visibility})"

    @property
    def id(self):
        """Alias for task_id."""
        return self.task_id

    @property
    def is_public(self):
        return self.visibility == self.VISIBILITY_PUBLIC

    def is_owner(self, user_id) -> bool:
        return self.owner_id == user_id

    def is_collaborator(self, user_id) -> bool:
        return self.collaborators.filter(pk=user_id).exists()

    def has_pending_invitation(self, user_id) -> bool:
        return self.pending_invitations.filter(pk=user_id).exists()


class Post(models.Model):
    """Community post. Only authorship matters here (XP and badges)."""

    post_id = models.CharField(max_length=36, primary_key=True, default=uuid.uuid4, editable=False)
    author = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='posts')
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'posts'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['author', '-created_at'], name='post_author_recent'),
        ]

    def __str__(self):
        return f"{self.author.username}: {self.content[:40]}"


class FoodLog(models.Model):
    """A single food entry counted towards the daily calorie goal."""

    MEAL_TYPE_CHOICES = [
        ('breakfast', 'Breakfast'),
        ('lunch', 'Lunch'),
        ('dinner', 'Dinner'),
        ('snack', 'Snack'),
    ]

    log_id = models.CharField(max_length=36, primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='food_logs')
    food_name = models.CharField(max_length=200)
    calories = models.PositiveIntegerField()
    protein = models.FloatField(default=0)
    carbs = models.FloatField(default=0)
    fat = models.FloatField(default=0)
    meal_type = models.CharField(max_length=20, choices=MEAL_TYPE_CHOICES, default='snack')
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'food_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'created_at'], name='food_log_user_day'),
        ]

    def __str__(self):
        return f"{self.food_name} ({self.calories} kcal)"


class MeditationSession(models.Model):
    """A completed meditation or sleep-content session."""

    CONTENT_TYPE_CHOICES = [
        ('Meditation', 'Meditation'),
        ('SleepContent', 'Sleep Content'),
    ]

    session_id = models.CharField(max_length=36, primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='meditation_sessions')
    meditation_ref = models.CharField(max_length=64)
    content_type = models.CharField(max_length=20, choices=CONTENT_TYPE_CHOICES, default='Meditation')
    duration = models.PositiveIntegerField(help_text="Minutes")
    mood = models.CharField(max_length=50)
    mood_after = models.CharField(max_length=50, blank=True, default='')
    notes = models.TextField(blank=True, default='')
    completed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'meditation_sessions'
        ordering = ['-completed_at']
        indexes = [
            models.Index(fields=['user', '-completed_at'], name='meditation_user_recent'),
        ]

    def __str__(self):
        return f"{self.user.username} - {self.meditation_ref} ({self.duration} min)"
