"""
Input Validation and Output Serializers

Provides validation for user input using Django REST Framework serializers,
plus read serializers that render tasks with their members.
"""
from rest_framework import serializers
import pytz

from core.exceptions import ValidationError as AppValidationError
from core.models import Task, Post, FoodLog, MeditationSession
from core.utils.constants import (
    VISIBILITY_CHOICES, VISIBILITY_PRIVATE, MEAL_TYPE_CHOICES, MEDITATION_CONTENT_TYPES
)


def validate_or_raise(serializer_class, data) -> dict:
    """
    Run a serializer and convert its first error into an AppValidationError.

    Returns:
        The serializer's validated_data
    """
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        field, messages = next(iter(serializer.errors.items()))
        message = messages[0] if isinstance(messages, list) else messages
        raise AppValidationError(field, str(message))
    return serializer.validated_data


# ============================================================================
# TASKS
# ============================================================================

class TaskCreateSerializer(serializers.Serializer):
    """Validate task creation data"""

    content = serializers.CharField(
        required=True,
        allow_blank=False,
        help_text="What the goal is (e.g., 'Run 5k')"
    )

    visibility = serializers.ChoiceField(
        choices=VISIBILITY_CHOICES,
        default=VISIBILITY_PRIVATE,
        help_text="private (invite-only) or public (discoverable and joinable)"
    )

    def validate_content(self, value):
        """Ensure content is not just whitespace"""
        if not value or not value.strip():
            raise serializers.ValidationError("Content field is required")
        return value.strip()


class TaskUpdateSerializer(serializers.Serializer):
    """Validate a partial task update"""

    content = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        help_text="New content (owner only)"
    )

    is_completed = serializers.BooleanField(
        required=False,
        help_text="Completion flag (owner or collaborator)"
    )


class InviteSerializer(serializers.Serializer):
    """Validate a collaborator invitation"""

    username = serializers.CharField(
        required=True,
        max_length=150,
        help_text="Username to invite (case-insensitive)"
    )


class CollaborationRequestSerializer(serializers.Serializer):
    """Validate approval of a pending collaboration request"""

    user_id = serializers.IntegerField(
        required=True,
        min_value=1,
        help_text="User whose pending request is accepted"
    )


# ============================================================================
# ACTIVITIES
# ============================================================================

class PostCreateSerializer(serializers.Serializer):
    """Validate post creation data"""

    content = serializers.CharField(required=True, allow_blank=False)

    def validate_content(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("Post content cannot be empty.")
        return value.strip()


class FoodLogSerializer(serializers.Serializer):
    """Validate a food log entry"""

    food_name = serializers.CharField(required=True, max_length=200)
    calories = serializers.IntegerField(required=True, min_value=0)
    protein = serializers.FloatField(required=False, min_value=0, default=0)
    carbs = serializers.FloatField(required=False, min_value=0, default=0)
    fat = serializers.FloatField(required=False, min_value=0, default=0)
    meal_type = serializers.ChoiceField(choices=MEAL_TYPE_CHOICES, default='snack')


class CalorieGoalSerializer(serializers.Serializer):
    """Validate a daily calorie goal update"""

    daily_calorie_goal = serializers.IntegerField(
        required=True,
        min_value=0,
        help_text="Calories to log per day to extend the streak"
    )

    timezone = serializers.CharField(
        required=False,
        max_length=50,
        help_text="IANA timezone the streak day is counted in (e.g., 'Asia/Kolkata')"
    )

    def validate_timezone(self, value):
        if value not in pytz.all_timezones_set:
            raise serializers.ValidationError(f"Unknown timezone '{value}'")
        return value


class MeditationLogSerializer(serializers.Serializer):
    """Validate a completed meditation session"""

    meditation_id = serializers.CharField(required=True, max_length=64)
    content_type = serializers.ChoiceField(choices=MEDITATION_CONTENT_TYPES, required=True)
    duration = serializers.IntegerField(required=True, min_value=1, help_text="Minutes")
    mood = serializers.CharField(required=True, max_length=50)
    mood_after = serializers.CharField(required=False, allow_blank=True, max_length=50, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')


# ============================================================================
# READ SERIALIZERS
# ============================================================================

class UserSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField()


class TaskSerializer(serializers.ModelSerializer):
    """Task with owner and both membership sets rendered as {id, username}"""

    id = serializers.CharField(source='task_id', read_only=True)
    owner = UserSummarySerializer(read_only=True)
    collaborators = UserSummarySerializer(many=True, read_only=True)
    pending_invitations = UserSummarySerializer(many=True, read_only=True)

    class Meta:
        model = Task
        fields = [
            'id', 'owner', 'collaborators', 'pending_invitations', 'content',
            'is_completed', 'visibility', 'created_at', 'updated_at',
        ]


class PostSerializer(serializers.ModelSerializer):
    id = serializers.CharField(source='post_id', read_only=True)
    author = UserSummarySerializer(read_only=True)

    class Meta:
        model = Post
        fields = ['id', 'author', 'content', 'created_at']


class FoodLogReadSerializer(serializers.ModelSerializer):
    id = serializers.CharField(source='log_id', read_only=True)

    class Meta:
        model = FoodLog
        fields = ['id', 'food_name', 'calories', 'protein', 'carbs', 'fat', 'meal_type', 'created_at']


class MeditationSessionSerializer(serializers.ModelSerializer):
    id = serializers.CharField(source='session_id', read_only=True)

    class Meta:
        model = MeditationSession
        fields = [
            'id', 'meditation_ref', 'content_type', 'duration', 'mood',
            'mood_after', 'notes', 'completed_at',
        ]
