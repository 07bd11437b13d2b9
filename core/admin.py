from django.contrib import admin
from core.models import UserProfile, UserBadge, Task, Post, FoodLog, MeditationSession


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ['content', 'owner', 'visibility', 'is_completed', 'created_at']
    list_filter = ['visibility', 'is_completed', 'created_at']
    search_fields = ['content', 'owner__username']
    readonly_fields = ['task_id', 'created_at', 'updated_at']
    filter_horizontal = ['collaborators', 'pending_invitations']

    fieldsets = (
        ('Basic Information', {
            'fields': ('task_id', 'owner', 'content', 'visibility', 'is_completed')
        }),
        ('Membership', {
            'fields': ('collaborators', 'pending_invitations')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'xp', 'streak', 'meditation_current_streak', 'timezone']
    search_fields = ['user__username']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(UserBadge)
class UserBadgeAdmin(admin.ModelAdmin):
    list_display = ['user', 'code', 'awarded_at']
    list_filter = ['code']
    search_fields = ['user__username']


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ['author', 'content', 'created_at']
    search_fields = ['content', 'author__username']


@admin.register(FoodLog)
class FoodLogAdmin(admin.ModelAdmin):
    list_display = ['user', 'food_name', 'calories', 'meal_type', 'created_at']
    list_filter = ['meal_type']


@admin.register(MeditationSession)
class MeditationSessionAdmin(admin.ModelAdmin):
    list_display = ['user', 'meditation_ref', 'content_type', 'duration', 'completed_at']
    list_filter = ['content_type']
