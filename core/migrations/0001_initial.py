from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='UserProfile',
            fields=[
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='profile', serialize=False, to='auth.user')),
                ('xp', models.PositiveIntegerField(default=0)),
                ('streak', models.PositiveIntegerField(default=0)),
                ('last_streak_update', models.DateField(blank=True, null=True)),
                ('daily_calorie_goal', models.PositiveIntegerField(default=2000, help_text='Calories that must be logged in a day to extend the streak')),
                ('meditation_total_sessions', models.PositiveIntegerField(default=0)),
                ('meditation_total_minutes', models.PositiveIntegerField(default=0)),
                ('meditation_current_streak', models.PositiveIntegerField(default=0)),
                ('meditation_longest_streak', models.PositiveIntegerField(default=0)),
                ('last_meditation_date', models.DateField(blank=True, null=True)),
                ('timezone', models.CharField(default='UTC', max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'user_profiles',
            },
        ),
        migrations.CreateModel(
            name='UserBadge',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=50)),
                ('awarded_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='badges', to='auth.user')),
            ],
            options={
                'db_table': 'user_badges',
                'ordering': ['awarded_at'],
                'constraints': [models.UniqueConstraint(fields=('user', 'code'), name='unique_user_badge')],
            },
        ),
        migrations.CreateModel(
            name='Task',
            fields=[
                ('task_id', models.CharField(default=uuid.uuid4, editable=False, max_length=36, primary_key=True, serialize=False)),
                ('content', models.TextField()),
                ('is_completed', models.BooleanField(default=False)),
                ('visibility', models.CharField(choices=[('private', 'Private'), ('public', 'Public')], default='private', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='owned_tasks', to='auth.user')),
                ('collaborators', models.ManyToManyField(blank=True, db_table='task_collaborators', related_name='collaborating_tasks', to='auth.user')),
                ('pending_invitations', models.ManyToManyField(blank=True, db_table='task_pending_invitations', related_name='task_invitations', to='auth.user')),
            ],
            options={
                'db_table': 'tasks',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['owner', '-created_at'], name='task_owner_recent'),
                    models.Index(fields=['visibility', '-created_at'], name='task_visibility_recent'),
                    models.Index(fields=['owner', 'is_completed'], name='task_owner_completed'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Post',
            fields=[
                ('post_id', models.CharField(default=uuid.uuid4, editable=False, max_length=36, primary_key=True, serialize=False)),
                ('content', models.TextField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('author', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='posts', to='auth.user')),
            ],
            options={
                'db_table': 'posts',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['author', '-created_at'], name='post_author_recent')],
            },
        ),
        migrations.CreateModel(
            name='FoodLog',
            fields=[
                ('log_id', models.CharField(default=uuid.uuid4, editable=False, max_length=36, primary_key=True, serialize=False)),
                ('food_name', models.CharField(max_length=200)),
                ('calories', models.PositiveIntegerField()),
                ('protein', models.FloatField(default=0)),
                ('carbs', models.FloatField(default=0)),
                ('fat', models.FloatField(default=0)),
                ('meal_type', models.CharField(choices=[('breakfast', 'Breakfast'), ('lunch', 'Lunch'), ('dinner', 'Dinner'), ('snack', 'Snack')], default='snack', max_length=20)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='food_logs', to='auth.user')),
            ],
            options={
                'db_table': 'food_logs',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['user', 'created_at'], name='food_log_user_day')],
            },
        ),
        migrations.CreateModel(
            name='MeditationSession',
            fields=[
                ('session_id', models.CharField(default=uuid.uuid4, editable=False, max_length=36, primary_key=True, serialize=False)),
                ('meditation_ref', models.CharField(max_length=64)),
                ('content_type', models.CharField(choices=[('Meditation', 'Meditation'), ('SleepContent', 'Sleep Content')], default='Meditation', max_length=20)),
                ('duration', models.PositiveIntegerField(help_text='Minutes')),
                ('mood', models.CharField(max_length=50)),
                ('mood_after', models.CharField(blank=True, default='', max_length=50)),
                ('notes', models.TextField(blank=True, default='')),
                ('completed_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='meditation_sessions', to='auth.user')),
            ],
            options={
                'db_table': 'meditation_sessions',
                'ordering': ['-completed_at'],
                'indexes': [models.Index(fields=['user', '-completed_at'], name='meditation_user_recent')],
            },
        ),
    ]
