"""
Badge Catalog

Fixed, ordered registry of badges. Each badge carries a predicate over
AchievementFacts; adding a badge means adding one entry to BADGE_CATALOG.
"""
from typing import Callable, Dict, NamedTuple, Tuple

from core.utils.constants import (
    TASK_MASTER_THRESHOLD, STREAK_WEEK_THRESHOLD, STREAK_MONTH_THRESHOLD,
    MINDFUL_WEEK_THRESHOLD
)


class AchievementFacts(NamedTuple):
    """Aggregated state a badge predicate may look at."""
    completed_owned_tasks: int
    completed_collaborative_tasks: int
    post_count: int
    streak: int
    meditation_streak: int


class BadgeDefinition(NamedTuple):
    code: str
    name: str
    description: str
    predicate: Callable[[AchievementFacts], bool]

    def to_dict(self) -> Dict:
        return {
            'code': self.code,
            'name': self.name,
            'description': self.description,
        }


BADGE_CATALOG: Tuple[BadgeDefinition, ...] = (
    # Task badges
    BadgeDefinition(
        code='FIRST_TASK',
        name='Task Taker',
        description='Completed your first task.',
        predicate=lambda facts: facts.completed_owned_tasks >= 1,
    ),
    BadgeDefinition(
        code='TEN_TASKS',
        name='Task Master',
        description=f'Completed {TASK_MASTER_THRESHOLD} tasks.',
        predicate=lambda facts: facts.completed_owned_tasks >= TASK_MASTER_THRESHOLD,
    ),
    BadgeDefinition(
        code='FIRST_COLLAB',
        name='Team Player',
        description='Completed a collaborative task.',
        predicate=lambda facts: facts.completed_collaborative_tasks >= 1,
    ),

    # Wellness badges
    BadgeDefinition(
        code='STREAK_7',
        name='Week-Long Warrior',
        description=f'Maintained a {STREAK_WEEK_THRESHOLD}-day streak.',
        predicate=lambda facts: facts.streak >= STREAK_WEEK_THRESHOLD,
    ),
    BadgeDefinition(
        code='STREAK_30',
        name='Monthly Motivator',
        description=f'Maintained a {STREAK_MONTH_THRESHOLD}-day streak.',
        predicate=lambda facts: facts.streak >= STREAK_MONTH_THRESHOLD,
    ),
    BadgeDefinition(
        code='MINDFUL_7',
        name='Mindful Week',
        description=f'Meditated {MINDFUL_WEEK_THRESHOLD} days in a row.',
        predicate=lambda facts: facts.meditation_streak >= MINDFUL_WEEK_THRESHOLD,
    ),

    # Community badges
    BadgeDefinition(
        code='FIRST_POST',
        name='Town Crier',
        description='Made your first post.',
        predicate=lambda facts: facts.post_count >= 1,
    ),
)
