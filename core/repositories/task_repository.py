"""
Task data access using the Django ORM.

Membership sets are mutated row-by-row through the M2M tables, never by
rewriting the whole task, so concurrent invites/accepts on the same task
cannot clobber each other.
"""
from django.db import transaction
from django.db.models import Q
import logging

from core.models import Task
from core.exceptions import TaskNotFoundError

logger = logging.getLogger(__name__)

COLLABORATORS = 'collaborators'
PENDING_INVITATIONS = 'pending_invitations'

MEMBERSHIP_FIELDS = (COLLABORATORS, PENDING_INVITATIONS)

STATE_OWNER = 'owner'
STATE_COLLABORATOR = 'collaborator'
STATE_INVITED = 'invited'


# =============================================================================
# TASKS
# =============================================================================

def create_task(owner_id, content: str, visibility: str) -> Task:
    """Create a task with empty membership sets"""
    task = Task.objects.create(owner_id=owner_id, content=content, visibility=visibility)
    logger.info(f"Task {task.task_id} created by user {owner_id} ({visibility})")
    return task


def get_task(task_id, for_update: bool = False) -> Task:
    """
    Fetch a task by id.

    Args:
        task_id: Task primary key
        for_update: Lock the row; must be called inside transaction.atomic()

    Raises:
        TaskNotFoundError: If no such task exists
    """
    queryset = Task.objects.select_related('owner')
    if for_update:
        queryset = Task.objects.select_for_update()
    try:
        return queryset.get(task_id=task_id)
    except Task.DoesNotExist:
        raise TaskNotFoundError(str(task_id))


def delete_task(task: Task):
    """Hard delete; membership rows go with the task"""
    task_id = task.task_id
    task.delete()
    logger.info(f"Task {task_id} deleted")


def update_fields(task_id, **fields) -> int:
    """Write only the given columns. Returns the number of rows updated."""
    return Task.objects.filter(task_id=task_id).update(**fields)


# =============================================================================
# MEMBERSHIP SETS
# =============================================================================

def _through(field: str):
    if field not in MEMBERSHIP_FIELDS:
        raise ValueError(f"Unknown membership field '{field}'")
    return getattr(Task, field).through


def add_to_set(task_id, field: str, user_id) -> bool:
    """
    Add a user to one membership set if not already present.

    Returns:
        True if a row was inserted, False if the user was already in the set
    """
    through = _through(field)
    _, created = through.objects.get_or_create(task_id=task_id, user_id=user_id)
    return created


def remove_from_set(task_id, field: str, user_id) -> bool:
    """
    Remove a user from one membership set.

    Returns:
        True if the user was present and removed, False otherwise
    """
    deleted, _ = _through(field).objects.filter(task_id=task_id, user_id=user_id).delete()
    return deleted > 0


def move_between_sets(task_id, user_id, source: str, target: str) -> bool:
    """
    Atomically move a user from one membership set to the other.

    The removal is the guard: if the user is not in ``source`` nothing
    is added to ``target``.
    """
    with transaction.atomic():
        if not remove_from_set(task_id, source, user_id):
            return False
        add_to_set(task_id, target, user_id)
    return True


def get_membership_state(task: Task, user_id):
    """
    Relationship of a user to a task.

    Returns:
        'owner', 'collaborator', 'invited' or None
    """
    if task.is_owner(user_id):
        return STATE_OWNER
    if task.is_collaborator(user_id):
        return STATE_COLLABORATOR
    if task.has_pending_invitation(user_id):
        return STATE_INVITED
    return None


def get_collaborator_ids(task_id) -> list:
    return list(
        _through(COLLABORATORS).objects.filter(task_id=task_id).values_list('user_id', flat=True)
    )


# =============================================================================
# QUERIES
# =============================================================================

def _with_members(queryset):
    return queryset.select_related('owner').prefetch_related('collaborators', 'pending_invitations')


def get_owned_tasks(user_id):
    return _with_members(Task.objects.filter(owner_id=user_id)).order_by('-created_at')


def get_collaborating_tasks(user_id):
    return _with_members(Task.objects.filter(collaborators=user_id)).order_by('-created_at')


def get_invitations(user_id):
    return _with_members(
        Task.objects.filter(pending_invitations=user_id).exclude(owner_id=user_id)
    ).order_by('-created_at')


def get_discoverable_public_tasks(user_id, limit: int):
    """Public tasks of other users that the user is not involved in yet"""
    queryset = (
        Task.objects.filter(visibility=Task.VISIBILITY_PUBLIC)
        .exclude(owner_id=user_id)
        .exclude(collaborators=user_id)
        .exclude(pending_invitations=user_id)
    )
    return _with_members(queryset).order_by('-created_at')[:limit]


def count_completed_owned_tasks(user_id) -> int:
    return Task.objects.filter(owner_id=user_id, is_completed=True).count()


def count_completed_collaborative_tasks(user_id) -> int:
    """Completed tasks with at least one collaborator, as owner or collaborator"""
    return (
        Task.objects.filter(is_completed=True)
        .filter(Q(owner_id=user_id, collaborators__isnull=False) | Q(collaborators=user_id))
        .distinct()
        .count()
    )
