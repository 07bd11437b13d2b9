"""
Task Lifecycle Service

Centralizes the collaborative goal lifecycle: create, update, delete and
the membership state machine.

Per (task, user) relationship:
    None -> Invited          invite_collaborator
    Invited -> Collaborator  accept_invite / accept_collaboration_request
    Invited -> None          reject_invite
    None -> Collaborator     request_join_public_task (public tasks only)

Every membership mutation runs inside a transaction holding the task row
lock and touches only the affected M2M rows.
"""
from typing import Dict, Optional
from django.db import transaction
from django.utils import timezone
import logging

from core.models import Task
from core.repositories import task_repository, user_repository
from core.repositories.task_repository import COLLABORATORS, PENDING_INVITATIONS
from core.serializers import (
    TaskCreateSerializer, TaskUpdateSerializer, TaskSerializer, validate_or_raise
)
from core.services.achievement_service import AchievementService
from core.utils.constants import normalize_visibility
from core.exceptions import (
    ValidationError as AppValidationError,
    UserNotFoundError, UnauthorizedError, InvalidStateError, ConflictError
)

logger = logging.getLogger(__name__)


class TaskLifecycleService:
    """
    Service for task operations and collaborator membership.

    Methods return plain dicts ready for JSON responses and raise
    core.exceptions errors on failure.
    """

    def _serialize(self, task: Task) -> Dict:
        return TaskSerializer(task).data

    def _reload(self, task_id) -> Task:
        return task_repository.get_task(task_id)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create_task(self, owner_id, content: str, visibility: Optional[str] = None) -> Dict:
        """
        Create a new task owned by owner_id with empty membership sets.

        Raises:
            ValidationError: If content is empty/whitespace or visibility is unknown
            UserNotFoundError: If the owner does not exist
        """
        data = {'content': content, 'visibility': normalize_visibility(visibility)}
        validated = validate_or_raise(TaskCreateSerializer, data)

        owner = user_repository.get_user(owner_id)
        task = task_repository.create_task(owner.pk, validated['content'], validated['visibility'])
        return self._serialize(self._reload(task.task_id))

    def update_task(self, task_id, actor_id, patch: Dict) -> Dict:
        """
        Update content and/or completion of a task.

        Content edits are owner-only; completion may be toggled by the owner
        or any collaborator. Only a false -> true completion edge rewards:
        +10 XP to the owner, +5 XP to each collaborator, then a badge check
        for the owner.

        Returns:
            {'task': dict, 'new_badges': list}

        Raises:
            TaskNotFoundError, UnauthorizedError, ValidationError, ConflictError
        """
        data = validate_or_raise(TaskUpdateSerializer, patch or {})

        with transaction.atomic():
            task = task_repository.get_task(task_id, for_update=True)

            is_owner = task.is_owner(actor_id)
            is_collaborator = not is_owner and task.is_collaborator(actor_id)
            if not is_owner and not is_collaborator:
                logger.warning(f"User {actor_id} denied update on task {task.task_id}")
                raise UnauthorizedError('update')

            updates = {}

            new_content = (data.get('content') or '').strip()
            if new_content and new_content != task.content:
                if not is_owner:
                    raise UnauthorizedError('edit the content of')
                updates['content'] = new_content

            was_completed = task.is_completed
            if 'is_completed' in data:
                updates['is_completed'] = data['is_completed']

            completed_now = not was_completed and updates.get('is_completed', was_completed)

            if updates:
                updates['updated_at'] = timezone.now()
                if not task_repository.update_fields(task.task_id, **updates):
                    raise ConflictError(
                        "Task changed while it was being updated; retry",
                        details={'task_id': str(task.task_id)}
                    )

            if completed_now:
                collaborator_ids = task_repository.get_collaborator_ids(task.task_id)
                AchievementService.award_task_completion(task.owner_id, collaborator_ids)
                logger.info(
                    f"Task {task.task_id} completed by user {actor_id}; "
                    f"rewarded owner and {len(collaborator_ids)} collaborator(s)"
                )

        new_badges = []
        if completed_now:
            new_badges = AchievementService.check_and_award_badges(task.owner_id)

        return {
            'task': self._serialize(self._reload(task.task_id)),
            'new_badges': new_badges,
        }

    def delete_task(self, task_id, actor_id) -> Dict:
        """
        Delete a task. Owner only.

        Raises:
            TaskNotFoundError, UnauthorizedError
        """
        with transaction.atomic():
            task = task_repository.get_task(task_id, for_update=True)
            if not task.is_owner(actor_id):
                logger.warning(f"User {actor_id} denied delete on task {task.task_id}")
                raise UnauthorizedError('delete')

            task_id = str(task.task_id)
            task_repository.delete_task(task)

        return {'id': task_id, 'message': 'Task removed'}

    # ------------------------------------------------------------------
    # Invitations (owner -> invitee)
    # ------------------------------------------------------------------

    def invite_collaborator(self, task_id, owner_id, target_username: str) -> Dict:
        """
        Invite a user (by username, case-insensitive) to collaborate.

        Works for private and public tasks alike.

        Raises:
            TaskNotFoundError, UnauthorizedError
            UserNotFoundError: If the username does not resolve
            InvalidStateError: If the target is already owner, collaborator or invited
        """
        with transaction.atomic():
            task = task_repository.get_task(task_id, for_update=True)
            if not task.is_owner(owner_id):
                raise UnauthorizedError('invite collaborators to')

            target = user_repository.find_user_by_username(target_username)
            if target is None:
                raise UserNotFoundError(target_username)

            if task_repository.get_membership_state(task, target.pk) is not None:
                logger.warning(f"User {target.username} already involved with task {task.task_id}")
                raise InvalidStateError("User is already involved with this task.")

            task_repository.add_to_set(task.task_id, PENDING_INVITATIONS, target.pk)

        logger.info(f"User {target.username} invited to task {task.task_id}")

        result = self._serialize(self._reload(task.task_id))
        result['message'] = f"Invitation sent to {target.username}"
        return result

    def accept_invite(self, task_id, invitee_id) -> Dict:
        """
        Accept a pending invitation: pending -> collaborators.

        Raises:
            TaskNotFoundError
            InvalidStateError: If the user has no pending invitation
        """
        with transaction.atomic():
            task = task_repository.get_task(task_id, for_update=True)
            moved = task_repository.move_between_sets(
                task.task_id, invitee_id, PENDING_INVITATIONS, COLLABORATORS
            )
            if not moved:
                raise InvalidStateError("No pending invitation found.")

        logger.info(f"User {invitee_id} accepted invitation to task {task.task_id}")
        return self._serialize(self._reload(task.task_id))

    def reject_invite(self, task_id, invitee_id) -> Dict:
        """
        Reject a pending invitation: removed from pending only.

        Raises:
            TaskNotFoundError
            InvalidStateError: If the user has no pending invitation
        """
        with transaction.atomic():
            task = task_repository.get_task(task_id, for_update=True)
            if not task_repository.remove_from_set(task.task_id, PENDING_INVITATIONS, invitee_id):
                raise InvalidStateError("No pending invitation found.")

        logger.info(f"User {invitee_id} rejected invitation to task {task.task_id}")
        return {'id': str(task.task_id), 'message': 'Invitation rejected.'}

    # ------------------------------------------------------------------
    # Public tasks
    # ------------------------------------------------------------------

    def request_join_public_task(self, task_id, requester_id) -> Dict:
        """
        Join a public task directly as a collaborator (no approval stage).

        A pending invitation the requester may hold on the same task is
        consumed so the two membership sets stay disjoint.

        Raises:
            TaskNotFoundError
            ValidationError: If the task is not public
            InvalidStateError: If the requester is the owner or already a collaborator
        """
        with transaction.atomic():
            task = task_repository.get_task(task_id, for_update=True)
            if not task.is_public:
                raise AppValidationError('visibility', 'Can only join public tasks.')

            if task.is_owner(requester_id) or task.is_collaborator(requester_id):
                raise InvalidStateError("You are already involved with this task.")

            task_repository.remove_from_set(task.task_id, PENDING_INVITATIONS, requester_id)
            task_repository.add_to_set(task.task_id, COLLABORATORS, requester_id)

        logger.info(f"User {requester_id} joined public task {task.task_id}")
        return {
            'message': 'You have joined this goal successfully.',
            'task': self._serialize(self._reload(task.task_id)),
        }

    def accept_collaboration_request(self, task_id, owner_id, target_user_id) -> Dict:
        """
        Owner approves a pending entry: pending -> collaborators.

        Raises:
            TaskNotFoundError, UnauthorizedError
            InvalidStateError: If the target has no pending entry
        """
        with transaction.atomic():
            task = task_repository.get_task(task_id, for_update=True)
            if not task.is_owner(owner_id):
                raise UnauthorizedError('perform this action on')

            moved = task_repository.move_between_sets(
                task.task_id, target_user_id, PENDING_INVITATIONS, COLLABORATORS
            )
            if not moved:
                raise InvalidStateError("No pending request from this user.")

        logger.info(f"Owner {owner_id} accepted user {target_user_id} on task {task.task_id}")
        return self._serialize(self._reload(task.task_id))
