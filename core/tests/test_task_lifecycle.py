"""
Task Lifecycle Tests

Coverage: TaskLifecycleService

These tests cover:
- Task creation, update and deletion with authorization
- The invite / accept / reject / request-join / accept-collab state machine
- Completion rewards on the false -> true edge only
- Membership invariants after mixed operation sequences
"""
from unittest import mock
from django.test import TestCase
from django.contrib.auth import get_user_model

from core.models import Task, UserProfile, UserBadge
from core.services.task_service import TaskLifecycleService
from core.services.dashboard_service import DashboardService
from core.tests.factories import UserFactory, TaskFactory
from core.utils.constants import TASK_MASTER_THRESHOLD
from core.exceptions import (
    ValidationError as AppValidationError,
    TaskNotFoundError, UserNotFoundError, UnauthorizedError,
    InvalidStateError, ConflictError
)

User = get_user_model()


def xp_of(user):
    return UserProfile.objects.get(user=user).xp


def member_ids(task, field):
    return set(getattr(Task.objects.get(task_id=task.task_id), field).values_list('id', flat=True))


class LifecycleTestCase(TestCase):
    def setUp(self):
        self.service = TaskLifecycleService()
        self.owner = User.objects.create_user(username='alice', password='password')
        self.bob = User.objects.create_user(username='bob', password='password')
        self.carol = User.objects.create_user(username='carol', password='password')

    def assertInvariants(self, task):
        collaborators = member_ids(task, 'collaborators')
        pending = member_ids(task, 'pending_invitations')
        self.assertNotIn(task.owner_id, collaborators)
        self.assertNotIn(task.owner_id, pending)
        self.assertEqual(collaborators & pending, set())


# =============================================================================
# CREATE
# =============================================================================

class TaskCreateTests(LifecycleTestCase):

    def test_create_defaults_to_private_with_empty_sets(self):
        result = self.service.create_task(self.owner.pk, 'Run 5k')

        self.assertEqual(result['content'], 'Run 5k')
        self.assertEqual(result['visibility'], 'private')
        self.assertFalse(result['is_completed'])
        self.assertEqual(result['owner'], {'id': self.owner.pk, 'username': 'alice'})
        self.assertEqual(result['collaborators'], [])
        self.assertEqual(result['pending_invitations'], [])

        task = Task.objects.get(task_id=result['id'])
        self.assertTrue(task.is_owner(self.owner.pk))

    def test_create_strips_content(self):
        result = self.service.create_task(self.owner.pk, '  Drink water  ')
        self.assertEqual(result['content'], 'Drink water')

    def test_create_public_task(self):
        result = self.service.create_task(self.owner.pk, 'Read', 'public')
        self.assertEqual(result['visibility'], 'public')

    def test_create_normalizes_visibility_case(self):
        result = self.service.create_task(self.owner.pk, 'Read', ' PUBLIC ')
        self.assertEqual(result['visibility'], 'public')

    def test_create_none_visibility_is_private(self):
        result = self.service.create_task(self.owner.pk, 'Read', None)
        self.assertEqual(result['visibility'], 'private')

    def test_create_empty_content_rejected(self):
        with self.assertRaises(AppValidationError) as ctx:
            self.service.create_task(self.owner.pk, '')
        self.assertEqual(ctx.exception.field, 'content')
        self.assertEqual(Task.objects.count(), 0)

    def test_create_whitespace_content_rejected(self):
        with self.assertRaises(AppValidationError):
            self.service.create_task(self.owner.pk, '   ')

    def test_create_invalid_visibility_rejected(self):
        with self.assertRaises(AppValidationError) as ctx:
            self.service.create_task(self.owner.pk, 'Read', 'friends-only')
        self.assertEqual(ctx.exception.field, 'visibility')

    def test_create_unknown_owner(self):
        with self.assertRaises(UserNotFoundError):
            self.service.create_task(999999, 'Read')


# =============================================================================
# UPDATE
# =============================================================================

class TaskUpdateTests(LifecycleTestCase):

    def setUp(self):
        super().setUp()
        self.task = TaskFactory.create(
            self.owner, content='Original', collaborators=[self.bob], pending=[self.carol]
        )

    def test_owner_edits_content(self):
        result = self.service.update_task(self.task.task_id, self.owner.pk, {'content': 'Updated'})

        self.assertEqual(result['task']['content'], 'Updated')
        self.assertEqual(result['new_badges'], [])
        self.task.refresh_from_db()
        self.assertEqual(self.task.content, 'Updated')

    def test_owner_empty_content_keeps_previous(self):
        self.service.update_task(self.task.task_id, self.owner.pk, {'content': ''})
        self.task.refresh_from_db()
        self.assertEqual(self.task.content, 'Original')

    def test_owner_null_content_keeps_previous_and_applies_completion(self):
        result = self.service.update_task(
            self.task.task_id, self.owner.pk, {'content': None, 'is_completed': True}
        )

        self.assertEqual(result['task']['content'], 'Original')
        self.assertTrue(result['task']['is_completed'])

    def test_collaborator_null_content_is_not_an_edit(self):
        result = self.service.update_task(
            self.task.task_id, self.bob.pk, {'content': None, 'is_completed': True}
        )
        self.assertTrue(result['task']['is_completed'])

    def test_collaborator_toggles_completion(self):
        result = self.service.update_task(self.task.task_id, self.bob.pk, {'is_completed': True})
        self.assertTrue(result['task']['is_completed'])

    def test_collaborator_cannot_change_content(self):
        with self.assertRaises(UnauthorizedError):
            self.service.update_task(self.task.task_id, self.bob.pk, {'content': 'Hijacked'})

        self.task.refresh_from_db()
        self.assertEqual(self.task.content, 'Original')

    def test_collaborator_may_echo_current_content(self):
        result = self.service.update_task(
            self.task.task_id, self.bob.pk, {'content': 'Original', 'is_completed': True}
        )
        self.assertTrue(result['task']['is_completed'])
        self.assertEqual(result['task']['content'], 'Original')

    def test_stranger_cannot_update(self):
        stranger = UserFactory.create()
        with self.assertRaises(UnauthorizedError):
            self.service.update_task(self.task.task_id, stranger.pk, {'is_completed': True})

        self.task.refresh_from_db()
        self.assertFalse(self.task.is_completed)

    def test_pending_invitee_cannot_update(self):
        with self.assertRaises(UnauthorizedError):
            self.service.update_task(self.task.task_id, self.carol.pk, {'is_completed': True})

    def test_invalid_completion_value(self):
        with self.assertRaises(AppValidationError) as ctx:
            self.service.update_task(self.task.task_id, self.owner.pk, {'is_completed': 'maybe'})
        self.assertEqual(ctx.exception.field, 'is_completed')

    def test_update_missing_task(self):
        with self.assertRaises(TaskNotFoundError):
            self.service.update_task('missing-id', self.owner.pk, {'is_completed': True})

    def test_lost_row_raises_conflict(self):
        with mock.patch('core.repositories.task_repository.update_fields', return_value=0):
            with self.assertRaises(ConflictError):
                self.service.update_task(self.task.task_id, self.owner.pk, {'is_completed': True})

        self.assertEqual(xp_of(self.owner), 0)


# =============================================================================
# COMPLETION REWARDS
# =============================================================================

class CompletionRewardTests(LifecycleTestCase):

    def setUp(self):
        super().setUp()
        self.task = TaskFactory.create(
            self.owner, collaborators=[self.bob], pending=[self.carol]
        )

    def complete(self, actor=None, value=True):
        actor = actor or self.owner
        return self.service.update_task(self.task.task_id, actor.pk, {'is_completed': value})

    def test_false_to_true_rewards_owner_and_collaborators(self):
        self.complete()

        self.assertEqual(xp_of(self.owner), 10)
        self.assertEqual(xp_of(self.bob), 5)
        self.assertEqual(xp_of(self.carol), 0)

    def test_completion_by_collaborator_rewards_the_same(self):
        self.complete(actor=self.bob)

        self.assertEqual(xp_of(self.owner), 10)
        self.assertEqual(xp_of(self.bob), 5)

    def test_true_to_true_grants_nothing(self):
        self.complete()
        self.complete()

        self.assertEqual(xp_of(self.owner), 10)
        self.assertEqual(xp_of(self.bob), 5)

    def test_true_to_false_grants_nothing(self):
        self.complete()
        result = self.complete(value=False)

        self.assertFalse(result['task']['is_completed'])
        self.assertEqual(result['new_badges'], [])
        self.assertEqual(xp_of(self.owner), 10)

    def test_each_new_crossing_grants_again(self):
        self.complete()
        self.complete(value=False)
        self.complete()

        self.assertEqual(xp_of(self.owner), 20)
        self.assertEqual(xp_of(self.bob), 10)

    def test_first_completion_awards_owner_badges(self):
        result = self.complete()

        codes = [badge['code'] for badge in result['new_badges']]
        self.assertEqual(codes, ['FIRST_TASK', 'FIRST_COLLAB'])
        self.assertEqual(result['new_badges'][0]['name'], 'Task Taker')

    def test_badges_checked_for_owner_only(self):
        self.complete(actor=self.bob)
        self.assertFalse(UserBadge.objects.filter(user=self.bob).exists())

    def test_badges_not_reawarded_on_second_crossing(self):
        self.complete()
        self.complete(value=False)
        result = self.complete()

        self.assertEqual(result['new_badges'], [])
        self.assertEqual(UserBadge.objects.filter(user=self.owner, code='FIRST_TASK').count(), 1)

    def test_content_only_update_grants_nothing(self):
        self.service.update_task(self.task.task_id, self.owner.pk, {'content': 'New'})
        self.assertEqual(xp_of(self.owner), 0)

    def test_task_master_awarded_once(self):
        for _ in range(TASK_MASTER_THRESHOLD):
            task = TaskFactory.create(self.carol)
            self.service.update_task(task.task_id, self.carol.pk, {'is_completed': True})

        codes = set(UserBadge.objects.filter(user=self.carol).values_list('code', flat=True))
        self.assertIn('TEN_TASKS', codes)

        eleventh = TaskFactory.create(self.carol)
        result = self.service.update_task(eleventh.task_id, self.carol.pk, {'is_completed': True})

        self.assertEqual(result['new_badges'], [])
        self.assertEqual(UserBadge.objects.filter(user=self.carol, code='TEN_TASKS').count(), 1)


# =============================================================================
# DELETE
# =============================================================================

class TaskDeleteTests(LifecycleTestCase):

    def setUp(self):
        super().setUp()
        self.task = TaskFactory.create(self.owner, collaborators=[self.bob])

    def test_owner_deletes(self):
        result = self.service.delete_task(self.task.task_id, self.owner.pk)

        self.assertEqual(result['id'], str(self.task.task_id))
        self.assertEqual(result['message'], 'Task removed')
        self.assertFalse(Task.objects.filter(task_id=self.task.task_id).exists())

    def test_collaborator_cannot_delete(self):
        with self.assertRaises(UnauthorizedError):
            self.service.delete_task(self.task.task_id, self.bob.pk)
        self.assertTrue(Task.objects.filter(task_id=self.task.task_id).exists())

    def test_delete_missing_task(self):
        with self.assertRaises(TaskNotFoundError):
            self.service.delete_task('missing-id', self.owner.pk)


# =============================================================================
# INVITATIONS
# =============================================================================

class InviteTests(LifecycleTestCase):

    def setUp(self):
        super().setUp()
        self.task = TaskFactory.create(self.owner)

    def test_invite_adds_pending(self):
        result = self.service.invite_collaborator(self.task.task_id, self.owner.pk, 'bob')

        self.assertEqual(result['pending_invitations'], [{'id': self.bob.pk, 'username': 'bob'}])
        self.assertEqual(result['message'], 'Invitation sent to bob')
        self.assertTrue(self.task.has_pending_invitation(self.bob.pk))
        self.assertFalse(self.task.is_collaborator(self.bob.pk))

    def test_invite_username_is_case_insensitive(self):
        self.service.invite_collaborator(self.task.task_id, self.owner.pk, 'BoB')
        self.assertEqual(member_ids(self.task, 'pending_invitations'), {self.bob.pk})

    def test_invite_on_public_task(self):
        public = TaskFactory.create(self.owner, visibility='public')
        self.service.invite_collaborator(public.task_id, self.owner.pk, 'bob')
        self.assertEqual(member_ids(public, 'pending_invitations'), {self.bob.pk})

    def test_only_owner_invites(self):
        with self.assertRaises(UnauthorizedError):
            self.service.invite_collaborator(self.task.task_id, self.bob.pk, 'carol')
        self.assertEqual(member_ids(self.task, 'pending_invitations'), set())

    def test_unknown_username(self):
        with self.assertRaises(UserNotFoundError) as ctx:
            self.service.invite_collaborator(self.task.task_id, self.owner.pk, 'ghost')
        self.assertEqual(str(ctx.exception), "User 'ghost' not found")

    def test_cannot_invite_owner(self):
        with self.assertRaises(InvalidStateError):
            self.service.invite_collaborator(self.task.task_id, self.owner.pk, 'alice')
        self.assertInvariants(self.task)

    def test_cannot_invite_existing_collaborator(self):
        self.task.collaborators.add(self.bob)

        with self.assertRaises(InvalidStateError) as ctx:
            self.service.invite_collaborator(self.task.task_id, self.owner.pk, 'bob')

        self.assertIn('already involved', str(ctx.exception))
        self.assertEqual(member_ids(self.task, 'collaborators'), {self.bob.pk})
        self.assertEqual(member_ids(self.task, 'pending_invitations'), set())

    def test_cannot_invite_twice(self):
        self.service.invite_collaborator(self.task.task_id, self.owner.pk, 'bob')
        with self.assertRaises(InvalidStateError):
            self.service.invite_collaborator(self.task.task_id, self.owner.pk, 'bob')
        self.assertEqual(member_ids(self.task, 'pending_invitations'), {self.bob.pk})

    def test_invite_missing_task(self):
        with self.assertRaises(TaskNotFoundError):
            self.service.invite_collaborator('missing-id', self.owner.pk, 'bob')


class AcceptRejectTests(LifecycleTestCase):

    def setUp(self):
        super().setUp()
        self.task = TaskFactory.create(self.owner)

    def test_invite_then_accept(self):
        self.service.invite_collaborator(self.task.task_id, self.owner.pk, 'bob')
        result = self.service.accept_invite(self.task.task_id, self.bob.pk)

        self.assertEqual(result['collaborators'], [{'id': self.bob.pk, 'username': 'bob'}])
        self.assertEqual(result['pending_invitations'], [])
        self.assertInvariants(self.task)

        owned = DashboardService(self.owner.pk).get_dashboard()['owned_tasks']
        self.assertEqual(owned[0]['pending_invitations'], [])
        self.assertEqual(owned[0]['collaborators'], [{'id': self.bob.pk, 'username': 'bob'}])

    def test_accept_without_invitation(self):
        with self.assertRaises(InvalidStateError):
            self.service.accept_invite(self.task.task_id, self.bob.pk)
        self.assertEqual(member_ids(self.task, 'collaborators'), set())

    def test_accept_twice(self):
        self.task.pending_invitations.add(self.bob)
        self.service.accept_invite(self.task.task_id, self.bob.pk)

        with self.assertRaises(InvalidStateError):
            self.service.accept_invite(self.task.task_id, self.bob.pk)
        self.assertEqual(member_ids(self.task, 'collaborators'), {self.bob.pk})

    def test_reject_removes_pending_only(self):
        self.task.pending_invitations.add(self.bob)
        result = self.service.reject_invite(self.task.task_id, self.bob.pk)

        self.assertEqual(result, {'id': str(self.task.task_id), 'message': 'Invitation rejected.'})
        self.assertEqual(member_ids(self.task, 'pending_invitations'), set())
        self.assertEqual(member_ids(self.task, 'collaborators'), set())

    def test_reject_without_invitation(self):
        self.task.collaborators.add(self.carol)

        with self.assertRaises(InvalidStateError):
            self.service.reject_invite(self.task.task_id, self.bob.pk)

        self.assertEqual(member_ids(self.task, 'collaborators'), {self.carol.pk})
        self.assertEqual(member_ids(self.task, 'pending_invitations'), set())

    def test_accept_missing_task(self):
        with self.assertRaises(TaskNotFoundError):
            self.service.accept_invite('missing-id', self.bob.pk)


# =============================================================================
# PUBLIC TASKS
# =============================================================================

class RequestJoinTests(LifecycleTestCase):

    def setUp(self):
        super().setUp()
        self.task = TaskFactory.create(self.owner, visibility='public')

    def test_join_public_task_directly(self):
        result = self.service.request_join_public_task(self.task.task_id, self.carol.pk)

        self.assertEqual(result['message'], 'You have joined this goal successfully.')
        self.assertEqual(member_ids(self.task, 'collaborators'), {self.carol.pk})
        self.assertEqual(member_ids(self.task, 'pending_invitations'), set())

    def test_cannot_join_private_task(self):
        private = TaskFactory.create(self.owner)

        with self.assertRaises(AppValidationError):
            self.service.request_join_public_task(private.task_id, self.carol.pk)
        self.assertEqual(member_ids(private, 'collaborators'), set())

    def test_owner_cannot_join(self):
        with self.assertRaises(InvalidStateError):
            self.service.request_join_public_task(self.task.task_id, self.owner.pk)
        self.assertInvariants(self.task)

    def test_collaborator_cannot_join_again(self):
        self.task.collaborators.add(self.carol)
        with self.assertRaises(InvalidStateError):
            self.service.request_join_public_task(self.task.task_id, self.carol.pk)

    def test_join_consumes_pending_invitation(self):
        self.task.pending_invitations.add(self.bob)

        self.service.request_join_public_task(self.task.task_id, self.bob.pk)

        self.assertEqual(member_ids(self.task, 'collaborators'), {self.bob.pk})
        self.assertEqual(member_ids(self.task, 'pending_invitations'), set())

    def test_join_missing_task(self):
        with self.assertRaises(TaskNotFoundError):
            self.service.request_join_public_task('missing-id', self.carol.pk)


class AcceptCollaborationRequestTests(LifecycleTestCase):

    def setUp(self):
        super().setUp()
        self.task = TaskFactory.create(self.owner, visibility='public', pending=[self.bob])

    def test_owner_accepts_pending_entry(self):
        result = self.service.accept_collaboration_request(self.task.task_id, self.owner.pk, self.bob.pk)

        self.assertEqual(result['collaborators'], [{'id': self.bob.pk, 'username': 'bob'}])
        self.assertEqual(result['pending_invitations'], [])

    def test_non_owner_cannot_accept(self):
        with self.assertRaises(UnauthorizedError):
            self.service.accept_collaboration_request(self.task.task_id, self.carol.pk, self.bob.pk)
        self.assertEqual(member_ids(self.task, 'pending_invitations'), {self.bob.pk})

    def test_target_without_pending_entry(self):
        with self.assertRaises(InvalidStateError):
            self.service.accept_collaboration_request(self.task.task_id, self.owner.pk, self.carol.pk)
        self.assertEqual(member_ids(self.task, 'collaborators'), set())


# =============================================================================
# INVARIANTS
# =============================================================================

class MembershipInvariantTests(LifecycleTestCase):

    def test_invariants_hold_across_mixed_operations(self):
        dave = UserFactory.create(username='dave')
        task = TaskFactory.create(self.owner, visibility='public')
        task_id = task.task_id

        self.service.invite_collaborator(task_id, self.owner.pk, 'bob')
        self.service.invite_collaborator(task_id, self.owner.pk, 'carol')
        self.service.request_join_public_task(task_id, dave.pk)
        self.service.accept_invite(task_id, self.bob.pk)
        self.service.request_join_public_task(task_id, self.carol.pk)

        for attempt in (
            lambda: self.service.invite_collaborator(task_id, self.owner.pk, 'dave'),
            lambda: self.service.invite_collaborator(task_id, self.owner.pk, 'alice'),
            lambda: self.service.request_join_public_task(task_id, self.owner.pk),
            lambda: self.service.accept_invite(task_id, self.bob.pk),
            lambda: self.service.reject_invite(task_id, self.carol.pk),
        ):
            with self.assertRaises(InvalidStateError):
                attempt()

        self.assertInvariants(task)
        self.assertEqual(
            member_ids(task, 'collaborators'), {self.bob.pk, self.carol.pk, dave.pk}
        )
        self.assertEqual(member_ids(task, 'pending_invitations'), set())
