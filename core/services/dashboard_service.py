"""
Dashboard Service

Central service for dashboard data aggregation.
Provides the four task lists shown on the main goals screen:
- Tasks the user owns
- Tasks the user collaborates on
- Pending invitations addressed to the user
- Public tasks the user could join
"""
from typing import Dict, List
from django.conf import settings

from core.models import Task
from core.repositories import task_repository
from core.serializers import TaskSerializer
from core.utils.constants import DEFAULT_PUBLIC_TASK_LIMIT


class DashboardService:
    """
    Service for aggregating dashboard data.

    The four reads are independent; none of them mutates anything.
    """

    def __init__(self, user_id):
        """
        Initialize dashboard service.

        Args:
            user_id: Primary key of the viewing user
        """
        self.user_id = user_id
        self.public_limit = getattr(
            settings, 'DASHBOARD_PUBLIC_TASK_LIMIT', DEFAULT_PUBLIC_TASK_LIMIT
        )

    def get_dashboard(self) -> Dict:
        """
        Get complete dashboard data.

        Returns:
            {'owned_tasks', 'collaborating_tasks', 'invitations', 'public_tasks'}
        """
        return {
            'owned_tasks': self.get_owned_tasks(),
            'collaborating_tasks': self.get_collaborating_tasks(),
            'invitations': self.get_invitations(),
            'public_tasks': self.get_public_tasks(),
        }

    def get_owned_tasks(self) -> List[Dict]:
        """
        Owned tasks, newest first.

        Private owned tasks are rendered with an empty pending list; the
        stored invitations are left untouched.
        """
        tasks = task_repository.get_owned_tasks(self.user_id)
        return [self._mask_private(TaskSerializer(task).data, task) for task in tasks]

    def get_collaborating_tasks(self) -> List[Dict]:
        return TaskSerializer(task_repository.get_collaborating_tasks(self.user_id), many=True).data

    def get_invitations(self) -> List[Dict]:
        return TaskSerializer(task_repository.get_invitations(self.user_id), many=True).data

    def get_public_tasks(self) -> List[Dict]:
        tasks = task_repository.get_discoverable_public_tasks(self.user_id, self.public_limit)
        return TaskSerializer(tasks, many=True).data

    @staticmethod
    def _mask_private(data: Dict, task: Task) -> Dict:
        if task.visibility == Task.VISIBILITY_PRIVATE:
            data['pending_invitations'] = []
        return data


# Convenience function
def get_dashboard(user_id) -> Dict:
    """Get complete dashboard data for a user."""
    return DashboardService(user_id).get_dashboard()
