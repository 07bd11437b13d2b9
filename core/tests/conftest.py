"""
Pytest configuration and fixtures for the Wellness Goals tests.

This module provides reusable fixtures for testing.
"""
import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient


@pytest.fixture
def api_client():
    """Returns an API client instance."""
    return APIClient()


@pytest.fixture
def user(db):
    """Creates and returns a test user."""
    User = get_user_model()
    return User.objects.create_user(
        username='testuser',
        email='test@example.com',
        password='testpass123'
    )


@pytest.fixture
def other_user(db):
    """Creates and returns another test user for access control tests."""
    User = get_user_model()
    return User.objects.create_user(
        username='otheruser',
        email='other@example.com',
        password='otherpass123'
    )


@pytest.fixture
def third_user(db):
    """A third user, e.g. a public-task joiner."""
    User = get_user_model()
    return User.objects.create_user(
        username='thirduser',
        email='third@example.com',
        password='thirdpass123'
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Returns an API client logged in through the session."""
    api_client.force_login(user)
    return api_client


@pytest.fixture
def private_task(user):
    """A private task owned by `user`."""
    from core.tests.factories import TaskFactory
    return TaskFactory.create(user, content='Run 5k')


@pytest.fixture
def public_task(user):
    """A public task owned by `user`."""
    from core.tests.factories import TaskFactory
    return TaskFactory.create(user, content='Read 20 pages', visibility='public')

