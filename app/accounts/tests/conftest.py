"""
Test configuration and fixtures for accounts tests.

This module provides:
- ACTIVE and unverified user fixtures for lookup tests
"""

import pytest

from accounts.models import UserStatus
from accounts.tests.factories import UserFactory


@pytest.fixture
def active_user(db):
    """Create an ACTIVE user."""
    return UserFactory(email="ana@example.com", display_name="Ana Souza")


@pytest.fixture
def unverified_user(db):
    """Create a user who has not confirmed their email."""
    return UserFactory(
        email="pending@example.com",
        display_name="Pending Person",
        status=UserStatus.PENDING_VERIFICATION,
    )
