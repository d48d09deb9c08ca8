"""
Test configuration and fixtures for connections tests.

This module provides:
- ACTIVE user fixtures with a known id order
- Pending request and conversation fixtures

Usage:
    def test_example(pending_request, lower_user):
        ChatRequestService.accept_request(pending_request.id, lower_user.id)
"""

import pytest

from accounts.models import UserStatus
from accounts.tests.factories import UserFactory
from connections.tests.factories import ChatRequestFactory, ConversationFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def lower_user(db):
    """Create an ACTIVE user; created first, so it has the lower id."""
    return UserFactory(email="ana@example.com")


@pytest.fixture
def higher_user(db, lower_user):
    """Create an ACTIVE user with a higher id than lower_user."""
    return UserFactory(email="bea@example.com")


@pytest.fixture
def outsider(db, higher_user):
    """Create an ACTIVE user unrelated to the pair."""
    return UserFactory(email="carla@example.com")


@pytest.fixture
def unverified_user(db):
    """Create a user who has not confirmed their email."""
    return UserFactory(
        email="pending@example.com",
        status=UserStatus.PENDING_VERIFICATION,
    )


# =============================================================================
# Relationship Fixtures
# =============================================================================


@pytest.fixture
def pending_request(higher_user, lower_user):
    """PENDING request sent by higher_user to lower_user."""
    return ChatRequestFactory(sender=higher_user, receiver=lower_user)


@pytest.fixture
def conversation(lower_user, higher_user):
    """Conversation between lower_user and higher_user."""
    return ConversationFactory(user1=lower_user, user2=higher_user)
