"""
Tests for IdentityDirectory lookups.

Test Organization:
    - One test class per lookup
    - Tests use descriptive names following: test_<scenario>_<expected_outcome>
"""

import pytest

from accounts.exceptions import LookupKeyRequired, UserNotFound
from accounts.models import User, UserStatus
from accounts.services import IdentityDirectory
from accounts.tests.factories import UserFactory


# =============================================================================
# TestFindUser
# =============================================================================


class TestFindUser:
    """Tests for find_user_by_id() and find_user_by_email()."""

    def test_find_by_id_returns_user_regardless_of_status(self, unverified_user):
        assert IdentityDirectory.find_user_by_id(unverified_user.id) == unverified_user

    def test_find_by_id_returns_none_for_unknown_id(self, db):
        assert IdentityDirectory.find_user_by_id(999999) is None

    def test_find_by_email_is_case_insensitive(self, active_user):
        assert IdentityDirectory.find_user_by_email("ANA@Example.com") == active_user

    def test_find_by_email_ignores_surrounding_whitespace(self, active_user):
        assert IdentityDirectory.find_user_by_email("  ana@example.com ") == active_user

    def test_find_by_blank_email_returns_none(self, active_user):
        assert IdentityDirectory.find_user_by_email("") is None


# =============================================================================
# TestRequireActiveUser
# =============================================================================


class TestRequireActiveUser:
    """
    Tests for require_active_user().

    Why it matters:
        Every relationship operation resolves its counterpart through this
        method. Unverified accounts must look exactly like missing ones.
    """

    def test_resolves_active_user_by_id(self, active_user):
        assert IdentityDirectory.require_active_user(user_id=active_user.id) == active_user

    def test_resolves_active_user_by_email(self, active_user):
        assert IdentityDirectory.require_active_user(email="ana@example.com") == active_user

    def test_id_takes_precedence_over_email(self, active_user):
        other = UserFactory()

        resolved = IdentityDirectory.require_active_user(
            user_id=other.id, email=active_user.email
        )

        assert resolved == other

    def test_unknown_id_raises_user_not_found(self, db):
        with pytest.raises(UserNotFound) as exc_info:
            IdentityDirectory.require_active_user(user_id=424242)

        assert exc_info.value.error_code == "USER_NOT_FOUND"
        assert exc_info.value.details == {"user_id": 424242}

    def test_unknown_email_raises_user_not_found(self, db):
        with pytest.raises(UserNotFound):
            IdentityDirectory.require_active_user(email="ghost@example.com")

    def test_unverified_user_is_reported_as_not_found(self, unverified_user):
        with pytest.raises(UserNotFound):
            IdentityDirectory.require_active_user(user_id=unverified_user.id)

        with pytest.raises(UserNotFound):
            IdentityDirectory.require_active_user(email=unverified_user.email)

    def test_no_lookup_key_raises_validation_error(self, db):
        with pytest.raises(LookupKeyRequired) as exc_info:
            IdentityDirectory.require_active_user(email="   ")

        assert exc_info.value.error_code == "LOOKUP_KEY_REQUIRED"


# =============================================================================
# TestSearchUsers
# =============================================================================


class TestSearchUsers:
    """Tests for search_users()."""

    def test_matches_email_and_display_name(self, active_user):
        by_name = UserFactory(email="someone@example.com", display_name="Joana")
        UserFactory(email="bob@example.com", display_name="Bob")
        searcher = UserFactory(email="searcher@example.com", display_name="Searcher")

        results = IdentityDirectory.search_users("ana", current_user_id=searcher.id)

        assert results == [active_user, by_name]

    def test_excludes_searching_user(self, active_user):
        results = IdentityDirectory.search_users("ana", current_user_id=active_user.id)

        assert results == []

    def test_excludes_unverified_users(self, unverified_user):
        searcher = UserFactory()

        results = IdentityDirectory.search_users("pending", current_user_id=searcher.id)

        assert results == []

    def test_blank_query_returns_nothing(self, active_user):
        searcher = UserFactory()

        assert IdentityDirectory.search_users("  ", current_user_id=searcher.id) == []

    def test_results_are_capped(self, db, settings):
        settings.RELATIONSHIP_LIMITS = {"USER_SEARCH_MAX_RESULTS": 2}
        searcher = UserFactory(email="searcher@other.org")
        for index in range(4):
            UserFactory(email=f"match{index}@example.com")

        results = IdentityDirectory.search_users("match", current_user_id=searcher.id)

        assert [user.email for user in results] == [
            "match0@example.com",
            "match1@example.com",
        ]


# =============================================================================
# TestUserModel
# =============================================================================


class TestUserModel:
    """Tests for User model behaviour used by the relationship apps."""

    def test_create_user_defaults_to_pending_verification(self, db):
        user = User.objects.create_user(email="new@Example.COM")

        assert user.status == UserStatus.PENDING_VERIFICATION
        assert user.is_verified is False
        assert user.email == "new@example.com"
        assert user.has_usable_password() is False

    def test_active_manager_filter(self, active_user, unverified_user):
        assert list(User.objects.active()) == [active_user]
