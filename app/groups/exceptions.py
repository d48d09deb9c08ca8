"""
Group membership exceptions.

Exception Hierarchy:
    ValidationError
    ├── GroupNameRequired - Blank name on create
    ├── GroupNameTooLong - Name over GROUP_NAME_MAX_LENGTH
    ├── GroupDescriptionTooLong - Description over GROUP_DESCRIPTION_MAX_LENGTH
    ├── SelfInvitation - Admin invited themself
    └── UseLeaveInstead - Admin tried to remove themself
    NotFoundError
    ├── GroupNotFound
    ├── InvitationNotFound - Absent or hidden from the caller
    └── MemberNotFound - Target user is not in the group
    PermissionDeniedError
    ├── NotGroupMember
    ├── NotGroupAdmin
    └── NotInvitee - Only the invitee may accept or reject
    ConflictError
    ├── AlreadyMember
    ├── PendingInvitationExists
    ├── InvitationAlreadyResolved
    ├── AlreadyAdmin
    ├── LastAdmin - Removing the only admin
    └── MustPromoteFirst - Only admin leaving a group that still has members
"""

from __future__ import annotations

from core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)


# =============================================================================
# Validation
# =============================================================================


class GroupNameRequired(ValidationError):
    default_error_code: str = "NAME_REQUIRED"

    def __init__(self):
        super().__init__("Group name is required")


class GroupNameTooLong(ValidationError):
    default_error_code: str = "NAME_TOO_LONG"

    def __init__(self, max_length: int):
        super().__init__(
            f"Group name cannot exceed {max_length} characters",
            details={"max_length": max_length},
        )


class GroupDescriptionTooLong(ValidationError):
    default_error_code: str = "DESCRIPTION_TOO_LONG"

    def __init__(self, max_length: int):
        super().__init__(
            f"Group description cannot exceed {max_length} characters",
            details={"max_length": max_length},
        )


class SelfInvitation(ValidationError):
    default_error_code: str = "SELF_INVITE"

    def __init__(self, group_id: int, user_id: int):
        super().__init__(
            "You cannot invite yourself",
            details={"group_id": group_id, "user_id": user_id},
        )


class UseLeaveInstead(ValidationError):
    """Raised when an admin targets themself with remove_member()."""

    default_error_code: str = "USE_LEAVE"

    def __init__(self, group_id: int, user_id: int):
        super().__init__(
            "Use leave_group to remove yourself from a group",
            details={"group_id": group_id, "user_id": user_id},
        )


# =============================================================================
# Not found
# =============================================================================


class GroupNotFound(NotFoundError):
    default_error_code: str = "GROUP_NOT_FOUND"

    def __init__(self, group_id: int):
        super().__init__(f"Group {group_id} not found", details={"group_id": group_id})


class InvitationNotFound(NotFoundError):
    """
    Raised when an invitation does not exist.

    Also raised when the caller is neither inviter nor invitee, so that
    existence is not revealed to third parties.
    """

    default_error_code: str = "INVITATION_NOT_FOUND"

    def __init__(self, invitation_id: int):
        super().__init__(
            f"Invitation {invitation_id} not found",
            details={"invitation_id": invitation_id},
        )


class MemberNotFound(NotFoundError):
    default_error_code: str = "MEMBER_NOT_FOUND"

    def __init__(self, group_id: int, user_id: int):
        super().__init__(
            f"User {user_id} is not a member of group {group_id}",
            details={"group_id": group_id, "user_id": user_id},
        )


# =============================================================================
# Permission denied
# =============================================================================


class NotGroupMember(PermissionDeniedError):
    default_error_code: str = "NOT_GROUP_MEMBER"

    def __init__(self, group_id: int, user_id: int):
        super().__init__(
            "You are not a member of this group",
            details={"group_id": group_id, "user_id": user_id},
        )


class NotGroupAdmin(PermissionDeniedError):
    default_error_code: str = "NOT_GROUP_ADMIN"

    def __init__(self, group_id: int, user_id: int):
        super().__init__(
            "Only group admins can perform this action",
            details={"group_id": group_id, "user_id": user_id},
        )


class NotInvitee(PermissionDeniedError):
    default_error_code: str = "NOT_INVITEE"

    def __init__(self, invitation_id: int, user_id: int):
        super().__init__(
            "Only the invitee can respond to this invitation",
            details={"invitation_id": invitation_id, "user_id": user_id},
        )


# =============================================================================
# Conflict
# =============================================================================


class AlreadyMember(ConflictError):
    default_error_code: str = "ALREADY_MEMBER"

    def __init__(self, group_id: int, user_id: int):
        super().__init__(
            "User is already a member of this group",
            details={"group_id": group_id, "user_id": user_id},
        )


class PendingInvitationExists(ConflictError):
    """
    Raised when the invitee already has a PENDING invitation to the group.

    Example:
        raise PendingInvitationExists(group_id=7, invitee_id=12)
    """

    default_error_code: str = "PENDING_EXISTS"

    def __init__(self, group_id: int, invitee_id: int):
        super().__init__(
            "A pending invitation already exists for this user",
            details={"group_id": group_id, "invitee_id": invitee_id},
        )


class InvitationAlreadyResolved(ConflictError):
    default_error_code: str = "ALREADY_RESOLVED"

    def __init__(self, invitation_id: int, status: str):
        super().__init__(
            f"Invitation {invitation_id} is already {status}",
            details={"invitation_id": invitation_id, "status": status},
        )


class AlreadyAdmin(ConflictError):
    default_error_code: str = "ALREADY_ADMIN"

    def __init__(self, group_id: int, user_id: int):
        super().__init__(
            "User is already an admin of this group",
            details={"group_id": group_id, "user_id": user_id},
        )


class LastAdmin(ConflictError):
    """Raised when removing a member would leave the group without an admin."""

    default_error_code: str = "LAST_ADMIN"

    def __init__(self, group_id: int, user_id: int):
        super().__init__(
            "Cannot remove the last admin of the group",
            details={"group_id": group_id, "user_id": user_id},
        )


class MustPromoteFirst(ConflictError):
    """
    Raised when the only admin tries to leave a group that has other members.

    Another member has to be promoted before the admin can leave.
    """

    default_error_code: str = "MUST_PROMOTE_FIRST"

    def __init__(self, group_id: int, user_id: int, member_count: int):
        super().__init__(
            "Promote another member to admin before leaving",
            details={
                "group_id": group_id,
                "user_id": user_id,
                "member_count": member_count,
            },
        )
