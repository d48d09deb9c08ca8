"""
Groups app: group chats, invitations and role-gated membership.

This app handles:
- Group creation (creator becomes the first ADMIN)
- Invitations sent by admins and answered by invitees
- Promotion, removal and leaving, keeping at least one ADMIN per group
- Group teardown when the last member leaves

Related apps:
    - accounts: User lookups and ACTIVE-status checks
    - connections: One-to-one conversations (separate lifecycle)

Usage:
    from groups.services import GroupInvitationService, GroupService

    group = GroupService.create_group(creator_id=1, name="Team")
    invitation = GroupInvitationService.create_invitation(group.id, 1, 2)
    GroupInvitationService.accept_invitation(invitation.id, acting_user_id=2)
"""
