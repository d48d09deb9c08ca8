"""
Accounts app: the identity directory.

This app owns the User record and read-only lookups over it. Credential
issuance (password hashing policy, tokens) is handled elsewhere; the
relationship apps only need existence and ACTIVE-status checks.

Related apps:
    - connections: Chat requests and one-to-one conversations
    - groups: Groups, invitations and memberships

Usage:
    from accounts.services import IdentityDirectory

    receiver = IdentityDirectory.require_active_user(email="ana@example.com")
"""
