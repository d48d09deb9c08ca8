"""
Groups application configuration.

This app provides:
- Group, GroupMember and GroupInvitation models
- Membership lifecycle services and the group permission validator
"""

from django.apps import AppConfig


class GroupsConfig(AppConfig):
    """Configuration for the groups application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "groups"
    verbose_name = "Groups"
