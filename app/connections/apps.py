"""
Connections application configuration.

This app provides:
- ChatRequest state machine (pending -> accepted | rejected)
- Canonical one-to-one Conversation records
"""

from django.apps import AppConfig


class ConnectionsConfig(AppConfig):
    """Configuration for the connections application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "connections"
    verbose_name = "Connections"
