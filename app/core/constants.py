"""
Limits shared by the relationship and membership services.

Values can be overridden with a RELATIONSHIP_LIMITS dict in Django settings:

    RELATIONSHIP_LIMITS = {"GROUP_NAME_MAX_LENGTH": 80}

Import example:
    from core.constants import RELATIONSHIP_LIMITS, get_limit
"""

from typing import Final

from django.conf import settings


# =============================================================================
# Relationship Limits
# =============================================================================


class RELATIONSHIP_LIMITS:
    """Default limits for groups and user lookups."""

    # Group fields
    GROUP_NAME_MAX_LENGTH: Final[int] = 100
    GROUP_DESCRIPTION_MAX_LENGTH: Final[int] = 500

    # User search
    USER_SEARCH_MAX_RESULTS: Final[int] = 20


def get_limit(name: str) -> int:
    """Return a limit, preferring a settings override over the default."""
    overrides = getattr(settings, "RELATIONSHIP_LIMITS", None) or {}
    if name in overrides:
        return int(overrides[name])
    return getattr(RELATIONSHIP_LIMITS, name)
