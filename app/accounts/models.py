"""
Accounts models.

This module defines the identity record consumed by the relationship apps:
- User: Email-keyed account with a verification status

Related files:
    - managers.py: Custom user manager for email-based creation
    - services.py: IdentityDirectory read-only lookups

Note:
    Only ACTIVE users may take part in new chat requests, conversations,
    groups or invitations. Existing relationships are left untouched when
    a user's status changes.
"""

from django.contrib.auth.base_user import AbstractBaseUser
from django.db import models

from accounts.managers import UserManager


class UserStatus(models.TextChoices):
    """
    Verification state of an account.

    PENDING_VERIFICATION: Registered, email not yet confirmed
    ACTIVE: Confirmed; may participate in relationships
    """

    PENDING_VERIFICATION = "pending_verification", "Pending verification"
    ACTIVE = "active", "Active"


class User(AbstractBaseUser):
    """
    Account identified by email.

    Fields:
        email: Primary identifier, unique, used for lookups
        display_name: Optional name shown in search results
        status: Verification state (PENDING_VERIFICATION or ACTIVE)
        date_joined: When the account was created
        updated_at: When the account was last modified

    Usage:
        user = User.objects.create_user(
            email="user@example.com",
            password="securepassword",
            status=UserStatus.ACTIVE,
        )
    """

    email = models.EmailField(
        unique=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )

    display_name = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Name shown to other users",
    )

    status = models.CharField(
        max_length=20,
        choices=UserStatus.choices,
        default=UserStatus.PENDING_VERIFICATION,
        db_index=True,
        help_text="Verification state of the account",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = "accounts_user"
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        """Return the user's email as string representation."""
        return self.email

    @property
    def is_verified(self) -> bool:
        """Check if the account may take part in new relationships."""
        return self.status == UserStatus.ACTIVE
