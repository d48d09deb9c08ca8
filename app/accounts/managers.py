"""
Custom user manager for email-based accounts.

Related files:
    - models.py: User model that uses this manager
"""

from django.contrib.auth.base_user import BaseUserManager


class UserManager(BaseUserManager):
    """
    Manager for User model keyed by email.

    Usage:
        user = User.objects.create_user(
            email="user@example.com",
            password="securepassword",
            display_name="User",
        )
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create and save a user with the given email and password.

        New accounts start in PENDING_VERIFICATION unless a status is given.

        Args:
            email: User's email address (required)
            password: User's password (optional; unusable if omitted)
            **extra_fields: Additional fields to set on the user

        Returns:
            User: The created user instance

        Raises:
            ValueError: If email is not provided
        """
        if not email:
            raise ValueError("The Email field must be set")

        # Normalize email (lowercase the domain portion)
        email = self.normalize_email(email)

        from accounts.models import UserStatus

        extra_fields.setdefault("status", UserStatus.PENDING_VERIFICATION)

        user = self.model(email=email, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def active(self):
        """Users allowed to take part in new relationships."""
        from accounts.models import UserStatus

        return self.filter(status=UserStatus.ACTIVE)
