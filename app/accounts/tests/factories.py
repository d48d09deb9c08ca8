"""
Factory Boy factories for accounts models.

Provides realistic test data generation for:
- User: Email-keyed account, ACTIVE by default

Usage:
    from accounts.tests.factories import UserFactory

    # ACTIVE user, may take part in relationships
    user = UserFactory()

    # Registered but not yet verified
    user = UserFactory(status=UserStatus.PENDING_VERIFICATION)
"""

import factory

from accounts.models import User, UserStatus


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    Creates users through UserManager.create_user() so passwords are
    hashed the same way as in production code.

    Examples:
        # Basic ACTIVE user
        user = UserFactory()

        # Unverified user (cannot take part in new relationships)
        user = UserFactory(status=UserStatus.PENDING_VERIFICATION)

        # User with a display name for search tests
        user = UserFactory(display_name="Ana Souza")
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    display_name = factory.Sequence(lambda n: f"Member {n}")
    status = UserStatus.ACTIVE

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", "TestPass123!")
        return model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )
