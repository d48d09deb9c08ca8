"""
Factory Boy factories for connections models.

Provides realistic test data generation for:
- ChatRequest: PENDING request between two new users by default
- Conversation: Conversation between two new users, canonical order

Usage:
    from connections.tests.factories import ChatRequestFactory, ConversationFactory

    # Pending request from a new user to `user`
    chat_request = ChatRequestFactory(receiver=user)

    # Conversation between two existing users (order does not matter)
    conversation = ConversationFactory(user1=bea, user2=ana)
"""

import factory

from accounts.tests.factories import UserFactory
from connections.models import ChatRequest, ChatRequestStatus, Conversation


class ChatRequestFactory(factory.django.DjangoModelFactory):
    """
    Factory for ChatRequest model.

    Examples:
        chat_request = ChatRequestFactory()
        rejected = ChatRequestFactory(status=ChatRequestStatus.REJECTED)
    """

    class Meta:
        model = ChatRequest

    sender = factory.SubFactory(UserFactory)
    receiver = factory.SubFactory(UserFactory)
    status = ChatRequestStatus.PENDING


class ConversationFactory(factory.django.DjangoModelFactory):
    """
    Factory for Conversation model.

    Swaps the users when needed so user1 always has the lower id.
    """

    class Meta:
        model = Conversation

    user1 = factory.SubFactory(UserFactory)
    user2 = factory.SubFactory(UserFactory)

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Store the pair in canonical order."""
        user1, user2 = kwargs["user1"], kwargs["user2"]
        if user1.id > user2.id:
            kwargs["user1"], kwargs["user2"] = user2, user1
        return super()._create(model_class, *args, **kwargs)
