"""
Tests for connections models and their database constraints.

The constraints are what keep a pair to one live request and one
conversation when two writers race, so they are tested directly against
the database here, bypassing the services.
"""

import pytest
from django.db import IntegrityError, transaction

from connections.models import ChatRequest, ChatRequestStatus, Conversation
from connections.tests.factories import ChatRequestFactory, ConversationFactory


# =============================================================================
# TestChatRequestModel
# =============================================================================


class TestChatRequestModel:
    """Tests for ChatRequest field behaviour and state transitions."""

    def test_save_fills_canonical_pair_from_either_direction(self, lower_user, higher_user):
        forward = ChatRequestFactory(sender=lower_user, receiver=higher_user)
        forward.status = ChatRequestStatus.REJECTED
        forward.save()
        backward = ChatRequestFactory(sender=higher_user, receiver=lower_user)

        for chat_request in (forward, backward):
            assert chat_request.user_lower_id == lower_user.id
            assert chat_request.user_higher_id == higher_user.id

    def test_pending_can_move_to_accepted_or_rejected(self, pending_request):
        assert pending_request.can_transition_to(ChatRequestStatus.ACCEPTED)
        assert pending_request.can_transition_to(ChatRequestStatus.REJECTED)
        assert not pending_request.can_transition_to(ChatRequestStatus.PENDING)

    @pytest.mark.parametrize(
        "terminal", [ChatRequestStatus.ACCEPTED, ChatRequestStatus.REJECTED]
    )
    def test_terminal_statuses_allow_no_transition(self, db, terminal):
        chat_request = ChatRequestFactory(status=terminal)
        chat_request.refresh_from_db()

        for status in ChatRequestStatus.values:
            assert not chat_request.can_transition_to(status)

    def test_involves_sender_and_receiver_only(self, pending_request, outsider):
        assert pending_request.involves(pending_request.sender_id)
        assert pending_request.involves(pending_request.receiver_id)
        assert not pending_request.involves(outsider.id)


# =============================================================================
# TestChatRequestConstraints
# =============================================================================


class TestChatRequestConstraints:
    """
    Tests for ChatRequest database constraints.

    Why it matters:
        The service checks for a live request before inserting, but two
        requests sent at the same moment both pass that check. Only the
        partial unique constraint stops the second one.
    """

    def test_reverse_direction_pending_request_is_rejected(self, pending_request):
        with pytest.raises(IntegrityError), transaction.atomic():
            ChatRequest.objects.create(
                sender=pending_request.receiver,
                receiver=pending_request.sender,
            )

    def test_accepted_request_blocks_new_request(self, lower_user, higher_user):
        ChatRequestFactory(
            sender=lower_user, receiver=higher_user, status=ChatRequestStatus.ACCEPTED
        )

        with pytest.raises(IntegrityError), transaction.atomic():
            ChatRequest.objects.create(sender=lower_user, receiver=higher_user)

    def test_rejected_requests_do_not_block_the_pair(self, lower_user, higher_user):
        ChatRequestFactory(
            sender=lower_user, receiver=higher_user, status=ChatRequestStatus.REJECTED
        )
        ChatRequestFactory(
            sender=higher_user, receiver=lower_user, status=ChatRequestStatus.REJECTED
        )

        ChatRequest.objects.create(sender=lower_user, receiver=higher_user)

        assert ChatRequest.objects.count() == 3

    def test_request_to_self_is_rejected(self, lower_user):
        with pytest.raises(IntegrityError), transaction.atomic():
            ChatRequest.objects.create(sender=lower_user, receiver=lower_user)


# =============================================================================
# TestConversationConstraints
# =============================================================================


class TestConversationConstraints:
    """Tests for Conversation pair uniqueness and ordering."""

    def test_factory_stores_pair_in_canonical_order(self, lower_user, higher_user):
        conversation = ConversationFactory(user1=higher_user, user2=lower_user)

        assert conversation.user1_id == lower_user.id
        assert conversation.user2_id == higher_user.id

    def test_duplicate_pair_is_rejected(self, conversation):
        with pytest.raises(IntegrityError), transaction.atomic():
            Conversation.objects.create(
                user1_id=conversation.user1_id,
                user2_id=conversation.user2_id,
            )

    def test_reversed_order_is_rejected(self, lower_user, higher_user):
        with pytest.raises(IntegrityError), transaction.atomic():
            Conversation.objects.create(user1=higher_user, user2=lower_user)
