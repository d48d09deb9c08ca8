"""
Connection services for chat requests and one-to-one conversations.

This module provides:
- ChatRequestService: Send, accept, reject and read chat requests
- ConversationService: The single writer of Conversation records

Design Principles:
    - Services are stateless (use class methods)
    - Every mutation runs inside transaction.atomic()
    - Business-rule failures raise connections.exceptions errors
    - Uniqueness is guaranteed by database constraints; the existence
      checks done first are a fast path, and constraint violations are
      translated into the same Conflict errors

Usage:
    from connections.services import ChatRequestService, ConversationService

    chat_request = ChatRequestService.create_request(
        sender_id=5, receiver_email="bea@example.com"
    )
    ChatRequestService.accept_request(chat_request.id, acting_user_id=3)

    conversation = ConversationService.get_between(3, 5)
"""

from __future__ import annotations

from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from accounts.exceptions import UserNotFound
from accounts.services import IdentityDirectory
from connections.exceptions import (
    ChatRequestAlreadyExists,
    ChatRequestAlreadyResolved,
    ChatRequestNotFound,
    ConversationAlreadyExists,
    NotConversationParticipant,
    NotRequestReceiver,
    SameUser,
)
from connections.models import (
    LIVE_CHAT_REQUEST_STATUSES,
    ChatRequest,
    ChatRequestStatus,
    Conversation,
)
from core.services import BaseService


def canonical_pair(user_a_id: int, user_b_id: int) -> tuple[int, int]:
    """Order a user pair lower id first."""
    if user_a_id < user_b_id:
        return user_a_id, user_b_id
    return user_b_id, user_a_id


# =============================================================================
# ConversationService
# =============================================================================


class ConversationService(BaseService):
    """
    Service for one-to-one conversations.

    Methods:
        create_conversation: Create the conversation for a pair (internal)
        get_conversation: Participant-gated lookup by id
        list_by_user: A user's conversations, most recent activity first
        exists_between: Whether a pair already shares a conversation
        get_between: The conversation a user shares with another user
        record_message_activity: Bump last_message_at after a message
    """

    @classmethod
    def create_conversation(cls, user_a_id: int, user_b_id: int) -> Conversation:
        """
        Create the conversation between two users.

        Only ChatRequestService.accept_request() calls this. It runs inside
        the caller's transaction, so a failure here undoes the acceptance.

        Implementation:
            1. Validate users are different and both exist
            2. Canonicalize order (lower user_id first)
            3. Fast path: refuse if the pair already has a conversation
            4. Insert; a unique constraint violation maps to the same conflict

        Args:
            user_a_id: One participant
            user_b_id: The other participant

        Returns:
            The new Conversation

        Raises:
            SameUser: Both ids are equal
            UserNotFound: Either user does not exist
            ConversationAlreadyExists: The pair already has a conversation
        """
        if user_a_id == user_b_id:
            raise SameUser(user_a_id)

        for user_id in (user_a_id, user_b_id):
            if IdentityDirectory.find_user_by_id(user_id) is None:
                raise UserNotFound.by_id(user_id)

        user1_id, user2_id = canonical_pair(user_a_id, user_b_id)

        if cls.exists_between(user1_id, user2_id):
            raise ConversationAlreadyExists(user1_id, user2_id)

        conversation = cls.insert_or_conflict(
            lambda: Conversation.objects.create(user1_id=user1_id, user2_id=user2_id),
            lambda: ConversationAlreadyExists(user1_id, user2_id),
        )

        cls.get_logger().info(
            f"Created conversation {conversation.id} "
            f"between users {user1_id} and {user2_id}"
        )
        return conversation

    @classmethod
    def get_conversation(cls, conversation_id: int, user_id: int) -> Conversation:
        """
        Get a conversation the user takes part in.

        An absent id and a conversation between other users raise the same
        error.

        Raises:
            NotConversationParticipant: No conversation with this id has the
                user as a participant
        """
        conversation = Conversation.objects.filter(
            Q(user1_id=user_id) | Q(user2_id=user_id), pk=conversation_id
        ).first()
        if conversation is None:
            raise NotConversationParticipant(conversation_id, user_id)
        return conversation

    @classmethod
    def list_by_user(cls, user_id: int) -> list[Conversation]:
        """Return the user's conversations, most recent activity first."""
        return list(
            Conversation.objects.filter(Q(user1_id=user_id) | Q(user2_id=user_id))
            .order_by(F("last_message_at").desc(nulls_last=True), "-created_at")
        )

    @classmethod
    def exists_between(cls, user_a_id: int, user_b_id: int) -> bool:
        if user_a_id == user_b_id:
            return False
        user1_id, user2_id = canonical_pair(user_a_id, user_b_id)
        return Conversation.objects.filter(user1_id=user1_id, user2_id=user2_id).exists()

    @classmethod
    def get_between(cls, user_id: int, other_user_id: int) -> Conversation | None:
        if user_id == other_user_id:
            return None
        user1_id, user2_id = canonical_pair(user_id, other_user_id)
        return Conversation.objects.filter(user1_id=user1_id, user2_id=user2_id).first()

    @classmethod
    def record_message_activity(cls, conversation_id: int, user_id: int) -> Conversation:
        """
        Record that a message was just posted to the conversation.

        Called by the message layer so conversation lists stay ordered by
        recent activity.

        Raises:
            NotConversationParticipant: No conversation with this id has the
                user as a participant
        """
        conversation = cls.get_conversation(conversation_id, user_id)
        conversation.last_message_at = timezone.now()
        conversation.save(update_fields=["last_message_at", "updated_at"])

        cls.get_logger().debug(
            f"Recorded message activity in conversation {conversation_id} by user {user_id}"
        )
        return conversation


# =============================================================================
# ChatRequestService
# =============================================================================


class ChatRequestService(BaseService):
    """
    Service for the chat request lifecycle.

    Lifecycle:
        create_request -> PENDING
        accept_request -> ACCEPTED (+ Conversation, same transaction)
        reject_request -> REJECTED

    Methods:
        create_request: Send a request to a user by id or email
        accept_request: Receiver accepts; creates the conversation
        reject_request: Receiver declines
        get_request: Read a request as its sender or receiver
        list_sent / list_received / list_pending: Newest first
        count_pending: Number of PENDING requests awaiting the user
    """

    @classmethod
    def create_request(
        cls,
        sender_id: int,
        receiver_id: int | None = None,
        receiver_email: str | None = None,
    ) -> ChatRequest:
        """
        Send a chat request.

        Args:
            sender_id: The acting user
            receiver_id: Receiver's id (preferred)
            receiver_email: Receiver's email, used when receiver_id is None

        Returns:
            The new PENDING ChatRequest

        Raises:
            LookupKeyRequired: Neither receiver_id nor receiver_email given
            UserNotFound: Receiver or sender missing or not ACTIVE
            SameUser: Sender and receiver are the same user
            ConversationAlreadyExists: The pair already shares a conversation
            ChatRequestAlreadyExists: A PENDING or ACCEPTED request links
                the pair in either direction
        """
        receiver = IdentityDirectory.require_active_user(
            user_id=receiver_id, email=receiver_email
        )
        if receiver.id == sender_id:
            raise SameUser(sender_id)
        IdentityDirectory.require_active_user(user_id=sender_id)

        if ConversationService.exists_between(sender_id, receiver.id):
            raise ConversationAlreadyExists(*canonical_pair(sender_id, receiver.id))

        if cls.live_request_exists(sender_id, receiver.id):
            raise ChatRequestAlreadyExists(sender_id, receiver.id)

        with transaction.atomic():
            chat_request = cls.insert_or_conflict(
                lambda: ChatRequest.objects.create(
                    sender_id=sender_id,
                    receiver_id=receiver.id,
                ),
                lambda: ChatRequestAlreadyExists(sender_id, receiver.id),
            )

        cls.get_logger().info(
            f"User {sender_id} sent chat request {chat_request.id} to user {receiver.id}"
        )
        return chat_request

    @classmethod
    def accept_request(cls, request_id: int, acting_user_id: int) -> ChatRequest:
        """
        Accept a PENDING request and create the pair's conversation.

        The status change and the conversation insert commit together or
        not at all.

        Raises:
            ChatRequestNotFound: No request with this id
            NotRequestReceiver: Acting user is not the receiver
            ChatRequestAlreadyResolved: Request is not PENDING
            ConversationAlreadyExists: The pair already has a conversation
        """
        with transaction.atomic():
            chat_request = cls._lock_for_response(request_id, acting_user_id)
            cls._transition(chat_request, ChatRequestStatus.ACCEPTED)
            conversation = ConversationService.create_conversation(
                chat_request.sender_id, chat_request.receiver_id
            )

        cls.get_logger().info(
            f"User {acting_user_id} accepted chat request {request_id}; "
            f"conversation {conversation.id} created"
        )
        return chat_request

    @classmethod
    def reject_request(cls, request_id: int, acting_user_id: int) -> ChatRequest:
        """
        Reject a PENDING request. No conversation is created.

        Raises:
            ChatRequestNotFound: No request with this id
            NotRequestReceiver: Acting user is not the receiver
            ChatRequestAlreadyResolved: Request is not PENDING
        """
        with transaction.atomic():
            chat_request = cls._lock_for_response(request_id, acting_user_id)
            cls._transition(chat_request, ChatRequestStatus.REJECTED)

        cls.get_logger().info(f"User {acting_user_id} rejected chat request {request_id}")
        return chat_request

    @classmethod
    def get_request(cls, request_id: int, user_id: int) -> ChatRequest:
        """
        Get a request as its sender or receiver.

        Raises:
            ChatRequestNotFound: No such request, or the user is not a party
        """
        chat_request = ChatRequest.objects.filter(pk=request_id).first()
        if chat_request is None or not chat_request.involves(user_id):
            raise ChatRequestNotFound(request_id)
        return chat_request

    @classmethod
    def list_sent(cls, user_id: int) -> list[ChatRequest]:
        return list(ChatRequest.objects.filter(sender_id=user_id).order_by("-created_at", "-id"))

    @classmethod
    def list_received(cls, user_id: int) -> list[ChatRequest]:
        return list(
            ChatRequest.objects.filter(receiver_id=user_id).order_by("-created_at", "-id")
        )

    @classmethod
    def list_pending(cls, user_id: int) -> list[ChatRequest]:
        """PENDING requests awaiting the user's response, newest first."""
        return list(
            ChatRequest.objects.filter(
                receiver_id=user_id, status=ChatRequestStatus.PENDING
            ).order_by("-created_at", "-id")
        )

    @classmethod
    def count_pending(cls, user_id: int) -> int:
        return ChatRequest.objects.filter(
            receiver_id=user_id, status=ChatRequestStatus.PENDING
        ).count()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @classmethod
    def _lock_for_response(cls, request_id: int, acting_user_id: int) -> ChatRequest:
        """
        Lock a request row and check the acting user may respond to it.

        Must be called within a transaction.atomic() block.
        """
        chat_request = ChatRequest.objects.select_for_update().filter(pk=request_id).first()
        if chat_request is None:
            raise ChatRequestNotFound(request_id)
        if chat_request.receiver_id != acting_user_id:
            raise NotRequestReceiver(request_id, acting_user_id)
        if not chat_request.is_pending:
            raise ChatRequestAlreadyResolved(request_id, chat_request.status)
        return chat_request

    @classmethod
    def _transition(cls, chat_request: ChatRequest, status: str) -> None:
        if not chat_request.can_transition_to(status):
            raise ChatRequestAlreadyResolved(chat_request.id, chat_request.status)
        chat_request.status = status
        chat_request.save(update_fields=["status", "updated_at"])

    @classmethod
    def live_request_exists(cls, user_a_id: int, user_b_id: int) -> bool:
        """Check for a PENDING or ACCEPTED request between the pair, either direction."""
        user_lower_id, user_higher_id = canonical_pair(user_a_id, user_b_id)
        return ChatRequest.objects.filter(
            user_lower_id=user_lower_id,
            user_higher_id=user_higher_id,
            status__in=LIVE_CHAT_REQUEST_STATUSES,
        ).exists()
