"""
Connection lifecycle exceptions.

Exception Hierarchy:
    SameUser (ValidationError) - Both sides of a pair are the same user
    ChatRequestNotFound (NotFoundError) - Request absent or hidden from caller
    NotRequestReceiver (PermissionDeniedError) - Only the receiver may respond
    NotConversationParticipant (PermissionDeniedError) - Caller not in pair,
        also raised for absent ids
    ConversationAlreadyExists (ConflictError) - Pair already has a conversation
    ChatRequestAlreadyExists (ConflictError) - Live request exists for pair
    ChatRequestAlreadyResolved (ConflictError) - Request no longer PENDING
"""

from __future__ import annotations

from core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)


class SameUser(ValidationError):
    """Raised when a request or conversation would pair a user with themself."""

    default_error_code: str = "SAME_USER"

    def __init__(self, user_id: int):
        super().__init__(
            "A user cannot start a conversation with themself",
            details={"user_id": user_id},
        )


class ChatRequestNotFound(NotFoundError):
    """
    Raised when a chat request does not exist.

    Also raised when the caller is neither sender nor receiver, so that
    existence is not revealed to third parties.
    """

    default_error_code: str = "CHAT_REQUEST_NOT_FOUND"

    def __init__(self, request_id: int):
        super().__init__(
            f"Chat request {request_id} not found",
            details={"request_id": request_id},
        )


class NotRequestReceiver(PermissionDeniedError):
    """Raised when someone other than the receiver responds to a request."""

    default_error_code: str = "NOT_RECEIVER"

    def __init__(self, request_id: int, user_id: int):
        super().__init__(
            "Only the receiver can respond to this chat request",
            details={"request_id": request_id, "user_id": user_id},
        )


class NotConversationParticipant(PermissionDeniedError):
    default_error_code: str = "NOT_PARTICIPANT"

    def __init__(self, conversation_id: int, user_id: int):
        super().__init__(
            "You are not a participant in this conversation",
            details={"conversation_id": conversation_id, "user_id": user_id},
        )


class ConversationAlreadyExists(ConflictError):
    """
    Raised when the pair already shares a conversation.

    Example:
        raise ConversationAlreadyExists(user1_id=3, user2_id=5)
    """

    default_error_code: str = "CONVERSATION_EXISTS"

    def __init__(self, user1_id: int, user2_id: int):
        super().__init__(
            "A conversation already exists between these users",
            details={"user1_id": user1_id, "user2_id": user2_id},
        )


class ChatRequestAlreadyExists(ConflictError):
    """
    Raised when a PENDING or ACCEPTED request already links the pair.

    Direction does not matter: a pending 3 -> 5 request blocks 5 -> 3.
    """

    default_error_code: str = "REQUEST_EXISTS"

    def __init__(self, sender_id: int, receiver_id: int):
        super().__init__(
            "A chat request already exists between these users",
            details={"sender_id": sender_id, "receiver_id": receiver_id},
        )


class ChatRequestAlreadyResolved(ConflictError):
    """Raised when accepting or rejecting a request that is not PENDING."""

    default_error_code: str = "ALREADY_RESOLVED"

    def __init__(self, request_id: int, status: str):
        super().__init__(
            f"Chat request {request_id} is already {status}",
            details={"request_id": request_id, "status": status},
        )
