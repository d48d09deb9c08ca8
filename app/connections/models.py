"""
Connection models.

This module defines the relationship store for one-to-one chat:

Models:
    ChatRequest: A request from one user to start chatting with another
    Conversation: The single private conversation between two users

Design Decisions:
    - Both models store the user pair in canonical order (lower id first)
      so a pair has exactly one storage location regardless of direction
    - Uniqueness is enforced by database constraints; services check first
      as a fast path and translate constraint violations into conflicts
    - A Conversation is only ever created by accepting a ChatRequest
    - Neither model is deleted by the relationship lifecycle
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import F, Q

from core.models import BaseModel


class ChatRequestStatus(models.TextChoices):
    """
    Status of a chat request.

    PENDING: Waiting for the receiver to respond
    ACCEPTED: Receiver accepted; a Conversation exists for the pair
    REJECTED: Receiver declined

    ACCEPTED and REJECTED are terminal.
    """

    PENDING = "pending", "Pending"
    ACCEPTED = "accepted", "Accepted"
    REJECTED = "rejected", "Rejected"


# Statuses that hold a pair: a new request is refused while one exists.
LIVE_CHAT_REQUEST_STATUSES = [ChatRequestStatus.PENDING, ChatRequestStatus.ACCEPTED]


class ChatRequest(BaseModel):
    """
    A request from sender to receiver to open a private conversation.

    Lifecycle:
        1. Sender creates request: status=PENDING
        2. Receiver accepts: status=ACCEPTED, Conversation created atomically
           -- or --
           Receiver rejects: status=REJECTED
        No transition leaves ACCEPTED or REJECTED.

    Fields:
        sender: User who sent the request
        receiver: User who may accept or reject it
        status: Current lifecycle status
        user_lower: Lower of (sender, receiver) by id, set on save
        user_higher: Higher of (sender, receiver) by id, set on save

    Constraints:
        - CheckConstraint(sender != receiver)
        - CheckConstraint(user_lower_id < user_higher_id)
        - UniqueConstraint(user_lower, user_higher) WHERE status IN
          (pending, accepted): one live request per unordered pair.
          Rejected requests do not block the pair from trying again.
    """

    TRANSITIONS = {
        ChatRequestStatus.PENDING: (
            ChatRequestStatus.ACCEPTED,
            ChatRequestStatus.REJECTED,
        ),
        ChatRequestStatus.ACCEPTED: (),
        ChatRequestStatus.REJECTED: (),
    }

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_chat_requests",
        help_text="User who sent the request",
    )

    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_chat_requests",
        help_text="User who may accept or reject the request",
    )

    status = models.CharField(
        max_length=10,
        choices=ChatRequestStatus.choices,
        default=ChatRequestStatus.PENDING,
        db_index=True,
        help_text="Current lifecycle status",
    )

    user_lower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",  # No reverse accessor needed
        editable=False,
        help_text="Participant with the lower id (canonical pair)",
    )

    user_higher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",  # No reverse accessor needed
        editable=False,
        help_text="Participant with the higher id (canonical pair)",
    )

    class Meta:
        db_table = "connections_chat_request"
        ordering = ["-created_at"]
        indexes = [
            # Received requests by status (pending inbox, counts)
            models.Index(
                fields=["receiver", "status"],
                name="conn_req_receiver_status_idx",
            ),
            # Sent requests, newest first
            models.Index(
                fields=["sender", "-created_at"],
                name="conn_req_sender_recent_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~Q(sender=F("receiver")),
                name="chat_request_sender_not_receiver",
            ),
            models.CheckConstraint(
                condition=Q(user_lower_id__lt=F("user_higher_id")),
                name="chat_request_pair_canonical_order",
            ),
            models.UniqueConstraint(
                fields=["user_lower", "user_higher"],
                condition=Q(status__in=LIVE_CHAT_REQUEST_STATUSES),
                name="unique_live_chat_request_per_pair",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return f"ChatRequest({self.sender_id} -> {self.receiver_id}) [{self.status}]"

    def save(self, *args, **kwargs):
        """Keep the canonical pair columns in sync with sender/receiver."""
        self.user_lower_id, self.user_higher_id = sorted(
            (self.sender_id, self.receiver_id)
        )
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = {*update_fields, "user_lower", "user_higher"}
        super().save(*args, **kwargs)

    @property
    def is_pending(self) -> bool:
        """Check if the request still awaits a response."""
        return self.status == ChatRequestStatus.PENDING

    def can_transition_to(self, status: str) -> bool:
        """Check if moving from the current status to `status` is allowed."""
        return status in self.TRANSITIONS.get(self.status, ())

    def involves(self, user_id: int) -> bool:
        """Check if the user is the sender or the receiver."""
        return user_id in (self.sender_id, self.receiver_id)


class Conversation(BaseModel):
    """
    The private conversation between exactly two users.

    The pair is stored in canonical order: user1 always has the lower id.
    This gives each unordered pair exactly one row, enforced by a unique
    constraint plus a check constraint on the ordering.

    Messages themselves live outside this app; they reference the
    conversation by id and report activity through
    ConversationService.record_message_activity().

    Fields:
        user1: Participant with the lower id
        user2: Participant with the higher id
        last_message_at: Timestamp of most recent message (for sorting)

    Constraints:
        - UniqueConstraint(user1, user2): One conversation per pair
        - CheckConstraint(user1_id < user2_id): Enforce canonical order
    """

    user1 = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="conversations_as_user1",
        help_text="Participant with the lower id",
    )

    user2 = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="conversations_as_user2",
        help_text="Participant with the higher id",
    )

    last_message_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Timestamp of most recent message (for sorting conversation lists)",
    )

    class Meta:
        db_table = "connections_conversation"
        ordering = ["-created_at"]
        constraints = [
            # Ensure only one conversation exists per user pair
            models.UniqueConstraint(
                fields=["user1", "user2"],
                name="unique_conversation_pair",
            ),
            # Enforce canonical ordering: lower ID first
            models.CheckConstraint(
                condition=Q(user1_id__lt=F("user2_id")),
                name="conversation_user1_less_than_user2",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return f"Conversation({self.user1_id}, {self.user2_id})"
