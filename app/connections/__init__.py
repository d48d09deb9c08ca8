"""
Connections app: chat requests and one-to-one conversations.

This app handles:
- Chat requests between two users (send, accept, reject)
- The single private conversation a pair gains once a request is accepted

Related apps:
    - accounts: User lookups and ACTIVE-status checks
    - groups: Group conversations and memberships (separate lifecycle)

Usage:
    from connections.services import ChatRequestService

    chat_request = ChatRequestService.create_request(sender_id=5, receiver_id=3)
    ChatRequestService.accept_request(chat_request.id, acting_user_id=3)
"""
