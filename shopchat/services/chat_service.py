"""
Chat boundary consumed by a transport layer (HTTP, console, ...).
Validates the request and issues session ids.
"""

import uuid
from typing import Optional

from shopchat.models.schemas import AuthContext, ChatRequest, ChatResponse
from shopchat.services.dialogue_service import DialogueRouter
from shopchat.utils.logger import get_logger

logger = get_logger(__name__)


class InvalidMessageError(ValueError):
    """Raised for a missing or blank message (client error, not retried)."""


class ChatService:
    """Single operation boundary: submit a message, get a reply."""

    def __init__(self, router: DialogueRouter):
        self.router = router

    async def submit(
        self, request: ChatRequest, auth: Optional[AuthContext] = None
    ) -> ChatResponse:
        """
        Handles a chat request.

        Args:
            request: Message and optional session id
            auth: Authentication context resolved by the transport layer

        Returns:
            ChatResponse with reply and the session id to reuse

        Raises:
            InvalidMessageError: If the message is missing or blank
            ResponderError: If the general responder fails (server error)
        """
        if not request.message or not request.message.strip():
            logger.warning("chat_request_rejected", reason="empty_message")
            raise InvalidMessageError("Message is required")

        session_id = request.session_id or str(uuid.uuid4())
        result = await self.router.handle_turn(session_id, request.message, auth)
        return ChatResponse(response=result.response_text, session_id=result.session_id)
