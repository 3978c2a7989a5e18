"""
Unit tests for the ChatService boundary.
"""

import uuid

import pytest
from unittest.mock import AsyncMock, Mock

from shopchat.models.schemas import AuthContext, ChatRequest, TurnResult
from shopchat.services.chat_service import ChatService, InvalidMessageError


@pytest.fixture
def router():
    router = Mock()
    router.handle_turn = AsyncMock(
        side_effect=lambda session_id, message, auth: TurnResult(
            response_text=f"echo: {message}", session_id=session_id
        )
    )
    return router


class TestSubmit:
    @pytest.mark.asyncio
    async def test_existing_session(self, router):
        # Arrange
        service = ChatService(router)
        auth = AuthContext(token="t")

        # Act
        reply = await service.submit(ChatRequest(message="halo", session_id="s1"), auth)

        # Assert
        assert reply.response == "echo: halo"
        assert reply.session_id == "s1"
        router.handle_turn.assert_awaited_once_with("s1", "halo", auth)

    @pytest.mark.asyncio
    async def test_new_session_id_issued(self, router):
        """Should issue a UUID when the request has no session id."""
        # Arrange
        service = ChatService(router)

        # Act
        reply = await service.submit(ChatRequest(message="halo"))

        # Assert
        assert uuid.UUID(reply.session_id).version == 4

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", [None, "", "   "])
    async def test_blank_message_rejected(self, router, message):
        """Should reject blank messages before any classification."""
        # Arrange
        service = ChatService(router)

        # Act & Assert
        with pytest.raises(InvalidMessageError):
            await service.submit(ChatRequest(message=message, session_id="s1"))
        router.handle_turn.assert_not_called()
