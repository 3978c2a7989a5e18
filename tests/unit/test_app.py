"""
Unit tests for the console chat loop.
"""

import pytest
from unittest.mock import AsyncMock, Mock, patch

from shopchat.app import MESSAGES, run_chatbot
from shopchat.models.schemas import TurnResult


@pytest.fixture
def router():
    router = Mock()
    router.handle_turn = AsyncMock(
        side_effect=lambda session_id, message, auth: TurnResult(
            response_text="Halo dari toko", session_id=session_id
        )
    )
    return router


class TestRunChatbot:
    @pytest.mark.asyncio
    @patch("shopchat.app.configure_logging")
    @patch("shopchat.app.create_dialogue_router")
    async def test_too_long_message_keeps_loop_running(
        self, mock_create_router, mock_configure_logging, router, capsys
    ):
        """Should reject an oversized line and keep serving the next one."""
        # Arrange
        mock_create_router.return_value = router
        lines = ["x" * 2001, "halo", "exit"]

        # Act
        with patch("builtins.input", side_effect=lines):
            await run_chatbot()

        # Assert
        output = capsys.readouterr().out
        assert MESSAGES["message_too_long"] in output
        assert "Halo dari toko" in output
        router.handle_turn.assert_awaited_once()
        assert router.handle_turn.call_args.args[1] == "halo"
