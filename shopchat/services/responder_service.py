"""
General-purpose responder backed by an LLM.
Answers anything the keyword pipeline cannot route to a concrete action.
"""

from typing import Optional

from langchain_core.messages import HumanMessage, SystemMessage

from shopchat.models.domain import ConversationState
from shopchat.services.llm_service import LLMError, LLMService
from shopchat.utils.prompts import load_prompts
from shopchat.utils.logger import get_logger

logger = get_logger(__name__)
PROMPTS = load_prompts()


class ResponderError(Exception):
    """Raised when the general responder cannot produce an answer."""


def build_prior_turn_summary(state: ConversationState) -> Optional[str]:
    """
    Summarizes the previous exchange of a session for the LLM.

    Args:
        state: Conversation state before this turn's context update

    Returns:
        Short summary, or None on the first turn
    """
    if state.context.turn_count <= 0:
        return None
    template = PROMPTS["general_responder"]["prior_turn_template"]
    return template.format(
        last_message=state.context.last_message,
        last_response=state.context.last_response,
    )


class GeneralResponder:
    """
    Open-domain answers for general queries and for intents that could
    not be served by a concrete action.
    """

    def __init__(self, llm_service: LLMService):
        """
        Initialize responder.

        Args:
            llm_service: LLM service used for completions
        """
        self.llm_service = llm_service

    async def respond(
        self, message: str, prior_turn_summary: Optional[str] = None
    ) -> str:
        """
        Generates an answer to the user's message.

        Args:
            message: User message
            prior_turn_summary: Summary of the previous exchange, if any

        Returns:
            Answer text (may be empty if the model returns nothing)

        Raises:
            ResponderError: If the LLM call fails (not recoverable locally)
        """
        system_message = PROMPTS["general_responder"]["system_message"]
        if prior_turn_summary:
            system_message = f"{system_message}\n{prior_turn_summary}"

        prompt = [SystemMessage(content=system_message), HumanMessage(content=message)]

        logger.info("general_response_started", has_context=bool(prior_turn_summary))
        try:
            response = await self.llm_service.invoke_with_retry(prompt)
        except LLMError as e:
            logger.error("general_response_failed", error=str(e))
            raise ResponderError(f"General responder failed: {e}") from e

        # Joins text parts when a provider returns a list of content blocks;
        # `text` is a method in older langchain-core releases
        text = response.text
        content = str(text if isinstance(text, str) else text())
        logger.info("general_response_completed", length=len(content))
        return content
