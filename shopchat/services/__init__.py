"""
Services package exports for business logic layer.
DialogueRouter and ChatService are imported from their modules directly
since they depend on the graph package.
"""

from shopchat.services.extraction_service import EntityExtractor, extract_entities
from shopchat.services.intent_service import (
    IntentClassifier,
    CannedResponder,
    should_use_fallback,
    get_fallback_response,
)
from shopchat.services.state_service import (
    ConversationStateStore,
    InMemoryStateStore,
    StateStoreError,
)
from shopchat.services.action_service import (
    ActionService,
    ActionError,
    ActionTimeoutError,
    EmptyResultError,
    UnauthorizedError,
)
from shopchat.services.llm_service import LLMService, create_llm, LLMError, LLMTimeoutError
from shopchat.services.responder_service import GeneralResponder, ResponderError

__all__ = [
    "EntityExtractor",
    "extract_entities",
    "IntentClassifier",
    "CannedResponder",
    "should_use_fallback",
    "get_fallback_response",
    "ConversationStateStore",
    "InMemoryStateStore",
    "StateStoreError",
    "ActionService",
    "ActionError",
    "ActionTimeoutError",
    "EmptyResultError",
    "UnauthorizedError",
    "LLMService",
    "create_llm",
    "LLMError",
    "LLMTimeoutError",
    "GeneralResponder",
    "ResponderError",
]
