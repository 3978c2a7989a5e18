"""
Dialogue router: runs one turn through the graph under the session lock.
Also wires the default router from configuration.
"""

import random
from typing import Optional

from shopchat import config
from shopchat.graph.builder import build_graph
from shopchat.graph.nodes import GraphNodes
from shopchat.models.schemas import AuthContext, TurnResult
from shopchat.services.action_service import (
    ActionService,
    OrderLookup,
    ProductSearch,
    UserStatusLookup,
)
from shopchat.services.intent_service import (
    IntentClassifier,
    create_fallback_responder,
    create_greeting_responder,
)
from shopchat.services.llm_service import LLMService, create_llm
from shopchat.services.responder_service import GeneralResponder
from shopchat.services.state_service import ConversationStateStore, InMemoryStateStore
from shopchat.utils.logger import get_logger, set_session_id

logger = get_logger(__name__)


class DialogueRouter:
    """
    Entry point for a turn: classify, dispatch, record, reply.
    Turns of the same session are serialized; different sessions run freely.
    """

    def __init__(self, graph, store: ConversationStateStore):
        """
        Initialize router.

        Args:
            graph: Compiled turn graph (see build_graph)
            store: Store shared with the graph nodes
        """
        self.graph = graph
        self.store = store

    async def handle_turn(
        self,
        session_id: str,
        message: str,
        auth: Optional[AuthContext] = None,
    ) -> TurnResult:
        """
        Handles one user message for a session.

        Args:
            session_id: Session identifier
            message: User message (validated by the caller)
            auth: Authentication context, if the user is logged in

        Returns:
            TurnResult with reply text and session id

        Raises:
            ResponderError: If the general responder fails
        """
        set_session_id(session_id)
        logger.info("turn_started", message_length=len(message))

        async with self.store.lock(session_id):
            result = await self.graph.ainvoke(
                {"session_id": session_id, "message": message, "auth": auth}
            )

        return TurnResult(response_text=result["response"], session_id=session_id)


def create_dialogue_router(
    local_product_search: ProductSearch,
    local_order_lookup: OrderLookup,
    user_status_lookup: Optional[UserStatusLookup] = None,
    product_search: Optional[ProductSearch] = None,
    order_lookup: Optional[OrderLookup] = None,
    llm_service: Optional[LLMService] = None,
    store: Optional[ConversationStateStore] = None,
    rng: Optional[random.Random] = None,
) -> DialogueRouter:
    """
    Builds a router from configuration and the given collaborators.

    Args:
        local_product_search: Local product search used as fallback
        local_order_lookup: Local order lookup used as fallback
        user_status_lookup: Membership lookup
        product_search: Primary product search
        order_lookup: Primary order lookup
        llm_service: LLM service (created from settings when None)
        store: State store (in-memory from settings when None)
        rng: Random source for greeting/fallback replies

    Returns:
        Ready-to-use DialogueRouter
    """
    logger.info("router_components_initializing")

    if llm_service is None:
        llm = create_llm(
            model_name=config.RESPONDER_MODEL,
            api_key=config.get_api_key(config.RESPONDER_MODEL),
            temperature=config.RESPONDER_TEMPERATURE,
        )
        llm_service = LLMService(
            model=llm,
            max_retries=config.LLM_MAX_RETRIES,
            timeout=config.LLM_TIMEOUT,
            rate_limit=config.LLM_RATE_LIMIT,
        )

    if store is None:
        store = InMemoryStateStore(
            ttl_seconds=config.SESSION_TTL_SECONDS,
            max_sessions=config.MAX_SESSIONS,
        )

    action_service = ActionService(
        local_product_search=local_product_search,
        local_order_lookup=local_order_lookup,
        user_status_lookup=user_status_lookup,
        product_search=product_search,
        order_lookup=order_lookup,
        timeout=config.ACTION_TIMEOUT,
        search_limit=config.PRODUCT_SEARCH_LIMIT,
    )

    nodes = GraphNodes(
        store=store,
        classifier=IntentClassifier(),
        action_service=action_service,
        responder=GeneralResponder(llm_service),
        greeting_responder=create_greeting_responder(rng),
        fallback_responder=create_fallback_responder(rng),
        fallback_threshold=config.FALLBACK_THRESHOLD,
    )
    return DialogueRouter(build_graph(nodes), store)
