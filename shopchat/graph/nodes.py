"""
Graph nodes implementing one dialogue turn.
Each node is thin and delegates business logic to services.
"""

from shopchat.models.domain import TurnState
from shopchat.models.schemas import ProductFilters
from shopchat.services.action_service import ActionService, is_authenticated
from shopchat.services.intent_service import (
    CannedResponder,
    IntentClassifier,
    should_use_fallback,
)
from shopchat.services.responder_service import GeneralResponder, build_prior_turn_summary
from shopchat.services.state_service import ConversationStateStore
from shopchat.utils.prompts import load_prompts
from shopchat.utils.logger import get_logger

logger = get_logger(__name__)
PROMPTS = load_prompts()


class GraphNodes:
    """
    Container for all graph node functions.
    Conversation state is read and written only through the store.
    """

    def __init__(
        self,
        store: ConversationStateStore,
        classifier: IntentClassifier,
        action_service: ActionService,
        responder: GeneralResponder,
        greeting_responder: CannedResponder,
        fallback_responder: CannedResponder,
        fallback_threshold: float = 0.4,
    ):
        """
        Initialize graph nodes with required services.

        Args:
            store: Conversation state store
            classifier: Intent classifier
            action_service: Product/order/membership lookups
            responder: LLM-backed general responder
            greeting_responder: Picker over greeting replies
            fallback_responder: Picker over "didn't understand" replies
            fallback_threshold: Confidence below which the fallback reply is used
        """
        self.store = store
        self.classifier = classifier
        self.action_service = action_service
        self.responder = responder
        self.greeting_responder = greeting_responder
        self.fallback_responder = fallback_responder
        self.fallback_threshold = fallback_threshold

    async def classify_node(self, state: TurnState) -> dict:
        """
        Classifies the message and records intent, confidence and entities
        before dispatch so later nodes see this turn's classification.
        """
        logger.info("node_started", node="classify")
        session_id = state["session_id"]

        conversation = self.store.get_or_create(session_id)
        classification = self.classifier.classify(state["message"], conversation)

        self.store.update(
            session_id,
            {
                "current_intent": classification.intent,
                "confidence": classification.confidence,
                "entities": classification.entities,
            },
        )

        use_fallback = should_use_fallback(classification, self.fallback_threshold)
        return {"classification": classification, "use_fallback": use_fallback}

    def fallback_node(self, state: TurnState) -> dict:  # noqa: ARG002
        """Replies with a courteous "didn't understand" message."""
        logger.info("node_started", node="fallback", action="low_confidence")
        return {"response": self.fallback_responder.pick()}

    def greeting_node(self, state: TurnState) -> dict:  # noqa: ARG002
        """Replies with a canned greeting."""
        logger.info("node_started", node="greeting")
        return {"response": self.greeting_responder.pick()}

    async def product_search_node(self, state: TurnState) -> dict:
        """Searches products for the extracted query term and filters."""
        logger.info("node_started", node="product_search")
        entities = state["classification"].entities
        query = entities.product_query

        filters = ProductFilters(
            category=entities.category, color=entities.color, size=entities.size
        )
        response = await self.action_service.search_products(
            query, filters, auth=state.get("auth")
        )
        return {
            "response": response,
            "context_updates": {"last_product_search": query},
        }

    async def order_tracking_node(self, state: TurnState) -> dict:
        """Looks up the extracted order id."""
        logger.info("node_started", node="order_tracking")
        order_id = state["classification"].entities.order_id

        response = await self.action_service.lookup_order(order_id, auth=state.get("auth"))
        return {"response": response, "context_updates": {"last_order_id": order_id}}

    async def user_status_node(self, state: TurnState) -> dict:
        """
        Shows membership status. Needs both a user id and a valid auth
        context; otherwise asks the user to log in.
        """
        logger.info("node_started", node="user_status")
        user_id = state["classification"].entities.user_id
        auth = state.get("auth")

        if not user_id or not is_authenticated(auth):
            logger.info(
                "user_status_login_required",
                has_user_id=bool(user_id),
                authenticated=is_authenticated(auth),
            )
            return {"response": PROMPTS["messages"]["login_required"]}

        response = await self.action_service.lookup_user_status(user_id, auth)
        return {"response": response}

    async def general_node(self, state: TurnState) -> dict:
        """
        Answers with the LLM responder, passing the previous exchange
        as context when there is one. Failures propagate.
        """
        logger.info("node_started", node="general")
        conversation = self.store.get_or_create(state["session_id"])
        summary = build_prior_turn_summary(conversation)

        response = await self.responder.respond(state["message"], summary)
        return {"response": response}

    async def end_of_turn_node(self, state: TurnState) -> dict:
        """Records the exchange and increments the turn counter once."""
        logger.info("node_started", node="end_of_turn")
        session_id = state["session_id"]
        context = self.store.get_or_create(session_id).context

        updated = self.store.update(
            session_id,
            {
                "context": {
                    "last_message": state["message"],
                    "last_response": state["response"],
                    "turn_count": context.turn_count + 1,
                    "previous_intents": [
                        *context.previous_intents,
                        state["classification"].intent,
                    ],
                    **state.get("context_updates", {}),
                }
            },
        )
        logger.info("turn_completed", turn_count=updated.context.turn_count)
        return {"response": state["response"]}
