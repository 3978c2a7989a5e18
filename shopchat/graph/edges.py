"""
Graph edge conditions for routing between nodes.
The intent dispatch table lives here together with the entity each
handler needs; a missing entity routes to the general responder.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from shopchat.models.domain import ExtractedEntities, Intent, TurnState
from shopchat.utils.logger import get_logger

logger = get_logger(__name__)

GENERAL_NODE = "general"
FALLBACK_NODE = "fallback"


@dataclass(frozen=True)
class Route:
    """
    Dispatch table entry.

    Attributes:
        node: Handler node name.
        requires: Entity the handler cannot work without, if any.
    """

    node: str
    requires: Optional[Callable[[ExtractedEntities], Any]] = None


INTENT_ROUTES: dict[Intent, Route] = {
    Intent.PRODUCT_SEARCH: Route("product_search", requires=lambda e: e.product_query),
    Intent.ORDER_TRACKING: Route("order_tracking", requires=lambda e: e.order_id),
    Intent.GREETING: Route("greeting"),
    Intent.USER_STATUS: Route("user_status"),
}


def route_after_classify(state: TurnState) -> str:
    """
    Picks the handler node for the classified intent.

    Args:
        state: Current turn state

    Returns:
        "fallback", a handler node from INTENT_ROUTES, or "general"
    """
    classification = state.get("classification")
    if classification is None:
        logger.error(
            "invalid_state_in_routing",
            error="State must contain a classification",
            fallback=GENERAL_NODE,
        )
        return GENERAL_NODE

    if state.get("use_fallback"):
        logger.info("routing_to_fallback", confidence=classification.confidence)
        return FALLBACK_NODE

    route = INTENT_ROUTES.get(classification.intent)
    if route is None:
        return GENERAL_NODE

    if route.requires is not None and not route.requires(classification.entities):
        logger.info(
            "required_entity_missing",
            intent=classification.intent.value,
            fallback=GENERAL_NODE,
        )
        return GENERAL_NODE

    return route.node
