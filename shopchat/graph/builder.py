"""
Graph builder for the dialogue turn workflow.
Assembles nodes and edges into an executable LangGraph.
"""

from langgraph.graph import StateGraph, END

from shopchat.models.domain import TurnState
from shopchat.graph.nodes import GraphNodes
from shopchat.graph.edges import (
    FALLBACK_NODE,
    GENERAL_NODE,
    INTENT_ROUTES,
    route_after_classify,
)
from shopchat.utils.logger import get_logger

logger = get_logger(__name__)


def build_graph(nodes: GraphNodes):
    """
    Builds and compiles the turn workflow:
    classify -> (fallback | handler | general) -> end_of_turn.

    Args:
        nodes: Node container wired with services

    Returns:
        Compiled graph ready for execution
    """
    logger.info("graph_workflow_building")
    workflow = StateGraph(TurnState)

    handlers = {
        FALLBACK_NODE: nodes.fallback_node,
        GENERAL_NODE: nodes.general_node,
        "product_search": nodes.product_search_node,
        "order_tracking": nodes.order_tracking_node,
        "greeting": nodes.greeting_node,
        "user_status": nodes.user_status_node,
    }
    missing = {route.node for route in INTENT_ROUTES.values()} - set(handlers)
    if missing:
        raise ValueError(f"No handler node for routes: {sorted(missing)}")

    workflow.add_node("classify", nodes.classify_node)
    workflow.add_node("end_of_turn", nodes.end_of_turn_node)
    for name, handler in handlers.items():
        workflow.add_node(name, handler)
        workflow.add_edge(name, "end_of_turn")

    workflow.set_entry_point("classify")
    workflow.add_conditional_edges(
        "classify",
        route_after_classify,
        {name: name for name in handlers},
    )
    workflow.add_edge("end_of_turn", END)

    logger.info("graph_compiling", handlers=sorted(handlers))
    return workflow.compile()
