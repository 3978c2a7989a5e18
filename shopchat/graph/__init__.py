"""
Graph package for the LangGraph dialogue turn workflow.
"""

from shopchat.graph.builder import build_graph
from shopchat.graph.nodes import GraphNodes
from shopchat.graph.edges import INTENT_ROUTES, Route, route_after_classify

__all__ = [
    "build_graph",
    "GraphNodes",
    "INTENT_ROUTES",
    "Route",
    "route_after_classify",
]
