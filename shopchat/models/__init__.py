"""
Models package exports for domain and schemas.
"""

from shopchat.models.domain import (
    Intent,
    ExtractedEntities,
    IntentClassification,
    TurnContext,
    ConversationState,
    TurnState,
)
from shopchat.models.schemas import (
    ChatRequest,
    ChatResponse,
    TurnResult,
    AuthContext,
    ProductFilters,
    Product,
    OrderItem,
    Order,
    UserProfile,
)

__all__ = [
    "Intent",
    "ExtractedEntities",
    "IntentClassification",
    "TurnContext",
    "ConversationState",
    "TurnState",
    "ChatRequest",
    "ChatResponse",
    "TurnResult",
    "AuthContext",
    "ProductFilters",
    "Product",
    "OrderItem",
    "Order",
    "UserProfile",
]
