"""
Domain models representing intents, extracted entities and conversation state.
TurnState is the state object passed between LangGraph nodes within one turn.
"""

from enum import Enum
from typing import Any, Literal, Optional
from typing_extensions import TypedDict
from pydantic import BaseModel, Field


class Intent(str, Enum):
    """Coarse category of user need inferred from a message."""

    PRODUCT_SEARCH = "product_search"
    ORDER_TRACKING = "order_tracking"
    GREETING = "greeting"
    GENERAL_QUERY = "general_query"
    FALLBACK = "fallback"
    USER_STATUS = "user_status"
    MENU_QUERY = "menu_query"
    ORDER_ACTION = "order_action"
    GENERAL_FAQ = "general_faq"


OrderAction = Literal["cancel", "return", "refund"]


class ExtractedEntities(BaseModel):
    """
    Sparse bag of facts found in one message.
    Only fields that were detected are set; everything else stays None.
    """

    product_name: Optional[str] = None
    product_keywords: Optional[list[str]] = None
    color: Optional[str] = None
    size: Optional[str] = None
    category: Optional[str] = None
    order_id: Optional[str] = None
    order_keywords: Optional[list[str]] = None
    order_action: Optional[OrderAction] = None
    user_status: Optional[bool] = None
    user_id: Optional[str] = None
    menu_query: Optional[bool] = None
    general_faq: Optional[bool] = None

    def as_dict(self) -> dict[str, Any]:
        """Returns only the detected entities."""
        return self.model_dump(exclude_none=True)

    @property
    def product_query(self) -> str | None:
        """Search term: product name, else the first product keyword."""
        if self.product_name:
            return self.product_name
        if self.product_keywords:
            return self.product_keywords[0]
        return None


class IntentClassification(BaseModel):
    """Outcome of classifying one message."""

    intent: Intent
    confidence: float = Field(ge=0, le=1)
    entities: ExtractedEntities = Field(default_factory=ExtractedEntities)


class TurnContext(BaseModel):
    """
    Per-session memory of the previous turn.

    Attributes:
        last_message: Last user message handled.
        last_response: Last reply sent back.
        previous_intents: Append-only intent history, one entry per turn.
        turn_count: Number of handled turns.
        last_product_search: Last product query sent to the search.
        last_order_id: Last order id looked up.
    """

    last_message: str = ""
    last_response: str = ""
    previous_intents: list[Intent] = Field(default_factory=list)
    turn_count: int = Field(default=0, ge=0)
    last_product_search: Optional[str] = None
    last_order_id: Optional[str] = None


class ConversationState(BaseModel):
    """
    Conversation state for one session, owned by the state store.
    Callers change it only through ConversationStateStore.update().
    """

    session_id: str
    current_intent: Optional[Intent] = None
    confidence: float = Field(default=1.0, ge=0, le=1)
    entities: dict[str, Any] = Field(default_factory=dict)
    context: TurnContext = Field(default_factory=TurnContext)
    last_active: float = Field(default=0.0, exclude=True)


class TurnState(TypedDict, total=False):
    """
    State flowing through the turn graph.

    Attributes:
        session_id: Session being served.
        message: Raw user message.
        auth: Opaque authentication context, if the caller has one.
        classification: Intent classification of the message.
        use_fallback: True when confidence is below the fallback threshold.
        response: Reply text produced by the handler node.
        context_updates: Extra context fields recorded by the handler
            (last_product_search / last_order_id).
    """

    session_id: str
    message: str
    auth: Any
    classification: IntentClassification
    use_fallback: bool
    response: str
    context_updates: dict[str, Any]
