"""
Shared test fixtures and configuration.
"""

import random
from datetime import datetime

import pytest
from unittest.mock import AsyncMock, Mock
from langchain_core.messages import AIMessage

from shopchat.models.domain import ConversationState, Intent
from shopchat.models.schemas import Order, OrderItem, Product, UserProfile
from shopchat.services.llm_service import LLMService
from shopchat.services.state_service import InMemoryStateStore


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> InMemoryStateStore:
    """In-memory store driven by a fake clock."""
    return InMemoryStateStore(ttl_seconds=3600, max_sessions=100, clock=clock)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for deterministic reply selection."""
    return random.Random(0)


@pytest.fixture
def mock_llm_service():
    """Mock LLM service returning a canned answer."""
    llm_service = Mock(spec=LLMService)
    response = AIMessage(content="Mocked response")
    response.usage_metadata = {
        "input_tokens": 100,
        "output_tokens": 50,
        "total_tokens": 150,
    }
    llm_service.invoke_with_retry = AsyncMock(return_value=response)
    return llm_service


@pytest.fixture
def sample_products() -> list[Product]:
    return [
        Product(
            id="p001",
            name="Dress Batik Modern",
            description="Dress batik modern dengan desain elegan.",
            price=350000,
            category="dress",
            in_stock=True,
        ),
        Product(
            id="p002",
            name="Kemeja Pria Slim Fit",
            description="Kemeja pria slim fit dengan bahan berkualitas tinggi.",
            price=250000,
            category="kemeja",
            in_stock=True,
        ),
        Product(
            id="p003",
            name="Celana Jeans Wanita",
            description="Celana jeans wanita dengan potongan high waist.",
            price=280000,
            category="celana",
            in_stock=True,
        ),
        Product(
            id="p004",
            name="Tas Selempang Kulit",
            description="Tas selempang dari bahan kulit asli.",
            price=450000,
            category="tas",
            in_stock=False,
        ),
    ]


@pytest.fixture
def sample_orders() -> list[Order]:
    return [
        Order(
            id="4521",
            customer_id="cust-123",
            items=[
                OrderItem(
                    product_id="p001",
                    product_name="Dress Batik Modern",
                    quantity=1,
                    price=350000,
                )
            ],
            total_amount=350000,
            status="shipped",
            tracking_number="TRK-12345",
            created_at=datetime(2023, 10, 15),
            updated_at=datetime(2023, 10, 16),
        ),
        Order(
            id="ORD-002",
            customer_id="cust-456",
            items=[
                OrderItem(
                    product_id="p002",
                    product_name="Kemeja Pria Slim Fit",
                    quantity=2,
                    price=250000,
                ),
                OrderItem(
                    product_id="p003",
                    product_name="Celana Jeans Wanita",
                    quantity=1,
                    price=280000,
                ),
            ],
            total_amount=780000,
            status="processing",
            created_at=datetime(2023, 10, 18),
        ),
    ]


@pytest.fixture
def sample_profile() -> UserProfile:
    return UserProfile(
        id="7",
        name="Siti Aminah",
        email="siti@example.com",
        membership_level="Gold",
        membership_points=1250,
        registered_since=datetime(2022, 3, 1),
    )


@pytest.fixture
def order_tracking_state() -> ConversationState:
    """State of a session whose last turn was an order lookup."""
    state = ConversationState(session_id="session-1")
    state.current_intent = Intent.ORDER_TRACKING
    state.confidence = 0.9
    state.context.turn_count = 1
    state.context.last_message = "lacak order #4521"
    state.context.previous_intents = [Intent.ORDER_TRACKING]
    return state
