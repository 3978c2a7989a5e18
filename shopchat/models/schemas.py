"""
Boundary and collaborator records.
Request/response models for the chat boundary and the shapes returned
by product, order and membership lookups.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class ChatRequest(BaseModel):
    """
    Inbound chat message.
    A missing or blank message is rejected by ChatService before classification.
    """

    message: Optional[str] = Field(
        default=None,
        description="Free-text user message",
        max_length=2000,
    )
    session_id: Optional[str] = Field(
        default=None,
        description="Existing session id; a new one is issued when absent",
        max_length=128,
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "saya mau cari dress warna merah ukuran m",
                "session_id": "3f6c2a9e-9a41-4b53-9d0f-2f4f1c1f7b10",
            }
        }
    )


class ChatResponse(BaseModel):
    """Reply returned to the caller together with the session id to reuse."""

    response: str = Field(description="Reply text")
    session_id: str = Field(description="Session id for follow-up messages")


class TurnResult(BaseModel):
    """Outcome of one handled turn."""

    response_text: str
    session_id: str


class AuthContext(BaseModel):
    """
    Opaque authentication context resolved by the transport layer.
    The dialogue logic only checks whether it is present and valid.
    """

    token: str = Field(repr=False)
    valid: bool = True


class ProductFilters(BaseModel):
    """Optional narrowing filters passed to product search."""

    category: Optional[str] = None
    color: Optional[str] = None
    size: Optional[str] = None


class Product(BaseModel):
    """Product as returned by a product search collaborator."""

    id: str
    name: str
    description: str = ""
    price: int = Field(ge=0, description="Price in Rupiah")
    category: str = ""
    image_url: Optional[str] = None
    in_stock: bool = True
    color: Optional[str] = None
    size: Optional[str] = None


class OrderItem(BaseModel):
    """Single line of an order."""

    product_id: str
    product_name: str
    quantity: int = Field(ge=1)
    price: int = Field(ge=0)


class Order(BaseModel):
    """Order as returned by an order lookup collaborator."""

    id: str
    customer_id: str = ""
    items: list[OrderItem] = Field(default_factory=list)
    total_amount: int = Field(ge=0)
    status: str
    tracking_number: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class UserProfile(BaseModel):
    """Membership profile returned by the user status collaborator."""

    id: str
    name: str
    email: str = ""
    membership_level: str
    membership_points: int = 0
    registered_since: datetime
