"""
In-memory catalog used as the local product search and order lookup.
Holds whatever products/orders it is given; nothing is bundled.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from shopchat.models.schemas import AuthContext, Order, Product, ProductFilters
from shopchat.utils.logger import get_logger

logger = get_logger(__name__)


class CatalogError(Exception):
    """Raised when a catalog file cannot be loaded."""


class InMemoryProductSearch:
    """
    Keyword search over name, description and category (case-insensitive).
    Filters are accepted for interface compatibility and ignored.
    """

    def __init__(self, products: list[Product]):
        self.products = list(products)

    async def search(
        self,
        query: str,
        filters: ProductFilters,  # noqa: ARG002
        page: int = 1,
        limit: int = 10,
        auth: Optional[AuthContext] = None,  # noqa: ARG002
    ) -> list[Product]:
        if not query:
            return []

        keyword = query.lower()
        matches = [
            product
            for product in self.products
            if keyword in product.name.lower()
            or keyword in product.description.lower()
            or keyword in product.category.lower()
        ]
        start = (page - 1) * limit
        return matches[start:start + limit]


class InMemoryOrderLookup:
    """Order lookup by id, case-insensitive."""

    def __init__(self, orders: list[Order]):
        self.orders = {order.id.lower(): order for order in orders}

    async def get_order(
        self, order_id: str, auth: Optional[AuthContext] = None  # noqa: ARG002
    ) -> Optional[Order]:
        return self.orders.get(order_id.lower())


def load_catalog(path: str | Path | None) -> tuple[list[Product], list[Order]]:
    """
    Loads products and orders from a YAML file with `products` and `orders` lists.

    Args:
        path: Catalog file, or None for an empty catalog

    Returns:
        Tuple of (products, orders)

    Raises:
        CatalogError: If the file is missing or malformed
    """
    if path is None:
        return [], []

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        products = [Product.model_validate(item) for item in data.get("products", [])]
        orders = [Order.model_validate(item) for item in data.get("orders", [])]
    except (OSError, yaml.YAMLError, ValidationError) as e:
        raise CatalogError(f"Could not load catalog {path}: {e}") from e

    logger.info("catalog_loaded", path=str(path), products=len(products), orders=len(orders))
    return products, orders
