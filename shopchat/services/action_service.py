"""
Action service wrapping product, order and membership lookups.
Each lookup is bounded by a timeout; product and order lookups fall back to a
local collaborator when the primary one fails or comes back empty.
"""

import asyncio
from typing import Awaitable, Optional, Protocol, TypeVar

from shopchat.models.schemas import (
    AuthContext,
    Order,
    Product,
    ProductFilters,
    UserProfile,
)
from shopchat.services.formatting import (
    format_order_response,
    format_product_response,
    format_user_status_response,
)
from shopchat.utils.prompts import load_prompts
from shopchat.utils.logger import get_logger

logger = get_logger(__name__)
MESSAGES = load_prompts()["messages"]

T = TypeVar("T")


class ActionError(Exception):
    """Base exception for failed lookups (network, provider, parsing)."""


class ActionTimeoutError(ActionError):
    """Raised when a lookup exceeds its timeout."""


class EmptyResultError(ActionError):
    """Raised by a collaborator that found nothing."""


class UnauthorizedError(ActionError):
    """Raised when a lookup needs a valid authentication context."""


class ProductSearch(Protocol):
    async def search(
        self,
        query: str,
        filters: ProductFilters,
        page: int = 1,
        limit: int = 10,
        auth: Optional[AuthContext] = None,
    ) -> list[Product]: ...


class OrderLookup(Protocol):
    async def get_order(
        self, order_id: str, auth: Optional[AuthContext] = None
    ) -> Optional[Order]: ...


class UserStatusLookup(Protocol):
    async def get_status(
        self, user_id: str, auth: AuthContext
    ) -> Optional[UserProfile]: ...


def is_authenticated(auth: Optional[AuthContext]) -> bool:
    """True when an authentication context is present and valid."""
    return auth is not None and auth.valid


class ActionService:
    """
    Runs lookups against external collaborators with local fallbacks
    and turns every outcome into reply text.
    """

    def __init__(
        self,
        local_product_search: ProductSearch,
        local_order_lookup: OrderLookup,
        user_status_lookup: Optional[UserStatusLookup] = None,
        product_search: Optional[ProductSearch] = None,
        order_lookup: Optional[OrderLookup] = None,
        timeout: float = 10.0,
        search_limit: int = 5,
    ):
        """
        Initialize action service.

        Args:
            local_product_search: Secondary product search used on failure/empty
            local_order_lookup: Secondary order lookup used on failure/not found
            user_status_lookup: Membership lookup (no local substitute)
            product_search: Primary product search, skipped when None
            order_lookup: Primary order lookup, skipped when None
            timeout: Timeout in seconds for each lookup
            search_limit: Products requested per search
        """
        self.local_product_search = local_product_search
        self.local_order_lookup = local_order_lookup
        self.user_status_lookup = user_status_lookup
        self.product_search = product_search
        self.order_lookup = order_lookup
        self.timeout = timeout
        self.search_limit = search_limit

    async def _bounded(self, call: Awaitable[T], action: str) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ActionTimeoutError(
                f"{action} exceeded timeout of {self.timeout}s"
            ) from e

    async def search_products(
        self,
        query: str,
        filters: ProductFilters,
        auth: Optional[AuthContext] = None,
    ) -> str:
        """
        Searches products, trying the primary search before the local one.

        Args:
            query: Search term
            filters: Category/color/size filters
            auth: Authentication context forwarded to the collaborators

        Returns:
            Formatted reply (results, not-found or unavailable message)
        """
        logger.info("product_search_started", query=query, filters=filters.model_dump(exclude_none=True))

        if self.product_search is not None:
            try:
                products = await self._bounded(
                    self.product_search.search(
                        query, filters, page=1, limit=self.search_limit, auth=auth
                    ),
                    "product_search",
                )
                if products:
                    logger.info("product_search_completed", source="primary", results=len(products))
                    return format_product_response(products)
                logger.warning("product_search_empty", source="primary", action="using_local_search")
            except Exception as e:
                logger.warning(
                    "product_search_failed",
                    source="primary",
                    error=str(e),
                    action="using_local_search",
                )

        try:
            products = await self._bounded(
                self.local_product_search.search(
                    query, filters, page=1, limit=self.search_limit, auth=auth
                ),
                "local_product_search",
            )
        except EmptyResultError:
            products = []
        except Exception as e:
            logger.error("product_search_failed", exc_info=True, source="local", error=str(e))
            return MESSAGES["product_search_unavailable"]

        logger.info("product_search_completed", source="local", results=len(products))
        return format_product_response(products)

    async def lookup_order(
        self, order_id: str, auth: Optional[AuthContext] = None
    ) -> str:
        """
        Looks up an order, trying the primary lookup before the local one.

        Args:
            order_id: Order reference extracted from the message
            auth: Authentication context forwarded to the collaborators

        Returns:
            Formatted reply (order details, not-found or unavailable message)
        """
        logger.info("order_lookup_started", order_id=order_id)

        if self.order_lookup is not None:
            try:
                order = await self._bounded(
                    self.order_lookup.get_order(order_id, auth=auth), "order_lookup"
                )
                if order is not None:
                    logger.info("order_lookup_completed", source="primary", status=order.status)
                    return format_order_response(order)
                logger.warning("order_lookup_empty", source="primary", action="using_local_lookup")
            except Exception as e:
                logger.warning(
                    "order_lookup_failed",
                    source="primary",
                    error=str(e),
                    action="using_local_lookup",
                )

        try:
            order = await self._bounded(
                self.local_order_lookup.get_order(order_id, auth=auth),
                "local_order_lookup",
            )
        except Exception as e:
            logger.error("order_lookup_failed", exc_info=True, source="local", error=str(e))
            return MESSAGES["order_lookup_unavailable"]

        logger.info("order_lookup_completed", source="local", found=order is not None)
        return format_order_response(order)

    async def lookup_user_status(
        self, user_id: str, auth: Optional[AuthContext]
    ) -> str:
        """
        Fetches a membership profile. Never called without a valid auth
        context; failures give a fixed apology with no mock substitute.

        Args:
            user_id: Member id extracted from the message
            auth: Authentication context

        Returns:
            Formatted membership reply or the apology message

        Raises:
            UnauthorizedError: If called without a valid auth context
        """
        if not is_authenticated(auth):
            raise UnauthorizedError("User status lookup requires authentication")

        if self.user_status_lookup is None:
            logger.warning("user_status_lookup_not_configured", user_id=user_id)
            return MESSAGES["user_status_unavailable"]

        logger.info("user_status_lookup_started", user_id=user_id)
        try:
            profile = await self._bounded(
                self.user_status_lookup.get_status(user_id, auth), "user_status_lookup"
            )
        except Exception as e:
            logger.error("user_status_lookup_failed", exc_info=True, user_id=user_id, error=str(e))
            return MESSAGES["user_status_unavailable"]

        logger.info("user_status_lookup_completed", user_id=user_id, found=profile is not None)
        return format_user_status_response(profile)
