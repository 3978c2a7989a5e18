"""
Conversation state store keyed by session id.
Provides get-or-create, deep-merge update, clear and listing, plus a
per-session lock so a session's read-modify-write cycle runs serially.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from shopchat.models.domain import ConversationState, ExtractedEntities, TurnContext
from shopchat.utils.logger import get_logger

logger = get_logger(__name__)

MERGEABLE_FIELDS = ("entities", "context")
SCALAR_FIELDS = ("current_intent", "confidence")


class StateStoreError(Exception):
    """Raised when a state update cannot be applied (programming error)."""


def merge_state(state: ConversationState, partial: Mapping[str, Any]) -> ConversationState:
    """
    Builds the deep-merged version of a state without touching the original.
    Scalars overwrite; `entities` and `context` merge key by key.

    Args:
        state: Current state
        partial: Fields to change

    Returns:
        New validated ConversationState

    Raises:
        StateStoreError: On unknown fields, a foreign session id or invalid values
    """
    unknown = set(partial) - set(MERGEABLE_FIELDS) - set(SCALAR_FIELDS) - {"session_id"}
    if unknown:
        raise StateStoreError(f"Unknown state fields: {sorted(unknown)}")
    if partial.get("session_id", state.session_id) != state.session_id:
        raise StateStoreError("session_id of a conversation state is immutable")

    merged = state.model_dump()
    for field in SCALAR_FIELDS:
        if field in partial:
            merged[field] = partial[field]

    entities = partial.get("entities")
    if isinstance(entities, ExtractedEntities):
        entities = entities.as_dict()
    if entities:
        merged["entities"] = {**merged["entities"], **entities}

    context = partial.get("context")
    if isinstance(context, TurnContext):
        context = context.model_dump(exclude_unset=True)
    if context:
        merged["context"] = {**merged["context"], **context}

    try:
        return ConversationState.model_validate(merged)
    except ValidationError as e:
        raise StateStoreError(f"Invalid state update: {e}") from e


class ConversationStateStore(ABC):
    """
    Contract for conversation state storage.
    A persistent backend must keep the same merge semantics.
    """

    @abstractmethod
    def get_or_create(self, session_id: str) -> ConversationState:
        """Returns the session's state, creating a fresh one on first use."""

    @abstractmethod
    def update(self, session_id: str, partial: Mapping[str, Any]) -> ConversationState:
        """Deep-merges partial into the session's state and returns it."""

    @abstractmethod
    def clear(self, session_id: str) -> None:
        """Removes the session's state entirely."""

    @abstractmethod
    def list_session_ids(self) -> list[str]:
        """Snapshot of the tracked session ids."""

    @abstractmethod
    def lock(self, session_id: str) -> asyncio.Lock:
        """Lock serializing turns of one session."""


class InMemoryStateStore(ConversationStateStore):
    """
    Process-local store with idle eviction and a session cap.
    Sessions are kept in least-recently-active order.
    """

    def __init__(
        self,
        ttl_seconds: float | None = 3600,
        max_sessions: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the store.

        Args:
            ttl_seconds: Idle time after which a session is evicted (None disables)
            max_sessions: Maximum tracked sessions (None disables)
            clock: Monotonic time source
        """
        self.ttl_seconds = ttl_seconds
        self.max_sessions = max_sessions
        self.clock = clock
        self._states: OrderedDict[str, ConversationState] = OrderedDict()
        self._locks: dict[str, asyncio.Lock] = {}

    def get_or_create(self, session_id: str) -> ConversationState:
        self._evict_expired()
        state = self._states.get(session_id)
        # The caller's own turn usually holds the lock, so check expiry here too
        if state is not None and self._is_expired(state):
            self._evict(session_id, reason="idle")
            state = None
        if state is None:
            state = ConversationState(session_id=session_id)
            self._states[session_id] = state
            logger.info("session_created", session=session_id)
            self._enforce_capacity(keep=session_id)
        self._touch(state)
        return state

    def update(self, session_id: str, partial: Mapping[str, Any]) -> ConversationState:
        state = self.get_or_create(session_id)
        merged = merge_state(state, partial)
        # Copy onto the stored instance so holders of it see the change
        for field in (*SCALAR_FIELDS, *MERGEABLE_FIELDS):
            setattr(state, field, getattr(merged, field))
        return state

    def clear(self, session_id: str) -> None:
        self._states.pop(session_id, None)
        self._drop_lock(session_id)
        logger.info("session_cleared", session=session_id)

    def list_session_ids(self) -> list[str]:
        return list(self._states)

    def lock(self, session_id: str) -> asyncio.Lock:
        if session_id not in self._locks:
            self._locks[session_id] = asyncio.Lock()
        return self._locks[session_id]

    def _touch(self, state: ConversationState) -> None:
        state.last_active = self.clock()
        self._states.move_to_end(state.session_id)

    def _is_busy(self, session_id: str) -> bool:
        lock = self._locks.get(session_id)
        return lock is not None and lock.locked()

    def _drop_lock(self, session_id: str) -> None:
        # A held lock stays registered until released, or a second turn could
        # obtain a fresh lock and run alongside the one in flight
        if not self._is_busy(session_id):
            self._locks.pop(session_id, None)

    def _prune_locks(self) -> None:
        orphaned = [
            session_id
            for session_id, lock in self._locks.items()
            if session_id not in self._states and not lock.locked()
        ]
        for session_id in orphaned:
            del self._locks[session_id]

    def _evict(self, session_id: str, reason: str) -> None:
        self._states.pop(session_id, None)
        self._drop_lock(session_id)
        logger.info("session_evicted", session=session_id, reason=reason)

    def _is_expired(self, state: ConversationState) -> bool:
        if self.ttl_seconds is None:
            return False
        return state.last_active < self.clock() - self.ttl_seconds

    def _evict_expired(self) -> None:
        self._prune_locks()
        if self.ttl_seconds is None:
            return
        expired = [
            session_id
            for session_id, state in self._states.items()
            if self._is_expired(state) and not self._is_busy(session_id)
        ]
        for session_id in expired:
            self._evict(session_id, reason="idle")

    def _enforce_capacity(self, keep: str) -> None:
        if self.max_sessions is None:
            return
        for session_id in list(self._states):
            if len(self._states) <= self.max_sessions:
                break
            if session_id == keep or self._is_busy(session_id):
                continue
            self._evict(session_id, reason="capacity")
