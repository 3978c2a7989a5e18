"""
Intent classification over extracted entities.
Rules are an ordered list evaluated top to bottom; the first match wins.
Also hosts the fallback gate and the canned-reply picker.
"""

import random
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from shopchat.models.domain import (
    ConversationState,
    ExtractedEntities,
    Intent,
    IntentClassification,
)
from shopchat.services.extraction_service import EntityExtractor
from shopchat.utils.prompts import load_prompts
from shopchat.utils.logger import get_logger

logger = get_logger(__name__)
PROMPTS = load_prompts()

GREETING_PATTERNS = (
    "halo", "hello", "hi", "hey", "selamat pagi", "selamat siang", "selamat sore",
    "selamat malam", "good morning", "good afternoon", "good evening",
    "assalamualaikum", "permisi", "excuse me", "hai", "apa kabar", "how are you",
)
GREETING_MAX_LENGTH = 20

CONTEXT_CONTINUATION_CONFIDENCE = 0.5
DEFAULT_CONFIDENCE = 0.3
DEFAULT_FALLBACK_THRESHOLD = 0.4


@dataclass(frozen=True)
class IntentRule:
    """
    One entry of the classification cascade.

    Attributes:
        name: Rule name used in logs.
        matches: Predicate over (lowercase message, entities).
        intent: Intent emitted when the rule fires.
        confidence: Confidence, or a function of the entities.
        keep_entities: False to drop entities from the result.
    """

    name: str
    matches: Callable[[str, ExtractedEntities], bool]
    intent: Intent
    confidence: float | Callable[[ExtractedEntities], float]
    keep_entities: bool = True

    def score(self, entities: ExtractedEntities) -> float:
        if callable(self.confidence):
            return self.confidence(entities)
        return self.confidence


def _is_greeting(text: str, entities: ExtractedEntities) -> bool:  # noqa: ARG001
    return len(text) < GREETING_MAX_LENGTH and any(
        pattern in text for pattern in GREETING_PATTERNS
    )


def _has_product_evidence(text: str, e: ExtractedEntities) -> bool:  # noqa: ARG001
    return bool(e.product_keywords or e.product_name or e.color or e.size or e.category)


def _product_confidence(e: ExtractedEntities) -> float:
    # color/size/category alone is a weaker signal than a product term
    return 0.85 if (e.product_name or e.product_keywords) else 0.7


def _has_order_reference(text: str, e: ExtractedEntities) -> bool:  # noqa: ARG001
    return bool(e.order_keywords or e.order_id)


def _order_confidence(e: ExtractedEntities) -> float:
    return 0.9 if e.order_id else 0.75


INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule("greeting", _is_greeting, Intent.GREETING, 0.9, keep_entities=False),
    IntentRule("product_search", _has_product_evidence, Intent.PRODUCT_SEARCH, _product_confidence),
    IntentRule("order_tracking", _has_order_reference, Intent.ORDER_TRACKING, _order_confidence),
    IntentRule("order_action", lambda _, e: e.order_action is not None, Intent.ORDER_ACTION, 0.85),
    IntentRule("user_status", lambda _, e: bool(e.user_status), Intent.USER_STATUS, 0.9),
    IntentRule("menu_query", lambda _, e: bool(e.menu_query), Intent.MENU_QUERY, 0.9),
    IntentRule("general_faq", lambda _, e: bool(e.general_faq), Intent.GENERAL_FAQ, 0.85),
)


class IntentClassifier:
    """
    Keyword/regex intent classifier with context continuation.
    """

    def __init__(
        self,
        extractor: Optional[EntityExtractor] = None,
        rules: Sequence[IntentRule] = INTENT_RULES,
    ):
        """
        Initialize classifier.

        Args:
            extractor: Entity extractor (defaults to the keyword extractor)
            rules: Ordered rule cascade, first match wins
        """
        self.extractor = extractor or EntityExtractor()
        self.rules = tuple(rules)

    def classify(
        self, message: str, state: Optional[ConversationState] = None
    ) -> IntentClassification:
        """
        Classifies a message, falling back to the previous intent when the
        message carries no signal of its own.

        Args:
            message: Raw user message
            state: Conversation state of the session, if any

        Returns:
            IntentClassification with fresh entities from this message
        """
        text = message.lower()
        entities = self.extractor.extract(message)

        for rule in self.rules:
            if rule.matches(text, entities):
                classification = IntentClassification(
                    intent=rule.intent,
                    confidence=rule.score(entities),
                    entities=entities if rule.keep_entities else ExtractedEntities(),
                )
                self._log(classification, rule.name)
                return classification

        # The previous intent is reused with this turn's (possibly empty) entities
        if state is not None and state.current_intent is not None:
            classification = IntentClassification(
                intent=state.current_intent,
                confidence=CONTEXT_CONTINUATION_CONFIDENCE,
                entities=entities,
            )
            self._log(classification, "context_continuation")
            return classification

        classification = IntentClassification(
            intent=Intent.GENERAL_QUERY,
            confidence=DEFAULT_CONFIDENCE,
            entities=entities,
        )
        self._log(classification, "default")
        return classification

    @staticmethod
    def _log(classification: IntentClassification, rule: str) -> None:
        logger.info(
            "intent_classified",
            rule=rule,
            intent=classification.intent.value,
            confidence=classification.confidence,
            entities=classification.entities.as_dict(),
        )


def should_use_fallback(
    classification: IntentClassification,
    threshold: float = DEFAULT_FALLBACK_THRESHOLD,
) -> bool:
    """True when the classification is too uncertain to act on."""
    return classification.confidence < threshold


class CannedResponder:
    """
    Picks a reply from a fixed pool.
    Uniform random by default; weights and the random source are injectable.
    """

    def __init__(
        self,
        pool: Sequence[str],
        weights: Optional[Sequence[float]] = None,
        rng: Optional[random.Random] = None,
    ):
        if not pool:
            raise ValueError("Reply pool must not be empty")
        if weights is not None and len(weights) != len(pool):
            raise ValueError("weights must have one entry per reply")
        self.pool = list(pool)
        self.weights = list(weights) if weights is not None else None
        self.rng = rng or random.Random()

    def pick(self) -> str:
        """Returns one reply from the pool."""
        if self.weights is None:
            return self.rng.choice(self.pool)
        return self.rng.choices(self.pool, weights=self.weights, k=1)[0]


def create_fallback_responder(rng: Optional[random.Random] = None) -> CannedResponder:
    """Responder over the configured "didn't understand" replies."""
    return CannedResponder(PROMPTS["fallback_responses"], rng=rng)


def create_greeting_responder(rng: Optional[random.Random] = None) -> CannedResponder:
    """Responder over the configured greeting replies."""
    return CannedResponder(PROMPTS["greeting_responses"], rng=rng)


_default_fallback_responder: Optional[CannedResponder] = None


def get_fallback_response() -> str:
    """Returns a random courteous "I didn't understand" reply."""
    global _default_fallback_responder
    if _default_fallback_responder is None:
        _default_fallback_responder = create_fallback_responder()
    return _default_fallback_responder.pick()
