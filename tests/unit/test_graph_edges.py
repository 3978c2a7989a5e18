"""
Unit tests for turn routing after classification.
"""

from shopchat.graph.edges import INTENT_ROUTES, route_after_classify
from shopchat.models.domain import ExtractedEntities, Intent, IntentClassification


def _state(intent, confidence=0.9, use_fallback=False, **entities):
    return {
        "session_id": "s1",
        "message": "pesan",
        "classification": IntentClassification(
            intent=intent,
            confidence=confidence,
            entities=ExtractedEntities(**entities),
        ),
        "use_fallback": use_fallback,
    }


class TestRouteAfterClassify:
    def test_fallback_wins(self):
        """Should route to fallback regardless of intent."""
        state = _state(Intent.ORDER_TRACKING, 0.3, use_fallback=True, order_id="1")
        assert route_after_classify(state) == "fallback"

    def test_product_search_with_query(self):
        state = _state(Intent.PRODUCT_SEARCH, product_name="dress")
        assert route_after_classify(state) == "product_search"

    def test_product_search_uses_keyword_when_no_name(self):
        state = _state(Intent.PRODUCT_SEARCH, product_keywords=["tas"])
        assert route_after_classify(state) == "product_search"

    def test_product_search_without_query_goes_general(self):
        state = _state(Intent.PRODUCT_SEARCH, 0.7, color="merah")
        assert route_after_classify(state) == "general"

    def test_order_tracking_needs_order_id(self):
        assert route_after_classify(_state(Intent.ORDER_TRACKING, order_id="4521")) == "order_tracking"
        assert route_after_classify(_state(Intent.ORDER_TRACKING, 0.75)) == "general"

    def test_greeting_and_user_status(self):
        assert route_after_classify(_state(Intent.GREETING)) == "greeting"
        assert route_after_classify(_state(Intent.USER_STATUS)) == "user_status"

    def test_unrouted_intents_go_general(self):
        for intent in (
            Intent.GENERAL_QUERY,
            Intent.MENU_QUERY,
            Intent.ORDER_ACTION,
            Intent.GENERAL_FAQ,
        ):
            assert intent not in INTENT_ROUTES
            assert route_after_classify(_state(intent)) == "general"

    def test_missing_classification_goes_general(self):
        assert route_after_classify({"session_id": "s1", "message": "x"}) == "general"
