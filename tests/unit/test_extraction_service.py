"""
Unit tests for entity extraction.
Tests vocabulary matching, regex captures and priority rules.
"""

from shopchat.services.extraction_service import EntityExtractor, extract_entities


class TestProductEntities:
    """Tests for product, category, color and size extraction."""

    def test_dress_scenario(self):
        """Should extract product terms, color, size and mapped category."""
        # Act
        entities = extract_entities("saya mau cari dress warna merah ukuran m")

        # Assert
        assert "dress" in entities.product_keywords
        assert entities.product_keywords == ["dress", "cari"]
        assert entities.product_name == "dress"
        assert entities.color == "merah"
        assert entities.size == "m"
        assert entities.category == "gamis"

    def test_product_name_follows_table_order(self):
        """Should pick the first vocabulary entry, not the first word in the text."""
        # Act
        entities = extract_entities("cari barang")

        # Assert
        assert entities.product_keywords == ["barang", "cari"]
        assert entities.product_name == "barang"

    def test_default_category_when_only_product_terms(self):
        """Should default the category when product terms have no mapping."""
        # Act
        entities = extract_entities("cari barang")

        # Assert
        assert entities.category == "gamis"

    def test_category_first_table_hit_wins(self):
        """Should use table order, not position in the message."""
        # Act
        first = extract_entities("tas dan sepatu")
        second = extract_entities("sepatu dan tas")

        # Assert
        assert first.category == "shoes"
        assert second.category == "shoes"

    def test_size_matches_whole_words_only(self):
        """Should not match a size inside a longer token."""
        # Act
        entities = extract_entities("celana jeans 300")

        # Assert
        assert entities.size is None

    def test_numeric_size(self):
        """Should match numeric sizes as whole words."""
        # Act
        entities = extract_entities("celana ukuran 30")

        # Assert
        assert entities.size == "30"

    def test_case_insensitive(self):
        """Should lowercase the message before matching."""
        # Act
        entities = extract_entities("CARI DRESS MERAH")

        # Assert
        assert entities.product_name == "dress"
        assert entities.color == "merah"


class TestOrderEntities:
    """Tests for order keywords, id and action."""

    def test_order_id_after_trigger_word(self):
        """Should capture digits after an order trigger word."""
        # Act
        entities = extract_entities("lacak order #4521")

        # Assert
        assert entities.order_id == "4521"
        assert entities.order_keywords == ["order", "lacak"]

    def test_order_id_with_colon(self):
        """Should accept ':' between trigger word and digits."""
        # Act
        entities = extract_entities("nomor: 889")

        # Assert
        assert entities.order_id == "889"

    def test_no_order_id_without_digits(self):
        """Should keep keywords but no id when there are no digits."""
        # Act
        entities = extract_entities("mana pesanan saya")

        # Assert
        assert entities.order_id is None
        assert entities.order_keywords == ["pesanan"]

    def test_cancel_has_priority(self):
        """Should record cancel even when refund is also mentioned."""
        # Act
        entities = extract_entities("cancel lalu refund")

        # Assert
        assert entities.order_action == "cancel"

    def test_return_before_refund(self):
        """Should prefer return over refund."""
        # Act
        entities = extract_entities("refund atau pengembalian")

        # Assert
        assert entities.order_action == "return"

    def test_refund_alone(self):
        """Should record refund when nothing of higher priority matches."""
        # Act
        entities = extract_entities("refund")

        # Assert
        assert entities.order_action == "refund"


class TestFlags:
    """Tests for user, menu and FAQ flags."""

    def test_user_status_and_user_id(self):
        """Should flag membership questions and capture the account id."""
        # Act
        entities = extract_entities("keanggotaan akun 7")

        # Assert
        assert entities.user_status is True
        assert entities.user_id == "7"

    def test_flags_can_co_occur(self):
        """Should set independent flags together."""
        # Act
        entities = extract_entities("menu layanan tentang perusahaan")

        # Assert
        assert entities.menu_query is True
        assert entities.general_faq is True
        assert entities.user_status is None


class TestPurity:
    """Tests for determinism and sparseness."""

    def test_extraction_is_deterministic(self):
        """Should return equal results for the same text."""
        # Arrange
        extractor = EntityExtractor()
        text = "saya mau cari dress warna merah ukuran m"

        # Act
        first = extractor.extract(text)
        extract_entities("lacak order #4521")
        second = extractor.extract(text)

        # Assert
        assert first == second

    def test_no_entities(self):
        """Should return an empty sparse record."""
        # Act
        entities = extract_entities("qwerty")

        # Assert
        assert entities.as_dict() == {}
