"""
Entity extraction from free-text customer messages.
Scans lowercase text against fixed keyword/regex tables; stateless and
deterministic, re-run on every turn.
"""

import re
from shopchat.models.domain import ExtractedEntities
from shopchat.utils.logger import get_logger

logger = get_logger(__name__)

# Indonesian and English colors, first match wins
COLOR_KEYWORDS = (
    "merah", "biru", "hijau", "kuning", "hitam", "putih", "abu", "abu-abu",
    "coklat", "ungu", "pink", "oren", "oranye", "emas", "silver",
    "red", "blue", "green", "yellow", "black", "white", "grey", "gray",
    "brown", "purple", "orange", "gold",
)

# Matched as whole words only
SIZE_KEYWORDS = (
    "s", "m", "l", "xl", "xxl", "xxxl",
    "all size", "all-size", "allsz", "jumbo", "standar", "standard",
    "28", "29", "30", "31", "32", "33", "34", "35", "36", "37", "38", "39", "40",
    "41", "42", "43", "44", "45",
)

PRODUCT_KEYWORDS = (
    "produk", "barang", "twill", "manohara", "standard", "std", "bahan", "item",
    "baju", "pakaian", "dress", "kemeja", "celana", "rok", "jaket", "sweater",
    "kaos", "t-shirt", "jeans", "sepatu", "shoes", "sandal", "tas", "bag",
    "aksesoris", "accessories", "topi", "hat", "kacamata", "glasses",
    "jam tangan", "watch", "perhiasan", "jewelry", "gelang", "bracelet",
    "kalung", "necklace", "cincin", "ring", "anting", "earrings", "syal", "scarf",
    "belt", "ikat pinggang", "dompet", "wallet", "cari", "search", "find",
    "temukan", "rekomendasi", "recommendation",
)

ORDER_KEYWORDS = (
    "order", "pesanan", "pembelian", "purchase", "tracking", "lacak", "status",
    "pengiriman", "delivery", "shipment", "resi", "receipt", "invoice", "faktur",
    "pembayaran", "payment", "konfirmasi", "confirmation", "return", "pengembalian",
    "refund", "cancel", "batal", "complain", "komplain", "keluhan", "nomor order",
    "order number", "id pesanan", "order id", "cek pesanan", "check order",
)

# Scanned in order; the first keyword found decides the category
CATEGORY_KEYWORDS = (
    ("dress", "gamis"),
    ("gaun", "gamis"),
    ("atasan", "setelan"),
    ("blouse", "setelan"),
    ("kemeja", "shirt"),
    ("baju", "tops"),
    ("pakaian", "setelan"),
    ("celana", "setelan"),
    ("jeans", "setelan"),
    ("rok", "setelan"),
    ("jaket", "setelan"),
    ("sweater", "setelan"),
    ("kaos", "setelan"),
    ("t-shirt", "setelan"),
    ("daster", "daster"),
    ("gamis", "gamis"),
    ("setelan", "setelan"),
    ("sepatu", "shoes"),
    ("shoes", "shoes"),
    ("sandal", "shoes"),
    ("tas", "bag"),
    ("bag", "bag"),
    ("topi", "hat"),
    ("hat", "hat"),
    ("dompet", "wallet"),
)
DEFAULT_CATEGORY = "gamis"

# Priority order: cancel, then return, then refund
ORDER_ACTION_RULES = (
    ("cancel", ("cancel", "batal")),
    ("return", ("return", "pengembalian")),
    ("refund", ("refund",)),
)

USER_STATUS_KEYWORDS = (
    "status saya", "status user", "akun saya", "membership", "keanggotaan",
    "user status", "my account", "profil saya",
)

MENU_KEYWORDS = (
    "menu", "fitur", "layanan", "akses", "apa saja yang bisa",
    "apa yang tersedia", "what can i access", "available menu", "options",
)

GENERAL_FAQ_KEYWORDS = (
    "ini web apa", "tentang", "apa itu", "siapa", "company",
    "perusahaan", "brand", "official", "resmi", "apa fungsi", "apa gunanya",
)

ORDER_ID_PATTERN = re.compile(
    r"(?:order|pesanan|tracking|lacak|status|nomor|number|id)\s*[#:]?\s*(\d+)",
    re.IGNORECASE,
)
USER_ID_PATTERN = re.compile(
    r"(?:user|pengguna|member|anggota|akun|account)\s*[#:]?\s*(\d+)",
    re.IGNORECASE,
)
SIZE_PATTERNS = tuple(
    (size, re.compile(r"\b" + re.escape(size) + r"\b", re.IGNORECASE))
    for size in SIZE_KEYWORDS
)


def _all_matches(text: str, vocabulary: tuple[str, ...]) -> list[str]:
    """Every vocabulary entry contained in text, in vocabulary order."""
    return [keyword for keyword in vocabulary if keyword in text]


def _first_match(text: str, vocabulary: tuple[str, ...]) -> str | None:
    return next((keyword for keyword in vocabulary if keyword in text), None)


def extract_entities(message: str) -> ExtractedEntities:
    """
    Extracts product, order, membership and navigation entities from a message.

    Args:
        message: Raw user message

    Returns:
        ExtractedEntities with only the detected fields set
    """
    text = message.lower()
    found: dict = {}

    for keyword, category in CATEGORY_KEYWORDS:
        if keyword in text:
            found["category"] = category
            break

    product_matches = _all_matches(text, PRODUCT_KEYWORDS)
    if product_matches:
        found["product_keywords"] = product_matches
        found["product_name"] = product_matches[0]

    if "category" not in found and product_matches:
        found["category"] = DEFAULT_CATEGORY

    order_matches = _all_matches(text, ORDER_KEYWORDS)
    if order_matches:
        found["order_keywords"] = order_matches

    order_id_match = ORDER_ID_PATTERN.search(text)
    if order_id_match:
        found["order_id"] = order_id_match.group(1)

    for action, keywords in ORDER_ACTION_RULES:
        if any(keyword in text for keyword in keywords):
            found["order_action"] = action
            break

    color = _first_match(text, COLOR_KEYWORDS)
    if color:
        found["color"] = color

    size = next((size for size, pattern in SIZE_PATTERNS if pattern.search(text)), None)
    if size:
        found["size"] = size

    if _first_match(text, USER_STATUS_KEYWORDS):
        found["user_status"] = True

    user_id_match = USER_ID_PATTERN.search(text)
    if user_id_match:
        found["user_id"] = user_id_match.group(1)

    if _first_match(text, MENU_KEYWORDS):
        found["menu_query"] = True

    if _first_match(text, GENERAL_FAQ_KEYWORDS):
        found["general_faq"] = True

    entities = ExtractedEntities(**found)
    logger.debug("entities_extracted", entities=entities.as_dict())
    return entities


class EntityExtractor:
    """
    Object wrapper around extract_entities for injection into the classifier.
    """

    def extract(self, message: str) -> ExtractedEntities:
        """Extracts entities from a message (pure, no state access)."""
        return extract_entities(message)
