"""
Reply formatting for product, order and membership lookups.
"""

from datetime import datetime

from shopchat.models.schemas import Order, Product, UserProfile
from shopchat.utils.prompts import load_prompts

PROMPTS = load_prompts()
TEXT = PROMPTS["formatting"]
MESSAGES = PROMPTS["messages"]

INDONESIAN_MONTHS = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)


def format_rupiah(amount: int) -> str:
    """Formats an amount the id-ID way, e.g. "Rp 350.000"."""
    return "Rp " + f"{amount:,}".replace(",", ".")


def format_date(value: datetime) -> str:
    """Long Indonesian date, e.g. "15 Oktober 2023"."""
    return f"{value.day} {INDONESIAN_MONTHS[value.month - 1]} {value.year}"


def _stock_label(product: Product) -> str:
    return TEXT["in_stock"] if product.in_stock else TEXT["out_of_stock"]


def format_product_response(products: list[Product]) -> str:
    """
    Formats search results: full details for one product, a numbered
    list for several, a not-found message for none.
    """
    if not products:
        return MESSAGES["product_not_found"]

    if len(products) == 1:
        product = products[0]
        lines = [
            TEXT["single_product_header"],
            "",
            f"**{product.name}**",
            product.description,
            f"Harga: {format_rupiah(product.price)}",
            f"Kategori: {product.category}",
        ]
        if product.color:
            lines.append(f"Warna: {product.color}")
        if product.size:
            lines.append(f"Ukuran: {product.size}")
        lines.append(f"Status: {_stock_label(product)}")
        return "\n".join(lines)

    lines = [TEXT["multiple_products_header"].format(count=len(products)), ""]
    for index, product in enumerate(products, start=1):
        lines.append(
            f"{index}. **{product.name}** - {format_rupiah(product.price)} "
            f"({_stock_label(product)})"
        )
    lines.extend(["", TEXT["multiple_products_footer"]])
    return "\n".join(lines)


def format_order_response(order: Order | None) -> str:
    """Formats order status, tracking number (shipped only), items and total."""
    if order is None:
        return MESSAGES["order_not_found"]

    status = order.status.lower()
    status_label = TEXT["order_status_labels"].get(status, order.status)

    lines = [
        f"Informasi Pesanan **{order.id}**:",
        "",
        f"Status: **{status_label}**",
        f"Tanggal Pemesanan: {format_date(order.created_at)}",
    ]
    if order.tracking_number and status == "shipped":
        lines.append(f"Nomor Pelacakan: {order.tracking_number}")
        lines.append(TEXT["shipped_notice"])

    lines.extend(["", "Detail Pesanan:"])
    for index, item in enumerate(order.items, start=1):
        lines.append(
            f"{index}. {item.product_name} "
            f"({item.quantity} x {format_rupiah(item.price)})"
        )
    lines.extend(["", f"Total: {format_rupiah(order.total_amount)}"])
    return "\n".join(lines)


def format_user_status_response(user: UserProfile | None) -> str:
    """Formats a membership profile with the benefits of its level."""
    if user is None:
        return MESSAGES["user_not_found"]

    lines = [
        f"Informasi Keanggotaan **{user.name}**:",
        "",
        f"Level Keanggotaan: **{user.membership_level}**",
        f"Poin: {user.membership_points} poin",
        f"Terdaftar sejak: {format_date(user.registered_since)}",
        "",
        f"Manfaat Keanggotaan {user.membership_level}:",
    ]
    benefits = TEXT["membership_benefits"].get(user.membership_level.lower())
    if benefits:
        lines.extend(f"- {benefit}" for benefit in benefits)
    else:
        lines.append(f"- {TEXT['membership_benefits_default']}")
    return "\n".join(lines)
