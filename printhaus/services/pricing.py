"""
Cart pricing

Pure functions over line items. A line is anything with a `price` and a
`quantity` (cart rows, joined cart views, plain test doubles). All money
is Decimal, rounded to cents.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from printhaus.core.config import settings
from printhaus.core.utils import to_money

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class CartTotals:
    item_count: int
    subtotal: Decimal
    shipping: Decimal
    total: Decimal
    amount_to_free_shipping: Decimal


def line_total(price, quantity: int) -> Decimal:
    return to_money(to_money(price) * quantity)


def shipping_for(
    subtotal: Decimal,
    threshold: Optional[Decimal] = None,
    fee: Optional[Decimal] = None,
) -> Decimal:
    """Flat fee unless the subtotal is strictly above the free-shipping threshold."""
    threshold = settings.FREE_SHIPPING_THRESHOLD if threshold is None else threshold
    fee = settings.SHIPPING_FEE if fee is None else fee
    if subtotal <= ZERO or subtotal > threshold:
        return ZERO
    return to_money(fee)


def compute_cart_totals(
    lines: Iterable,
    threshold: Optional[Decimal] = None,
    fee: Optional[Decimal] = None,
) -> CartTotals:
    threshold = settings.FREE_SHIPPING_THRESHOLD if threshold is None else threshold

    item_count = 0
    subtotal = ZERO
    for line in lines:
        item_count += line.quantity
        subtotal += line_total(line.price, line.quantity)

    subtotal = to_money(subtotal)
    shipping = shipping_for(subtotal, threshold, fee)
    if item_count == 0 or subtotal > threshold:
        remaining = ZERO
    else:
        # Free shipping starts one cent above the threshold
        remaining = to_money(threshold - subtotal + Decimal("0.01"))

    return CartTotals(
        item_count=item_count,
        subtotal=subtotal,
        shipping=shipping,
        total=to_money(subtotal + shipping),
        amount_to_free_shipping=remaining,
    )


def artist_commission(line_amount, rate) -> Decimal:
    return to_money(to_money(line_amount) * Decimal(str(rate)))
