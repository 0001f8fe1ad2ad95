"""
Price Converter - tax-inclusive/exclusive conversion and discount display.

Amounts are rounded half-up on the cent, matching how the storefront has
always displayed them. Only to_inclusive snaps near-integers back to whole
numbers; the two conversions are deliberately not exact inverses.
"""
import math
from typing import Optional

from .models import Product, Variant, PriceInfo

# Inclusive prices within this distance of a whole number are shown as that number
SNAP_TOLERANCE = 0.02


def round_cents(amount: float) -> float:
    """Round half-up to 2 decimals (0.125 → 0.13, -0.125 → -0.12)."""
    return math.floor(amount * 100 + 0.5) / 100


def _has_tax(tax_rate: Optional[float]) -> bool:
    return tax_rate is not None and tax_rate > 0


def to_exclusive(inclusive: Optional[float], tax_rate: Optional[float]) -> float:
    """
    Convert a tax-inclusive price back to its tax-exclusive base amount.

    Example: 5000 inclusive @ 18% → 4237.29 exclusive.
    A missing or non-positive tax rate means "no tax".
    """
    if not inclusive:
        return 0.0
    if not _has_tax(tax_rate):
        return inclusive

    return round_cents(inclusive / (1 + tax_rate / 100))


def to_inclusive(exclusive: Optional[float], tax_rate: Optional[float]) -> float:
    """
    Convert a tax-exclusive base amount to its tax-inclusive final price.

    Example: 4237.29 exclusive @ 18% → 5000 inclusive.
    Results within SNAP_TOLERANCE of a whole number snap to it, which undoes
    the cent lost when a whole retail price was stored as an exclusive amount.
    """
    if not exclusive:
        return 0.0
    if not _has_tax(tax_rate):
        return exclusive

    rounded = round_cents(exclusive * (1 + tax_rate / 100))
    nearest = math.floor(rounded + 0.5)
    if abs(rounded - nearest) <= SNAP_TOLERANCE:
        return float(nearest)
    return rounded


def discount_percentage(price: Optional[float], mrp: Optional[float]) -> int:
    """Whole-percent discount of price against mrp; 0 unless mrp > price."""
    if price is None or not mrp or mrp <= price:
        return 0
    return math.floor(((mrp - price) / mrp) * 100 + 0.5)


def tax_amount(price: Optional[float], tax_rate: Optional[float]) -> float:
    """Tax charged on top of an exclusive amount."""
    if not price or not _has_tax(tax_rate):
        return 0.0
    return round_cents(price * tax_rate / 100)


def price_info(
    product: Product,
    variant: Optional[Variant] = None,
    prices_include_tax: bool = True
) -> PriceInfo:
    """
    Build the price block for the selected variant, or the base product.

    The discount is computed from whichever record is shown and is never
    carried over from the product to a variant or back. The mrp is always a
    tax-inclusive reference, so it is compared with the inclusive price.
    """
    if variant is not None:
        price, mrp, stock = variant.price, variant.mrp, variant.stock_quantity
    else:
        price, mrp, stock = product.base_price, product.mrp, product.total_stock

    tax_rate = product.tax_rate
    if prices_include_tax:
        inclusive = price
        exclusive = to_exclusive(price, tax_rate)
    else:
        exclusive = price
        inclusive = to_inclusive(price, tax_rate)

    return PriceInfo(
        price=inclusive,
        mrp=mrp,
        show_mrp=bool(mrp) and mrp > inclusive,
        discount_percentage=discount_percentage(inclusive, mrp),
        tax_rate=tax_rate,
        price_exclusive=exclusive,
        price_inclusive=inclusive,
        tax_amount=round_cents(inclusive - exclusive),
        stock_quantity=stock,
    )
