"""
Price conversion tests.

Rounding, snapping and discount behavior the product page depends on.
"""
import pytest

from storefront_pricing.data.normalize import normalize_product
from storefront_pricing.engine.price_converter import (
    round_cents,
    to_exclusive,
    to_inclusive,
    discount_percentage,
    tax_amount,
    price_info,
)


def test_exclusive_from_inclusive():
    """5000 inclusive @ 18% → 4237.29 exclusive."""
    assert to_exclusive(5000, 18) == 4237.29


def test_inclusive_round_trip_snaps_back():
    """A whole retail price survives being stored as an exclusive amount."""
    exclusive = to_exclusive(5000, 18)
    assert to_inclusive(exclusive, 18) == 5000


@pytest.mark.parametrize("price", [499, 1299, 5000, 79900, 81599])
def test_round_trip_whole_prices(price):
    assert to_inclusive(to_exclusive(price, 18), 18) == price


@pytest.mark.parametrize("convert", [to_exclusive, to_inclusive])
def test_zero_tax_passthrough(convert):
    assert convert(1000, 0) == 1000
    assert convert(1000, None) == 1000
    assert convert(1000, -5) == 1000


@pytest.mark.parametrize("convert", [to_exclusive, to_inclusive])
@pytest.mark.parametrize("amount", [0, None])
def test_falsy_amount_is_zero(convert, amount):
    assert convert(amount, 18) == 0


def test_snap_inside_tolerance():
    # 847.45 * 1.18 = 999.991 → 999.99 → 1000
    assert to_inclusive(847.45, 18) == 1000


def test_no_snap_outside_tolerance():
    # 798.8 * 1.25 = 998.5
    assert to_inclusive(798.8, 25) == 998.5


def test_exclusive_never_snaps():
    """Only to_inclusive snaps; the asymmetry is intentional."""
    # 1179.99 / 1.18 = 999.9915... → 999.99, not 1000
    assert to_exclusive(1179.99, 18) == 999.99


def test_round_cents_is_half_up():
    assert round_cents(0.125) == 0.13
    assert round(0.125, 2) == 0.12  # banker's rounding would differ
    assert round_cents(-0.125) == -0.12


def test_discount_percentage():
    assert discount_percentage(79900, 89900) == 11
    assert discount_percentage(87.5, 100) == 13


@pytest.mark.parametrize("price,mrp", [
    (100, 100),
    (120, 100),
    (100, None),
    (100, 0),
    (0, 0),
])
def test_discount_zero_unless_mrp_above_price(price, mrp):
    assert discount_percentage(price, mrp) == 0


@pytest.mark.parametrize("price,mrp", [(1, 1000), (999, 1000), (500, 501), (0, 10)])
def test_discount_never_negative(price, mrp):
    assert 0 <= discount_percentage(price, mrp) <= 100


def test_tax_amount():
    assert tax_amount(1000, 18) == 180.0
    assert tax_amount(1000, 0) == 0.0
    assert tax_amount(None, 18) == 0.0


@pytest.fixture(scope="module")
def phone():
    return normalize_product({
        "_id": "p1",
        "name": "Phone",
        "slug": "phone",
        "basePrice": 79900,
        "mrp": 89900,
        "taxRate": 18,
        "variantConfiguration": {"hasVariants": True},
        "variants": [
            {"_id": "a", "name": "A", "price": 79900, "mrp": 89900, "stockQuantity": 5,
             "identifyingAttributes": [{"key": "color", "value": "Black"}]},
            {"_id": "b", "name": "B", "price": 89900, "stockQuantity": 2,
             "identifyingAttributes": [{"key": "color", "value": "Blue"}]},
        ],
    })


def test_price_info_for_variant(phone):
    info = price_info(phone, phone.variants[0])

    assert info.price == 79900
    assert info.show_mrp is True
    assert info.discount_percentage == 11
    assert info.price_exclusive == 67711.86
    assert info.tax_amount == 12188.14
    assert info.stock_quantity == 5


def test_variant_discount_not_inherited_from_product(phone):
    """Variant b has no mrp; the product's mrp must not leak into it."""
    info = price_info(phone, phone.variants[1])

    assert info.mrp is None
    assert info.show_mrp is False
    assert info.discount_percentage == 0


def test_price_info_without_variant_uses_product(phone):
    info = price_info(phone)

    assert info.price == 79900
    assert info.mrp == 89900
    assert info.stock_quantity == 7


def test_price_info_exclusive_storage():
    product = normalize_product({
        "_id": "m1", "name": "Mouse", "slug": "mouse",
        "basePrice": 1499, "taxRate": 18, "stockQuantity": 3,
    })
    info = price_info(product, prices_include_tax=False)

    assert info.price_exclusive == 1499
    assert info.price_inclusive == 1768.82
    assert info.price == 1768.82


def test_exclusive_storage_compares_mrp_with_shown_price():
    """An mrp equal to the inclusive price is not a discount."""
    product = normalize_product({
        "_id": "t1", "name": "Tee", "slug": "tee",
        "basePrice": 4237.29, "mrp": 5000, "taxRate": 18,
    })
    info = price_info(product, prices_include_tax=False)

    assert info.price == 5000
    assert info.show_mrp is False
    assert info.discount_percentage == 0

    product.mrp = 6000
    info = price_info(product, prices_include_tax=False)

    assert info.show_mrp is True
    assert info.discount_percentage == 17
