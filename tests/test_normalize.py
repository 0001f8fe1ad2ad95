"""
Product normalization tests.
"""
import logging

import pytest

from storefront_pricing.data.normalize import (
    unwrap,
    normalize_attribute,
    normalize_variant,
    normalize_product,
)


def _doc(**overrides):
    doc = {
        "_id": "p1",
        "name": "Tee",
        "slug": "Tee",
        "basePrice": 500,
        "taxRate": 5,
        "variantConfiguration": {
            "hasVariants": True,
            "variantAttributes": [{"key": "color", "label": "Color", "values": ["Red"]}],
            "variantCreatingSpecs": [{"specKey": "size", "specLabel": "Size"}],
        },
        "variants": [
            {"_id": "v1", "name": "Red S", "price": 500, "stockQuantity": 2,
             "identifyingAttributes": [{"key": "color", "value": "Red"}, {"key": "size", "value": "S"}]},
        ],
    }
    doc.update(overrides)
    return doc


@pytest.mark.parametrize("document", [
    {"data": {"product": {"_id": "p1"}}},
    {"product": {"_id": "p1"}},
    {"_id": "p1"},
])
def test_unwrap_envelopes(document):
    assert unwrap(document) == {"_id": "p1"}


def test_product_fields():
    product = normalize_product(_doc())

    assert product.id == "p1"
    assert product.slug == "tee"
    assert product.base_price == 500
    assert product.tax_rate == 5
    assert product.has_variants
    assert product.variant_configuration.spec_keys == ["size", "color"]


def test_price_prefers_selling_price():
    product = normalize_product(_doc(sellingPrice=450, lowestPrice=400))
    assert product.base_price == 450

    product = normalize_product(_doc(lowestPrice=400))
    assert product.base_price == 400


def test_mrp_prefers_display_mrp():
    product = normalize_product(_doc(mrp=700, displayMrp=650))
    assert product.mrp == 650


def test_brand_object_and_string():
    assert normalize_product(_doc(brand={"name": "Acme"})).brand == "Acme"
    assert normalize_product(_doc(brand="Acme")).brand == "Acme"
    assert normalize_product(_doc()).brand is None


@pytest.mark.parametrize("attrs", ["Red / S", None, {"key": "color"}])
def test_malformed_attributes_become_none(attrs):
    variant = normalize_variant({"_id": "v", "price": 1, "identifyingAttributes": attrs})

    assert variant.identifying_attributes is None
    assert not variant.is_well_formed


def test_missing_attributes_are_malformed():
    variant = normalize_variant({"_id": "v", "price": 1})
    assert variant.identifying_attributes is None


def test_attribute_entries_without_value_are_skipped():
    variant = normalize_variant({
        "_id": "v", "price": 1,
        "identifyingAttributes": [{"key": "color", "value": ""}, {"key": "size", "value": "M"}, "junk"],
    })
    assert variant.attribute_map() == {"size": "M"}


def test_attribute_fields():
    attr = normalize_attribute({
        "key": "color", "value": "Blue", "label": "Color",
        "displayValue": "Sky Blue", "hexCode": "#A7C1D9", "isColor": True,
    })

    assert attr.display_value == "Sky Blue"
    assert attr.hex_code == "#A7C1D9"
    assert attr.is_color is True


def test_offer_price_becomes_price():
    variant = normalize_variant({"_id": "v", "price": 1000, "offerPrice": 900, "identifyingAttributes": []})

    assert variant.price == 900
    assert variant.mrp == 1000


def test_offer_above_price_ignored():
    variant = normalize_variant({"_id": "v", "price": 1000, "offerPrice": 1200, "mrp": 1100})

    assert variant.price == 1000
    assert variant.mrp == 1100


def test_offer_keeps_explicit_mrp():
    variant = normalize_variant({"_id": "v", "price": 1000, "offerPrice": 900, "mrp": 1500})
    assert variant.mrp == 1500


@pytest.mark.parametrize("raw,expected", [(-3, 0), ("4", 4), (None, 0), ("many", 0)])
def test_stock_is_non_negative_int(raw, expected):
    assert normalize_variant({"_id": "v", "price": 1, "stockQuantity": raw}).stock_quantity == expected


def test_variant_id_fallback():
    assert normalize_variant({"id": "abc", "price": 1}).id == "abc"
    assert normalize_variant({"price": 1}, index=3).id == "variant-3"


def test_inactive_variant():
    assert normalize_variant({"_id": "v", "price": 1, "isActive": False}).is_active is False
    assert normalize_variant({"_id": "v", "price": 1}).is_active is True


@pytest.mark.parametrize("raw,expected", [
    ("false", False), ("False", False), (0, False), ("0", False), ("no", False),
    ("true", True), (1, True), ("", True), (None, True),
])
def test_is_active_coercion(raw, expected):
    assert normalize_variant({"_id": "v", "price": 1, "isActive": raw}).is_active is expected
    assert normalize_product(_doc(isActive=raw)).is_active is expected


def test_non_object_variants_dropped(caplog):
    with caplog.at_level(logging.WARNING):
        product = normalize_product(_doc(variants=[
            "oops",
            {"_id": "v1", "price": 10, "identifyingAttributes": [{"key": "size", "value": "S"}]},
        ]))

    assert [v.id for v in product.variants] == ["v1"]
    assert "Dropping non-object variant" in caplog.text


def test_unconfigured_attribute_key_warns(caplog):
    with caplog.at_level(logging.WARNING):
        normalize_product(_doc(variants=[
            {"_id": "v1", "price": 10,
             "identifyingAttributes": [{"key": "size", "value": "S"}, {"key": "fit", "value": "Slim"}]},
        ]))

    assert "unconfigured attribute keys: fit" in caplog.text


@pytest.mark.parametrize("document", [None, "product", 42, ["a"]])
def test_non_object_document_raises(document):
    with pytest.raises(ValueError):
        normalize_product(document)
