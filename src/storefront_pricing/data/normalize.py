"""
Product Normalizer - turns upstream product documents into canonical Products.

The product API has returned several shapes over time (envelopes, camelCase
virtual fields, offerPrice vs mrp). All of that is resolved here, once, so
the engine only ever sees one Product shape.
"""
import logging
from typing import Any, Optional

from ..engine.models import (
    IdentifyingAttribute,
    Variant,
    VariantSpec,
    VariantAttribute,
    VariantConfiguration,
    Product,
)

logger = logging.getLogger(__name__)


def _first_present(raw: dict, *keys: str) -> Any:
    """Value of the first key that is present and not None."""
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == '':
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_stock(value: Any) -> int:
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0


def _to_bool(value: Any, default: bool = True) -> bool:
    if value is None or value == '':
        return default
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'on')
    return bool(value)


def _image_url(image: Any) -> Optional[str]:
    if isinstance(image, dict):
        return image.get('url') or None
    if isinstance(image, str):
        return image or None
    return None


def unwrap(document: Any) -> Any:
    """Strip {"data": {"product": ...}} and {"product": ...} envelopes."""
    if isinstance(document, dict):
        data = document.get('data')
        if isinstance(data, dict) and isinstance(data.get('product'), dict):
            return data['product']
        if isinstance(document.get('product'), dict):
            return document['product']
    return document


def normalize_attribute(raw: Any) -> Optional[IdentifyingAttribute]:
    if not isinstance(raw, dict):
        return None
    key, value = raw.get('key'), raw.get('value')
    if not key or value is None or value == '':
        return None

    return IdentifyingAttribute(
        key=str(key).strip(),
        value=str(value).strip(),
        label=str(raw.get('label') or ''),
        display_value=str(raw.get('displayValue') or ''),
        hex_code=raw.get('hexCode') or None,
        is_color=bool(raw.get('isColor', False)),
    )


def normalize_variant(raw: dict, index: int = 0) -> Variant:
    """Canonical variant; malformed attribute lists become None, never an error."""
    raw_attrs = raw.get('identifyingAttributes')
    if isinstance(raw_attrs, list):
        attributes = [a for a in (normalize_attribute(r) for r in raw_attrs) if a is not None]
    else:
        attributes = None

    price = _to_float(raw.get('price')) or 0.0
    mrp = _to_float(raw.get('mrp'))
    offer = _to_float(raw.get('offerPrice'))

    # A live offer below the list price is what the customer pays
    if offer and 0 < offer < price:
        if not mrp:
            mrp = price
        price = offer

    images = raw.get('images') or {}
    image_urls = []
    if isinstance(images, dict):
        thumb = _image_url(images.get('thumbnail'))
        gallery = [_image_url(i) for i in images.get('gallery') or []]
        image_urls = [u for u in gallery + [thumb] if u]

    name = str(raw.get('name') or '')
    return Variant(
        id=str(_first_present(raw, '_id', 'id') or f"variant-{index}"),
        name=name,
        price=price,
        mrp=mrp,
        stock_quantity=_to_stock(raw.get('stockQuantity')),
        is_active=_to_bool(raw.get('isActive')),
        identifying_attributes=attributes,
        slug=raw.get('slug') or None,
        sku=raw.get('sku') or None,
        images=image_urls,
    )


def normalize_configuration(raw: Any) -> VariantConfiguration:
    if not isinstance(raw, dict):
        return VariantConfiguration()

    specs = [
        VariantSpec(
            spec_key=str(s.get('specKey')),
            spec_label=str(s.get('specLabel') or s.get('specKey')),
            possible_values=[str(v) for v in s.get('possibleValues') or []],
            section_title=str(s.get('sectionTitle') or ''),
        )
        for s in raw.get('variantCreatingSpecs') or []
        if isinstance(s, dict) and s.get('specKey')
    ]
    attributes = [
        VariantAttribute(
            key=str(a.get('key') or 'color'),
            label=str(a.get('label') or 'Color'),
            values=[str(v) for v in a.get('values') or []],
        )
        for a in raw.get('variantAttributes') or []
        if isinstance(a, dict)
    ]

    return VariantConfiguration(
        has_variants=bool(raw.get('hasVariants', False)),
        variant_type=str(raw.get('variantType') or 'None'),
        variant_creating_specs=specs,
        variant_attributes=attributes,
    )


def _check_attribute_keys(product: Product):
    """Warn when variants carry keys the configuration does not declare."""
    configured = set(product.variant_configuration.spec_keys)
    if not configured:
        return
    for variant in product.variants:
        extra = set(variant.attribute_map()) - configured
        if extra:
            logger.warning(
                "Product %s variant %s uses unconfigured attribute keys: %s",
                product.slug, variant.id, ", ".join(sorted(extra))
            )


def normalize_product(document: Any) -> Product:
    """
    Build the canonical Product from any upstream product document.

    Raises ValueError only when the document is not an object at all.
    """
    raw = unwrap(document)
    if not isinstance(raw, dict):
        raise ValueError(f"Product document must be an object, got {type(raw).__name__}")

    raw_variants = raw.get('variants')
    if not isinstance(raw_variants, list):
        raw_variants = []

    variants = []
    for index, entry in enumerate(raw_variants):
        if not isinstance(entry, dict):
            logger.warning("Dropping non-object variant at index %d", index)
            continue
        variants.append(normalize_variant(entry, index))

    malformed = sum(1 for v in variants if not v.is_well_formed)
    if malformed:
        logger.warning("%d variant(s) have no usable identifyingAttributes", malformed)

    brand = raw.get('brand')
    if isinstance(brand, dict):
        brand = brand.get('name')

    images = raw.get('images') or {}

    product = Product(
        id=str(_first_present(raw, '_id', 'id') or ''),
        name=str(raw.get('name') or ''),
        slug=str(raw.get('slug') or '').strip().lower(),
        base_price=_to_float(_first_present(raw, 'sellingPrice', 'lowestPrice', 'basePrice', 'price')) or 0.0,
        mrp=_to_float(_first_present(raw, 'displayMrp', 'mrp')),
        tax_rate=_to_float(raw.get('taxRate')),
        stock_quantity=_to_stock(raw.get('stockQuantity')),
        variants=variants,
        variant_configuration=normalize_configuration(raw.get('variantConfiguration')),
        is_active=_to_bool(raw.get('isActive')),
        status=raw.get('status') or None,
        brand=str(brand) if brand else None,
        thumbnail=_image_url(images.get('thumbnail')) if isinstance(images, dict) else None,
    )
    _check_attribute_keys(product)
    return product
