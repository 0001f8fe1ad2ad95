"""Engine subpackage - variant resolution and price conversion."""
from .variant_resolver import VariantResolver, resolve_variant
from .price_converter import to_exclusive, to_inclusive, discount_percentage, price_info
from .models import Product, Variant, IdentifyingAttribute, Resolution, PriceInfo

__all__ = [
    'VariantResolver', 'resolve_variant',
    'to_exclusive', 'to_inclusive', 'discount_percentage', 'price_info',
    'Product', 'Variant', 'IdentifyingAttribute', 'Resolution', 'PriceInfo',
]
