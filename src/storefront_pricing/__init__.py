"""
Storefront Pricing Package

Variant resolution and price display logic for the storefront product page.
Resolves Selection → Variant with a best-compatible fallback and converts
between tax-inclusive and tax-exclusive prices.
"""

__version__ = "1.0.0"
