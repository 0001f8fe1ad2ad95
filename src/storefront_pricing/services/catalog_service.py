"""
Catalog Service - product lookup for the product page.

Reads the product JSON export and normalizes every document once at load.
Lookups try the slug first and fall back to the product id, the same order
the storefront uses against the product API.
"""
import json
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from ..data.normalize import normalize_product
from ..engine.models import Product
from ..engine.price_converter import discount_percentage

logger = logging.getLogger(__name__)


class ProductNotFoundError(LookupError):
    """No product matched any lookup path."""


class ProductCatalog:
    """In-memory product catalog keyed by slug and id."""

    SUMMARY_COLUMNS = [
        'slug', 'name', 'brand', 'price', 'mrp', 'discount',
        'tax_rate', 'total_stock', 'variant_count'
    ]

    def __init__(self, catalog_path: Path):
        self.catalog_path = catalog_path
        self.products: list[Product] = []
        self._by_slug: dict[str, Product] = {}
        self._by_id: dict[str, Product] = {}
        self._load()

    def _load(self):
        """Load and normalize products from the JSON export."""
        if not self.catalog_path.exists():
            raise FileNotFoundError(f"Product catalog not found at {self.catalog_path}.")

        with open(self.catalog_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        documents = data.get('products', []) if isinstance(data, dict) else data

        products = []
        for index, document in enumerate(documents):
            try:
                products.append(normalize_product(document))
            except ValueError as e:
                logger.warning("Skipping catalog entry %d: %s", index, e)

        self.products = products
        self._by_slug = {p.slug: p for p in products if p.slug}
        self._by_id = {p.id: p for p in products if p.id}
        logger.info("Loaded %d products from %s", len(products), self.catalog_path)

    def reload(self):
        """Reload the catalog from disk."""
        self._load()

    def get_by_slug(self, slug: str) -> Product:
        product = self._by_slug.get(str(slug).strip().lower())
        if product is None:
            raise ProductNotFoundError(f"No product with slug '{slug}'")
        return product

    def get_by_id(self, product_id: str) -> Product:
        product = self._by_id.get(str(product_id).strip())
        if product is None:
            raise ProductNotFoundError(f"No product with id '{product_id}'")
        return product

    def lookup(self, identifier: str) -> Product:
        """
        Resolve a product by slug, then by id.

        Raises ProductNotFoundError with the last error when both fail.
        """
        if not identifier:
            raise ProductNotFoundError("Product identifier is missing")

        last_error: Optional[Exception] = None
        for finder in (self.get_by_slug, self.get_by_id):
            try:
                return finder(identifier)
            except ProductNotFoundError as e:
                logger.debug("Lookup path failed for '%s': %s", identifier, e)
                last_error = e

        raise ProductNotFoundError(f"Product not found. Last error: {last_error}")

    def to_frame(self, search: Optional[str] = None, limit: Optional[int] = None) -> pd.DataFrame:
        """Catalog summary, optionally filtered by name/slug/brand."""
        rows = [
            {
                'slug': p.slug,
                'name': p.name,
                'brand': p.brand,
                'price': p.lowest_price,
                'mrp': p.mrp,
                'discount': discount_percentage(p.base_price, p.mrp),
                'tax_rate': p.tax_rate,
                'total_stock': p.total_stock,
                'variant_count': len(p.variants),
            }
            for p in self.products
        ]
        df = pd.DataFrame(rows, columns=self.SUMMARY_COLUMNS)

        if search:
            mask = (
                df['slug'].str.contains(search, case=False, na=False, regex=False) |
                df['name'].str.contains(search, case=False, na=False, regex=False) |
                df['brand'].fillna('').str.contains(search, case=False, na=False, regex=False)
            )
            df = df[mask]

        if limit:
            df = df.head(limit)
        return df.reset_index(drop=True)

    def __len__(self) -> int:
        return len(self.products)
