#!/usr/bin/env python
"""
Catalog check - normalizes every product, reports variant health and runs tests.

Usage:
    python scripts/check_catalog.py [--skip-tests]
"""
import subprocess
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

import pandas as pd

from storefront_pricing.config.settings import get_settings, configure_logging
from storefront_pricing.engine.variant_resolver import VariantResolver
from storefront_pricing.services.catalog_service import ProductCatalog


def build_report(catalog: ProductCatalog) -> pd.DataFrame:
    """One row per product with variant health counts."""
    rows = []
    for product in catalog.products:
        resolver = VariantResolver(product.variants)
        default = resolver.default_variant()
        rows.append({
            'slug': product.slug,
            'variants': len(product.variants),
            'malformed': len(product.variants) - len(resolver.well_formed),
            'purchasable': len(resolver.candidates),
            'default_variant': default.id if default else '',
            'total_stock': product.total_stock,
            'tax_rate': product.tax_rate,
        })
    return pd.DataFrame(rows)


def main():
    configure_logging()
    settings = get_settings()

    print("=" * 60)
    print("STOREFRONT CATALOG CHECK")
    print("=" * 60)
    print()

    print(f"[1/2] Normalizing catalog {settings.catalog_path}...")
    try:
        catalog = ProductCatalog(settings.catalog_path)
    except (FileNotFoundError, ValueError) as e:
        print(f"\n❌ CHECK FAILED\n  ERROR: {e}")
        sys.exit(1)

    report = build_report(catalog)
    print(report.to_string(index=False))

    problems = report[(report['variants'] > 0) & (report['purchasable'] == 0)]
    if not problems.empty:
        print()
        for slug in problems['slug']:
            print(f"  WARNING: {slug} has variants but none are purchasable")

    if '--skip-tests' in sys.argv:
        return

    print()
    print("[2/2] Running tests...")
    test_result = subprocess.run(
        [sys.executable, '-m', 'pytest', 'tests', '-q', '--tb=short'],
        cwd=Path(__file__).parent.parent
    )

    if test_result.returncode != 0:
        print("\n❌ TESTS FAILED")
        sys.exit(1)

    print()
    print("=" * 60)
    print("✅ CHECK COMPLETE")
    print("=" * 60)
    print(f"  Products: {len(report)}")
    print(f"  Malformed variants: {int(report['malformed'].sum()) if not report.empty else 0}")


if __name__ == "__main__":
    main()
