import json

import pytest

from storefront_pricing.services.catalog_service import ProductCatalog, ProductNotFoundError


def test_sample_catalog_loads(catalog):
    assert len(catalog) == 3
    assert [p.slug for p in catalog.products] == ["iphone-15", "wireless-mouse", "gaming-laptop"]


def test_lookup_by_slug_then_id(catalog):
    assert catalog.lookup("iphone-15").id == "665f1a2b3c4d5e6f70000001"
    assert catalog.lookup("665f1a2b3c4d5e6f70000002").slug == "wireless-mouse"


def test_slug_lookup_is_case_insensitive(catalog):
    assert catalog.get_by_slug(" iPhone-15 ").name == "iPhone 15"


def test_lookup_not_found_reports_last_error(catalog):
    with pytest.raises(ProductNotFoundError, match="Product not found. Last error: No product with id 'nope'"):
        catalog.lookup("nope")


def test_lookup_requires_identifier(catalog):
    with pytest.raises(ProductNotFoundError, match="missing"):
        catalog.lookup("")


def test_to_frame_summary(catalog):
    df = catalog.to_frame()

    assert list(df.columns) == ProductCatalog.SUMMARY_COLUMNS
    laptop = df[df['slug'] == 'gaming-laptop'].iloc[0]
    assert laptop['price'] == 110000
    assert laptop['total_stock'] == 7


@pytest.mark.parametrize("term,expected", [
    ("logi", ["wireless-mouse"]),
    ("LAPTOP", ["gaming-laptop"]),
    ("apple", ["iphone-15"]),
    ("zzz", []),
])
def test_to_frame_search(catalog, term, expected):
    assert catalog.to_frame(search=term)['slug'].tolist() == expected


def test_to_frame_limit(catalog):
    assert len(catalog.to_frame(limit=2)) == 2


def test_missing_catalog(tmp_path):
    with pytest.raises(FileNotFoundError):
        ProductCatalog(tmp_path / "missing.json")


def test_wrapped_catalog_skips_bad_entries(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"products": [
        {"_id": "a", "name": "A", "slug": "a", "basePrice": 10},
        "not a product",
    ]}))

    catalog = ProductCatalog(path)

    assert len(catalog) == 1
    assert catalog.lookup("a").base_price == 10


def test_reload_picks_up_changes(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([{"_id": "a", "slug": "a", "basePrice": 10}]))
    catalog = ProductCatalog(path)

    path.write_text(json.dumps([
        {"_id": "a", "slug": "a", "basePrice": 12},
        {"_id": "b", "slug": "b", "basePrice": 20},
    ]))
    catalog.reload()

    assert len(catalog) == 2
    assert catalog.get_by_slug("a").base_price == 12
