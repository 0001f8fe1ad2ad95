import pytest

from storefront_pricing.config.settings import Settings
from storefront_pricing.engine.color_palette import ColorPalette
from storefront_pricing.engine.models import IdentifyingAttribute, Variant
from storefront_pricing.services.catalog_service import ProductCatalog


@pytest.fixture(scope="session")
def settings():
    return Settings.load()


@pytest.fixture(scope="session")
def catalog(settings):
    return ProductCatalog(settings.catalog_path)


@pytest.fixture(scope="session")
def palette(settings):
    return ColorPalette.load(settings.palette_path)


@pytest.fixture
def make_variant():
    """Factory for variants from a plain attribute dict."""
    def _make(variant_id, attrs, stock=1, active=True, price=100.0, mrp=None, **kwargs):
        attributes = None if attrs is None else [
            IdentifyingAttribute(key=k, value=v) for k, v in attrs.items()
        ]
        return Variant(
            id=variant_id,
            name=kwargs.pop('name', variant_id),
            price=price,
            mrp=mrp,
            stock_quantity=stock,
            is_active=active,
            identifying_attributes=attributes,
            **kwargs
        )
    return _make
