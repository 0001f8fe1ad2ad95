"""
Shared API state - one catalog and palette per process.
"""
from ..config.settings import get_settings
from ..engine.color_palette import ColorPalette
from ..services.catalog_service import ProductCatalog

settings = get_settings()
catalog = ProductCatalog(settings.catalog_path)
palette = ColorPalette.load(settings.palette_path, default_hex=settings.default_color_hex)
