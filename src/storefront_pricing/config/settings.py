"""
Centralized settings and path configuration for storefront pricing.
"""
import logging
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_package_root() -> Path:
    """Get the package directory (where data/ lives)."""
    return Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value.strip() == '':
        return default
    return value.strip().lower() in ('true', '1', 'yes', 'on')


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Input files
    catalog_path: Path
    palette_path: Path

    # Swatch color for names missing from the palette
    default_color_hex: str = "#CCCCCC"

    # Options with less stock than this show a "Low" badge
    low_stock_threshold: int = 5

    # Stored prices are what the customer pays (tax included)
    prices_include_tax: bool = True

    log_level: str = "INFO"

    @classmethod
    def load(cls, data_dir: Optional[Path] = None) -> 'Settings':
        """Load settings from packaged data files and STOREFRONT_* environment overrides."""
        data_dir = data_dir or get_package_root() / 'data'

        catalog = os.environ.get('STOREFRONT_CATALOG')
        palette = os.environ.get('STOREFRONT_PALETTE')

        return cls(
            catalog_path=Path(catalog) if catalog else data_dir / 'sample_catalog.json',
            palette_path=Path(palette) if palette else data_dir / 'color_palette.csv',
            low_stock_threshold=int(os.environ.get('STOREFRONT_LOW_STOCK', 5)),
            prices_include_tax=_env_bool('STOREFRONT_PRICES_INCLUDE_TAX', True),
            log_level=os.environ.get('STOREFRONT_LOG_LEVEL', 'INFO').upper(),
        )


def configure_logging(level: Optional[str] = None):
    """Configure root logging for the API, UI and scripts."""
    logging.basicConfig(
        level=level or get_settings().log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
