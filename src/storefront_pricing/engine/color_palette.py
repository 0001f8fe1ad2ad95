"""
Color Palette - color name → swatch hex lookup.

Loaded once from color_palette.csv (name,hex) at startup.
"""
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

logger = logging.getLogger(__name__)

DEFAULT_HEX = "#CCCCCC"


class ColorPalette:
    """Case-insensitive swatch lookup with a gray fallback for unknown colors."""

    def __init__(self, colors: Optional[dict[str, str]] = None, default_hex: str = DEFAULT_HEX):
        self.default_hex = default_hex
        self.colors = {
            str(name).strip().lower(): str(hex_code).strip()
            for name, hex_code in (colors or {}).items()
        }

    @classmethod
    def load(cls, path: Path, default_hex: str = DEFAULT_HEX) -> 'ColorPalette':
        """Load the palette CSV; a missing file gives an empty palette."""
        if not path.exists():
            logger.warning("Color palette not found at %s, every swatch falls back to %s", path, default_hex)
            return cls(default_hex=default_hex)

        df = pd.read_csv(path, dtype=str).fillna('')
        df.columns = [c.strip().lower() for c in df.columns]
        if 'name' not in df.columns or 'hex' not in df.columns:
            raise ValueError(f"Color palette {path} must have 'name' and 'hex' columns")

        df = df[(df['name'].str.strip() != '') & (df['hex'].str.strip() != '')]
        palette = cls(dict(zip(df['name'], df['hex'])), default_hex=default_hex)
        logger.info("Loaded %d palette colors from %s", len(palette), path)
        return palette

    def hex_for(self, name: Optional[str]) -> str:
        if not name:
            return self.default_hex
        return self.colors.get(name.strip().lower(), self.default_hex)

    def __contains__(self, name: str) -> bool:
        return name.strip().lower() in self.colors

    def __len__(self) -> int:
        return len(self.colors)
