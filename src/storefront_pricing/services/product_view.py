"""
Product View - selection state of one open product page.

Holds the product snapshot and the caller-owned selection, seeds both on
open, and applies attribute clicks through the VariantResolver. Nothing
here mutates the product; discarding the view discards the state.
"""
import logging
from dataclasses import dataclass, field, asdict
from typing import Optional

from ..config.settings import Settings, get_settings
from ..engine.color_palette import ColorPalette
from ..engine.models import Product, Variant, PriceInfo, Resolution
from ..engine.price_converter import price_info
from ..engine.variant_resolver import VariantResolver, variant_slug, NO_VARIANT_WARNING
from .catalog_service import ProductCatalog

logger = logging.getLogger(__name__)


@dataclass
class SelectorValue:
    """One button of an attribute selector."""
    value: str
    display_value: str
    is_selected: bool
    is_compatible: bool
    stock: int
    low_stock: bool
    hex_code: Optional[str] = None


@dataclass
class SelectorGroup:
    """All buttons for one variant-creating key."""
    key: str
    label: str
    is_color: bool
    selected_value: Optional[str]
    values: list[SelectorValue] = field(default_factory=list)


class ProductView:
    """Product page state: product, selection and the resolved variant."""

    def __init__(
        self,
        product: Product,
        variant_param: Optional[str] = None,
        settings: Optional[Settings] = None,
        palette: Optional[ColorPalette] = None
    ):
        self.settings = settings or get_settings()
        self.palette = palette or ColorPalette(default_hex=self.settings.default_color_hex)
        self.product = product
        self.resolver = VariantResolver(product.variants)
        self.warnings: list[str] = []
        self.last_resolution: Optional[Resolution] = None

        self.selected_variant: Optional[Variant] = self.resolver.default_variant(variant_param)
        self.selection: dict[str, str] = self.resolver.initial_selection(self.selected_variant)

        if product.has_variants and self.selected_variant is None:
            self.warnings.append(NO_VARIANT_WARNING)

    @classmethod
    def open(
        cls,
        catalog: ProductCatalog,
        identifier: str,
        variant_param: Optional[str] = None,
        settings: Optional[Settings] = None,
        palette: Optional[ColorPalette] = None
    ) -> 'ProductView':
        """Look the product up (slug, then id) and seed the selection."""
        product = catalog.lookup(identifier)
        return cls(product, variant_param=variant_param, settings=settings, palette=palette)

    def select(self, key: str, value: str) -> Resolution:
        """Apply an attribute click; the latest click always wins."""
        resolution = self.resolver.select_attribute(self.selection, key, value)
        self.selection = resolution.selection
        self.selected_variant = resolution.variant
        self.warnings = list(resolution.warnings)
        self.last_resolution = resolution

        logger.debug(
            "Selected %s=%s on %s → %s (%s)",
            key, value, self.product.slug,
            resolution.variant.id if resolution.variant else None, resolution.matched_by
        )
        return resolution

    def price_info(self) -> PriceInfo:
        return price_info(
            self.product,
            self.selected_variant,
            prices_include_tax=self.settings.prices_include_tax
        )

    def variant_param(self) -> Optional[str]:
        """Value for the ?variant= URL parameter."""
        if self.selected_variant is None:
            return None
        return variant_slug(self.selected_variant)

    def _selector_group(self, key: str, label: str, values: list[str], is_color: bool) -> SelectorGroup:
        availability = {o.value: o for o in self.resolver.available_options(self.selection, key)}
        # Fall back to what the variants actually carry when nothing is configured
        values = values or list(availability)

        group = SelectorGroup(
            key=key,
            label=label,
            is_color=is_color,
            selected_value=self.selection.get(key),
        )
        threshold = self.settings.low_stock_threshold

        for value in values:
            option = availability.get(value)
            stock = option.stock if option else 0
            compatible = self.resolver.is_option_compatible(self.selection, key, value)
            group.values.append(SelectorValue(
                value=value,
                display_value=self.resolver.display_value(key, value),
                is_selected=self.selection.get(key) == value,
                is_compatible=compatible,
                stock=stock,
                low_stock=compatible and 0 < stock < threshold,
                hex_code=self._swatch(key, value) if is_color else None,
            ))
        return group

    def _swatch(self, key: str, value: str) -> str:
        for variant in self.resolver.well_formed:
            attr = variant.get_attribute(key)
            if attr is not None and attr.value == value and attr.hex_code:
                return attr.hex_code
        return self.palette.hex_for(value)

    def selectors(self) -> list[SelectorGroup]:
        """Selector groups for every variant-creating spec and attribute."""
        config = self.product.variant_configuration
        if not config.has_variants:
            return []

        groups = [
            self._selector_group(spec.spec_key, spec.spec_label, spec.possible_values, is_color=False)
            for spec in config.variant_creating_specs
        ]
        for attr in config.variant_attributes:
            is_color = attr.key == 'color' or any(
                a.key == attr.key and a.is_color
                for v in self.resolver.well_formed
                for a in v.identifying_attributes
            )
            groups.append(self._selector_group(attr.key, attr.label, attr.values, is_color=is_color))
        return groups

    def to_dict(self) -> dict:
        """JSON-ready page state."""
        variant = self.selected_variant
        return {
            "product": {
                "id": self.product.id,
                "name": self.product.name,
                "slug": self.product.slug,
                "brand": self.product.brand,
                "total_stock": self.product.total_stock,
                "price_range": self.product.price_range,
                "variant_options": self.product.variant_options,
                "thumbnail": self.product.thumbnail,
            },
            "selection": dict(self.selection),
            "variant": asdict(variant) if variant else None,
            "variant_param": self.variant_param(),
            "price": asdict(self.price_info()),
            "selectors": [asdict(g) for g in self.selectors()],
            "colors": [asdict(c) for c in self.resolver.available_colors(self.palette)],
            "warnings": list(self.warnings),
        }
