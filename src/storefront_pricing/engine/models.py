"""
Data models for the variant and pricing engine.

Uses dataclasses for structured, type-safe data representation.
Everything here is the canonical shape produced by data.normalize;
upstream documents never reach the engine directly.
"""
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class IdentifyingAttribute:
    """A key/value pair that distinguishes one variant from another."""
    key: str
    value: str
    label: str = ""
    display_value: str = ""
    hex_code: Optional[str] = None
    is_color: bool = False


@dataclass
class Variant:
    """A sellable configuration of a product."""
    id: str
    name: str
    price: float
    mrp: Optional[float] = None
    stock_quantity: int = 0
    is_active: bool = True
    # None means the upstream document was malformed (missing or not a list)
    identifying_attributes: Optional[list[IdentifyingAttribute]] = field(default_factory=list)
    slug: Optional[str] = None
    sku: Optional[str] = None
    images: list[str] = field(default_factory=list)

    @property
    def is_well_formed(self) -> bool:
        return self.identifying_attributes is not None

    @property
    def is_purchasable(self) -> bool:
        """Active and in stock: the pool the fallback search draws from."""
        return self.is_active and self.stock_quantity > 0

    def attribute_map(self) -> dict[str, str]:
        """Key → value map of this variant's identifying attributes."""
        if not self.identifying_attributes:
            return {}
        return {attr.key: attr.value for attr in self.identifying_attributes}

    def get_attribute(self, key: str) -> Optional[IdentifyingAttribute]:
        for attr in self.identifying_attributes or []:
            if attr.key == key:
                return attr
        return None


@dataclass
class VariantSpec:
    """A specification key that creates variants (RAM, Storage, ...)."""
    spec_key: str
    spec_label: str
    possible_values: list[str] = field(default_factory=list)
    section_title: str = ""


@dataclass
class VariantAttribute:
    """A free attribute that creates variants, typically color."""
    key: str
    label: str
    values: list[str] = field(default_factory=list)


@dataclass
class VariantConfiguration:
    """Which attribute keys participate in variant differentiation."""
    has_variants: bool = False
    variant_type: str = "None"
    variant_creating_specs: list[VariantSpec] = field(default_factory=list)
    variant_attributes: list[VariantAttribute] = field(default_factory=list)

    @property
    def spec_keys(self) -> list[str]:
        keys = [spec.spec_key for spec in self.variant_creating_specs]
        keys.extend(attr.key for attr in self.variant_attributes if attr.key not in keys)
        return keys


@dataclass
class Product:
    """Canonical product record held by the product page."""
    id: str
    name: str
    slug: str
    base_price: float
    mrp: Optional[float] = None
    tax_rate: Optional[float] = None
    stock_quantity: int = 0
    variants: list[Variant] = field(default_factory=list)
    variant_configuration: VariantConfiguration = field(default_factory=VariantConfiguration)
    is_active: bool = True
    status: Optional[str] = None
    brand: Optional[str] = None
    thumbnail: Optional[str] = None

    @property
    def has_variants(self) -> bool:
        return self.variant_configuration.has_variants and len(self.variants) > 0

    @property
    def total_stock(self) -> int:
        if self.has_variants:
            return sum(v.stock_quantity for v in self.variants)
        return self.stock_quantity

    @property
    def lowest_price(self) -> float:
        if self.has_variants:
            return min(v.price for v in self.variants)
        return self.base_price

    @property
    def price_range(self) -> dict:
        if not self.has_variants:
            return {"min": self.base_price, "max": self.base_price, "has_range": False}
        prices = [v.price for v in self.variants]
        low, high = min(prices), max(prices)
        return {"min": low, "max": high, "has_range": low != high}

    @property
    def variant_options(self) -> dict[str, dict]:
        """Spec key → label and the distinct values present on variants."""
        if not self.variant_configuration.has_variants:
            return {}

        options = {}
        for spec in self.variant_configuration.variant_creating_specs:
            values = []
            for variant in self.variants:
                attr = variant.get_attribute(spec.spec_key)
                if attr and attr.value and attr.value not in values:
                    values.append(attr.value)
            options[spec.spec_key] = {"label": spec.spec_label, "values": values}
        return options


@dataclass
class OptionAvailability:
    """Aggregated availability of one value of one attribute key."""
    value: str
    display_value: str
    stock: int = 0
    in_stock: bool = False
    variant_count: int = 0
    is_compatible: bool = False


@dataclass
class ColorOption:
    """Aggregated availability of one color swatch."""
    value: str
    display_value: str
    hex_code: str
    stock: int = 0
    in_stock: bool = False
    variant_count: int = 0
    variant_ids: list[str] = field(default_factory=list)


@dataclass
class PriceInfo:
    """Everything the price block of the product page renders."""
    price: float
    mrp: Optional[float]
    show_mrp: bool
    discount_percentage: int
    tax_rate: Optional[float]
    price_exclusive: float
    price_inclusive: float
    tax_amount: float
    stock_quantity: int


@dataclass
class TraceStep:
    """A single step in the variant resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class Resolution:
    """Result of applying one attribute selection."""
    variant: Optional[Variant]
    selection: dict[str, str]
    matched_by: str  # "exact", "fallback" or "none"
    changed_key: Optional[str] = None
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the resolution trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        if warning not in self.warnings:
            self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)
