"""
Variant Resolver - matches attribute selections to product variants.

Used by the product page on load and on every attribute click:
- Exact match: every identifying attribute of a variant agrees with the selection
- Fallback: best compatible active, in-stock variant, boosted when it keeps
  the value the user just picked
- Option availability and color swatches for the selector UI

Malformed variants (identifying_attributes is None) never match and never
raise; they are simply skipped.
"""
import logging
import re
from typing import Optional

from .models import Variant, Resolution, OptionAvailability, ColorOption
from .color_palette import ColorPalette

logger = logging.getLogger(__name__)

# Extra points for a candidate that keeps the value of the key just changed
CHANGED_KEY_BOOST = 2

NO_VARIANT_WARNING = "Please select a variant before proceeding"


def changed_key_between(current: dict[str, str], target: dict[str, str]) -> Optional[str]:
    """First key (in target order) whose value differs from the current selection."""
    for key, value in target.items():
        if current.get(key) != value:
            return key
    return None


def variant_slug(variant: Variant) -> Optional[str]:
    """URL value for a variant: its slug, else its name slugified."""
    if variant.slug:
        return variant.slug
    if variant.name:
        return re.sub(r'\s+', '-', variant.name.lower())
    return None


def _matches_exactly(variant: Variant, selection: dict[str, str]) -> bool:
    if not variant.is_well_formed:
        return False
    return all(selection.get(attr.key) == attr.value for attr in variant.identifying_attributes)


def resolve_variant(
    variants: list[Variant],
    selection: dict[str, str],
    changed_key: Optional[str] = None
) -> Optional[Variant]:
    """Exact match first, then the best compatible fallback, else None."""
    return VariantResolver(variants).resolve(selection, changed_key)


class VariantResolver:
    """
    Resolves selections against one product's variant snapshot.

    The resolver never owns the selection; callers pass it in and decide
    what to do with the returned variant.
    """

    def __init__(self, variants: Optional[list[Variant]] = None):
        self.variants = list(variants or [])
        self.well_formed = [v for v in self.variants if v.is_well_formed]

        skipped = len(self.variants) - len(self.well_formed)
        if skipped:
            logger.debug("Skipping %d malformed variant(s) during resolution", skipped)

    @property
    def candidates(self) -> list[Variant]:
        """Variants eligible for fallback resolution."""
        return [v for v in self.well_formed if v.is_purchasable]

    def find_exact(self, selection: dict[str, str]) -> Optional[Variant]:
        """First variant whose every identifying attribute agrees with the selection."""
        for variant in self.well_formed:
            if _matches_exactly(variant, selection):
                return variant
        return None

    def score_candidates(
        self,
        target: dict[str, str],
        changed_key: Optional[str] = None
    ) -> list[tuple[Variant, int, bool]]:
        """
        Score every candidate against the target selection.

        Returns (variant, score, exact_key_match) ranked by exact_key_match,
        then score. Ties keep variant list order.
        """
        scored = []
        for variant in self.candidates:
            attrs = variant.attribute_map()
            score = sum(1 for key, value in target.items() if attrs.get(key) == value)

            exact_key_match = (
                changed_key is not None
                and changed_key in target
                and attrs.get(changed_key) == target[changed_key]
            )
            if exact_key_match:
                score += CHANGED_KEY_BOOST

            scored.append((variant, score, exact_key_match))

        scored.sort(key=lambda s: (not s[2], -s[1]))
        return scored

    def find_best_compatible(
        self,
        target: dict[str, str],
        changed_key: Optional[str] = None
    ) -> Optional[Variant]:
        """Top-ranked active, in-stock variant for the target, or None if there are none."""
        scored = self.score_candidates(target, changed_key)
        if not scored:
            return None
        return scored[0][0]

    def resolve(self, selection: dict[str, str], changed_key: Optional[str] = None) -> Optional[Variant]:
        variant = self.find_exact(selection)
        if variant is not None:
            return variant
        return self.find_best_compatible(selection, changed_key)

    def is_option_compatible(self, selection: dict[str, str], key: str, value: str) -> bool:
        """Whether picking key=value leaves any variant to fall back to."""
        target = {**selection, key: value}
        changed_key = key if selection.get(key) != value else None
        return self.find_best_compatible(target, changed_key) is not None

    def available_options(self, selection: dict[str, str], key: str) -> list[OptionAvailability]:
        """
        Aggregate the values of one key across active variants.

        A value is compatible when at least one variant carrying it agrees
        with every other selected attribute; the queried key is ignored.
        """
        others = {k: v for k, v in selection.items() if k != key and v}
        options: dict[str, OptionAvailability] = {}

        for variant in self.well_formed:
            if not variant.is_active:
                continue
            attr = variant.get_attribute(key)
            if attr is None:
                continue

            attrs = variant.attribute_map()
            compatible = all(attrs.get(k) == v for k, v in others.items())

            option = options.get(attr.value)
            if option is None:
                option = OptionAvailability(
                    value=attr.value,
                    display_value=attr.display_value or attr.value,
                )
                options[attr.value] = option

            option.stock += variant.stock_quantity
            option.variant_count += 1
            option.in_stock = option.stock > 0
            option.is_compatible = option.is_compatible or compatible

        return list(options.values())

    def available_colors(self, palette: Optional[ColorPalette] = None) -> list[ColorOption]:
        """Color swatches with stock, from the 'color' key or any is_color attribute."""
        palette = palette or ColorPalette()
        colors: dict[str, ColorOption] = {}

        for variant in self.well_formed:
            if not variant.is_active:
                continue
            color_attr = next(
                (a for a in variant.identifying_attributes if a.key == 'color' or a.is_color),
                None
            )
            if color_attr is None:
                continue

            option = colors.get(color_attr.value)
            if option is None:
                option = ColorOption(
                    value=color_attr.value,
                    display_value=color_attr.display_value or color_attr.value,
                    hex_code=color_attr.hex_code or palette.hex_for(color_attr.value),
                )
                colors[color_attr.value] = option

            option.stock += variant.stock_quantity
            option.variant_count += 1
            option.variant_ids.append(variant.id)
            option.in_stock = option.stock > 0

        return list(colors.values())

    def display_value(self, key: str, value: str) -> str:
        for variant in self.well_formed:
            attr = variant.get_attribute(key)
            if attr is not None and attr.value == value:
                return attr.display_value or value
        return value

    def default_variant(self, variant_param: Optional[str] = None) -> Optional[Variant]:
        """
        Initial variant for the page.

        Priority: URL parameter (slug, id or slugified name), then the first
        active variant, then the first variant.
        """
        if not self.well_formed:
            return None

        if variant_param:
            for variant in self.well_formed:
                if variant_param in (variant.slug, variant.id, variant_slug(variant)):
                    return variant
            logger.info("Variant parameter '%s' matched no variant, using default", variant_param)

        for variant in self.well_formed:
            if variant.is_active:
                return variant
        return self.well_formed[0]

    @staticmethod
    def initial_selection(variant: Optional[Variant]) -> dict[str, str]:
        if variant is None:
            return {}
        return {
            attr.key: attr.value
            for attr in variant.identifying_attributes or []
            if attr.key and attr.value
        }

    def select_attribute(self, selection: dict[str, str], key: str, value: str) -> Resolution:
        """
        Apply one attribute click to the caller's selection.

        The returned Resolution carries the new selection the caller should
        store. On fallback the selection snaps to every attribute of the
        fallback variant so the selectors stay consistent.
        """
        target = {**selection, key: value}
        resolution = Resolution(variant=None, selection=target, matched_by="none", changed_key=key)
        resolution.add_trace("Selection", f"{key} set", value)

        variant = self.find_exact(target)
        if variant is not None:
            resolution.variant = variant
            resolution.matched_by = "exact"
            resolution.add_trace("Exact Match", "All variant attributes agree", variant.id)
            return resolution

        resolution.add_trace("Exact Match", "No variant matches the full selection")

        # Re-clicking the current value changes nothing, so nothing is boosted
        changed_key = key if selection.get(key) != value else None
        scored = self.score_candidates(target, changed_key=changed_key)
        if not scored:
            resolution.add_trace("Fallback", "No active, in-stock variant to fall back to")
            resolution.add_warning(NO_VARIANT_WARNING)
            return resolution

        variant, score, exact_key_match = scored[0]
        snapped = dict(selection)
        snapped.update(variant.attribute_map())

        resolution.variant = variant
        resolution.selection = snapped
        resolution.matched_by = "fallback"
        resolution.add_trace(
            "Fallback",
            f"Best compatible variant (score {score}, keeps {key}: {'yes' if exact_key_match else 'no'})",
            variant.id
        )
        if snapped.get(key) != value:
            resolution.add_warning(f"{key} '{value}' is not available with the current selection")
        return resolution
