"""Design tokens of a storefront.

Each group of tokens is a value object. A group is replaced wholesale on
update after the patch has been merged over its current values, so a
partial update to one group never touches another.
"""

import re
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Integer, String

from commerce.domain import commerce

HEX_COLOUR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class PaletteMode(Enum):
    LIGHT = "light"
    DARK = "dark"


class HeroVariant(Enum):
    FULL_BLEED = "full_bleed"
    SPLIT = "split"
    MINIMAL = "minimal"
    CAROUSEL = "carousel"
    VIDEO = "video"


class ProductCardVariant(Enum):
    MINIMAL = "minimal"
    ELEVATED = "elevated"
    BORDERED = "bordered"
    OVERLAY = "overlay"


class NavVariant(Enum):
    STANDARD = "standard"
    CENTERED = "centered"
    MINIMAL = "minimal"
    SIDEBAR = "sidebar"


class CollectionVariant(Enum):
    GRID = "grid"
    MASONRY = "masonry"
    LIST = "list"
    CAROUSEL = "carousel"


class CheckoutVariant(Enum):
    SINGLE_PAGE = "single_page"
    MULTI_STEP = "multi_step"
    WHATSAPP = "whatsapp"


class Layout(Enum):
    STANDARD = "standard"
    EDITORIAL = "editorial"
    BOUTIQUE = "boutique"
    MINIMAL = "minimal"


class Spacing(Enum):
    COMPACT = "compact"
    COMFORTABLE = "comfortable"
    SPACIOUS = "spacious"


class Radius(Enum):
    NONE = "none"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    FULL = "full"


class ImageStyle(Enum):
    NATURAL = "natural"
    ROUNDED = "rounded"
    FRAMED = "framed"
    SHADOW = "shadow"


class Animation(Enum):
    NONE = "none"
    SUBTLE = "subtle"
    PLAYFUL = "playful"


PALETTE_SLOTS = ("primary", "secondary", "accent", "background", "surface", "text", "text_muted")


@commerce.value_object(part_of="Store")
class Palette:
    """Seven colour slots as ``#RRGGBB`` hex strings."""

    mode = String(choices=PaletteMode, default=PaletteMode.LIGHT.value)
    seed = String(max_length=7)
    primary = String(max_length=7, default="#1A1A2E")
    secondary = String(max_length=7, default="#4A4E69")
    accent = String(max_length=7, default="#E94560")
    background = String(max_length=7, default="#FFFFFF")
    surface = String(max_length=7, default="#F5F5F5")
    text = String(max_length=7, default="#1A1A2E")
    text_muted = String(max_length=7, default="#5C5C70")

    @invariant.post
    def colours_must_be_hex(self):
        bad = [slot for slot in PALETTE_SLOTS if getattr(self, slot) and not HEX_COLOUR.match(getattr(self, slot))]
        if self.seed and not HEX_COLOUR.match(self.seed):
            bad.append("seed")
        if bad:
            raise ValidationError({slot: ["Colour must be a #RRGGBB hex value"] for slot in bad})


@commerce.value_object(part_of="Store")
class Fonts:
    display = String(max_length=100, default="Playfair Display")
    body = String(max_length=100, default="Inter")
    scale = Float(min_value=0.5, max_value=2.0, default=1.0)

    @invariant.post
    def names_cannot_be_blank(self):
        if not (self.display or "").strip() or not (self.body or "").strip():
            raise ValidationError({"fonts": ["Font names cannot be empty"]})


@commerce.value_object(part_of="Store")
class HeroStyle:
    style = String(choices=HeroVariant, default=HeroVariant.FULL_BLEED.value)
    height = String(max_length=20, default="large")
    overlay_opacity = Float(min_value=0.0, max_value=1.0, default=0.3)
    background_image = String(max_length=1000)


@commerce.value_object(part_of="Store")
class ProductCardStyle:
    style = String(choices=ProductCardVariant, default=ProductCardVariant.ELEVATED.value)
    show_price = Boolean(default=True)
    show_rating = Boolean(default=False)
    image_ratio = String(max_length=10, default="1:1")


@commerce.value_object(part_of="Store")
class NavStyle:
    style = String(choices=NavVariant, default=NavVariant.STANDARD.value)
    show_search = Boolean(default=True)
    show_cart = Boolean(default=True)
    show_whatsapp = Boolean(default=True)


@commerce.value_object(part_of="Store")
class CollectionStyle:
    style = String(choices=CollectionVariant, default=CollectionVariant.GRID.value)
    mobile_columns = Integer(min_value=1, max_value=3, default=2)
    desktop_columns = Integer(min_value=2, max_value=6, default=4)
    pagination = String(max_length=20, default="infinite")


@commerce.value_object(part_of="Store")
class CheckoutStyle:
    style = String(choices=CheckoutVariant, default=CheckoutVariant.SINGLE_PAGE.value)
    show_trust_badges = Boolean(default=True)
    whatsapp_checkout = Boolean(default=True)


# Group name (camelCase, as addressed by actions) -> (attribute, value object)
DESIGN_GROUPS = {
    "palette": ("palette", Palette),
    "fonts": ("fonts", Fonts),
    "hero": ("hero", HeroStyle),
    "productCard": ("product_card", ProductCardStyle),
    "nav": ("nav", NavStyle),
    "collection": ("collection", CollectionStyle),
    "checkout": ("checkout", CheckoutStyle),
}

# Scalar token (camelCase) -> (attribute, allowed values)
DESIGN_SCALARS = {
    "layout": ("layout", Layout),
    "spacing": ("spacing", Spacing),
    "radius": ("radius", Radius),
    "imageStyle": ("image_style", ImageStyle),
    "animation": ("animation", Animation),
}
