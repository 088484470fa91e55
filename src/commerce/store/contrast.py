"""WCAG 2.1 contrast checks and automatic palette correction.

Contrast ratio is ``(L1 + 0.05) / (L2 + 0.05)`` over the relative
luminance of the lighter and darker colour. A failing foreground keeps its
hue and saturation; only its HSL lightness moves, by binary search, until
the ratio is met.
"""

import colorsys

from commerce.config import setting

NEAR_BLACK = "#1A1A2E"
NEAR_WHITE = "#F5F5F5"

# (foreground slot, background slot) pairs that must stay readable
CHECKED_PAIRS = (("text", "background"), ("textMuted", "background"), ("primary", "background"))


def _channels(hex_colour: str) -> tuple[int, int, int]:
    value = hex_colour.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Invalid hex colour: {hex_colour!r}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def is_hex_colour(value) -> bool:
    if not isinstance(value, str) or not value.startswith("#"):
        return False
    try:
        _channels(value)
    except ValueError:
        return False
    return True


def _to_hex(red: float, green: float, blue: float) -> str:
    return "#" + "".join(f"{round(max(0.0, min(1.0, c)) * 255):02X}" for c in (red, green, blue))


def relative_luminance(hex_colour: str) -> float:
    def linear(channel: int) -> float:
        c = channel / 255
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    red, green, blue = (linear(c) for c in _channels(hex_colour))
    return 0.2126 * red + 0.7152 * green + 0.0722 * blue


def contrast_ratio(first: str, second: str) -> float:
    lighter, darker = sorted((relative_luminance(first), relative_luminance(second)), reverse=True)
    return (lighter + 0.05) / (darker + 0.05)


def meets_contrast(foreground: str, background: str, minimum: float | None = None) -> bool:
    minimum = float(setting("MIN_CONTRAST_RATIO")) if minimum is None else minimum
    return contrast_ratio(foreground, background) >= minimum


def adjust_for_contrast(foreground: str, background: str, minimum: float | None = None) -> str:
    """Return ``foreground`` or the closest readable variant of it."""
    minimum = float(setting("MIN_CONTRAST_RATIO")) if minimum is None else minimum
    if contrast_ratio(foreground, background) >= minimum:
        return foreground.upper()

    red, green, blue = (c / 255 for c in _channels(foreground))
    hue, lightness, saturation = colorsys.rgb_to_hls(red, green, blue)

    # Darken against light backgrounds, lighten against dark ones.
    darken = relative_luminance(background) > 0.179
    low, high = (0.0, lightness) if darken else (lightness, 1.0)
    extreme = 0.0 if darken else 1.0

    best = None
    if contrast_ratio(_to_hex(*colorsys.hls_to_rgb(hue, extreme, saturation)), background) >= minimum:
        for _ in range(24):
            middle = (low + high) / 2
            candidate = _to_hex(*colorsys.hls_to_rgb(hue, middle, saturation))
            if contrast_ratio(candidate, background) >= minimum:
                best = candidate
                if darken:
                    low = middle
                else:
                    high = middle
            elif darken:
                high = middle
            else:
                low = middle
        if best is None:
            best = _to_hex(*colorsys.hls_to_rgb(hue, extreme, saturation))

    if best is not None:
        return best

    fallback = NEAR_BLACK if darken else NEAR_WHITE
    if contrast_ratio(fallback, background) >= minimum:
        return fallback
    return "#000000" if darken else "#FFFFFF"


def fix_palette(palette: dict, minimum: float | None = None) -> tuple[dict, list[str]]:
    """Correct unreadable foregrounds of a camelCase palette.

    Returns the (possibly) corrected palette and the slots that changed.
    Slots absent from the palette are not checked.
    """
    fixed = dict(palette)
    changed = []
    background = fixed.get("background")
    if not background:
        return fixed, changed

    for foreground_slot, _ in CHECKED_PAIRS:
        foreground = fixed.get(foreground_slot)
        if not foreground:
            continue
        corrected = adjust_for_contrast(foreground, background, minimum)
        if corrected.upper() != foreground.upper():
            fixed[foreground_slot] = corrected
            changed.append(foreground_slot)

    return fixed, changed
