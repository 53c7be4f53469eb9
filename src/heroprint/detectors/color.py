"""
Background/text colour sampling for the hero and the colour vocabulary used
in fingerprints (`dark`, `light_blue`, `pink-yellow-gradient`, ...).
"""
import colorsys
import logging
import re
from typing import List, Optional

from pydantic import BaseModel, Field

from ..dom.core import RenderNode
from ..dom.hit_test import HitTester, element_from_point
from ..dom.traversal import walk_up
from .scope import HeroScope

logger = logging.getLogger(__name__)

_NUM = r"(?:\d+(?:\.\d+)?|\.\d+)"
RGBA_REGEX = re.compile(rf"rgba?\((\d+),\s*(\d+),\s*(\d+)(?:,\s*({_NUM}))?\s*\)", re.IGNORECASE)
HSLA_REGEX = re.compile(
    rf"hsla?\(({_NUM})(?:deg)?\s*[\s,]\s*({_NUM})%\s*[\s,]\s*({_NUM})%(?:\s*[\s,/]\s*({_NUM}%?))?\s*\)",
    re.IGNORECASE,
)
COLOR_TOKEN_REGEX = re.compile(r"(rgba?\([^)]+\)|hsla?\([^)]+\)|#[0-9a-fA-F]{3,8})")
GRADIENT_REGEX = re.compile(r"gradient", re.IGNORECASE)

TRANSPARENT = "rgba(0, 0, 0, 0)"
MAX_BACKGROUND_WALK = 10
MAX_GRADIENT_NAMES = 3
DARK_BACKGROUND_LUMINANCE = 0.2
LIGHT_TEXT_LUMINANCE = 0.7

# (upper hue bound, light name, name); luminance above 0.6 picks the light name
HUE_BUCKETS = (
    (15, "light_red", "red"),
    (35, "peach", "orange"),
    (65, "light_yellow", "yellow"),
    (160, "light_green", "green"),
    (200, "light_cyan", "cyan"),
    (260, "light_blue", "blue"),
    (290, "light_purple", "purple"),
    (345, "pink", "magenta"),
)


class ColorSample(BaseModel):
    r: int = Field(ge=0, le=255)
    g: int = Field(ge=0, le=255)
    b: int = Field(ge=0, le=255)
    a: float = Field(default=1.0, ge=0, le=1)

    @property
    def luminance(self) -> float:
        return (0.2126 * self.r + 0.7152 * self.g + 0.0722 * self.b) / 255


class ThemeResult(BaseModel):
    is_dark: bool = False
    hero_bg: Optional[str] = None
    hero_bg_gradient: Optional[str] = None
    hero_bg_color_name: Optional[str] = None
    hero_bg_gradient_tag: Optional[str] = None
    hero_text_color: Optional[str] = None
    sampled_element: Optional[str] = None


def _channel(value: str) -> int:
    return min(255, int(value))


def parse_rgba(value: Optional[str]) -> Optional[ColorSample]:
    match = RGBA_REGEX.search(value or "")
    if not match:
        return None
    alpha = float(match.group(4)) if match.group(4) is not None else 1.0
    return ColorSample(
        r=_channel(match.group(1)), g=_channel(match.group(2)), b=_channel(match.group(3)),
        a=min(1.0, alpha),
    )


def parse_hsla(value: Optional[str]) -> Optional[ColorSample]:
    match = HSLA_REGEX.search(value or "")
    if not match:
        return None
    h = (float(match.group(1)) % 360) / 360
    s = min(100.0, float(match.group(2))) / 100
    lightness = min(100.0, float(match.group(3))) / 100
    raw_alpha = match.group(4)
    if raw_alpha is None:
        alpha = 1.0
    elif raw_alpha.endswith("%"):
        alpha = float(raw_alpha[:-1]) / 100
    else:
        alpha = float(raw_alpha)
    r, g, b = colorsys.hls_to_rgb(h, lightness, s)
    return ColorSample(r=round(r * 255), g=round(g * 255), b=round(b * 255), a=min(1.0, alpha))


def parse_hex(value: Optional[str]) -> Optional[ColorSample]:
    if not value or not value.startswith("#"):
        return None
    digits = value[1:]
    try:
        if len(digits) == 3:
            return ColorSample(r=int(digits[0] * 2, 16), g=int(digits[1] * 2, 16), b=int(digits[2] * 2, 16))
        if len(digits) >= 6:
            return ColorSample(r=int(digits[0:2], 16), g=int(digits[2:4], 16), b=int(digits[4:6], 16))
    except ValueError:
        return None
    return None


def parse_any_color(value: Optional[str]) -> Optional[ColorSample]:
    """rgb()/rgba(), hsl()/hsla() or #hex; None for anything else."""
    return parse_rgba(value) or parse_hsla(value) or parse_hex(value)


def gradient_colors(gradient: Optional[str]) -> List[ColorSample]:
    """Parsed colour stops in textual order."""
    colors = []
    for token in COLOR_TOKEN_REGEX.findall(gradient or ""):
        parsed = parse_any_color(token)
        if parsed is not None:
            colors.append(parsed)
    return colors


def classify_color(color: Optional[ColorSample]) -> Optional[str]:
    if color is None:
        return None
    r, g, b = color.r, color.g, color.b
    max_c, min_c = max(r, g, b), min(r, g, b)
    delta = max_c - min_c
    lum = color.luminance

    if max_c <= 35 and delta <= 10:
        return "black"
    # Chromatic dark colours (navy, burgundy) fall through to a hue name
    if lum < 0.15 and delta < 40:
        return "dark"
    if min_c >= 240:
        return "white"
    if lum > 0.9:
        return "off_white"
    if delta < 20:
        return "light_grey" if lum > 0.5 else "dark_grey"

    if max_c == r:
        hue = ((g - b) / delta) % 6
    elif max_c == g:
        hue = (b - r) / delta + 2
    else:
        hue = (r - g) / delta + 4
    hue = round(hue * 60)
    if hue < 0:
        hue += 360

    if hue >= 345:
        return "light_red" if lum > 0.6 else "red"
    for bound, light_name, name in HUE_BUCKETS:
        if hue < bound:
            return light_name if lum > 0.6 else name
    return None


def build_gradient_tag(gradient: Optional[str]) -> Optional[str]:
    """e.g. 'pink-yellow-gradient': up to three stop names, consecutive repeats collapsed."""
    names: List[str] = []
    for color in gradient_colors(gradient):
        name = classify_color(color)
        if name and (not names or names[-1] != name):
            names.append(name)
    if not names:
        return None
    return "-".join(names[:MAX_GRADIENT_NAMES]) + "-gradient"


def describe_element(node: Optional[RenderNode]) -> Optional[str]:
    """tag plus first class name, like 'div.hero'."""
    if node is None:
        return None
    class_name = node.class_name.split(" ")[0] if node.class_name else ""
    return f"{node.tag}.{class_name}" if class_name else node.tag


def _first_opaque_stop(gradient: str) -> Optional[ColorSample]:
    return next((c for c in gradient_colors(gradient) if c.a > 0), None)


def analyze_theme(
        scope: HeroScope, headline_node: Optional[RenderNode], hit_tester: Optional[HitTester] = None
) -> ThemeResult:
    """
    Samples the background just left of the headline and compares it with
    the headline's text colour. Dark theme: background luminance below 0.2
    with text luminance above 0.7.
    """
    result = ThemeResult()
    if headline_node is None:
        return result
    rect = headline_node.rect
    x = max(10.0, rect.left - 30)
    y = max(10.0, rect.top + rect.height / 2)

    hit_tester = hit_tester or element_from_point
    try:
        hit = hit_tester(scope.root, x, y)
    except Exception as e:
        logger.warning(f"Hit test at ({x:.0f}, {y:.0f}) failed: {e}")
        return result
    if hit is None:
        return result

    background, background_image, sampled = TRANSPARENT, "none", None
    for node in walk_up(hit, limit=MAX_BACKGROUND_WALK):
        background = node.style.background_color
        background_image = node.style.background_image
        if (background and background != TRANSPARENT) or (background_image and background_image != "none"):
            sampled = node
            break

    result.sampled_element = describe_element(sampled)
    result.hero_bg = background

    has_gradient = bool(
        background_image and background_image != "none" and GRADIENT_REGEX.search(background_image)
    )
    if has_gradient:
        result.hero_bg_gradient = background_image
        result.hero_bg_gradient_tag = build_gradient_tag(background_image)

    text_color = headline_node.style.color
    result.hero_text_color = text_color

    bg_color = parse_rgba(background)
    if bg_color is None or bg_color.a <= 0:
        bg_color = _first_opaque_stop(background_image) if has_gradient else None

    if bg_color is not None:
        result.hero_bg_color_name = classify_color(bg_color)
        if bg_color.luminance < DARK_BACKGROUND_LUMINANCE:
            text = parse_any_color(text_color)
            text_luminance = text.luminance if text is not None else 0.0
            result.is_dark = text_luminance > LIGHT_TEXT_LUMINANCE

    if result.is_dark:
        logger.debug("Dark hero: background %s, text %s", background, text_color)
    return result
