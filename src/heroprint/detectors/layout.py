import re
from typing import Optional

from ..dom.core import RenderNode
from .scope import HeroScope
from .visibility import is_visible

PRICING_TOKENS_REGEX = re.compile(r"(pricing|plans|per month|per year|billing|free trial)", re.IGNORECASE)

SPLIT_LEFT_RATIO = 0.4
SPLIT_RIGHT_RATIO = 0.6


def detect_layout(scope: HeroScope) -> str:
    """
    "split" when the first top-level wrapper has visible hero children both
    left of 40% and right of 60% of the viewport width.
    """
    hero = scope.body.children[0] if scope.body.children else None
    if hero is None:
        return "single-column"
    rects = [c.rect for c in hero.children if scope.in_hero(c) and is_visible(c)]
    width = scope.viewport.width
    has_left = any(r.left < width * SPLIT_LEFT_RATIO for r in rects)
    has_right = any(r.left > width * SPLIT_RIGHT_RATIO for r in rects)
    return "split" if has_left and has_right else "single-column"


def detect_alignment(h1: Optional[RenderNode]) -> Optional[str]:
    if h1 is None:
        return None
    return h1.style.text_align or None


def hero_height_ratio(scope: HeroScope) -> float:
    return round(min(1.0, scope.hero_bottom / scope.viewport.height), 2)


def has_pricing_tokens(*texts: Optional[str]) -> bool:
    return bool(PRICING_TOKENS_REGEX.search(" ".join(t for t in texts if t)))
