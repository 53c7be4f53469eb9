import logging
from functools import cmp_to_key
from typing import Optional, Callable, List

from ..dom.core import RenderNode
from ..dom.traversal import INTERACTIVE, is_tag, walk_up, next_siblings
from .scope import HeroScope
from .text import clean_text, word_count, looks_like_nav_text
from .visibility import is_visible, is_fixed_or_sticky, looks_like_footer_content

logger = logging.getLogger(__name__)

NESTED_SUBHEADING = is_tag("p", "h2", "h3")
ANCESTOR_LEVELS = 3

# Paragraph band for split/grid layouts, relative to the headline box
BAND_ABOVE = 50
PARAGRAPH_BAND_BELOW = 200
FALLBACK_BAND_BELOW = 320
CENTER_TOLERANCE = 20

CtaTextCheck = Callable[[str], bool]


def _is_sub_candidate(node: Optional[RenderNode], scope: HeroScope, is_cta_text: CtaTextCheck) -> bool:
    if node is None or not scope.in_hero(node) or scope.is_chrome(node):
        return False
    text = clean_text(node.text)
    if len(text) < 10 or word_count(text) < 3:
        return False
    if node.closest(INTERACTIVE) is not None:
        return False
    return not is_cta_text(text)


def _clean_block(node: Optional[RenderNode], scope: HeroScope, is_cta_text: CtaTextCheck) -> bool:
    return _is_sub_candidate(node, scope, is_cta_text) and node.query(INTERACTIVE) is None


def _from_sibling(start: RenderNode, scope: HeroScope, is_cta_text: CtaTextCheck) -> Optional[RenderNode]:
    """The first in-hero sibling after `start`, or a paragraph nested in it."""
    sibling = next(
        (s for s in next_siblings(start) if scope.in_hero(s) and not scope.is_chrome(s)),
        None,
    )
    if sibling is None:
        return None
    if _clean_block(sibling, scope, is_cta_text):
        return sibling
    nested = sibling.query(NESTED_SUBHEADING)
    if nested is not None and _clean_block(nested, scope, is_cta_text):
        return nested
    return None


def _from_ancestor_paragraphs(
        headline_node: RenderNode, scope: HeroScope, is_cta_text: CtaTextCheck
) -> Optional[RenderNode]:
    """Split layouts: paragraphs near the headline within a few ancestor levels."""
    rect = headline_node.rect
    ancestors = walk_up(
        headline_node, stop=lambda n: n is scope.body, limit=ANCESTOR_LEVELS, include_self=False
    )
    for ancestor in ancestors:
        paragraphs = []
        for p in ancestor.query_all(is_tag("p")):
            if p is headline_node or not _clean_block(p, scope, is_cta_text):
                continue
            near = p.rect.top <= rect.bottom + PARAGRAPH_BAND_BELOW and p.rect.bottom >= rect.top - BAND_ABOVE
            text = clean_text(p.text)
            if near and len(text) >= 20 and word_count(text) >= 5:
                paragraphs.append(p)
        if paragraphs:
            paragraphs.sort(key=lambda p: abs(p.rect.top - rect.top))
            return paragraphs[0]
    return None


def _best_generic_text(
        headline_node: Optional[RenderNode], scope: HeroScope, is_cta_text: CtaTextCheck
) -> Optional[str]:
    """Closest plausible body copy when no structural neighbour qualifies."""
    rect = headline_node.rect if headline_node is not None else None
    headline_size = headline_node.style.font_size if headline_node is not None else 0.0

    candidates: List[RenderNode] = []
    for node in scope.hero_text_nodes:
        if node is headline_node:
            continue
        if not (scope.in_hero(node) and is_visible(node)) or scope.is_chrome(node):
            continue
        if looks_like_footer_content(node) or is_fixed_or_sticky(node):
            continue
        if node.closest(INTERACTIVE) is not None or node.query(INTERACTIVE) is not None:
            continue
        text = clean_text(node.text)
        if len(text) < 12 or word_count(text) < 4:
            continue
        if looks_like_nav_text(text) or is_cta_text(text):
            continue
        if rect is not None:
            size = node.style.font_size
            near = rect.top - BAND_ABOVE <= node.rect.top <= rect.bottom + FALLBACK_BAND_BELOW
            size_ok = size <= headline_size - 4 if headline_size else True
            not_too_small = size >= max(12.0, headline_size * 0.32)
            if not (near and size_ok and not_too_small):
                continue
        candidates.append(node)

    if not candidates:
        return None

    center = (rect.top + rect.bottom) / 2 if rect is not None else None

    def compare(a: RenderNode, b: RenderNode) -> float:
        if center is not None:
            a_dist = abs(a.rect.top - center)
            b_dist = abs(b.rect.top - center)
            if abs(a_dist - b_dist) > CENTER_TOLERANCE:
                return a_dist - b_dist
        if a.style.font_size != b.style.font_size:
            return b.style.font_size - a.style.font_size
        return len(clean_text(a.text)) - len(clean_text(b.text))

    candidates.sort(key=cmp_to_key(compare))
    return clean_text(candidates[0].text)


def select_subheadline(
        scope: HeroScope, headline_node: Optional[RenderNode], is_cta_text: CtaTextCheck
) -> Optional[str]:
    """
    Finds the supporting line under the headline: the next sibling, then the
    parent's next sibling, then a nearby paragraph within three ancestors,
    and finally the best-scoring generic hero text.
    """
    if headline_node is not None:
        found = _from_sibling(headline_node, scope, is_cta_text)
        if found is None:
            parent = headline_node.parent
            if parent is not None and parent is not scope.body:
                found = _from_sibling(parent, scope, is_cta_text)
        if found is None:
            found = _from_ancestor_paragraphs(headline_node, scope, is_cta_text)
        if found is not None:
            logger.debug("Subheadline found next to headline in <%s>", found.tag)
            return clean_text(found.text)

    return _best_generic_text(headline_node, scope, is_cta_text)
