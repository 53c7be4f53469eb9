"""
Headline detection and shared text helpers.

Text is read from the renderer's inner text. The headline is normally the
first visible hero <h1>, but logo-sized or nav-like headings lose to a clearly
larger text block further down, and animated headings split over several
elements are widened to their wrapper.
"""
import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from ..dom.core import RenderNode
from ..dom.traversal import (
    walk_up, is_tag, has_role, attr_startswith, attr_equals, any_of, all_of, SECTION_BOUNDARY
)
from .scope import HeroScope
from .visibility import is_fixed_or_sticky

logger = logging.getLogger(__name__)

MAX_HEADLINE_WORDS = 30
FALLBACK_HEADLINE_WORDS = 15

NAV_WORDS = re.compile(
    r"\b(log\s?in|sign\s?in|sign\s?up|pricing|blog|resources|community|support|contact|about|products?"
    r"|solutions?|enterprise|platform|documentation|docs|careers|partners?)\b",
    re.IGNORECASE,
)
SKIP_LINK_REGEX = re.compile(r"skip\s*(to)?\s*(main|content|navigation)", re.IGNORECASE)
LEADING_SKIP_REGEX = re.compile(r"^skip\s*(to)?\s*(main\s*)?(content|navigation)\s*", re.IGNORECASE)
FIRST_SENTENCE_REGEX = re.compile(r"^[^.!?]+[.!?]")
HAS_LETTERS = re.compile(r"[a-zA-Z]{2,}")

_WHITESPACE = re.compile(r"\s+")

SKIP_LINK = all_of(is_tag("a"), attr_startswith("href", "#"))
NESTED_CHROME = any_of(is_tag("a", "button", "nav", "header"), has_role("button"))
RICH_TEXT_CONTAINER = attr_equals("data-framer-component-type", "RichTextContainer")


def clean_text(text: Optional[str]) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def word_count(text: Optional[str]) -> int:
    return len((text or "").split())


def looks_like_nav_text(text: Optional[str]) -> bool:
    """Three or more navigation keywords making up a quarter of the words."""
    if not text:
        return False
    matches = len(NAV_WORDS.findall(text))
    words = word_count(text)
    return matches >= 3 and words > 0 and matches / words >= 0.25


def truncate_headline(text: Optional[str]) -> Optional[str]:
    """Caps runaway text at the first sentence, or at 15 words."""
    if not text:
        return text
    words = text.split()
    if len(words) <= MAX_HEADLINE_WORDS:
        return text
    sentence = FIRST_SENTENCE_REGEX.match(text)
    if sentence and word_count(sentence.group(0)) <= MAX_HEADLINE_WORDS:
        return sentence.group(0).strip()
    return " ".join(words[:FALLBACK_HEADLINE_WORDS])


def _text_without(node: RenderNode, removed: List[RenderNode]) -> str:
    """
    The node's text with the removed subtrees cut out. Children are matched
    right to left against the text so each cut lands on that child's own span,
    and the text between children (the node's own copy) is kept.
    """
    if any(node is r for r in removed):
        return ""
    text = clean_text(node.text)
    if not node.children or not any(node.contains(r) for r in removed):
        return text

    parts = []
    end = len(text)
    for child in reversed(node.children):
        fragment = clean_text(child.text)
        start = text.rfind(fragment, 0, end) if fragment else -1
        if start < 0:
            continue
        parts.append(text[start + len(fragment):end])
        parts.append(_text_without(child, removed))
        end = start
    parts.append(text[:end])
    return clean_text(" ".join(reversed(parts)))


def direct_headline_text(node: Optional[RenderNode]) -> str:
    """
    The heading's own copy: skip links are dropped, and nested links/buttons
    are stripped only when there are three or more of them (a single link
    wrapping the headline is kept).
    """
    if node is None:
        return ""
    full = clean_text(node.text)

    removed = [
        a for a in node.query_all(SKIP_LINK)
        if SKIP_LINK_REGEX.search((a.text or "").lower())
    ]
    nested = node.query_all(NESTED_CHROME)
    if len(nested) >= 3:
        removed.extend(n for n in nested if all(n is not r for r in removed))

    text = _text_without(node, removed)

    if text and word_count(text) >= 2:
        return text
    return full


@dataclass
class TextCandidate:
    node: RenderNode
    text: str
    direct_text: str
    word_count: int
    font_size: float
    top: float


@dataclass
class HeadlineResult:
    text: Optional[str] = None
    node: Optional[RenderNode] = None
    h1: Optional[RenderNode] = None
    largest_text: Optional[str] = None

    @property
    def word_count(self) -> int:
        return word_count(self.text)


def text_candidates(scope: HeroScope) -> List[TextCandidate]:
    """Hero text blocks ranked by font size, ties in document order."""
    candidates = []
    for node in scope.hero_text_nodes:
        text = clean_text(node.text)
        if len(text) <= 3 or not HAS_LETTERS.search(text):
            continue
        if looks_like_nav_text(text):
            continue
        words = word_count(text)
        if words > MAX_HEADLINE_WORDS:
            continue
        candidates.append(TextCandidate(
            node=node,
            text=text,
            direct_text=direct_headline_text(node),
            word_count=words,
            font_size=node.style.font_size or 0.0,
            top=node.rect.top,
        ))
    candidates.sort(key=lambda c: -c.font_size)
    return candidates


def _widen_short_heading(h1: RenderNode, headline: str, scope: HeroScope) -> str:
    """Recovers headlines split into per-word elements by animation wrappers."""
    rich_text = h1.closest(RICH_TEXT_CONTAINER)
    if rich_text is not None:
        full = clean_text(rich_text.text)
        if len(full) > len(headline) and word_count(full) <= MAX_HEADLINE_WORDS:
            headline = full

    if word_count(headline) <= 2:
        for wrapper in walk_up(h1, stop=lambda n: n is scope.body, include_self=False):
            wrapper_text = clean_text(wrapper.text)
            wrapper_words = word_count(wrapper_text)
            if looks_like_nav_text(wrapper_text) or wrapper_words > MAX_HEADLINE_WORDS:
                break
            if wrapper_words > word_count(headline):
                headline = wrapper_text
            if SECTION_BOUNDARY(wrapper):
                break
    return headline


def select_headline(scope: HeroScope) -> HeadlineResult:
    """
    Picks the hero headline.

    The first hero <h1> wins unless it looks like a logo or nav item and a
    bigger text block sits below it, or a candidate is clearly larger
    regardless. Without a usable <h1> the largest-font candidate is used.
    """
    viewport_width = scope.viewport.width
    h1 = next((n for n in scope.hero_text_nodes if n.tag == "h1"), None)
    headline: Optional[str] = direct_headline_text(h1) if h1 is not None else None
    headline_node = h1

    if h1 is not None and headline and word_count(headline) <= 2:
        headline = _widen_short_heading(h1, headline, scope)

    if headline and word_count(headline) > MAX_HEADLINE_WORDS:
        logger.debug("Discarding h1 text that spans the page (%d words)", word_count(headline))
        headline, headline_node = None, None
    if headline and looks_like_nav_text(headline):
        logger.debug("Discarding nav-like h1 text: %r", headline)
        headline, headline_node = None, None

    candidates = text_candidates(scope)
    best = candidates[0] if candidates else None
    largest_text = None
    if best is not None:
        direct = best.direct_text
        if direct and not looks_like_nav_text(direct) and word_count(direct) >= 2:
            largest_text = direct
        else:
            largest_text = best.text
        largest_text = truncate_headline(largest_text)

    if h1 is not None:
        rect = h1.rect
        h1_size = h1.style.font_size or 0.0
        h1_is_link = h1.closest(is_tag("a")) is not None or h1.query(is_tag("a")) is not None
        h1_sticky = is_fixed_or_sticky(h1) or is_fixed_or_sticky(h1.parent)
        h1_likely_nav = (
            scope.is_chrome(h1)
            or h1_sticky
            or (rect.top < 90 and rect.height < 90 and rect.width < viewport_width * 0.5)
        )
        looks_like_logo = bool(
            headline
            and word_count(headline) <= 3
            and rect.top < 120
            and rect.height < 90
            and h1_size <= 28
            and (h1_is_link or rect.width < viewport_width * 0.35)
        )
        candidate_beats_h1 = bool(
            best and largest_text
            and best.top >= rect.bottom + 20
            and (h1_size == 0 or best.font_size >= h1_size + 4)
        )
        candidate_clearly_better = bool(
            best and largest_text
            and best.top >= rect.bottom + 24
            and best.font_size >= h1_size + 8
        )
        if ((looks_like_logo or h1_likely_nav) and candidate_beats_h1) or candidate_clearly_better:
            logger.debug("Replacing h1 %r with larger candidate %r", headline, largest_text)
            headline = largest_text
            headline_node = best.node

    if not headline and largest_text:
        headline = largest_text
        headline_node = best.node if best else None

    return HeadlineResult(
        text=headline or largest_text,
        node=headline_node,
        h1=h1,
        largest_text=largest_text,
    )


def collect_hero_text(scope: HeroScope, headline_node: Optional[RenderNode]) -> str:
    """
    Leaf-level hero copy from the headline down, used by the language
    classifiers. Wrapper blocks that contain headings/paragraphs are skipped
    to avoid counting text twice.
    """
    content_top = headline_node.rect.top - 20 if headline_node is not None else 0
    block_tags = is_tag("h1", "h2", "h3", "p")
    leaves = []
    for node in scope.hero_text_nodes:
        if node.rect.top < content_top:
            continue
        if node.tag in ("div", "span") and node.query(block_tags) is not None:
            continue
        leaves.append(node.text or "")
    return LEADING_SKIP_REGEX.sub("", clean_text(" ".join(leaves)))
