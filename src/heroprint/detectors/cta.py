import logging
import re
from dataclasses import dataclass
from functools import cmp_to_key
from typing import List, Optional

from ..dom.core import RenderNode
from ..dom.traversal import CTA_ELEMENT
from .scope import HeroScope
from .text import clean_text
from .visibility import is_visible

logger = logging.getLogger(__name__)

LEGAL_LINK_REGEX = re.compile(r"(user agreement|privacy policy|cookie policy|terms|legal)", re.IGNORECASE)
FOOTER_NAV_REGEX = re.compile(
    r"^(instagram|twitter|facebook|linkedin|youtube|tiktok|discord|reddit|github|medium|x|blog|about|careers"
    r"|contact|support|help|terms|privacy|cookie|home|back to top|manifesto|research|the boring|the good"
    r"|the cool|play by the rules|rules)$",
    re.IGNORECASE,
)
UTILITY_LINK_REGEX = re.compile(
    r"^(forgot(ten)?\s*(your\s*)?(password|email|username)|reset\s*(your\s*)?(password|email)"
    r"|can'?t\s*(log|sign)\s*in|need\s*help|trouble\s*(logging|signing)\s*in)",
    re.IGNORECASE,
)
ACTION_PREFIX_REGEX = re.compile(
    r"^(start|try|buy|join|get|apply|subscribe|download|install|register|explore|discover|watch|book"
    r"|schedule|request|submit|enter|launch|upgrade|claim|demo|contact)",
    re.IGNORECASE,
)
OAUTH_CTA_REGEX = re.compile(
    r"(sign\s*(in|up)\s*with|continue\s*with|log\s*in\s*with)\s*(google|apple|github|microsoft)", re.IGNORECASE
)
PRIMARY_CTA_REGEX = re.compile(
    r"^(log\s*in|sign\s*(in|up)|create|register|get\s*started|start|try|buy|join|subscribe|download|explore"
    r"|book|launch|submit|talk\s*to|contact|request|schedule|demo|watch|deploy|install|begin)",
    re.IGNORECASE,
)
SELF_SERVE_REGEX = re.compile(
    r"^(deploy|start|try|get\s*started|sign\s*up|create|register|join|launch|download|install|begin|buy|subscribe)",
    re.IGNORECASE,
)
SALES_LED_REGEX = re.compile(
    r"^(book|schedule|request|contact|talk\s*to|demo|get\s*demo|book\s*demo|request\s*demo)", re.IGNORECASE
)
INFORMATIONAL_REGEX = re.compile(r"^(learn\s*more|explore|watch|see\s*more|view\s*details)", re.IGNORECASE)
SHORT_CTA_REGEX = re.compile(
    r"^(sign\s*up|sign\s*in|log\s*in|contact\s*sales|talk\s*to\s*sales|get\s*started|start|try|request|book"
    r"|schedule|join|buy|explore|learn\s*more)$",
    re.IGNORECASE,
)

# CTAs above this line sit in the top bar
MIN_CTA_TOP = 120
ABOVE_HEADLINE_SLACK = 40
BELOW_HEADLINE_REACH = 420
IDEAL_OFFSET = 20
DISTANCE_TOLERANCE = 30


@dataclass
class CtaCandidate:
    node: RenderNode
    text: str
    top: float
    left: float
    area: float
    is_button: bool
    is_oauth: bool

    @property
    def kind(self) -> str:
        return "button" if self.is_button else "link"


@dataclass
class CtaResult:
    ranked: List[CtaCandidate]

    @property
    def texts(self) -> List[str]:
        return [c.text for c in self.ranked]

    @property
    def primary(self) -> Optional[str]:
        return self.ranked[0].text if self.ranked else None

    def is_likely_cta_text(self, text: Optional[str]) -> bool:
        """True for copy that duplicates (or contains) a CTA label."""
        norm = clean_text(text).lower()
        if not norm:
            return False
        cta_texts = {clean_text(t).lower() for t in self.texts}
        if norm in cta_texts:
            return True
        if any(cta and cta in norm for cta in cta_texts):
            return True
        return len(norm.split()) <= 4 and bool(SHORT_CTA_REGEX.match(norm))


def cta_priority(text: str) -> int:
    """Self-serve (3) > sales-led (2) > informational or other action (1) > none (0)."""
    t = (text or "").strip().lower()
    if not t:
        return 0
    if SELF_SERVE_REGEX.match(t):
        return 3
    if SALES_LED_REGEX.match(t):
        return 2
    if INFORMATIONAL_REGEX.match(t):
        return 1
    return 1 if PRIMARY_CTA_REGEX.match(t) else 0


def is_noise_label(text: str) -> bool:
    """Legal, footer/social, utility and bare single-word labels."""
    label = text.strip()
    if LEGAL_LINK_REGEX.search(label):
        return True
    if FOOTER_NAV_REGEX.match(label):
        return True
    if UTILITY_LINK_REGEX.match(label):
        return True
    words = label.split()
    if len(words) == 1 and len(label) < 12 and not ACTION_PREFIX_REGEX.match(label):
        return True
    return False


def _is_button(node: RenderNode) -> bool:
    return node.tag in ("button", "input") or node.role == "button"


def collect_candidates(scope: HeroScope) -> List[CtaCandidate]:
    """Actionable, visible hero elements outside navigation chrome."""
    candidates = []
    for node in scope.body_nodes:
        if not CTA_ELEMENT(node):
            continue
        if not scope.in_hero(node) or scope.is_chrome(node) or not is_visible(node):
            continue
        text = clean_text(node.text or node.get("value"))
        if not text:
            continue
        candidates.append(CtaCandidate(
            node=node,
            text=text,
            top=node.rect.top,
            left=node.rect.left,
            area=node.rect.area,
            is_button=_is_button(node),
            is_oauth=bool(OAUTH_CTA_REGEX.search(text)),
        ))
    return candidates


def within_headline_band(
        candidate: CtaCandidate, headline_node: Optional[RenderNode], viewport_height: float
) -> bool:
    if candidate.top < MIN_CTA_TOP:
        return False
    if headline_node is None:
        return True
    rect = headline_node.rect
    if candidate.top > viewport_height * 0.8 and candidate.top > rect.bottom + BELOW_HEADLINE_REACH:
        return False
    return rect.top - ABOVE_HEADLINE_SLACK <= candidate.top <= rect.bottom + BELOW_HEADLINE_REACH


def rank_candidates(candidates: List[CtaCandidate], headline_node: Optional[RenderNode]) -> List[CtaCandidate]:
    """
    Orders CTAs: non-OAuth, then buttons, then verb tier, then closeness to
    just below the headline (ignored within 30px), then area, then left.
    """
    ideal_top = headline_node.rect.bottom + IDEAL_OFFSET if headline_node is not None else None

    def compare(a: CtaCandidate, b: CtaCandidate) -> float:
        if a.is_oauth != b.is_oauth:
            return 1 if a.is_oauth else -1
        if a.is_button != b.is_button:
            return -1 if a.is_button else 1
        a_priority, b_priority = cta_priority(a.text), cta_priority(b.text)
        if a_priority != b_priority:
            return b_priority - a_priority
        if ideal_top is not None:
            a_dist = abs(a.top - ideal_top)
            b_dist = abs(b.top - ideal_top)
            if abs(a_dist - b_dist) > DISTANCE_TOLERANCE:
                return a_dist - b_dist
        if a.area != b.area:
            return b.area - a.area
        return a.left - b.left

    return sorted(candidates, key=cmp_to_key(compare))


def extract_ctas(scope: HeroScope, headline_node: Optional[RenderNode]) -> CtaResult:
    candidates = [c for c in collect_candidates(scope) if not is_noise_label(c.text)]
    in_band = [
        c for c in candidates
        if within_headline_band(c, headline_node, scope.viewport.height)
    ]
    ranked = rank_candidates(in_band, headline_node)
    if ranked:
        logger.debug("Primary CTA %r out of %d candidates", ranked[0].text, len(ranked))
    return CtaResult(ranked=ranked)
