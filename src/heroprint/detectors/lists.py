import logging
import re
from dataclasses import dataclass, field
from typing import List

from ..dom.core import RenderNode
from ..dom.traversal import is_tag, attr_contains, has_attr, any_of
from .scope import HeroScope
from .text import clean_text, word_count
from .visibility import is_visible

logger = logging.getLogger(__name__)

LEGAL_TEXT_REGEX = re.compile(r"(user agreement|privacy policy|cookie policy|terms|legal)", re.IGNORECASE)
NAV_LINK_REGEX = re.compile(
    r"(^(top content|people|learning|jobs|games|career|productivity|finance|about|blog|pricing|contact|support"
    r"|help|resources|docs|changelog|status)$)",
    re.IGNORECASE,
)
ACTION_HINT_REGEX = re.compile(r"^(no credit|no card|free |cancel anytime|money.back)", re.IGNORECASE)
SHORT_ACTION_REGEX = re.compile(
    r"^(add|import|see|view|get|try|start|create|set up|install|connect)\b", re.IGNORECASE
)
HAS_LETTER = re.compile(r"[a-zA-Z]")

ICON = any_of(is_tag("svg", "img", "i"), attr_contains("class", "icon"), has_attr("data-icon"))
MEDIA = is_tag("img", "svg")
TEXT_BLOCK = is_tag("p", "span", "div")

MAX_RAW_ITEMS = 20


@dataclass
class ListItem:
    node: RenderNode
    text: str
    top: float
    list_style_type: str
    has_icon: bool
    word_count: int
    looks_like_logo: bool
    is_legal: bool
    is_nav_link: bool
    in_form: bool
    is_just_link: bool

    @property
    def is_chrome(self) -> bool:
        return self.looks_like_logo or self.is_legal or self.is_nav_link or self.is_just_link


@dataclass
class ListSignals:
    items: List[ListItem] = field(default_factory=list)
    feature_items: List[ListItem] = field(default_factory=list)
    bullet_count: int = 0
    virtual_bullet_count: int = 0
    total_lists_in_hero: int = 0
    selectable_from_items: bool = False

    @property
    def total_bullet_count(self) -> int:
        return self.bullet_count + self.virtual_bullet_count

    def raw_summary(self) -> List[dict]:
        """Feature items first, then the remaining non-chrome items (max 20)."""
        rest = [
            item for item in self.items
            if all(item is not f for f in self.feature_items) and not item.is_chrome
        ]
        return [
            {"text": item.text, "word_count": item.word_count}
            for item in (self.feature_items + rest)[:MAX_RAW_ITEMS]
        ]


def _list_item(node: RenderNode) -> ListItem:
    text = clean_text(node.text)
    words = word_count(text)
    return ListItem(
        node=node,
        text=text,
        top=node.rect.top,
        list_style_type=node.style.list_style_type or "",
        has_icon=node.query(ICON) is not None,
        word_count=words,
        looks_like_logo=words <= 2 and node.query(MEDIA) is not None and node.query(TEXT_BLOCK) is None,
        is_legal=bool(LEGAL_TEXT_REGEX.search(text)),
        is_nav_link=bool(NAV_LINK_REGEX.search(text)),
        in_form=node.closest(is_tag("form")) is not None,
        is_just_link=len(node.children) <= 1 and node.query(is_tag("a")) is not None and words <= 3,
    )


def is_feature_bullet(item: ListItem, content_top: float) -> bool:
    """A substantive capability line, not a CTA hint or trust micro-copy."""
    if len(item.text) < 20 or not HAS_LETTER.search(item.text):
        return False
    if item.top < content_top:
        return False
    if item.is_chrome or item.in_form:
        return False
    if ACTION_HINT_REGEX.match(item.text):
        return False
    if item.word_count < 5 and SHORT_ACTION_REGEX.match(item.text):
        return False
    if item.list_style_type and item.list_style_type != "none":
        return item.word_count >= 4
    if not item.has_icon:
        return False
    return item.word_count >= 5


def is_selectable_item(item: ListItem) -> bool:
    """Short icon-labelled options (voice pickers, tab rows)."""
    return (
        item.has_icon
        and not item.looks_like_logo
        and not (item.is_legal or item.is_nav_link or item.in_form or item.is_just_link)
        and 0 < item.word_count <= 4
        and len(item.text) >= 2
    )


def count_virtual_bullets(scope: HeroScope) -> int:
    """
    Icon + text feature rows built from flex/grid containers instead of lists.
    Returns the largest qualifying child count (0 below three).
    """
    best = 0
    for container in scope.hero_visible(is_tag("div", "section")):
        if scope.regions.in_nav_or_header(container):
            continue
        if container.style.display not in ("flex", "grid") or len(container.children) < 3:
            continue
        children = [c for c in container.children if is_visible(c)]
        if len(children) < 3:
            continue
        featured = [
            c for c in children
            if c.query(ICON) is not None and word_count(clean_text(c.text)) >= 4
        ]
        if len(featured) >= 3:
            best = max(best, len(featured))
    return best


def detect_lists(scope: HeroScope, content_top: float) -> ListSignals:
    lists = [
        node for node in scope.hero_visible(is_tag("ul", "ol"))
        if not scope.regions.in_nav_or_header(node)
    ]
    items = [_list_item(li) for lst in lists for li in lst.query_all(is_tag("li"))]

    feature_items = [item for item in items if is_feature_bullet(item, content_top)]
    bullet_count = len(feature_items)
    virtual = count_virtual_bullets(scope) if bullet_count < 2 else 0
    if virtual:
        logger.debug("Found %d virtual bullets in flex/grid rows", virtual)

    return ListSignals(
        items=items,
        feature_items=feature_items,
        bullet_count=bullet_count,
        virtual_bullet_count=virtual,
        total_lists_in_hero=len(lists),
        selectable_from_items=sum(1 for item in items if is_selectable_item(item)) >= 4,
    )
