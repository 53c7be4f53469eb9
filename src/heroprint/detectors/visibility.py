import re
from typing import Dict, Optional

from ..dom.core import RenderNode, Viewport
from ..dom.traversal import walk_up, find_ancestor, is_tag, has_role, attr_contains, any_of

NAV_CLASS_REGEX = re.compile(
    r"\b(nav|navbar|navigation|menu|topbar|top-bar|site-header|masthead|toolbar)\b", re.IGNORECASE
)
BUILDER_REGION_REGEX = re.compile(r"\b(footer|nav|navbar|navigation|menu|header)\b")
BUILDER_HEADER_REGEX = re.compile(r"\bheader\b")
FOOTER_CONTENT_REGEX = re.compile(r"©|\bcopyright\b|\ball rights reserved\b", re.IGNORECASE)

# Attributes site builders use to name layout regions without semantic tags
BUILDER_NAME_ATTRS = ("data-framer-name",)

# Below this height a <header>/<aside>/nav-classed box is a bar, not a hero wrapper
NAV_MAX_HEIGHT = 150
NAV_MAX_TOP = 120

SEMANTIC_NAV = any_of(
    is_tag("nav", "footer"),
    has_role("navigation", "menubar", "menu", "toolbar"),
    attr_contains("aria-label", "nav"),
    attr_contains("aria-label", "menu"),
    attr_contains("data-testid", "nav"),
    attr_contains("data-testid", "header"),
)


def is_visible(node: RenderNode) -> bool:
    """False for display:none, visibility:hidden, opacity 0 or an empty box."""
    style = node.style
    if style.display == "none" or style.visibility == "hidden":
        return False
    if style.opacity == 0:
        return False
    return node.rect.width > 0 and node.rect.height > 0


def is_fixed_or_sticky(node: Optional[RenderNode]) -> bool:
    if node is None:
        return False
    return node.style.position in ("fixed", "sticky")


def looks_like_footer_content(node: RenderNode) -> bool:
    """Copyright notices give away plain-div footers on SPA and builder sites."""
    text = (node.text or "").strip()
    if not text:
        return False
    return bool(FOOTER_CONTENT_REGEX.search(text))


class RegionFilter:
    """
    Decides whether a node belongs to navigation, header, footer or legal
    chrome rather than hero content.

    Semantic tags alone are unreliable: builders wrap whole heroes in
    <header> or <aside>, so those only count when their box is bar-sized.
    Answers are cached per node for the lifetime of one extraction.
    """

    def __init__(self, viewport: Viewport, body: Optional[RenderNode] = None):
        self.viewport = viewport
        self.body = body
        self._nav_cache: Dict[int, bool] = {}
        self._builder_cache: Dict[int, bool] = {}

    def _is_body(self, node: RenderNode) -> bool:
        return node is self.body

    def in_nav_or_header(self, node: RenderNode) -> bool:
        key = id(node)
        if key not in self._nav_cache:
            self._nav_cache[key] = self._compute_nav_or_header(node)
        return self._nav_cache[key]

    def _compute_nav_or_header(self, node: RenderNode) -> bool:
        if node.closest(SEMANTIC_NAV) is not None:
            return True

        header = node.closest(is_tag("header"))
        if header is not None and header.rect.height < NAV_MAX_HEIGHT:
            return True

        aside = node.closest(is_tag("aside"))
        if aside is not None:
            if aside.rect.width < self.viewport.width * 0.5 or aside.rect.height < NAV_MAX_HEIGHT:
                return True

        for current in walk_up(node, stop=self._is_body):
            if NAV_CLASS_REGEX.search(current.class_name) or NAV_CLASS_REGEX.search(current.element_id):
                if current.rect.top < NAV_MAX_TOP and current.rect.height < NAV_MAX_HEIGHT:
                    return True
        return False

    def in_builder_nav_or_footer(self, node: RenderNode) -> bool:
        key = id(node)
        if key not in self._builder_cache:
            self._builder_cache[key] = find_ancestor(
                node, self._is_builder_chrome, stop=self._is_body
            ) is not None
        return self._builder_cache[key]

    @staticmethod
    def _is_builder_chrome(node: RenderNode) -> bool:
        for attr in BUILDER_NAME_ATTRS:
            name = node.get(attr).lower()
            if not name or not BUILDER_REGION_REGEX.search(name):
                continue
            # A tall "header" region is the hero itself
            if BUILDER_HEADER_REGEX.search(name) and node.rect.height >= NAV_MAX_HEIGHT:
                continue
            return True
        return False

    def is_chrome(self, node: RenderNode) -> bool:
        """Nav/header/footer by semantics, geometry or builder naming."""
        return self.in_nav_or_header(node) or self.in_builder_nav_or_footer(node)
