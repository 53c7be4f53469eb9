from typing import List, Optional, Sequence

from ..dom.core import RenderNode, Viewport
from ..dom.traversal import Predicate, is_tag
from .boundary import HeroBoundary
from .visibility import RegionFilter, is_visible, is_fixed_or_sticky, looks_like_footer_content

TEXT_TAGS = is_tag("h1", "h2", "h3", "p", "span", "div")


class HeroScope:
    """
    The filtered node set every detector reads.

    Bundles the document, the content root, the viewport, the computed hero
    boundary and the region filter for one extraction call. Node lists are
    materialised once in document order; nothing here is shared between calls.
    """

    def __init__(
            self,
            root: RenderNode,
            body: RenderNode,
            viewport: Viewport,
            boundary: HeroBoundary,
            title: str = "",
            window_globals: Sequence[str] = ()
    ):
        self.root = root
        self.body = body
        self.viewport = viewport
        self.boundary = boundary
        self.title = title or ""
        self.window_globals = frozenset(window_globals)
        self.regions = RegionFilter(viewport, body)

        self.document_nodes: List[RenderNode] = list(root.iter())
        self.body_nodes: List[RenderNode] = list(body.iter_descendants())
        self._hero_text_nodes: Optional[List[RenderNode]] = None

    @property
    def hero_bottom(self) -> float:
        return self.boundary.hero_bottom

    def in_hero(self, node: RenderNode) -> bool:
        return self.boundary.contains(node)

    def in_fold(self, node: RenderNode) -> bool:
        """Overlaps the first viewport (stricter than the hero for tall heroes)."""
        return node.rect.bottom > 0 and node.rect.top < self.viewport.height

    def is_chrome(self, node: RenderNode) -> bool:
        return self.regions.is_chrome(node)

    def select(self, predicate: Predicate) -> List[RenderNode]:
        """document.querySelectorAll() over the body subtree."""
        return [node for node in self.body_nodes if predicate(node)]

    def hero_visible(self, predicate: Predicate) -> List[RenderNode]:
        """Matching nodes that are visible and intersect the hero."""
        return [
            node for node in self.body_nodes
            if predicate(node) and self.in_hero(node) and is_visible(node)
        ]

    def fold_visible(self, predicate: Predicate) -> List[RenderNode]:
        return [
            node for node in self.body_nodes
            if predicate(node) and self.in_fold(node) and is_visible(node)
        ]

    @property
    def hero_text_nodes(self) -> List[RenderNode]:
        """Visible, non-chrome, non-fixed text blocks inside the hero."""
        if self._hero_text_nodes is None:
            self._hero_text_nodes = [
                node for node in self.body_nodes
                if TEXT_TAGS(node)
                and self.in_hero(node)
                and not self.is_chrome(node)
                and not looks_like_footer_content(node)
                and is_visible(node)
                and not is_fixed_or_sticky(node)
            ]
        return self._hero_text_nodes
