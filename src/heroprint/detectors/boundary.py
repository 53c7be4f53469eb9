import logging
from typing import List, Sequence

from pydantic import BaseModel

from ..dom.core import RenderNode, Viewport

logger = logging.getLogger(__name__)

# The hero never extends past this multiple of the viewport height
HERO_MAX_RATIO = 1.15
# Wrappers taller than this multiple are SPA roots, not sections
WRAPPER_DESCEND_RATIO = 1.5
FEW_SECTIONS = 3


class HeroBoundary(BaseModel):
    """The vertical extent of the hero region for one extraction run."""
    hero_bottom: float
    max_bottom: float

    def contains(self, node: RenderNode) -> bool:
        """True if any part of the node's box lies above the hero bottom."""
        return node.rect.bottom > 0 and node.rect.top < self.hero_bottom


def top_level_sections(body: RenderNode, viewport: Viewport) -> List[RenderNode]:
    """
    Direct children of the content root. With very few children (SPA
    wrappers) any child taller than 1.5x the viewport is replaced by its own
    children.
    """
    sections = list(body.children)
    if len(sections) <= FEW_SECTIONS:
        deeper: List[RenderNode] = []
        for wrapper in sections:
            if wrapper.rect.height > viewport.height * WRAPPER_DESCEND_RATIO and len(wrapper.children) > 1:
                deeper.extend(wrapper.children)
            else:
                deeper.append(wrapper)
        if len(deeper) > len(sections):
            logger.debug("Descended into SPA wrapper: %d -> %d sections", len(sections), len(deeper))
            sections = deeper
    return sections


def compute_hero_boundary(sections: Sequence[RenderNode], viewport: Viewport) -> HeroBoundary:
    """
    Accumulates the lowest bottom edge of the sections that start above the
    cap, capped at 1.15x the viewport height.

    Sections are read in document order; the first one starting at or below
    the cap ends the scan. Only section geometry is consulted.
    """
    max_bottom = viewport.height * HERO_MAX_RATIO
    hero_bottom = viewport.height

    for section in sections:
        rect = section.rect
        if rect.bottom <= 0:
            continue
        if rect.top >= max_bottom:
            break
        hero_bottom = min(max_bottom, max(hero_bottom, rect.bottom))

    return HeroBoundary(hero_bottom=hero_bottom, max_bottom=max_bottom)
