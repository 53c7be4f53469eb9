# src/heroprint/dom/models.py
from typing import Optional, List

from pydantic import BaseModel, Field

from .core import RenderNode, Viewport


class PageSnapshot(BaseModel):
    """
    A rendered page as handed over by the rendering collaborator.

    Holds the laid-out element tree (html root, head and body), the viewport
    it was laid out in, and the page-level facts that live outside the tree:
    the document title and the names of framework globals found on `window`.
    """
    root: RenderNode
    viewport: Viewport = Field(default_factory=Viewport)
    url: Optional[str] = None
    title: Optional[str] = None
    window_globals: List[str] = Field(default_factory=list)
