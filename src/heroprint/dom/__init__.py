from .core import RenderNode, ComputedStyle, Rect, Viewport
from .models import PageSnapshot
from .builder import SnapshotBuilder
from .hit_test import element_from_point

__all__ = [
    "RenderNode",
    "ComputedStyle",
    "Rect",
    "Viewport",
    "PageSnapshot",
    "SnapshotBuilder",
    "element_from_point",
]
