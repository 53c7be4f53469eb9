from typing import Dict, Any, List, Optional, Iterator, Callable

from pydantic import BaseModel, Field, PrivateAttr, ValidationInfo, field_validator


class Rect(BaseModel):
    """
    Viewport-relative bounding box of a rendered element (getBoundingClientRect).
    """
    top: float = 0.0
    left: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center_y(self) -> float:
        return self.top + self.height / 2

    def contains_point(self, x: float, y: float) -> bool:
        """Returns True if (x, y) lies inside the box (edges inclusive)."""
        return self.left <= x <= self.right and self.top <= y <= self.bottom


class ComputedStyle(BaseModel):
    """
    The subset of resolved CSS properties the extractor reads.
    Color values are kept as the renderer's tokens (e.g. 'rgb(0, 0, 0)').
    """
    display: str = "block"
    position: str = "static"
    visibility: str = "visible"
    opacity: float = 1.0
    font_size: float = 16.0
    text_align: Optional[str] = None
    color: str = "rgb(0, 0, 0)"
    background_color: str = "rgba(0, 0, 0, 0)"
    background_image: str = "none"
    flex_direction: str = "row"
    list_style_type: str = ""

    @field_validator('font_size', 'opacity', mode='before')
    @classmethod
    def parse_css_number(cls, v: Any, info: ValidationInfo) -> Any:
        """
        Accepts CSS tokens like '18px' or '0.5'. Empty or unparseable values
        fall back to 1 for opacity (fully opaque) and 0 for font size.
        """
        fallback = 1.0 if info.field_name == "opacity" else 0.0
        if v is None:
            return fallback
        if isinstance(v, str):
            token = v.strip().lower().removesuffix("px")
            try:
                return float(token)
            except ValueError:
                return fallback
        return v


class RenderNode(BaseModel):
    """
    A rendered element of the snapshot tree.

    `text` is the rendered inner text of the whole subtree. When a snapshot
    omits it, it is derived from the children. Parent links are private and
    wired on construction so the model serialises as a plain tree.
    """
    tag: str
    attrs: Dict[str, Any] = Field(default_factory=dict)
    text: Optional[str] = None
    style: ComputedStyle = Field(default_factory=ComputedStyle)
    rect: Rect = Field(default_factory=Rect)
    children: List['RenderNode'] = Field(default_factory=list)

    _parent: Optional['RenderNode'] = PrivateAttr(default=None)
    _index: int = PrivateAttr(default=0)

    @field_validator('tag', mode='before')
    @classmethod
    def normalize_tag(cls, v: Any) -> str:
        return str(v or "").lower()

    def model_post_init(self, __context: Any) -> None:
        for i, child in enumerate(self.children):
            child._parent = self
            child._index = i
        if self.text is None:
            self.text = " ".join(c.text for c in self.children if c.text)

    # --- Relations ---

    @property
    def parent(self) -> Optional['RenderNode']:
        return self._parent

    @property
    def next_sibling(self) -> Optional['RenderNode']:
        """The next element sibling (nextElementSibling)."""
        if self._parent is None:
            return None
        siblings = self._parent.children
        return siblings[self._index + 1] if self._index + 1 < len(siblings) else None

    @property
    def previous_sibling(self) -> Optional['RenderNode']:
        if self._parent is None or self._index == 0:
            return None
        return self._parent.children[self._index - 1]

    def iter(self) -> Iterator['RenderNode']:
        """Pre-order iteration over this node and all descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_descendants(self) -> Iterator['RenderNode']:
        it = self.iter()
        next(it)
        yield from it

    def ancestors(self) -> Iterator['RenderNode']:
        node = self._parent
        while node is not None:
            yield node
            node = node._parent

    def closest(self, predicate: Callable[['RenderNode'], bool]) -> Optional['RenderNode']:
        """Element.closest(): the first of self and its ancestors matching predicate."""
        if predicate(self):
            return self
        for node in self.ancestors():
            if predicate(node):
                return node
        return None

    def query(self, predicate: Callable[['RenderNode'], bool]) -> Optional['RenderNode']:
        """Element.querySelector(): first matching descendant in document order."""
        for node in self.iter_descendants():
            if predicate(node):
                return node
        return None

    def query_all(self, predicate: Callable[['RenderNode'], bool]) -> List['RenderNode']:
        return [node for node in self.iter_descendants() if predicate(node)]

    def contains(self, other: 'RenderNode') -> bool:
        """Node.contains(): True for the node itself and its descendants."""
        if other is self:
            return True
        return any(node is self for node in other.ancestors())

    # --- Attributes ---

    def get(self, name: str, default: str = "") -> str:
        """Attribute lookup that always returns a string (lists are space-joined)."""
        value = self.attrs.get(name)
        if value is None:
            return default
        if isinstance(value, (list, tuple)):
            return " ".join(str(v) for v in value)
        return str(value)

    def has_attr(self, name: str) -> bool:
        return name in self.attrs

    @property
    def class_name(self) -> str:
        return self.get("class")

    @property
    def element_id(self) -> str:
        return self.get("id")

    @property
    def role(self) -> str:
        return self.get("role").lower()

    def __repr__(self) -> str:
        ident = f"#{self.element_id}" if self.element_id else ""
        return f"<RenderNode {self.tag}{ident} top={self.rect.top:g} h={self.rect.height:g}>"


class Viewport(BaseModel):
    """The browser viewport; its height defines the fold."""
    width: float = 1440.0
    height: float = 900.0

    @field_validator('width', 'height')
    @classmethod
    def must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("viewport dimensions must be positive")
        return v
