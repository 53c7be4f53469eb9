# src/heroprint/dom/builder.py
import json
import logging
import re
from pathlib import Path
from xml.dom import DOMException
from typing import Dict, Any, List, Optional, Iterable, Union

import cssutils
from bs4 import BeautifulSoup, Tag, NavigableString, Comment, Doctype
from pydantic import ValidationError

from .core import RenderNode, ComputedStyle, Rect, Viewport
from .models import PageSnapshot
from ..errors import SnapshotError

logger = logging.getLogger(__name__)

# Silence cssutils' parser log
cssutils.log.setLevel(logging.CRITICAL)

# Elements that never produce a box
NON_RENDERED_TAGS = {"head", "script", "style", "meta", "link", "title", "noscript", "template", "base"}

# CSS properties that cascade from parent to child
INHERITED_STYLE_KEYS = ("color", "font_size", "text_align", "visibility", "list_style_type")

GEOMETRY_KEYS = ("top", "left", "width", "height")

_STYLE_KEY_ALIASES = {
    "background": "background",
    "backgroundcolor": "background_color",
    "backgroundimage": "background_image",
    "fontsize": "font_size",
    "textalign": "text_align",
    "flexdirection": "flex_direction",
    "liststyletype": "list_style_type",
}

_WHITESPACE = re.compile(r"\s+")


def _normalize_style_key(key: str) -> str:
    """Maps 'font-size', 'fontSize' and 'font_size' onto the model's field name."""
    flat = key.replace("-", "").replace("_", "").lower()
    return _STYLE_KEY_ALIASES.get(flat, flat)


def _px(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(str(value).strip().lower().removesuffix("px"))
    except ValueError:
        return None


def _split_background(style: Dict[str, Any]) -> Dict[str, Any]:
    """Resolves the `background` shorthand into color or image."""
    shorthand = style.pop("background", None)
    if shorthand:
        if "gradient(" in str(shorthand) or "url(" in str(shorthand):
            style.setdefault("background_image", shorthand)
        else:
            style.setdefault("background_color", shorthand)
    return style


class SnapshotBuilder:
    """
    Builds PageSnapshot objects from the formats a rendering collaborator emits.

    * `from_dict` / `from_json`: a serialised tree as dumped by a headless
      browser (tag, attrs, text, style, rect, children per node).
    * `from_html`: plain HTML where layout is declared inline
      (`style="top:120px;left:0;width:1440px;height:80px;font-size:48px"`).
      Boxes without geometry inherit their parent's box, inherited CSS
      properties cascade. This is a simulated renderer for fixtures and
      offline captures.
    """

    def __init__(self, viewport: Optional[Viewport] = None):
        self.viewport = viewport or Viewport()

    # --- Serialised trees ---

    def from_json(self, payload: Union[str, bytes]) -> PageSnapshot:
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, TypeError) as e:
            raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e
        return self.from_dict(data)

    def from_dict(self, data: Dict[str, Any]) -> PageSnapshot:
        """
        Accepts either a full snapshot ({"root": ..., "viewport": ...}) or a
        bare node tree ({"tag": "html", ...}).
        """
        if not isinstance(data, dict):
            raise SnapshotError("Snapshot must be a JSON object.")

        node_data = data.get("root") if "root" in data else data
        if not isinstance(node_data, dict) or not node_data.get("tag"):
            raise SnapshotError("Snapshot has no root node.")

        viewport = self.viewport
        if data.get("viewport"):
            try:
                viewport = Viewport(**data["viewport"])
            except (ValidationError, TypeError) as e:
                raise SnapshotError(f"Invalid viewport: {e}") from e

        try:
            root = self._node_from_dict(node_data, parent_tag="")
        except ValidationError as e:
            raise SnapshotError(f"Invalid node in snapshot: {e}") from e

        title = data.get("title")
        if title is None:
            title = self._find_title(root)

        return PageSnapshot(
            root=root,
            viewport=viewport,
            url=data.get("url"),
            title=title,
            window_globals=list(data.get("window_globals") or [])
        )

    def _node_from_dict(self, data: Dict[str, Any], parent_tag: str) -> RenderNode:
        tag = str(data.get("tag") or "div").lower()
        children = [
            self._node_from_dict(child, parent_tag=tag)
            for child in data.get("children") or []
            if isinstance(child, dict)
        ]

        style = {_normalize_style_key(k): v for k, v in (data.get("style") or {}).items()}
        style = _split_background(style)
        if tag == "li" and "list_style_type" not in style and parent_tag in ("ul", "ol"):
            style["list_style_type"] = "disc" if parent_tag == "ul" else "decimal"
        style = {k: v for k, v in style.items() if k in ComputedStyle.model_fields}

        raw_rect = data.get("rect") or {}
        rect = Rect(
            top=_px(raw_rect.get("top", raw_rect.get("y"))) or 0.0,
            left=_px(raw_rect.get("left", raw_rect.get("x"))) or 0.0,
            width=_px(raw_rect.get("width")) or 0.0,
            height=_px(raw_rect.get("height")) or 0.0,
        )

        return RenderNode(
            tag=tag,
            attrs=dict(data.get("attrs") or {}),
            text=data.get("text"),
            style=ComputedStyle(**style),
            rect=rect,
            children=children
        )

    # --- HTML with inline layout ---

    def from_html(
            self,
            html: str,
            url: Optional[str] = None,
            window_globals: Iterable[str] = ()
    ) -> PageSnapshot:
        if not html or not html.strip():
            raise SnapshotError("HTML content cannot be empty.")

        clean_html = html.replace('\ufeff', '').strip()
        soup = BeautifulSoup(clean_html, 'html.parser')

        root_tag = soup.find('html')
        if root_tag is None:
            # Fragment: wrap it so the tree always has html > body
            soup = BeautifulSoup(f"<html><body>{clean_html}</body></html>", 'html.parser')
            root_tag = soup.find('html')

        viewport_box = Rect(top=0, left=0, width=self.viewport.width, height=self.viewport.height)
        root = self._build_tree(root_tag, parent_style=ComputedStyle(), parent_rect=viewport_box)

        title_tag = soup.find('title')
        title = title_tag.get_text(" ", strip=True) if title_tag else None

        return PageSnapshot(
            root=root,
            viewport=self.viewport,
            url=url,
            title=title,
            window_globals=list(window_globals)
        )

    def _build_tree(self, tag: Tag, parent_style: ComputedStyle, parent_rect: Rect) -> RenderNode:
        """
        Recursively converts a BeautifulSoup Tag into a RenderNode, resolving
        the inline style against the parent's cascade and box.
        """
        declared = self._parse_inline_style(tag.get("style", ""))

        style_values: Dict[str, Any] = {k: getattr(parent_style, k) for k in INHERITED_STYLE_KEYS}
        if tag.name == "li" and "list_style_type" not in declared and tag.parent is not None:
            if tag.parent.name in ("ul", "ol"):
                style_values["list_style_type"] = "disc" if tag.parent.name == "ul" else "decimal"
        if tag.name in NON_RENDERED_TAGS or tag.has_attr("hidden"):
            style_values["display"] = "none"

        geometry = {k: _px(declared.pop(k, None)) for k in GEOMETRY_KEYS}
        style_values.update({k: v for k, v in declared.items() if k in ComputedStyle.model_fields})
        style = ComputedStyle(**style_values)

        if style.display == "none":
            rect = Rect()
        else:
            rect = Rect(
                top=geometry["top"] if geometry["top"] is not None else parent_rect.top,
                left=geometry["left"] if geometry["left"] is not None else parent_rect.left,
                width=geometry["width"] if geometry["width"] is not None else parent_rect.width,
                height=geometry["height"] if geometry["height"] is not None else parent_rect.height,
            )

        children: List[RenderNode] = []
        text_parts: List[str] = []
        for item in tag.children:
            if isinstance(item, (Comment, Doctype)):
                continue
            if isinstance(item, NavigableString):
                # Script and title bodies stay on their own node only
                text_parts.append(str(item))
                continue
            if isinstance(item, Tag):
                child = self._build_tree(item, parent_style=style, parent_rect=rect)
                children.append(child)
                if child.style.display != "none" and child.text:
                    text_parts.append(child.text)

        text = _WHITESPACE.sub(" ", " ".join(text_parts)).strip()

        attrs = {
            k: (" ".join(v) if isinstance(v, list) else v)
            for k, v in tag.attrs.items()
        }

        return RenderNode(
            tag=tag.name,
            attrs=attrs,
            text=text,
            style=style,
            rect=rect,
            children=children
        )

    @staticmethod
    def _parse_inline_style(raw: str) -> Dict[str, Any]:
        """Declarations of a style attribute, keyed by model field name."""
        declarations: Dict[str, Any] = {}
        if not raw or not raw.strip():
            return declarations
        try:
            style = cssutils.parseStyle(raw, validate=False)
        except (DOMException, ValueError) as e:
            logger.debug(f"Unparseable inline style {raw!r}: {e}")
            return declarations

        for prop in style:
            value = prop.value.strip()
            if value:
                declarations[_normalize_style_key(prop.name)] = value
        return _split_background(declarations)

    @staticmethod
    def _find_title(root: RenderNode) -> Optional[str]:
        node = root.query(lambda n: n.tag == "title") if root.tag != "title" else root
        return node.text if node is not None else None

    # --- Files ---

    def load(self, path: Union[str, Path]) -> PageSnapshot:
        """Loads a `.json` snapshot or a `.html` page with inline layout."""
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e

        logger.debug(f"Loading snapshot {path} ({len(content)} chars)")
        if path.suffix.lower() in (".html", ".htm"):
            return self.from_html(content, url=path.as_uri())
        return self.from_json(content)
