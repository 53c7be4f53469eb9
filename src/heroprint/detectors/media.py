import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from ..dom.core import RenderNode, Rect
from ..dom.traversal import is_tag, has_role, any_of
from .scope import HeroScope
from .visibility import is_visible

logger = logging.getLogger(__name__)

MEDIA_TAGS = is_tag("img", "video", "svg", "canvas", "figure")
MAX_HERO_IMAGES = 10
MIN_IMAGE_AREA = 400

DASHBOARD_KEYWORDS = re.compile(r"(dashboard|analytics|reporting|metrics|kpi|overview|insights)", re.IGNORECASE)
PRODUCT_UI_MEDIA = re.compile(r"(dashboard|analytics|report|insight|ui|product|screenshot)", re.IGNORECASE)

LOGO_IMG_EXCLUDE = re.compile(r"(icon|favicon)", re.IGNORECASE)
LOGO_SVG_EXCLUDE = re.compile(r"(icon|favicon|arrow|chevron|check|close|menu|hamburger)", re.IGNORECASE)
DATA_CONTAINER = any_of(is_tag("table", "tr", "td", "th"), has_role("grid", "row", "cell"))
SVG_DATA_CONTAINER = any_of(is_tag("table"), has_role("grid", "row"))
SVG_INTERACTIVE = any_of(is_tag("button"), has_role("button"), lambda n: n.tag == "a" and n.has_attr("href"))

LOGO_ROW_TOLERANCE = 25
LOGO_ROW_MIN_SPREAD = 200
MIN_LOGOS = 3

SOCIAL_PROOF_REGEX = re.compile(
    r"(trusted by|loved by|used by|chosen by|powering|backed by|as seen in|as seen on|featured in|featured on"
    r"|customers include|partners include|join\s+\d|rated\s+\d"
    r"|\d[\d,.\s]*\+?\s*(users|teams|companies|businesses|organizations|brands|developers|customers)"
    r"|(over|more than)\s+\d[\d,.\s]*\s*(users|teams|companies|businesses|organizations|brands|developers|customers)"
    r"|\d+\s*\+?\s*(customers|teams|companies)\s*(trust|use|love|rely))",
    re.IGNORECASE,
)
METRICS_REGEX = re.compile(r"(\$\s?\d|\b\d{1,3}(?:[.,]\d{3})*(?:k|m|b)?\b|%)", re.IGNORECASE)


@dataclass
class MediaItem:
    node: RenderNode

    @property
    def rect(self) -> Rect:
        return self.node.rect

    @property
    def area(self) -> float:
        return self.node.rect.area

    def summary(self) -> dict:
        node = self.node
        return {
            "tag": node.tag,
            "alt": node.get("alt") or node.get("aria-label") or None,
            "width": round(self.rect.width),
            "height": round(self.rect.height),
            "position": {"top": round(self.rect.top), "left": round(self.rect.left)},
        }


@dataclass
class LogoCandidate:
    width: float
    height: float
    top: float
    left: float
    center_y: float


@dataclass
class MediaSignals:
    items: List[MediaItem] = field(default_factory=list)
    hero_images: List[dict] = field(default_factory=list)
    hero_media_type: Optional[str] = None
    has_dashboard_keywords: bool = False
    logo_row_count: int = 0
    logo_candidate_count: int = 0

    @property
    def largest(self) -> Optional[MediaItem]:
        return self.items[0] if self.items else None

    @property
    def has_dashboard_preview(self) -> bool:
        return self.hero_media_type == "product-ui" and self.has_dashboard_keywords

    @property
    def logo_count(self) -> int:
        return self.logo_row_count if self.logo_row_count > 0 else self.logo_candidate_count

    @property
    def has_logo_row(self) -> bool:
        return self.logo_row_count >= MIN_LOGOS


def media_inventory(scope: HeroScope) -> List[MediaItem]:
    """Visible hero media, largest first (stable for equal areas)."""
    items = [MediaItem(node) for node in scope.hero_visible(MEDIA_TAGS)]
    items.sort(key=lambda m: -m.area)
    return items


def classify_hero_media(
        largest: Optional[MediaItem], scope: HeroScope, keyword_text: str
) -> Optional[str]:
    """'product-ui' when the dominant media is a product screenshot, else None."""
    if largest is None:
        return None
    viewport = scope.viewport
    if largest.area <= viewport.width * 0.22 * viewport.height * 0.22:
        return None
    if largest.node.tag not in ("img", "video"):
        return None
    source = largest.node.get("src") or largest.node.get("currentSrc")
    looks_like_ui = bool(PRODUCT_UI_MEDIA.search(f"{source} {largest.node.get('alt')}"))
    if looks_like_ui or DASHBOARD_KEYWORDS.search(keyword_text):
        return "product-ui"
    return None


def logo_candidates(scope: HeroScope) -> List[LogoCandidate]:
    """Small images and inline SVGs sized like partner logos."""
    candidates = []
    for img in scope.hero_visible(is_tag("img")):
        if img.closest(DATA_CONTAINER) is not None:
            continue
        r = img.rect
        if 24 < r.width < 180 and r.height < 80 and not LOGO_IMG_EXCLUDE.search(img.get("alt").lower()):
            candidates.append(LogoCandidate(r.width, r.height, r.top, r.left, r.center_y))

    for svg in scope.hero_visible(is_tag("svg")):
        if scope.regions.in_nav_or_header(svg):
            continue
        if svg.closest(SVG_INTERACTIVE) is not None or svg.closest(SVG_DATA_CONTAINER) is not None:
            continue
        r = svg.rect
        label = svg.get("aria-label").lower()
        if 24 < r.width < 180 and 10 < r.height < 80 and not LOGO_SVG_EXCLUDE.search(label):
            candidates.append(LogoCandidate(r.width, r.height, r.top, r.left, r.center_y))
    return candidates


def cluster_logo_rows(candidates: List[LogoCandidate]) -> int:
    """
    Groups logos by vertical centre (within 25px) and returns the size of the
    largest row holding three or more logos spread over more than 200px.
    """
    if len(candidates) < MIN_LOGOS:
        return 0
    ordered = sorted(candidates, key=lambda c: c.center_y)
    best = 0
    i = 0
    while i < len(ordered):
        row_y = ordered[i].center_y
        j = i
        row = []
        while j < len(ordered) and abs(ordered[j].center_y - row_y) < LOGO_ROW_TOLERANCE:
            row.append(ordered[j])
            j += 1
        if len(row) >= MIN_LOGOS:
            lefts = [c.left for c in row]
            if max(lefts) - min(lefts) > LOGO_ROW_MIN_SPREAD:
                best = max(best, len(row))
        i = j
    return best


def logo_containers(scope: HeroScope) -> int:
    """Fallback: flex rows or grids with three or more small media children."""
    best = 0
    for container in scope.hero_visible(is_tag("div", "section", "ul")):
        if scope.regions.in_nav_or_header(container):
            continue
        style = container.style
        is_row = style.display == "flex" and style.flex_direction != "column"
        if not (is_row or style.display == "grid"):
            continue
        media_children = [
            child for child in container.children
            if is_visible(child)
            and (child.query(is_tag("img", "svg")) is not None or child.tag in ("img", "svg"))
            and child.rect.width < 200 and child.rect.height < 100
        ]
        if len(media_children) >= MIN_LOGOS:
            best = max(best, len(media_children))
    return best


def detect_media(scope: HeroScope, keyword_text: str) -> MediaSignals:
    items = media_inventory(scope)
    hero_images = [m.summary() for m in items if m.area > MIN_IMAGE_AREA][:MAX_HERO_IMAGES]
    largest = items[0] if items else None

    candidates = logo_candidates(scope)
    row_count = cluster_logo_rows(candidates)
    if row_count < MIN_LOGOS:
        row_count = max(row_count, logo_containers(scope))
    if row_count:
        logger.debug("Logo row with %d items", row_count)

    return MediaSignals(
        items=items,
        hero_images=hero_images,
        hero_media_type=classify_hero_media(largest, scope, keyword_text),
        has_dashboard_keywords=bool(DASHBOARD_KEYWORDS.search(keyword_text)),
        logo_row_count=row_count,
        logo_candidate_count=len(candidates),
    )


def has_social_proof_text(hero_text: str) -> bool:
    return bool(SOCIAL_PROOF_REGEX.search(hero_text or ""))


def has_visible_metrics(hero_text: str) -> bool:
    return bool(METRICS_REGEX.search(hero_text or ""))


def left_copy_right_media(layout: str, largest: Optional[MediaItem], viewport_width: float) -> bool:
    return layout == "split" and largest is not None and largest.rect.left > viewport_width * 0.5
