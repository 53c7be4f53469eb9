import logging
import re
from dataclasses import dataclass, asdict
from typing import Optional, Sequence

from ..dom.core import RenderNode
from ..dom.traversal import (
    INTERACTIVE, is_tag, is_input, has_role, has_attr, attr_contains, attr_equals, all_of, any_of, negate
)
from .scope import HeroScope
from .text import clean_text, word_count
from .visibility import is_visible

logger = logging.getLogger(__name__)

ANIMATION_STACK = ("gsap", "lottie", "framer-motion", "three")
WEBGL_CONTEXTS = ("webgl", "webgl2")

PLAY_LABEL_REGEX = re.compile(r"\b(play|listen|preview|sample)\b", re.IGNORECASE)
PLAY_ATTR_REGEX = re.compile(r"\bplay\b", re.IGNORECASE)
VOICE_REGEX = re.compile(r"\b(voice|voices|text to speech|tts)\b", re.IGNORECASE)
AVATAR_CLASS_REGEX = re.compile(r"avatar|voice|speaker", re.IGNORECASE)
SHOWCASE_REGEX = re.compile(
    r"\b(animate|animation|interactive|playground|demo|experiment|creative|motion|3d|webgl|three\.?js|canvas"
    r"|generative|immersive|experience)\b",
    re.IGNORECASE,
)

CONTENT_EDITABLE = attr_equals("contenteditable", "true")
INTERACTIVE_DEMO = any_of(
    attr_contains("class", "playground"),
    attr_contains("class", "editor"),
    attr_contains("class", "sandbox"),
    attr_contains("class", "codepen"),
    attr_contains("class", "repl"),
    attr_contains("class", "interactive"),
    all_of(attr_contains("class", "demo"), negate(is_tag("button", "a"))),
    all_of(is_tag("iframe"), attr_contains("src", "codepen")),
    all_of(is_tag("iframe"), attr_contains("src", "codesandbox")),
    all_of(is_tag("iframe"), attr_contains("src", "stackblitz")),
    CONTENT_EDITABLE,
)
TEXT_INPUT = any_of(is_tag("textarea"), is_input("text", "search"), CONTENT_EDITABLE, has_role("textbox"))
FOCUSABLE = any_of(INTERACTIVE, has_attr("tabindex"))
PLAY_ATTRS = ("class", "id", "aria-label", "data-testid", "data-action")
OPTION = any_of(
    has_role("listbox", "option", "tablist", "tab"),
    has_attr("data-voice"),
    attr_contains("class", "voice"),
)
ROW_CONTAINER_TAGS = is_tag("div", "section", "ul", "ol")

LARGE_SVG_SIDE = 80
MIN_OPTIONS = 3
MIN_ROW_CHILDREN = 4


@dataclass
class InteractiveEvidence:
    """Raw evidence behind the interactive-demo decision, reported as-is."""
    has_text_input: bool = False
    text_input_count: int = 0
    has_audio_element: bool = False
    audio_count: int = 0
    has_play_button: bool = False
    has_play_control: bool = False
    play_control_candidates: int = 0
    selectable_option_count: int = 0
    has_selectable_list: bool = False
    row_container_count: int = 0
    has_selectable_list_from_rows: bool = False
    has_selectable_list_from_items: bool = False
    has_voice_language: bool = False
    has_interactive_demo_base: bool = False
    looks_like_audio_demo: bool = False
    has_interactive_demo: bool = False

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class ShowcaseSignals:
    has_canvas: bool = False
    has_webgl: bool = False
    large_svg_count: int = 0
    has_interactive_demo: bool = False
    has_animation_stack: bool = False
    has_showcase_language: bool = False
    is_showcase_hero: bool = False
    evidence: Optional[InteractiveEvidence] = None


def is_webgl_canvas(canvas: RenderNode) -> bool:
    """The renderer records the acquired drawing context on the canvas."""
    for attr in ("data-engine", "data-context"):
        if canvas.get(attr).lower() in WEBGL_CONTEXTS:
            return True
    return False


def _is_play_button(node: RenderNode) -> bool:
    labels = (clean_text(node.text), node.get("aria-label").strip(), node.get("title").strip())
    return any(PLAY_LABEL_REGEX.search(label) for label in labels)


def _is_play_control(node: RenderNode) -> bool:
    return any(PLAY_ATTR_REGEX.search(node.get(attr)) for attr in PLAY_ATTRS)


def _row_containers(scope: HeroScope):
    containers = []
    for node in scope.fold_visible(ROW_CONTAINER_TAGS):
        if scope.is_chrome(node):
            continue
        style = node.style
        is_row = style.display == "flex" and style.flex_direction != "column"
        if (is_row or style.display == "grid") and len(node.children) >= MIN_ROW_CHILDREN:
            containers.append(node)
    return containers


def _is_picker_row(container: RenderNode) -> bool:
    """Voice-picker style rows: avatar plus a short label, four or more times."""
    children = [c for c in container.children if is_visible(c)]
    if len(children) < MIN_ROW_CHILDREN:
        return False
    qualifying = 0
    for child in children:
        words = word_count(clean_text(child.text))
        has_avatar = child.query(is_tag("img", "svg")) is not None or bool(
            AVATAR_CLASS_REGEX.search(child.class_name)
        )
        if has_avatar and 0 < words <= 4:
            qualifying += 1
    return qualifying >= MIN_ROW_CHILDREN


def detect_interactive_demo(
        scope: HeroScope, hero_text: str, selectable_from_items: bool
) -> InteractiveEvidence:
    """
    Code playgrounds and embedded editors anywhere on the page, or an
    audio/voice demo assembled from fold-level inputs, play controls and
    option pickers.
    """
    ev = InteractiveEvidence()
    ev.has_interactive_demo_base = any(
        INTERACTIVE_DEMO(n) and scope.in_fold(n) for n in scope.body_nodes
    )

    text_inputs = scope.fold_visible(TEXT_INPUT)
    ev.text_input_count = len(text_inputs)
    ev.has_text_input = bool(text_inputs)

    audio = scope.fold_visible(is_tag("audio"))
    ev.audio_count = len(audio)
    ev.has_audio_element = bool(audio)

    focusable = scope.fold_visible(FOCUSABLE)
    ev.has_play_button = any(_is_play_button(n) for n in focusable)
    ev.play_control_candidates = sum(1 for n in focusable if _is_play_control(n))
    ev.has_play_control = ev.has_play_button or ev.play_control_candidates > 0

    options = scope.fold_visible(OPTION)
    ev.selectable_option_count = len(options)

    rows = _row_containers(scope)
    ev.row_container_count = len(rows)
    ev.has_selectable_list_from_rows = any(_is_picker_row(r) for r in rows)
    ev.has_selectable_list = len(options) >= MIN_OPTIONS or ev.has_selectable_list_from_rows

    ev.has_voice_language = bool(VOICE_REGEX.search(hero_text or ""))

    ev.looks_like_audio_demo = (
        (ev.has_text_input and (
            ev.has_selectable_list or ev.has_voice_language or ev.has_play_control or ev.has_audio_element
        ))
        or (ev.has_selectable_list and (ev.has_play_control or ev.has_audio_element or ev.has_voice_language))
        or (ev.has_play_control and ev.has_voice_language)
    )
    ev.has_interactive_demo = ev.has_interactive_demo_base or ev.looks_like_audio_demo

    # Icon-labelled list items only count once the audio verdict is in
    ev.has_selectable_list_from_items = selectable_from_items
    if selectable_from_items:
        ev.has_selectable_list = True
    if ev.has_text_input and (selectable_from_items or ev.has_voice_language):
        ev.has_interactive_demo = True

    if ev.has_interactive_demo:
        logger.debug("Interactive demo detected (base=%s, audio=%s)",
                     ev.has_interactive_demo_base, ev.looks_like_audio_demo)
    return ev


def detect_showcase(
        scope: HeroScope,
        hero_text: str,
        cta_count: int,
        detected_stack: Sequence[str],
        selectable_from_items: bool = False
) -> ShowcaseSignals:
    canvases = scope.hero_visible(is_tag("canvas"))
    large_svgs = [
        svg for svg in scope.hero_visible(is_tag("svg"))
        if svg.rect.width > LARGE_SVG_SIDE and svg.rect.height > LARGE_SVG_SIDE
    ]
    evidence = detect_interactive_demo(scope, hero_text, selectable_from_items)

    signals = ShowcaseSignals(
        has_canvas=bool(canvases),
        has_webgl=any(is_webgl_canvas(c) for c in canvases),
        large_svg_count=len(large_svgs),
        has_interactive_demo=evidence.has_interactive_demo,
        has_animation_stack=any(tag in ANIMATION_STACK for tag in detected_stack),
        has_showcase_language=bool(SHOWCASE_REGEX.search(hero_text or "")),
        evidence=evidence,
    )
    # Decided before icon-labelled list items can promote the demo flag
    demo = evidence.has_interactive_demo_base or evidence.looks_like_audio_demo
    visual = signals.has_animation_stack or signals.has_canvas or signals.has_webgl or demo
    signals.is_showcase_hero = visual and (cta_count <= 1 or signals.has_showcase_language or demo)
    return signals
