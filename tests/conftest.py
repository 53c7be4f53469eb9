# tests/conftest.py
import pytest

from heroprint.detectors.boundary import top_level_sections, compute_hero_boundary
from heroprint.detectors.scope import HeroScope
from heroprint.dom.core import RenderNode, ComputedStyle, Rect, Viewport
from heroprint.engine import find_body

VIEWPORT = Viewport(width=1440, height=900)


def build_node(tag, top=0, left=0, width=0, height=0, text=None, children=None, attrs=None, **style):
    """Een RenderNode met box en (optioneel) stijl in één aanroep."""
    return RenderNode(
        tag=tag,
        attrs=attrs or {},
        text=text,
        style=ComputedStyle(**style),
        rect=Rect(top=top, left=left, width=width, height=height),
        children=children or [],
    )


def build_page(*sections, head=None, height=3000):
    """html > (head, body > sections), zoals een gerenderde pagina van 1440px breed."""
    body = build_node("body", 0, 0, VIEWPORT.width, height, children=list(sections))
    head_node = build_node("head", children=head or [], display="none")
    return build_node("html", 0, 0, VIEWPORT.width, height, children=[head_node, body])


def build_scope(root, viewport=VIEWPORT, title=""):
    body = find_body(root)
    sections = top_level_sections(body, viewport)
    boundary = compute_hero_boundary(sections, viewport)
    return HeroScope(root=root, body=body, viewport=viewport, boundary=boundary, title=title)


@pytest.fixture
def make_node():
    return build_node


@pytest.fixture
def make_page():
    return build_page


@pytest.fixture
def make_scope():
    return build_scope


@pytest.fixture
def viewport():
    return VIEWPORT


def _saas_page(bg="rgb(10, 10, 20)", text_color="rgb(255, 255, 255)"):
    header = build_node("header", 0, 0, 1440, 80, children=[
        build_node("nav", 20, 40, 1360, 40, children=[
            build_node("a", 28, 40, 80, 24, "Pricing", attrs={"href": "/pricing"}),
            build_node("a", 28, 140, 80, 24, "Log in", attrs={"href": "/login"}),
            build_node("a", 20, 1240, 160, 40, "Sign up", attrs={"href": "/signup"}),
        ]),
    ])
    hero = build_node(
        "section", 80, 0, 1440, 700,
        attrs={"class": "hero", "data-reactroot": ""},
        background_color=bg,
        children=[
            build_node("h1", 200, 200, 800, 80, "Ship code faster, together",
                       font_size=56, color=text_color, text_align="left"),
            build_node("p", 300, 200, 700, 40, "The platform for teams who deploy every day.",
                       font_size=20, color=text_color),
            build_node("div", 380, 200, 600, 50, display="flex", children=[
                build_node("a", 380, 200, 180, 48, "Book a demo", attrs={"href": "/demo"}),
                build_node("button", 380, 400, 180, 48, "Start free trial"),
            ]),
        ],
    )
    features = build_node("section", 780, 0, 1440, 800, children=[
        build_node("h2", 820, 200, 600, 40, "Everything you need", font_size=32),
    ])
    head = [
        build_node("title", text="Acme | Ship code faster", display="none"),
        build_node("script", attrs={"src": "/_next/static/chunks/main.js"}, display="none"),
    ]
    return build_page(header, hero, features, head=head)


@pytest.fixture
def saas_page():
    """Een typische SaaS-homepage: nav-balk, donkere hero met h1, subkop en twee CTA's."""
    return _saas_page()


@pytest.fixture
def light_saas_page():
    return _saas_page(bg="rgb(250, 250, 250)", text_color="rgb(20, 20, 20)")
