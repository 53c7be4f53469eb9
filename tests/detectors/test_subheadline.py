# tests/detectors/test_subheadline.py
from heroprint.detectors.subheadline import select_subheadline


def never_cta(text):
    return False


def test_next_sibling_paragraph(make_node, make_page, make_scope):
    """De eerste strategie: de paragraaf direct na de kop."""
    h1 = make_node("h1", 200, 200, 800, 80, "Ship code faster", font_size=56)
    hero = make_node("section", 0, 0, 1440, 800, children=[
        h1,
        make_node("p", 300, 200, 700, 30, "The platform for teams who deploy every day.", font_size=20),
    ])
    scope = make_scope(make_page(hero))
    assert select_subheadline(scope, h1, never_cta) == "The platform for teams who deploy every day."


def test_parent_sibling_block(make_node, make_page, make_scope):
    h1 = make_node("h1", 200, 200, 800, 80, "Ship code faster", font_size=56)
    hero = make_node("section", 0, 0, 1440, 800, children=[
        make_node("div", 200, 200, 800, 80, children=[h1]),
        make_node("div", 300, 200, 700, 30, children=[
            make_node("span", 300, 200, 700, 30, "Previews for every pull request."),
        ]),
    ])
    scope = make_scope(make_page(hero))
    assert select_subheadline(scope, h1, never_cta) == "Previews for every pull request."


def test_nearby_paragraph_within_ancestors(make_node, make_page, make_scope):
    """Split-layouts: een paragraaf vlak bij de kop binnen drie voorouders."""
    h1 = make_node("h1", 200, 100, 600, 80, "Ship code faster", font_size=56)
    copy = make_node("div", 100, 100, 600, 400, children=[
        make_node("p", 150, 100, 600, 30, "A new way to ship your software", font_size=18),
        h1,
        make_node("div", 320, 100, 600, 50, children=[
            make_node("a", 320, 100, 200, 48, "Start building today", attrs={"href": "/signup"}),
        ]),
    ])
    hero = make_node("section", 0, 0, 1440, 800, children=[
        copy,
    ])
    scope = make_scope(make_page(hero))
    assert select_subheadline(scope, h1, never_cta) == "A new way to ship your software"


def test_cta_copy_is_never_a_subheadline(make_node, make_page, make_scope):
    h1 = make_node("h1", 200, 200, 800, 80, "Ship code faster", font_size=56)
    hero = make_node("section", 0, 0, 1440, 800, children=[
        h1,
        make_node("p", 300, 200, 700, 30, "Get started for free today", font_size=20),
    ])
    scope = make_scope(make_page(hero))
    is_cta = lambda text: text == "Get started for free today"
    assert select_subheadline(scope, h1, is_cta) is None


def test_generic_fallback_without_headline(make_node, make_page, make_scope):
    """Zonder kop wint de grootste plausibele hero-tekst."""
    hero = make_node("section", 0, 0, 1440, 800, children=[
        make_node("p", 200, 200, 700, 30, "Everything your team needs to ship", font_size=22),
        make_node("p", 260, 200, 700, 20, "Some smaller print below the fold", font_size=14),
        make_node("p", 320, 200, 700, 20, "Yes", font_size=30),
    ])
    scope = make_scope(make_page(hero))
    assert select_subheadline(scope, None, never_cta) == "Everything your team needs to ship"


def test_generic_fallback_respects_font_band(make_node, make_page, make_scope):
    h1 = make_node("h1", 200, 200, 800, 80, "Ship code faster", font_size=56)
    hero = make_node("section", 0, 0, 1440, 800, children=[
        make_node("div", 200, 200, 800, 80, children=[h1]),
        make_node("div", 290, 200, 800, 50, children=[
            make_node("a", 290, 200, 200, 48, "Start now", attrs={"href": "/signup"}),
        ]),
        make_node("div", 360, 200, 800, 100, children=[
            make_node("span", 360, 200, 700, 30, "Tiny legal note that is far too small", font_size=10),
            make_node("span", 400, 200, 700, 30, "Works with the tools you already use", font_size=20),
        ]),
    ])
    scope = make_scope(make_page(hero))
    assert select_subheadline(scope, h1, never_cta) == "Works with the tools you already use"
