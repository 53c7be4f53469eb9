# tests/detectors/test_lists.py
from heroprint.detectors.lists import detect_lists


def _bullets(make_node, top, texts, style="disc"):
    items = [
        make_node("li", top + i * 30, 200, 600, 28, text, list_style_type=style)
        for i, text in enumerate(texts)
    ]
    return make_node("ul", top, 200, 600, 30 * len(texts), children=items)


def test_feature_bullets_are_counted(make_node, make_page, make_scope):
    """Echte opsommingen met inhoudelijke regels tellen als feature bullets."""
    ul = _bullets(make_node, 400, [
        "Unlimited projects and collaborators",
        "Automatic previews for every branch",
        "Global edge network with instant rollbacks",
        "No credit card required",
    ])
    hero = make_node("section", 0, 0, 1440, 800, children=[ul])
    signals = detect_lists(make_scope(make_page(hero)), content_top=0)

    assert signals.bullet_count == 3
    assert signals.total_bullet_count == 3
    assert signals.total_lists_in_hero == 1
    assert [item["text"] for item in signals.raw_summary()][:3] == [
        "Unlimited projects and collaborators",
        "Automatic previews for every branch",
        "Global edge network with instant rollbacks",
    ]


def test_items_above_the_content_top_are_ignored(make_node, make_page, make_scope):
    ul = _bullets(make_node, 100, [
        "Unlimited projects and collaborators",
        "Automatic previews for every branch",
    ])
    hero = make_node("section", 0, 0, 1440, 800, children=[ul])
    signals = detect_lists(make_scope(make_page(hero)), content_top=300)
    assert signals.bullet_count == 0


def test_nav_and_legal_items_are_chrome(make_node, make_page, make_scope):
    ul = _bullets(make_node, 400, ["Pricing", "Privacy policy and terms of use", "Trusted by developers"], style="none")
    hero = make_node("section", 0, 0, 1440, 800, children=[ul])
    signals = detect_lists(make_scope(make_page(hero)), content_top=0)

    assert signals.bullet_count == 0
    assert signals.raw_summary() == [{"text": "Trusted by developers", "word_count": 3}]


def test_lists_inside_navigation_are_skipped(make_node, make_page, make_scope):
    nav = make_node("nav", 0, 0, 1440, 60, children=[
        _bullets(make_node, 10, ["Products for every team size", "Solutions for enterprises of all kinds"]),
    ])
    signals = detect_lists(make_scope(make_page(nav)), content_top=0)
    assert signals.total_lists_in_hero == 0


def test_icon_rows_count_as_virtual_bullets(make_node, make_page, make_scope):
    """Flex-rijen met icoon en tekst tellen als virtuele bullets."""
    rows = [
        make_node("div", 400, i * 300, 280, 60, children=[
            make_node("svg", 400, i * 300, 24, 24),
            make_node("span", 400, i * 300 + 30, 240, 24, text),
        ])
        for i, text in enumerate([
            "Deploy straight from git",
            "Preview every single change",
            "Roll back in one click",
        ])
    ]
    hero = make_node("section", 0, 0, 1440, 800, children=[
        make_node("div", 400, 0, 1440, 60, display="flex", children=rows),
    ])
    signals = detect_lists(make_scope(make_page(hero)), content_top=0)

    assert signals.bullet_count == 0
    assert signals.virtual_bullet_count == 3
    assert signals.total_bullet_count == 3


def test_icon_labelled_items_are_selectable(make_node, make_page, make_scope):
    items = [
        make_node("li", 400 + i * 40, 200, 200, 36, children=[
            make_node("img", 400 + i * 40, 200, 32, 32, attrs={"src": f"/avatars/{name}.png"}),
            make_node("span", 400 + i * 40, 240, 120, 32, name),
        ])
        for i, name in enumerate(["Rachel", "Adam", "Bella", "Josh"])
    ]
    hero = make_node("section", 0, 0, 1440, 800, children=[
        make_node("ul", 400, 200, 200, 160, children=items),
    ])
    signals = detect_lists(make_scope(make_page(hero)), content_top=0)
    assert signals.selectable_from_items
