# tests/detectors/test_forms.py
from heroprint.detectors.forms import detect_forms


def _hero(make_node, *children):
    return make_node("section", 0, 0, 1440, 800, children=list(children))


def test_email_capture_form(make_node, make_page, make_scope):
    """Een formulier met één e-mailveld is een 'email-only' capture."""
    form = make_node("form", 400, 200, 500, 60, children=[
        make_node("input", 400, 200, 300, 48, attrs={"type": "email", "placeholder": "you@company.com"}),
        make_node("button", 400, 520, 160, 48, "Get early access"),
    ])
    signals = detect_forms(make_scope(make_page(_hero(make_node, form))))

    assert signals.has_form
    assert signals.form_fields_count == 1
    assert signals.has_email_only
    assert not signals.has_password_field


def test_login_form_and_loose_password_field(make_node, make_page, make_scope):
    loose = _hero(
        make_node,
        make_node("input", 300, 200, 300, 48, attrs={"type": "email"}),
        make_node("input", 360, 200, 300, 48, attrs={"type": "password"}),
    )
    signals = detect_forms(make_scope(make_page(loose)))

    assert not signals.has_form
    assert signals.has_password_field


def test_forms_in_navigation_are_ignored(make_node, make_page, make_scope):
    nav = make_node("nav", 0, 0, 1440, 60, children=[
        make_node("form", 10, 1000, 300, 40, children=[
            make_node("input", 10, 1000, 300, 40, attrs={"type": "search"}),
        ]),
    ])
    signals = detect_forms(make_scope(make_page(nav)))
    assert not signals.has_form
    assert signals.form_fields_count == 0


def test_oauth_by_text_and_by_logo(make_node, make_page, make_scope):
    by_text = _hero(make_node, make_node("button", 300, 200, 300, 48, "Continue with GitHub"))
    by_logo = _hero(make_node, make_node("button", 300, 200, 300, 48, children=[
        make_node("img", 310, 210, 24, 24, attrs={"src": "/icons/google-logo.svg", "alt": ""}),
    ]))
    plain = _hero(make_node, make_node("button", 300, 200, 300, 48, "Start free trial"))

    assert detect_forms(make_scope(make_page(by_text))).has_oauth
    assert detect_forms(make_scope(make_page(by_logo))).has_oauth
    assert not detect_forms(make_scope(make_page(plain))).has_oauth


def test_grid_cards_and_filters(make_node, make_page, make_scope):
    cards = [make_node("div", 400, i * 200, 180, 200, f"Card {i}") for i in range(6)]
    hero = _hero(
        make_node,
        make_node("div", 400, 0, 1440, 200, display="grid", children=cards),
        make_node("input", 300, 200, 400, 40, attrs={"type": "search"}),
    )
    signals = detect_forms(make_scope(make_page(hero)))
    assert signals.grid_cards_in_fold == 6
    assert signals.has_filters


def test_filters_below_the_hero_do_not_count(make_node, make_page, make_scope):
    hero = _hero(make_node, make_node("h1", 200, 200, 800, 80, "Find your next home"))
    below = make_node("section", 800, 0, 1440, 2000, children=[
        make_node("select", 1500, 200, 200, 40),
    ])
    signals = detect_forms(make_scope(make_page(hero, below)))
    assert not signals.has_filters
