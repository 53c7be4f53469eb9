# tests/test_engine.py
from unittest.mock import MagicMock

import pytest

from heroprint import extract, extract_snapshot, ExtractionFailure, Fingerprint
from heroprint.dom.builder import SnapshotBuilder
from heroprint.dom.core import Viewport


def test_saas_fingerprint(saas_page, viewport):
    """Test het volledige fingerprint van een typische SaaS-hero."""
    fp = extract(saas_page, viewport)

    assert fp.headline == "Ship code faster, together"
    assert fp.headline_word_count == 4
    assert fp.subheadline == "The platform for teams who deploy every day."
    assert fp.alignment == "left"
    assert fp.layout == "single-column"

    assert fp.cta_count == 2
    assert fp.primary_cta_text == "Start free trial"
    assert fp.ctas == ["Start free trial", "Book a demo"]
    assert fp.cta_details[0].type == "button"
    assert (fp.cta_details[0].position.top, fp.cta_details[0].position.left) == (380, 400)
    assert fp.has_pricing_tokens

    assert fp.detected_stack == ["nextjs"]
    assert fp.dark_theme_hero
    assert fp.hero_bg_sampled_from == "section.hero"

    assert fp.hero_bottom == 1035
    assert fp.hero_height_ratio == 1.0
    assert not fp.is_copy_only
    assert not fp.is_error_page
    assert not fp.is_commerce_hero
    assert not fp.has_interactive_demo
    assert fp.interactive_debug.has_interactive_demo is False
    assert "Pricing" not in fp.page_text


def test_extraction_is_deterministic(saas_page, viewport):
    """Twee runs op dezelfde boom leveren byte-identieke JSON."""
    first = extract(saas_page, viewport).model_dump_json()
    second = extract(saas_page, viewport).model_dump_json()
    assert first == second


def test_light_theme_is_not_dark(light_saas_page, viewport):
    assert not extract(light_saas_page, viewport).dark_theme_hero


def test_broken_hit_tester_does_not_abort(saas_page, viewport):
    def broken(root, x, y):
        raise RuntimeError("no renderer")

    fp = extract(saas_page, viewport, hit_tester=broken)
    assert fp.headline == "Ship code faster, together"
    assert not fp.dark_theme_hero
    assert fp.hero_bg is None


def test_empty_tree(make_node, viewport):
    """Een lege pagina levert een volledig, leeg fingerprint op."""
    root = make_node("html", children=[make_node("body")])
    fp = extract(root, viewport)

    assert fp.headline is None
    assert fp.subheadline is None
    assert fp.cta_count == 0
    assert fp.ctas == []
    assert fp.hero_bottom == 900
    assert fp.hero_height_ratio == 1.0
    assert fp.page_text == ""
    assert fp.detected_stack == []
    assert not fp.is_copy_only
    assert fp.hero_bg_sampled_from is None


def test_copy_only_hero(make_node, make_page, viewport):
    hero = make_node("section", 0, 0, 1440, 800, children=[
        make_node("h1", 300, 200, 1000, 80, "We write software for humans", font_size=64),
    ])
    fp = extract(make_page(hero), viewport)
    assert fp.is_copy_only
    assert fp.cta_count == 0


def test_fingerprint_is_frozen(saas_page, viewport):
    fp = extract(saas_page, viewport)
    with pytest.raises(Exception):
        fp.headline = "changed"


def test_fingerprint_rejects_duplicate_stack_tags():
    with pytest.raises(ValueError):
        Fingerprint(detected_stack=["react", "react"])


@pytest.mark.parametrize("root", [None, "<html></html>", {"tag": "html"}])
def test_invalid_root(root, viewport):
    with pytest.raises(ExtractionFailure):
        extract(root, viewport)


def test_invalid_viewport(saas_page):
    with pytest.raises(ExtractionFailure):
        extract(saas_page, "1440x900")


def test_default_viewport_from_settings(saas_page):
    fp = extract(saas_page)
    assert fp.headline == "Ship code faster, together"


def test_extract_snapshot_uses_snapshot_facts():
    html = """
    <html><head><title>404 - Page not found</title></head>
    <body>
      <section style="top:0;left:0;width:1440px;height:700px">
        <h1 style="top:200px;left:200px;width:800px;height:80px;font-size:48px">We lost this page</h1>
      </section>
    </body></html>
    """
    snapshot = SnapshotBuilder(Viewport(width=1440, height=900)).from_html(html, window_globals=["__NUXT__"])
    fp = extract_snapshot(snapshot)

    assert fp.is_error_page
    assert fp.error_page_reason == "not_found"
    assert fp.detected_stack == ["nuxt"]
    assert fp.headline == "We lost this page"


def test_extract_snapshot_requires_snapshot():
    with pytest.raises(ExtractionFailure):
        extract_snapshot(None)


def test_hit_tester_is_called_once_left_of_headline(saas_page, viewport):
    hit_tester = MagicMock(return_value=None)
    fp = extract(saas_page, viewport, hit_tester=hit_tester)

    hit_tester.assert_called_once()
    assert hit_tester.call_args.args[1:] == (170.0, 240.0)
    assert fp.hero_bg is None


def test_adding_a_cta_never_lowers_the_count(make_node, make_page, viewport):
    """Een extra knop in de hero mag het aantal CTA's niet verlagen."""
    def page(*buttons):
        hero = make_node("section", 0, 0, 1440, 800, children=[
            make_node("h1", 200, 200, 800, 80, "Ship code faster, together", font_size=56),
            *buttons,
        ])
        return make_page(hero)

    start = make_node("button", 320, 200, 180, 48, "Start free trial")
    demo = make_node("button", 320, 400, 180, 48, "Book a demo")

    one = extract(page(start), viewport)
    two = extract(page(make_node("button", 320, 200, 180, 48, "Start free trial"), demo), viewport)
    assert one.cta_count == 1
    assert two.cta_count == 2
    assert two.primary_cta_text == one.primary_cta_text == "Start free trial"
