# tests/detectors/test_color_theme.py
import pytest

from heroprint.detectors.color import (
    ColorSample, parse_rgba, parse_hsla, parse_hex, parse_any_color, classify_color, build_gradient_tag,
    describe_element, analyze_theme
)
from heroprint.detectors.text import select_headline
from heroprint.engine import extract


# --- Parsing & naming ---

def test_parse_color_tokens():
    assert parse_rgba("rgba(255, 0, 0, 0.5)") == ColorSample(r=255, g=0, b=0, a=0.5)
    assert parse_rgba("rgb(10, 20, 30)").a == 1.0
    assert parse_rgba("transparent") is None
    assert parse_hsla("hsl(0, 100%, 50%)") == ColorSample(r=255, g=0, b=0)
    assert parse_hex("#fff") == ColorSample(r=255, g=255, b=255)
    assert parse_hex("#1a2b3c") == ColorSample(r=26, g=43, b=60)
    assert parse_hex("#zzz") is None
    assert parse_any_color("#000000").luminance == 0


@pytest.mark.parametrize("rgb, name", [
    ((0, 0, 0), "black"),
    ((255, 255, 255), "white"),
    ((100, 100, 100), "dark_grey"),
    ((200, 200, 200), "light_grey"),
    ((10, 20, 80), "blue"),
    ((220, 20, 20), "red"),
    ((255, 200, 0), "light_yellow"),
    ((30, 30, 60), "dark"),
])
def test_classify_color(rgb, name):
    r, g, b = rgb
    assert classify_color(ColorSample(r=r, g=g, b=b)) == name


def test_build_gradient_tag():
    """Opeenvolgende gelijke kleurnamen worden samengevoegd."""
    assert build_gradient_tag("linear-gradient(90deg, rgb(220, 20, 20), rgb(255, 200, 0))") == \
        "red-light_yellow-gradient"
    assert build_gradient_tag(
        "linear-gradient(rgb(220, 20, 20), rgb(230, 10, 10), rgb(20, 40, 220))"
    ) == "red-blue-gradient"
    assert build_gradient_tag("none") is None


def test_describe_element(make_node):
    assert describe_element(make_node("div", attrs={"class": "hero main"})) == "div.hero"
    assert describe_element(make_node("section")) == "section"
    assert describe_element(None) is None


# --- Theme sampling ---

def _theme(page, make_scope, hit_tester=None):
    scope = make_scope(page)
    return analyze_theme(scope, select_headline(scope).node, hit_tester)


def test_dark_hero(saas_page, make_scope):
    """Donkere achtergrond met witte tekst: een donker thema."""
    theme = _theme(saas_page, make_scope)

    assert theme.is_dark
    assert theme.hero_bg == "rgb(10, 10, 20)"
    assert theme.hero_bg_color_name == "black"
    assert theme.hero_text_color == "rgb(255, 255, 255)"
    assert theme.sampled_element == "section.hero"
    assert theme.hero_bg_gradient is None


def test_light_hero(light_saas_page, make_scope):
    theme = _theme(light_saas_page, make_scope)
    assert not theme.is_dark
    assert theme.hero_bg_color_name == "white"


def test_gradient_only_background(make_node, make_page, make_scope):
    gradient = "linear-gradient(180deg, rgb(5, 5, 15), rgb(30, 30, 60))"
    hero = make_node("section", 0, 0, 1440, 800, attrs={"class": "hero"}, background_image=gradient, children=[
        make_node("h1", 200, 200, 800, 80, "Ship code faster", font_size=56, color="#ffffff"),
    ])
    theme = _theme(make_page(hero), make_scope)

    assert theme.is_dark
    assert theme.hero_bg == "rgba(0, 0, 0, 0)"
    assert theme.hero_bg_gradient == gradient
    assert theme.hero_bg_gradient_tag == "black-dark-gradient"
    assert theme.sampled_element == "section.hero"


def test_no_background_found(make_node, make_page, make_scope):
    hero = make_node("section", 0, 0, 1440, 800, children=[
        make_node("h1", 200, 200, 800, 80, "Ship code faster", font_size=56),
    ])
    theme = _theme(make_page(hero), make_scope)
    assert not theme.is_dark
    assert theme.sampled_element is None
    assert theme.hero_bg_color_name is None


def test_failing_hit_test_returns_defaults(saas_page, make_scope):
    def broken(root, x, y):
        raise RuntimeError("renderer went away")

    theme = _theme(saas_page, make_scope, hit_tester=broken)
    assert not theme.is_dark
    assert theme.hero_bg is None


def test_hit_tester_receives_point_left_of_headline(saas_page, make_scope):
    calls = []

    def recorder(root, x, y):
        calls.append((x, y))
        return None

    _theme(saas_page, make_scope, hit_tester=recorder)
    assert calls == [(170.0, 240.0)]


@pytest.mark.parametrize("token", [
    "rgba(0, 0, 0, 1..)",
    "rgba(0, 0, 0, .)",
    "hsl(1.2.3, 50%, 50%)",
    "hsla(120, 50.%, 50%, 0.5)",
    "hsla(120, 50%, 50%, 1..5%)",
])
def test_malformed_color_tokens_parse_to_none(token):
    assert parse_any_color(token) is None


def test_malformed_background_does_not_break_extraction(make_node, make_page, viewport):
    """Een kapotte kleurwaarde levert een leeg thema op, geen exception."""
    hero = make_node("section", 0, 0, 1440, 800, attrs={"class": "hero"}, background_color="rgba(0, 0, 0, 1..)",
                     children=[make_node("h1", 200, 200, 800, 80, "Ship code faster", font_size=56,
                                         color="hsl(1.2.3, 0%, 100%)")])
    fp = extract(make_page(hero), viewport)

    assert fp.headline == "Ship code faster"
    assert fp.hero_bg == "rgba(0, 0, 0, 1..)"
    assert fp.hero_bg_color_name is None
    assert not fp.dark_theme_hero


def test_fractional_alpha_without_leading_zero():
    assert parse_rgba("rgba(10, 20, 30, .5)") == ColorSample(r=10, g=20, b=30, a=0.5)
