# tests/detectors/test_hero_boundary.py
from heroprint.detectors.boundary import compute_hero_boundary, top_level_sections


def test_no_sections_gives_one_viewport(viewport):
    """Zonder secties is de hero precies één viewport hoog."""
    boundary = compute_hero_boundary([], viewport)
    assert boundary.hero_bottom == 900
    assert boundary.max_bottom == 900 * 1.15


def test_boundary_grows_but_is_capped(make_node, viewport):
    sections = [make_node("section", 0, 0, 1440, 600), make_node("section", 600, 0, 1440, 1000)]
    boundary = compute_hero_boundary(sections, viewport)
    assert boundary.hero_bottom == 900 * 1.15


def test_boundary_stops_at_first_section_below_cap(make_node, viewport):
    sections = [
        make_node("section", 0, 0, 1440, 500),
        make_node("section", 1100, 0, 1440, 100),
        make_node("section", 400, 0, 1440, 600),
    ]
    assert compute_hero_boundary(sections, viewport).hero_bottom == 900


def test_sections_scrolled_above_are_ignored(make_node, viewport):
    sections = [make_node("section", -500, 0, 1440, 400), make_node("section", 0, 0, 1440, 950)]
    assert compute_hero_boundary(sections, viewport).hero_bottom == 950


def test_boundary_is_idempotent(make_node, viewport):
    """Twee keer berekenen op dezelfde secties geeft hetzelfde resultaat."""
    sections = [make_node("section", 0, 0, 1440, 700), make_node("section", 700, 0, 1440, 300)]
    first = compute_hero_boundary(sections, viewport)
    second = compute_hero_boundary(sections, viewport)
    assert first == second
    assert first.hero_bottom == 1000


def test_contains_checks_overlap(make_node, viewport):
    boundary = compute_hero_boundary([], viewport)
    assert boundary.contains(make_node("div", 850, 0, 100, 100))
    assert not boundary.contains(make_node("div", 900, 0, 100, 100))
    assert not boundary.contains(make_node("div", -200, 0, 100, 100))


def test_spa_wrapper_is_descended(make_node, viewport):
    """Een enkele hoge wrapper (SPA-root) wordt vervangen door zijn kinderen."""
    children = [make_node("section", i * 700, 0, 1440, 700) for i in range(3)]
    wrapper = make_node("div", 0, 0, 1440, 2100, attrs={"id": "root"}, children=children)
    body = make_node("body", 0, 0, 1440, 2100, children=[wrapper])

    assert top_level_sections(body, viewport) == children


def test_short_wrapper_is_kept(make_node, viewport):
    children = [make_node("section", 0, 0, 1440, 500), make_node("section", 500, 0, 1440, 500)]
    wrapper = make_node("div", 0, 0, 1440, 1000, children=children)
    body = make_node("body", 0, 0, 1440, 1000, children=[wrapper])

    assert top_level_sections(body, viewport) == [wrapper]
