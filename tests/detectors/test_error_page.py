# tests/detectors/test_error_page.py
import pytest

from heroprint.detectors.error_page import detect_error_page


@pytest.mark.parametrize("title, body, hero, expected", [
    ("Access denied", "", "", (True, "bot_blocked")),
    ("Just a moment...", "Verify you are human by completing the action below.", "", (True, "bot_blocked")),
    ("404 - Page not found", "", "", (True, "not_found")),
    ("Acme", "503 Service Unavailable", "", (True, "server_error")),
    ("Oops", "Something went wrong", "", (True, "unknown_error")),
    ("Acme | Ship code faster", "Ship code faster with Acme", "Ship code faster", (False, None)),
])
def test_detect_error_page(title, body, hero, expected):
    assert detect_error_page(title, body, hero) == expected


def test_only_the_start_of_the_body_is_scanned():
    """Foutteksten diep in de body (na 500 tekens) tellen niet mee."""
    body = "Welcome to our store. " * 30 + "404"
    assert detect_error_page("Acme", body, "") == (False, None)


def test_hero_text_alone_flags_without_reason():
    assert detect_error_page("Acme", "", "Request blocked") == (True, "unknown_error")


def test_missing_inputs_are_tolerated():
    assert detect_error_page(None, None, None) == (False, None)
