import logging
import re
from dataclasses import dataclass

from ..dom.traversal import (
    INTERACTIVE, is_tag, is_input, has_role, attr_contains, all_of, any_of, within
)
from .scope import HeroScope

logger = logging.getLogger(__name__)

OAUTH_PROVIDER_REGEX = re.compile(r"\b(google|apple|github|microsoft)\b", re.IGNORECASE)
AUTH_VERB_REGEX = re.compile(r"(sign|log|continue|connect)\s*(in|up|with)", re.IGNORECASE)

# Provider buttons rendered with logos or provider attributes instead of text
OAUTH_ELEMENT = any_of(
    within(is_tag("button"), all_of(is_tag("img"), attr_contains("src", "google"))),
    within(is_tag("button"), all_of(is_tag("img"), attr_contains("src", "apple"))),
    within(is_tag("button"), all_of(is_tag("svg"), attr_contains("aria-label", "google"))),
    within(is_tag("button"), all_of(is_tag("svg"), attr_contains("aria-label", "apple"))),
    within(is_tag("a"), all_of(is_tag("img"), attr_contains("src", "google"))),
    within(is_tag("a"), all_of(is_tag("img"), attr_contains("src", "apple"))),
    attr_contains("data-provider", "google"),
    attr_contains("data-provider", "apple"),
    attr_contains("aria-label", "continue with google"),
    attr_contains("aria-label", "sign in with google"),
    attr_contains("aria-label", "continue with apple"),
    attr_contains("aria-label", "sign in with apple"),
)

FILTER_CONTROL = any_of(
    is_input("search", "checkbox"),
    is_tag("select"),
    has_role("listbox", "combobox"),
)


@dataclass
class FormSignals:
    has_form: bool = False
    form_fields_count: int = 0
    has_email_only: bool = False
    has_password_field: bool = False
    has_oauth: bool = False
    grid_cards_in_fold: int = 0
    has_filters: bool = False


def detect_forms(scope: HeroScope) -> FormSignals:
    """Form, authentication and OAuth affordances inside the hero."""
    forms = [
        f for f in scope.select(is_tag("form"))
        if scope.in_hero(f) and not scope.is_chrome(f)
    ]
    field_count = sum(len(f.query_all(is_tag("input"))) for f in forms)

    has_email_only = any(
        len(f.query_all(is_tag("input"))) == 1 and f.query(is_input("email")) is not None
        for f in forms
    )

    # React apps often render inputs without a wrapping <form>
    password = is_input("password")
    has_password = any(f.query(password) is not None for f in forms) or bool(scope.hero_visible(password))

    has_oauth = detect_oauth(scope)

    return FormSignals(
        has_form=bool(forms),
        form_fields_count=field_count,
        has_email_only=has_email_only,
        has_password_field=has_password,
        has_oauth=has_oauth,
        grid_cards_in_fold=max_grid_children(scope),
        has_filters=bool(scope.hero_visible(FILTER_CONTROL)),
    )


def detect_oauth(scope: HeroScope) -> bool:
    """Provider logos/attributes, or a provider name next to an auth verb."""
    if scope.hero_visible(OAUTH_ELEMENT):
        logger.debug("OAuth detected via provider element")
        return True
    for node in scope.hero_visible(INTERACTIVE):
        text = (node.text or "").strip()
        if OAUTH_PROVIDER_REGEX.search(text) and AUTH_VERB_REGEX.search(text):
            logger.debug("OAuth detected via button text %r", text)
            return True
    return False


def max_grid_children(scope: HeroScope) -> int:
    grids = scope.hero_visible(lambda n: n.style.display == "grid")
    return max((len(g.children) for g in grids), default=0)
