import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from ..dom.traversal import INTERACTIVE, is_tag, attr_contains, has_attr, any_of, within
from .scope import HeroScope
from .visibility import is_visible

logger = logging.getLogger(__name__)

PROMO_REGEX = re.compile(
    r"(\d+%\s*off|\bsale\b|\bflash sale\b|\bclearance\b|\bdiscount\b|\bsave\s+\d|\bdeal(s)?\b|\blimited.?time\b"
    r"|\bends?\s+(today|tonight|soon|in)\b|\blast\s+(day|chance|hours?)\b|\bhurry\b|\bwhile\s+stocks?\s+last\b"
    r"|\bdouble\b.*\b(sale|offer|deal)\b)",
    re.IGNORECASE,
)
TRANSACTIONAL_CTA_REGEX = re.compile(
    r"^(shop\s*now|buy\s*now|add\s*to\s*cart|order\s*now|get\s*the\s*deal|grab\s*(it|yours)"
    r"|shop\s*(all|the\s*sale)|view\s*deal)",
    re.IGNORECASE,
)
PRICE_REGEX = re.compile(
    r"\$\d+|\d+[.,]\d{2}\s*(USD|EUR|GBP|SGD|AUD|MYR|THB|PHP|IDR|VND|HKD|KRW|JPY|INR|BRL|CAD)?|\d+%\s*off",
    re.IGNORECASE,
)
COUNTDOWN_TEXT_REGEX = re.compile(r"\d{1,2}\s*:\s*\d{2}\s*:\s*\d{2}")
ADD_TO_CART_REGEX = re.compile(
    r"^(add\s*to\s*cart|add\s*to\s*bag|add\s*to\s*basket|buy\s*now|shop\s*now|quick\s*add|quick\s*shop)\s*$",
    re.IGNORECASE,
)
DISCOVERY_REGEX = re.compile(
    r"\b(new\s*arrivals?|just\s*dropped|trending|best\s*sellers?|most\s*popular|curated|picks?\s*for\s*you"
    r"|recommended|explore|discover|what'?s\s*new|fresh\s*finds?|editor'?s?\s*choice|top\s*rated)\b",
    re.IGNORECASE,
)
BRAND_CAMPAIGN_REGEX = re.compile(
    r"\b(collection|campaign|introducing|new\s*season|spring|summer|autumn|fall|winter|holiday|launch"
    r"|collab(oration)?|limited\s*edition|exclusive)\b",
    re.IGNORECASE,
)
TRUST_REGEX = re.compile(
    r"\b(free\s*(shipping|delivery|returns?)|money.?back\s*guarantee|satisfaction\s*guaranteed"
    r"|secure\s*(checkout|payment)|trusted\s*by|verified|authentic|100%\s*(genuine|original)|no\s*risk"
    r"|easy\s*returns?|customer\s*reviews?|rated\s*\d|stars?\s*rating|\d+[,.]?\d*\+?\s*reviews?)\b",
    re.IGNORECASE,
)

COUNTDOWN_SELECTORS = (
    attr_contains("class", "countdown"),
    attr_contains("id", "countdown"),
    attr_contains("class", "timer"),
    attr_contains("id", "timer"),
    attr_contains("class", "clock"),
    has_attr("data-countdown"),
)
PRODUCT_CARD = any_of(
    attr_contains("class", "product"),
    attr_contains("class", "item-card"),
    attr_contains("class", "sku"),
    has_attr("data-product"),
    has_attr("data-sku"),
    has_attr("data-item"),
    attr_contains("class", "card"),
)
CATEGORY_NAV = any_of(
    attr_contains("class", "category"),
    attr_contains("class", "department"),
    within(attr_contains("class", "sidebar"), is_tag("nav", "ul")),
    has_attr("data-category"),
    lambda n: n.tag == "nav" and "shop" in n.class_name.lower(),
    attr_contains("class", "browse"),
)
TRUST_BADGE = any_of(
    attr_contains("class", "trust"),
    attr_contains("class", "badge"),
    attr_contains("class", "guarantee"),
    attr_contains("class", "secure"),
    attr_contains("class", "verified"),
    attr_contains("class", "certification"),
)

MAX_PRICE_TEXT = 30
MAX_COUNTDOWN_TEXT = 20
MAX_CARD_TEXT = 300


@dataclass
class CommerceSignals:
    has_promo_language: bool = False
    has_transactional_cta: bool = False
    has_price_display: bool = False
    price_count: int = 0
    has_countdown: bool = False
    add_to_cart_count: int = 0
    product_card_count: int = 0
    has_category_nav: bool = False
    has_discovery_language: bool = False
    has_brand_campaign_language: bool = False
    has_trust_signals: bool = False
    trust_badge_count: int = 0

    @property
    def has_promotion_signals(self) -> bool:
        return self.has_promo_language or (self.has_transactional_cta and self.has_price_display)

    @property
    def is_commerce_hero(self) -> bool:
        return self.product_card_count >= 2 or (self.add_to_cart_count >= 2 and self.has_price_display)


def _text(node) -> str:
    return (node.text or "").strip()


def count_price_elements(scope: HeroScope) -> int:
    """Leaf elements carrying a short price label."""
    return sum(
        1 for node in scope.hero_visible(lambda n: not n.children)
        if len(_text(node)) < MAX_PRICE_TEXT and PRICE_REGEX.search(_text(node))
    )


def has_countdown(scope: HeroScope) -> bool:
    # Only the first match in document order is consulted per selector
    for predicate in COUNTDOWN_SELECTORS:
        first = next((n for n in scope.body_nodes if predicate(n)), None)
        if first is not None and scope.in_hero(first) and is_visible(first):
            return True
    small = scope.hero_visible(is_tag("span", "div", "p"))
    return any(
        len(node.text or "") < MAX_COUNTDOWN_TEXT and COUNTDOWN_TEXT_REGEX.search(node.text or "")
        for node in small
    )


def count_product_cards(scope: HeroScope) -> int:
    cards = scope.hero_visible(PRODUCT_CARD)
    return sum(
        1 for card in cards
        if card.query(is_tag("img")) is not None
        and PRICE_REGEX.search(_text(card))
        and len(_text(card)) < MAX_CARD_TEXT
    )


def has_category_nav(scope: HeroScope) -> bool:
    candidates = [
        n for n in scope.select(CATEGORY_NAV)
        if scope.in_hero(n) or n.rect.top < scope.viewport.height
    ]
    return any(len(n.query_all(is_tag("a"))) >= 3 for n in candidates)


def detect_commerce(scope: HeroScope, hero_text: str, headline: Optional[str],
                    subheadline: Optional[str], ctas: List[str]) -> CommerceSignals:
    """Promotion and storefront signals over the hero text and elements."""
    hero_text = hero_text or ""
    heading_text = " ".join(t for t in (headline, subheadline) if t)
    buttons = scope.hero_visible(INTERACTIVE)

    signals = CommerceSignals(
        has_promo_language=bool(PROMO_REGEX.search(hero_text) or PROMO_REGEX.search(heading_text)),
        has_transactional_cta=any(TRANSACTIONAL_CTA_REGEX.match(cta) for cta in ctas),
        has_price_display=bool(PRICE_REGEX.search(hero_text)),
        price_count=count_price_elements(scope),
        has_countdown=has_countdown(scope),
        add_to_cart_count=sum(1 for b in buttons if ADD_TO_CART_REGEX.match(_text(b))),
        product_card_count=count_product_cards(scope),
        has_category_nav=has_category_nav(scope),
        has_discovery_language=bool(DISCOVERY_REGEX.search(hero_text)),
        has_brand_campaign_language=bool(BRAND_CAMPAIGN_REGEX.search(hero_text)),
        has_trust_signals=bool(TRUST_REGEX.search(hero_text)),
        trust_badge_count=len(scope.hero_visible(TRUST_BADGE)),
    )
    if signals.is_commerce_hero:
        logger.debug(
            "Commerce hero: %d product cards, %d add-to-cart buttons",
            signals.product_card_count, signals.add_to_cart_count
        )
    return signals
