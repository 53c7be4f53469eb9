# src/heroprint/engine.py
import logging
from typing import Iterable, Optional

from pydantic import ValidationError

from .core.managers.config_manager import config_manager
from .detectors.boundary import top_level_sections, compute_hero_boundary
from .detectors.color import analyze_theme
from .detectors.commerce import detect_commerce
from .detectors.cta import extract_ctas
from .detectors.error_page import detect_error_page
from .detectors.forms import detect_forms
from .detectors.layout import detect_layout, detect_alignment, hero_height_ratio, has_pricing_tokens
from .detectors.lists import detect_lists
from .detectors.media import detect_media, has_social_proof_text, has_visible_metrics, left_copy_right_media
from .detectors.scope import HeroScope
from .detectors.showcase import detect_showcase
from .detectors.subheadline import select_subheadline
from .detectors.text import select_headline, collect_hero_text, word_count
from .dom.core import RenderNode, Viewport
from .dom.hit_test import HitTester
from .dom.models import PageSnapshot
from .errors import ExtractionFailure
from .model import Fingerprint, CtaDetail, Position, HeroImage, InteractiveDebug, ListItemSummary
from .stack.detector import detect_stack

logger = logging.getLogger(__name__)

CONTENT_TOP_OFFSET = 20
COPY_ONLY_MIN_WORDS = 3


def default_viewport() -> Viewport:
    """The viewport configured in settings.json (1440x900 out of the box)."""
    try:
        return Viewport(
            width=config_manager.get_nested("viewport.width", 1440),
            height=config_manager.get_nested("viewport.height", 900),
        )
    except ValidationError as e:
        raise ExtractionFailure(f"Configured viewport is invalid: {e}") from e


def find_body(root: RenderNode) -> RenderNode:
    """The <body> element, or the root itself for fragments without one."""
    if root.tag == "body":
        return root
    body = next((c for c in root.children if c.tag == "body"), None)
    if body is None:
        body = root.query(lambda n: n.tag == "body")
    return body if body is not None else root


def find_title(root: RenderNode) -> str:
    node = root.query(lambda n: n.tag == "title")
    return (node.text or "").strip() if node is not None else ""


class HeroExtractor:
    """
    Runs every detector over one rendered tree and assembles the Fingerprint.

    The order matters where results feed each other: the headline anchors the
    CTA band, the CTA texts filter subheadline candidates, and the hero text
    drives all language classifiers.
    """

    def __init__(
            self,
            root: RenderNode,
            viewport: Optional[Viewport] = None,
            title: Optional[str] = None,
            window_globals: Iterable[str] = (),
            hit_tester: Optional[HitTester] = None
    ):
        if not isinstance(root, RenderNode):
            raise ExtractionFailure(f"Expected a RenderNode root, got {type(root).__name__}")
        if viewport is None:
            viewport = default_viewport()
        if not isinstance(viewport, Viewport) or viewport.width <= 0 or viewport.height <= 0:
            raise ExtractionFailure(f"Invalid viewport: {viewport!r}")

        self.root = root
        self.viewport = viewport
        self.title = title if title is not None else find_title(root)
        self.window_globals = list(window_globals or ())
        self.hit_tester = hit_tester

    def _build_scope(self) -> HeroScope:
        body = find_body(self.root)
        sections = top_level_sections(body, self.viewport)
        boundary = compute_hero_boundary(sections, self.viewport)
        logger.debug(f"Hero bottom at {boundary.hero_bottom:.0f}px from {len(sections)} sections")
        return HeroScope(
            root=self.root,
            body=body,
            viewport=self.viewport,
            boundary=boundary,
            title=self.title,
            window_globals=self.window_globals,
        )

    def extract(self) -> Fingerprint:
        scope = self._build_scope()
        viewport = self.viewport

        # --- Text roles ---
        headline = select_headline(scope)
        headline_node = headline.node
        content_top = headline_node.rect.top - CONTENT_TOP_OFFSET if headline_node is not None else 0

        ctas = extract_ctas(scope, headline_node)
        subheadline = select_subheadline(scope, headline_node, ctas.is_likely_cta_text)
        hero_text = collect_hero_text(scope, headline_node)

        # --- Structure ---
        layout = detect_layout(scope)
        forms = detect_forms(scope)
        lists = detect_lists(scope, content_top)
        keyword_text = " ".join(t for t in (headline.text, subheadline) if t)
        media = detect_media(scope, keyword_text)

        # --- Stack & composites ---
        stack = detect_stack(self.root, self.window_globals)
        commerce = detect_commerce(scope, hero_text, headline.text, subheadline, ctas.texts)
        showcase = detect_showcase(
            scope, hero_text, len(ctas.ranked), stack, selectable_from_items=lists.selectable_from_items
        )
        is_error_page, error_reason = detect_error_page(self.title, scope.body.text or "", hero_text)

        theme = analyze_theme(scope, headline_node, self.hit_tester)

        headline_words = word_count(headline.text)
        is_copy_only = bool(
            headline.text
            and headline_words >= COPY_ONLY_MIN_WORDS
            and not ctas.ranked
            and not media.hero_media_type
        )
        total_bullets = lists.total_bullet_count

        fingerprint = Fingerprint(
            layout=layout,
            alignment=detect_alignment(headline.h1),
            hero_height_ratio=hero_height_ratio(scope),
            hero_bottom=round(scope.hero_bottom, 2),
            headline=headline.text,
            subheadline=subheadline,
            headline_word_count=headline_words,
            page_text=hero_text,
            cta_count=len(ctas.ranked),
            primary_cta_text=ctas.primary,
            ctas=ctas.texts,
            cta_details=[
                CtaDetail(
                    text=c.text,
                    type=c.kind,
                    position=Position(top=round(c.top), left=round(c.left)),
                )
                for c in ctas.ranked
            ],
            has_form=forms.has_form,
            form_fields_count=forms.form_fields_count,
            has_email_only=forms.has_email_only,
            has_password_field=forms.has_password_field,
            has_oauth=forms.has_oauth,
            grid_cards_in_fold=forms.grid_cards_in_fold,
            has_filters=forms.has_filters,
            detected_stack=stack,
            has_pricing_tokens=has_pricing_tokens(headline.text, subheadline, *ctas.texts),
            has_promotion_signals=commerce.has_promotion_signals,
            has_promo_language=commerce.has_promo_language,
            has_transactional_cta=commerce.has_transactional_cta,
            has_price_display=commerce.has_price_display,
            price_count=commerce.price_count,
            has_countdown=commerce.has_countdown,
            add_to_cart_count=commerce.add_to_cart_count,
            product_card_count=commerce.product_card_count,
            has_category_nav=commerce.has_category_nav,
            has_discovery_language=commerce.has_discovery_language,
            has_brand_campaign_language=commerce.has_brand_campaign_language,
            has_trust_signals=commerce.has_trust_signals,
            trust_badge_count=commerce.trust_badge_count,
            is_commerce_hero=commerce.is_commerce_hero,
            has_canvas=showcase.has_canvas,
            has_webgl=showcase.has_webgl,
            large_svg_count=showcase.large_svg_count,
            has_interactive_demo=showcase.has_interactive_demo,
            has_animation_stack=showcase.has_animation_stack,
            has_showcase_language=showcase.has_showcase_language,
            is_showcase_hero=showcase.is_showcase_hero,
            is_error_page=is_error_page,
            error_page_reason=error_reason,
            bullet_count=total_bullets,
            feature_bullet_count=total_bullets,
            has_feature_bullets=total_bullets >= 2,
            total_lists_in_hero=lists.total_lists_in_hero,
            has_dashboard_preview=media.has_dashboard_preview,
            has_dashboard_keywords=media.has_dashboard_keywords,
            has_social_proof=has_social_proof_text(hero_text) or media.has_logo_row,
            logo_count=media.logo_count,
            left_copy_right_media=left_copy_right_media(layout, media.largest, viewport.width),
            metrics_visible=has_visible_metrics(hero_text),
            is_copy_only=is_copy_only,
            dark_theme_hero=theme.is_dark,
            hero_bg=theme.hero_bg,
            hero_bg_gradient=theme.hero_bg_gradient,
            hero_bg_color_name=theme.hero_bg_color_name,
            hero_bg_gradient_tag=theme.hero_bg_gradient_tag,
            hero_text_color=theme.hero_text_color,
            hero_bg_sampled_from=theme.sampled_element,
            hero_media_type=media.hero_media_type,
            hero_images=[HeroImage(**image) for image in media.hero_images],
            hero_image_count=len(media.hero_images),
            interactive_debug=InteractiveDebug(**showcase.evidence.as_dict()),
            list_items_raw=[ListItemSummary(**item) for item in lists.raw_summary()],
        )
        logger.info(
            f"Fingerprinted hero: headline={fingerprint.headline!r}, "
            f"{fingerprint.cta_count} CTAs, stack={fingerprint.detected_stack}"
        )
        return fingerprint


def extract(
        root: RenderNode,
        viewport: Optional[Viewport] = None,
        *,
        title: Optional[str] = None,
        window_globals: Iterable[str] = (),
        hit_tester: Optional[HitTester] = None
) -> Fingerprint:
    """
    Fingerprints the hero region of a rendered tree.

    Args:
        root: The document root (html) or body of the rendered tree.
        viewport: Viewport the tree was laid out in; defaults to settings.json.
        title: Document title; defaults to the tree's <title> text.
        window_globals: Names of framework globals present on `window`.
        hit_tester: Point-to-element lookup used for background sampling.

    Raises:
        ExtractionFailure: If the root is missing or the viewport is invalid.
    """
    return HeroExtractor(
        root, viewport, title=title, window_globals=window_globals, hit_tester=hit_tester
    ).extract()


def extract_snapshot(snapshot: PageSnapshot, hit_tester: Optional[HitTester] = None) -> Fingerprint:
    if snapshot is None:
        raise ExtractionFailure("No snapshot given")
    return extract(
        snapshot.root,
        snapshot.viewport,
        title=snapshot.title,
        window_globals=snapshot.window_globals,
        hit_tester=hit_tester,
    )
