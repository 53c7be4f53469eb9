# src/heroprint/model.py
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    top: int
    left: int


class CtaDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    type: str
    position: Position


class HeroImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    tag: str
    alt: Optional[str] = None
    width: int
    height: int
    position: Position


class ListItemSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    word_count: int


class InteractiveDebug(BaseModel):
    """Evidence behind `has_interactive_demo`, kept for tuning."""
    model_config = ConfigDict(frozen=True)

    has_text_input: bool = False
    text_input_count: int = 0
    has_audio_element: bool = False
    audio_count: int = 0
    has_play_button: bool = False
    has_play_control: bool = False
    play_control_candidates: int = 0
    selectable_option_count: int = 0
    has_selectable_list: bool = False
    row_container_count: int = 0
    has_selectable_list_from_rows: bool = False
    has_selectable_list_from_items: bool = False
    has_voice_language: bool = False
    has_interactive_demo_base: bool = False
    looks_like_audio_demo: bool = False
    has_interactive_demo: bool = False


class Fingerprint(BaseModel):
    """
    Immutable description of a page's hero region.

    Every field is always present; absent values are None, False, 0 or an
    empty list. Field order is stable so dumps of identical input compare
    byte for byte.
    """
    model_config = ConfigDict(frozen=True)

    # --- Layout ---
    layout: str = "single-column"
    alignment: Optional[str] = None
    hero_height_ratio: float = 0.0
    hero_bottom: float = 0.0

    # --- Content ---
    headline: Optional[str] = None
    subheadline: Optional[str] = None
    headline_word_count: int = 0
    page_text: str = ""

    # --- Calls to action ---
    cta_count: int = 0
    primary_cta_text: Optional[str] = None
    ctas: List[str] = Field(default_factory=list)
    cta_details: List[CtaDetail] = Field(default_factory=list)

    # --- Forms & structure ---
    has_form: bool = False
    form_fields_count: int = 0
    has_email_only: bool = False
    has_password_field: bool = False
    has_oauth: bool = False
    grid_cards_in_fold: int = 0
    has_filters: bool = False

    # --- Stack ---
    detected_stack: List[str] = Field(default_factory=list)

    # --- Commerce & promotion ---
    has_pricing_tokens: bool = False
    has_promotion_signals: bool = False
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
    is_commerce_hero: bool = False

    # --- Showcase ---
    has_canvas: bool = False
    has_webgl: bool = False
    large_svg_count: int = 0
    has_interactive_demo: bool = False
    has_animation_stack: bool = False
    has_showcase_language: bool = False
    is_showcase_hero: bool = False

    # --- Error page ---
    is_error_page: bool = False
    error_page_reason: Optional[str] = None

    # --- Lists, media & proof ---
    bullet_count: int = 0
    feature_bullet_count: int = 0
    has_feature_bullets: bool = False
    total_lists_in_hero: int = 0
    has_dashboard_preview: bool = False
    has_dashboard_keywords: bool = False
    has_social_proof: bool = False
    logo_count: int = 0
    left_copy_right_media: bool = False
    metrics_visible: bool = False
    is_copy_only: bool = False

    # --- Theme ---
    dark_theme_hero: bool = False
    hero_bg: Optional[str] = None
    hero_bg_gradient: Optional[str] = None
    hero_bg_color_name: Optional[str] = None
    hero_bg_gradient_tag: Optional[str] = None
    hero_text_color: Optional[str] = None
    hero_bg_sampled_from: Optional[str] = None

    # --- Media ---
    hero_media_type: Optional[str] = None
    hero_images: List[HeroImage] = Field(default_factory=list)
    hero_image_count: int = 0

    # --- Debug ---
    interactive_debug: InteractiveDebug = Field(default_factory=InteractiveDebug)
    list_items_raw: List[ListItemSummary] = Field(default_factory=list)

    @field_validator('detected_stack')
    @classmethod
    def stack_tags_unique(cls, v: List[str]) -> List[str]:
        if len(v) != len(set(v)):
            raise ValueError(f"duplicate stack tags: {v}")
        return v

    @field_validator('hero_height_ratio')
    @classmethod
    def ratio_in_range(cls, v: float) -> float:
        if not 0 <= v <= 1:
            raise ValueError("hero_height_ratio must be within [0, 1]")
        return v
