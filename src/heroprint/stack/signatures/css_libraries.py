import re

from ..core import StackContext, SignatureCatalog, stack_signature

TAILWIND_CLASS = re.compile(r"(^|\s)(bg-|text-|px-|py-|rounded-)")
BOOTSTRAP_CLASS = re.compile(r"(^|\s)(btn btn-|container-fluid|col-(xs|sm|md|lg|xl)-|navbar-|form-control|card-body)")
MUI_CLASS = re.compile(r"(^|\s)Mui[A-Z]")
CHAKRA_CLASS = re.compile(r"(^|\s)chakra-")
ANT_CLASS = re.compile(r"(^|\s)ant-")
EMOTION_CLASS = re.compile(r"\bcss-[a-z0-9]{4,}\b")
STYLED_CLASS = re.compile(r"\bsc-[a-zA-Z0-9]{6,}\b")
CSS_MODULES_CLASS = re.compile(r"\b\w+_\w+__[a-zA-Z0-9]{4,}\b")

# Hashed or generic class names need several hits before they count
MIN_CLASS_HITS = 3


@stack_signature("tailwind")
def detect_tailwind(ctx: StackContext) -> bool:
    return ctx.any_class(TAILWIND_CLASS)


@stack_signature("bootstrap")
def detect_bootstrap(ctx: StackContext) -> bool:
    return ctx.class_hits(BOOTSTRAP_CLASS) >= MIN_CLASS_HITS


@stack_signature("material-ui")
def detect_material_ui(ctx: StackContext) -> bool:
    return ctx.any_class(MUI_CLASS)


@stack_signature("chakra-ui")
def detect_chakra_ui(ctx: StackContext) -> bool:
    return ctx.any_class(CHAKRA_CLASS)


@stack_signature("radix")
def detect_radix(ctx: StackContext) -> bool:
    return ctx.has_any_attr("data-radix-popper-content-wrapper", "data-radix-collection-item", "data-state")


@stack_signature("ant-design")
def detect_ant_design(ctx: StackContext) -> bool:
    return ctx.any_class(ANT_CLASS)


@stack_signature("emotion")
def detect_emotion(ctx: StackContext) -> bool:
    if ctx.exists(lambda n: n.tag == "style" and n.has_attr("data-emotion")):
        return True
    return ctx.class_hits(EMOTION_CLASS) >= MIN_CLASS_HITS


@stack_signature("styled-components")
def detect_styled_components(ctx: StackContext) -> bool:
    if ctx.exists(lambda n: n.tag == "style" and (n.has_attr("data-styled") or n.has_attr("data-styled-components"))):
        return True
    return ctx.class_hits(STYLED_CLASS) >= MIN_CLASS_HITS


@stack_signature("css-modules")
def detect_css_modules(ctx: StackContext) -> bool:
    return ctx.class_hits(CSS_MODULES_CLASS) >= MIN_CLASS_HITS


CATALOG = SignatureCatalog(
    group="css_libraries",
    order=20,
    signatures=[
        detect_tailwind, detect_bootstrap, detect_material_ui, detect_chakra_ui, detect_radix,
        detect_ant_design, detect_emotion, detect_styled_components, detect_css_modules,
    ]
)
