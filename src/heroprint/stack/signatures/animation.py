from ..core import StackContext, SignatureCatalog, stack_signature


@stack_signature("gsap")
def detect_gsap(ctx: StackContext) -> bool:
    return ctx.has_global("gsap") or ctx.script_src("gsap")


@stack_signature("lottie")
def detect_lottie(ctx: StackContext) -> bool:
    return ctx.exists(lambda n: n.tag == "lottie-player") or ctx.script_src("lottie")


@stack_signature("three")
def detect_three(ctx: StackContext) -> bool:
    if ctx.has_global("THREE"):
        return True
    if ctx.exists(lambda n: n.tag == "canvas" and "three" in n.get("data-engine").lower()):
        return True
    return ctx.script_src("three.module") or ctx.script_src("three.min") or ctx.script_src("/three@")


@stack_signature("framer-motion")
def detect_framer_motion(ctx: StackContext) -> bool:
    return ctx.has_any_attr("data-framer-appear-id", "data-framer-component-type")


CATALOG = SignatureCatalog(
    group="animation",
    order=40,
    signatures=[detect_gsap, detect_lottie, detect_three, detect_framer_motion]
)
