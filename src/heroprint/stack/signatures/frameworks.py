from ..core import StackContext, SignatureCatalog, stack_signature


@stack_signature("nextjs", suppresses=["react"])
def detect_nextjs(ctx: StackContext) -> bool:
    if ctx.has_global("__NEXT_DATA__") or ctx.by_id("__next") is not None:
        return True
    if ctx.exists(lambda n: n.tag == "script" and n.element_id == "__NEXT_DATA__"):
        return True
    if ctx.resource("/_next/"):
        return True
    return ctx.exists(lambda n: n.tag == "meta" and n.get("name") == "next-head-count")


@stack_signature("webflow")
def detect_webflow(ctx: StackContext) -> bool:
    return ctx.has_global("Webflow")


@stack_signature("framer", suppresses=["framer-motion"])
def detect_framer(ctx: StackContext) -> bool:
    return ctx.meta_generator("Framer")


@stack_signature("gatsby", suppresses=["react"])
def detect_gatsby(ctx: StackContext) -> bool:
    return ctx.has_global("___gatsby") or ctx.by_id("___gatsby") is not None


@stack_signature("nuxt", suppresses=["vue"])
def detect_nuxt(ctx: StackContext) -> bool:
    return ctx.has_global("__NUXT__") or ctx.by_id("__nuxt") is not None


@stack_signature("remix", suppresses=["react"])
def detect_remix(ctx: StackContext) -> bool:
    return ctx.has_global("__remixContext")


@stack_signature("astro")
def detect_astro(ctx: StackContext) -> bool:
    return ctx.meta_generator("Astro")


@stack_signature("hugo")
def detect_hugo(ctx: StackContext) -> bool:
    return ctx.meta_generator("Hugo")


@stack_signature("sveltekit")
def detect_sveltekit(ctx: StackContext) -> bool:
    return ctx.has_id_containing("__sveltekit") or ctx.inline_script_contains("__sveltekit")


@stack_signature("wordpress")
def detect_wordpress(ctx: StackContext) -> bool:
    return ctx.meta_generator("WordPress") or ctx.resource("wp-content", "wp-includes")


@stack_signature("shopify")
def detect_shopify(ctx: StackContext) -> bool:
    return ctx.has_global("Shopify") or ctx.resource("cdn.shopify.com")


@stack_signature("wix")
def detect_wix(ctx: StackContext) -> bool:
    return ctx.has_global("wixBiSession") or ctx.resource("static.wixstatic.com")


@stack_signature("squarespace")
def detect_squarespace(ctx: StackContext) -> bool:
    if ctx.has_global("Static") and ctx.script_src("squarespace"):
        return True
    return ctx.resource("squarespace.com")


@stack_signature("vitepress", suppresses=["vue"])
def detect_vitepress(ctx: StackContext) -> bool:
    if ctx.by_id("VPContent") is not None:
        return True
    markers = {"vp-doc", "VPDoc", "VPHome"}
    if ctx.exists(lambda n: bool(markers & set(n.class_name.split()))):
        return True
    return ctx.script_src("vitepress")


@stack_signature("vue")
def detect_vue(ctx: StackContext) -> bool:
    # Scoped-style markers look like data-v-7ba5bd90
    if ctx.has_attr_prefix("data-v-"):
        return True
    app = ctx.by_id("app")
    return app is not None and app.has_attr("data-server-rendered")


@stack_signature("react")
def detect_react(ctx: StackContext) -> bool:
    return ctx.has_any_attr("data-reactroot", "data-reactid") or ctx.by_id("react-root") is not None


@stack_signature("angular")
def detect_angular(ctx: StackContext) -> bool:
    return ctx.has_any_attr("ng-version", "_nghost", "_ngcontent") or ctx.script_src("angular")


CATALOG = SignatureCatalog(
    group="frameworks",
    order=10,
    signatures=[
        detect_nextjs, detect_webflow, detect_framer, detect_gatsby, detect_nuxt, detect_remix,
        detect_astro, detect_hugo, detect_sveltekit, detect_wordpress, detect_shopify, detect_wix,
        detect_squarespace, detect_vitepress, detect_vue, detect_react, detect_angular,
    ]
)
