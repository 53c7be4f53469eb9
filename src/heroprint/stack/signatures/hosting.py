from ..core import StackContext, SignatureCatalog, stack_signature


@stack_signature("vercel")
def detect_vercel(ctx: StackContext) -> bool:
    return (
        ctx.meta_name_contains("vercel")
        or ctx.script_src("vercel-insights")
        or ctx.script_src("vercel-analytics")
    )


@stack_signature("netlify")
def detect_netlify(ctx: StackContext) -> bool:
    return ctx.resource(".netlify") or ctx.meta_generator("Netlify")


@stack_signature("cloudflare")
def detect_cloudflare(ctx: StackContext) -> bool:
    if ctx.script_src("cloudflareinsights.com"):
        return True
    return ctx.exists(lambda n: n.tag == "script" and n.has_attr("data-cf-beacon"))


@stack_signature("aws-amplify")
def detect_aws_amplify(ctx: StackContext) -> bool:
    return ctx.script_src("aws-amplify") or ctx.meta_name_contains("amplify")


CATALOG = SignatureCatalog(
    group="hosting",
    order=30,
    signatures=[detect_vercel, detect_netlify, detect_cloudflare, detect_aws_amplify]
)
