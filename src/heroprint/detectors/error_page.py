import logging
import re
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

ERROR_PAGE_REGEX = re.compile(
    r"\b(something went wrong|access denied|blocked|forbidden|error occurred|page not found|404|403|500|502|503"
    r"|504|service unavailable|temporarily unavailable|try again later|request blocked|security check"
    r"|verify you are human|captcha|challenge|bot detected|automated access|unusual traffic"
    r"|reference\s*(error\s*)?(code|id)|cloudflare|akamai|incapsula|distil|datadome|perimeterx)\b",
    re.IGNORECASE,
)

# Checked in order; the first match names the reason
ERROR_REASONS = (
    ("bot_blocked", re.compile(
        r"access denied|blocked|forbidden|bot detected|automated|unusual traffic|security check"
        r"|verify you are human|captcha|challenge",
        re.IGNORECASE,
    )),
    ("not_found", re.compile(r"404|page not found", re.IGNORECASE)),
    ("server_error", re.compile(r"500|502|503|504|service unavailable|temporarily unavailable", re.IGNORECASE)),
)
UNKNOWN_REASON = "unknown_error"
BODY_TEXT_LIMIT = 500


def detect_error_page(title: str, body_text: str, hero_text: str) -> Tuple[bool, Optional[str]]:
    """
    Flags blocked, missing and failing pages so their fingerprints can be
    discarded. Returns (is_error_page, reason).
    """
    title = title or ""
    body_text = (body_text or "")[:BODY_TEXT_LIMIT]
    if not any(ERROR_PAGE_REGEX.search(t) for t in (title, body_text, hero_text or "")):
        return False, None

    haystack = body_text + title
    for reason, pattern in ERROR_REASONS:
        if pattern.search(haystack):
            logger.debug("Error page detected: %s", reason)
            return True, reason
    return True, UNKNOWN_REASON
