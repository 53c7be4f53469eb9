import logging
from typing import Iterable, List

from ..dom.core import RenderNode
from .core import StackContext
from .registry import StackRegistry

logger = logging.getLogger(__name__)


def detect_stack(root: RenderNode, window_globals: Iterable[str] = ()) -> List[str]:
    """
    Evaluates every registered signature into an ordered set of stack tags.

    A rule is skipped when its tag is already present or suppressed by a
    detected tag; a new tag evicts the generic tags it suppresses, so
    'nextjs' and 'react' never appear together.
    """
    ctx = StackContext(root, window_globals)
    detected: List[str] = []

    for rule in StackRegistry.get_all_rules():
        tag = rule.stack_tag
        if tag in detected:
            continue
        if any(tag in StackRegistry.suppressed_by(d) for d in detected):
            continue
        if not rule(ctx):
            continue
        detected = [d for d in detected if d not in rule.suppresses]
        detected.append(tag)

    if detected:
        logger.debug(f"Detected stack: {', '.join(detected)}")
    return detected
