"""
Bounded tree walks and element predicates.

The predicates stand in for the CSS selectors a browser-side extractor would
use; they are plain callables so call sites can combine them freely.
"""
from typing import Callable, Iterator, Optional, Iterable

from .core import RenderNode

Predicate = Callable[[RenderNode], bool]


def walk_up(
        node: Optional[RenderNode],
        stop: Optional[Predicate] = None,
        limit: Optional[int] = None,
        include_self: bool = True
) -> Iterator[RenderNode]:
    """
    Yields the node (optionally) and its ancestors, innermost first.

    Args:
        node: Starting node.
        stop: Walking ends *before* yielding a node matching this predicate.
        limit: Maximum number of nodes yielded.
        include_self: Whether the starting node itself is yielded.
    """
    current = node if include_self else (node.parent if node else None)
    count = 0
    while current is not None:
        if stop is not None and stop(current):
            return
        if limit is not None and count >= limit:
            return
        yield current
        count += 1
        current = current.parent


def find_ancestor(
        node: Optional[RenderNode],
        match: Predicate,
        stop: Optional[Predicate] = None,
        limit: Optional[int] = None,
        include_self: bool = True
) -> Optional[RenderNode]:
    """Returns the first node of a bounded upward walk that matches."""
    for current in walk_up(node, stop=stop, limit=limit, include_self=include_self):
        if match(current):
            return current
    return None


def next_siblings(node: RenderNode) -> Iterator[RenderNode]:
    sibling = node.next_sibling
    while sibling is not None:
        yield sibling
        sibling = sibling.next_sibling


# --- Predicate builders ---


def is_tag(*tags: str) -> Predicate:
    wanted = {t.lower() for t in tags}
    return lambda node: node.tag in wanted


def has_role(*roles: str) -> Predicate:
    wanted = {r.lower() for r in roles}
    return lambda node: node.role in wanted


def attr_contains(name: str, needle: str) -> Predicate:
    """[name*='needle' i]"""
    needle = needle.lower()
    return lambda node: needle in node.get(name).lower()


def attr_equals(name: str, value: str) -> Predicate:
    """[name='value' i]"""
    value = value.lower()
    return lambda node: node.has_attr(name) and node.get(name).lower() == value


def attr_startswith(name: str, prefix: str) -> Predicate:
    return lambda node: node.get(name).startswith(prefix)


def has_attr(name: str) -> Predicate:
    return lambda node: node.has_attr(name)


def any_of(*predicates: Predicate) -> Predicate:
    return lambda node: any(p(node) for p in predicates)


def all_of(*predicates: Predicate) -> Predicate:
    return lambda node: all(p(node) for p in predicates)


def negate(predicate: Predicate) -> Predicate:
    return lambda node: not predicate(node)


def within(ancestor: Predicate, predicate: Predicate) -> Predicate:
    """Descendant combinator: `ancestor predicate`."""
    return lambda node: predicate(node) and any(ancestor(a) for a in node.ancestors())


def is_input(*types: str) -> Predicate:
    """input[type=...]; an input without a type attribute counts as 'text'."""
    wanted = {t.lower() for t in types}
    return lambda node: node.tag == "input" and (node.get("type", "text").lower() or "text") in wanted


# Frequently used selector equivalents
INTERACTIVE = any_of(is_tag("button", "a"), has_role("button"))
CTA_ELEMENT = any_of(is_tag("button", "a"), has_role("button"), is_input("submit"))
SECTION_BOUNDARY = is_tag("section", "header", "main", "article")


def count_matching(nodes: Iterable[RenderNode], predicate: Predicate) -> int:
    return sum(1 for node in nodes if predicate(node))
