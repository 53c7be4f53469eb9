import re
from functools import cached_property
from typing import Callable, Iterable, List, Optional, Sequence, Set

from ..dom.core import RenderNode

MAX_CLASS_ELEMENTS = 500
MAX_INLINE_SCRIPTS = 30


def stack_signature(tag: str, suppresses: Optional[List[str]] = None):
    """
    Decorator to declare which stack tag a detection rule reports, and which
    generic tags it makes redundant. Facilitates auto-discovery by the
    StackRegistry.
    """
    def decorator(func):
        func.stack_tag = tag
        func.suppresses = tuple(suppresses or ())
        return func
    return decorator


class StackContext:
    """
    Read-only view of the whole document used by stack rules: element
    queries, the class-bearing element sample and the page's window globals.
    """

    def __init__(self, root: RenderNode, window_globals: Iterable[str] = ()):
        self.root = root
        self.nodes: List[RenderNode] = list(root.iter())
        self.window_globals = frozenset(window_globals)

    @cached_property
    def class_nodes(self) -> List[RenderNode]:
        """The first 500 elements carrying a class attribute."""
        return [n for n in self.nodes if n.has_attr("class")][:MAX_CLASS_ELEMENTS]

    @cached_property
    def scripts(self) -> List[RenderNode]:
        return [n for n in self.nodes if n.tag == "script"]

    def has_global(self, name: str) -> bool:
        return name in self.window_globals

    def exists(self, predicate: Callable[[RenderNode], bool]) -> bool:
        return any(predicate(n) for n in self.nodes)

    def by_id(self, element_id: str) -> Optional[RenderNode]:
        return next((n for n in self.nodes if n.element_id == element_id), None)

    def has_id_containing(self, needle: str) -> bool:
        return any(needle in n.element_id for n in self.nodes)

    def class_hits(self, pattern: re.Pattern) -> int:
        return sum(1 for n in self.class_nodes if pattern.search(n.get("class")))

    def any_class(self, pattern: re.Pattern) -> bool:
        return any(pattern.search(n.get("class")) for n in self.class_nodes)

    def meta_generator(self, needle: str) -> bool:
        """meta[name="generator"][content*=needle]"""
        return self.exists(
            lambda n: n.tag == "meta" and n.get("name") == "generator" and needle in n.get("content")
        )

    def meta_name_contains(self, needle: str) -> bool:
        """meta[name*=needle i]"""
        needle = needle.lower()
        return self.exists(lambda n: n.tag == "meta" and needle in n.get("name").lower())

    def script_src(self, needle: str) -> bool:
        return any(needle in s.get("src") for s in self.scripts)

    def link_href(self, needle: str) -> bool:
        return self.exists(lambda n: n.tag == "link" and needle in n.get("href"))

    def resource(self, *needles: str) -> bool:
        """script[src*=needle] or link[href*=needle] for any needle."""
        return any(self.script_src(n) or self.link_href(n) for n in needles)

    def inline_script_contains(self, needle: str) -> bool:
        return any(needle in (s.text or "") for s in self.scripts[:MAX_INLINE_SCRIPTS])

    def has_attr_prefix(self, prefix: str) -> bool:
        return self.exists(lambda n: any(name.startswith(prefix) for name in n.attrs))

    def has_any_attr(self, *names: str) -> bool:
        return self.exists(lambda n: any(n.has_attr(name) for name in names))


StackRule = Callable[[StackContext], bool]


class SignatureCatalog:
    """
    Configuration object binding a group of stack rules to its evaluation
    position. Catalogs with a lower order are evaluated first.
    """

    def __init__(self, group: str, order: int, signatures: Sequence[StackRule]):
        self.group = group
        self.order = order
        self.signatures = list(signatures)

        for rule in self.signatures:
            if not hasattr(rule, "stack_tag"):
                raise ValueError(f"Rule {rule.__name__} in catalog '{group}' lacks @stack_signature")

        self.tags: List[str] = [rule.stack_tag for rule in self.signatures]

    @property
    def suppressed(self) -> Set[str]:
        return {tag for rule in self.signatures for tag in rule.suppresses}
