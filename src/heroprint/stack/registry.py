# src/heroprint/stack/registry.py
import importlib
import pkgutil
import logging
from typing import Dict, List, Set

from .core import SignatureCatalog, StackRule

logger = logging.getLogger(__name__)


class StackRegistry:
    """
    Central registry for stack signature catalogs.

    Dynamically discovers the `CATALOG` objects in the
    'heroprint.stack.signatures' package and keeps them in evaluation order.
    """

    _catalogs: List[SignatureCatalog] = []
    _suppressions: Dict[str, Set[str]] = {}
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Scans `heroprint.stack.signatures` for modules exposing a `CATALOG`
        attribute (instance of `SignatureCatalog`) and registers them sorted
        by their `order`.
        """
        if cls._loaded:
            return

        try:
            import heroprint.stack.signatures as signatures_pkg

            catalogs = []
            for _, name, _ in pkgutil.iter_modules(signatures_pkg.__path__):
                full_name = f"heroprint.stack.signatures.{name}"
                try:
                    module = importlib.import_module(full_name)
                    if hasattr(module, "CATALOG") and isinstance(module.CATALOG, SignatureCatalog):
                        catalogs.append(module.CATALOG)
                        logger.debug(f"Stack catalog loaded: {module.CATALOG.group}")
                except Exception as e:
                    logger.error(f"Error loading module {name}: {e}")

            cls._catalogs = sorted(catalogs, key=lambda c: c.order)
            cls._suppressions = {}
            for catalog in cls._catalogs:
                for rule in catalog.signatures:
                    cls._suppressions.setdefault(rule.stack_tag, set()).update(rule.suppresses)
            cls._loaded = True
        except ImportError as e:
            logger.error(f"Could not find signatures package: {e}")

    @classmethod
    def get_catalogs(cls) -> List[SignatureCatalog]:
        cls.discover()
        return cls._catalogs

    @classmethod
    def get_all_rules(cls) -> List[StackRule]:
        """All rules across catalogs, in evaluation order."""
        return [rule for catalog in cls.get_catalogs() for rule in catalog.signatures]

    @classmethod
    def suppressed_by(cls, tag: str) -> Set[str]:
        """Generic tags made redundant by `tag`."""
        cls.discover()
        return cls._suppressions.get(tag, set())

    @classmethod
    def get_all_tags(cls) -> List[str]:
        return [tag for catalog in cls.get_catalogs() for tag in catalog.tags]
