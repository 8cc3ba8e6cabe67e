# src/htmlrefine/dom/registry.py
import importlib
import pkgutil
import logging
from typing import Dict, FrozenSet, List, Optional

from .core import ElementDefinition

logger = logging.getLogger(__name__)


class DOMRegistry:
    """
    Central registry for per-tag presentation policy.

    Dynamically discovers ElementDefinition objects from the modules of the
    'htmlrefine.dom.elements' package. A module exposes either a single
    `DEFINITION` or a list called `DEFINITIONS`. After discovery the registry
    is only read.
    """

    _style_classes: Dict[str, str] = {}
    _preserved_attrs: Dict[str, FrozenSet[str]] = {}
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Discovers and registers all element definitions found in the
        'htmlrefine.dom.elements' package. Safe to call repeatedly.
        """
        if cls._loaded:
            return

        try:
            import htmlrefine.dom.elements as elements_pkg

            for _, name, _ in pkgutil.iter_modules(elements_pkg.__path__):
                full_name = f"htmlrefine.dom.elements.{name}"
                try:
                    module = importlib.import_module(full_name)
                except Exception as e:
                    logger.error(f"Error loading module {name}: {e}")
                    continue

                definitions: List[ElementDefinition] = list(getattr(module, "DEFINITIONS", []))
                single = getattr(module, "DEFINITION", None)
                if isinstance(single, ElementDefinition):
                    definitions.append(single)

                for defn in definitions:
                    cls.register(defn)
                    logger.debug(f"Element definition loaded: {', '.join(defn.tag_names)}")

            cls._loaded = True
        except ImportError as e:
            logger.error(f"Could not find elements package: {e}")

    @classmethod
    def register(cls, defn: ElementDefinition) -> None:
        """Registers a single definition for each of its tag names."""
        for tag in defn.tag_names:
            if defn.style_class:
                cls._style_classes[tag] = defn.style_class
            if defn.embeddable:
                cls._preserved_attrs[tag] = defn.preserved_attrs

    @classmethod
    def get_style_class(cls, tag_name: str) -> Optional[str]:
        """Retrieves the fixed class string for a tag, or None if it has none."""
        return cls._style_classes.get(tag_name)

    @classmethod
    def get_preserved_attrs(cls, tag_name: str) -> FrozenSet[str]:
        """Attributes that survive sanitization on this tag (empty for most tags)."""
        return cls._preserved_attrs.get(tag_name, frozenset())
