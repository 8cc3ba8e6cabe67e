# src/htmlrefine/services/sanitize_service.py
import logging
from typing import FrozenSet

from htmlrefine.dom.core import ElementNode, iter_elements
from htmlrefine.dom.registry import DOMRegistry

logger = logging.getLogger(__name__)

PRESENTATION_ATTRIBUTES: FrozenSet[str] = frozenset({
    "style", "class", "id", "align", "bgcolor", "border",
    "cellpadding", "cellspacing", "width", "height",
})


class SanitizeService:
    """
    Strips presentation attributes from every element of a tree, in place.
    Elements are never removed or reordered; only attributes change.
    Embeddable elements keep the attributes they need to stay functional.
    """

    def __init__(self, stripped_attributes: FrozenSet[str] = PRESENTATION_ATTRIBUTES):
        DOMRegistry.discover()
        self.stripped_attributes = stripped_attributes

    def sanitize(self, root: ElementNode) -> int:
        """
        Sanitizes `root` and all of its descendants.

        Returns:
            int: The number of attributes removed.
        """
        removed = 0
        for element in iter_elements(root):
            preserved = DOMRegistry.get_preserved_attrs(element.tag)
            doomed = [
                name for name in element.attrs
                if name in self.stripped_attributes and name not in preserved
            ]
            for name in doomed:
                element.remove_attr(name)
            removed += len(doomed)

        logger.debug("Sanitizer removed %d attributes.", removed)
        return removed
