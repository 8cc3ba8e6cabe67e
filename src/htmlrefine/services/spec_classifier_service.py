# src/htmlrefine/services/spec_classifier_service.py
import logging
import re
from typing import Dict, List, Optional, Set, Tuple

from htmlrefine.dom.core import ElementNode, Node, TextNode, walk, walk_with_parent
from htmlrefine.dom.elements.heading import HEADING_TAGS
from htmlrefine.dom.elements.lists import LIST_TAGS
from .table_builder_service import TableBuilderService

logger = logging.getLogger(__name__)

SPEC_KEYWORDS = (
    "product specifications",
    "specifications",
    "tech specs",
    "technical specifications",
)

# Only the first of these levels that has any heading is scanned.
ANCHOR_HEADING_LEVELS = ("h1", "h2", "h3")

# "Battery Life 12 hours", "Weight 2 kg"
_WORDS_THEN_NUMBER = re.compile(r'^[\w\s]+ \d+')


def has_spec_keyword(text: str) -> bool:
    """Case-insensitive substring match against the specification keywords."""
    lowered = text.lower()
    return any(keyword in lowered for keyword in SPEC_KEYWORDS)


def looks_like_spec_item(text: str) -> bool:
    """True when a list item's text reads like a name/value pair."""
    return ':' in text or ' - ' in text or bool(_WORDS_THEN_NUMBER.match(text))


def _node_text(node: Node) -> str:
    return node.data if isinstance(node, TextNode) else node.text_content


class SpecClassifierService:
    """
    Detects lists that enumerate product specifications and hands them to the
    TableBuilderService.

    Two strategies run in order, first match wins per list:
      1. Heading-anchored: a heading mentioning specifications claims the
         next list among its following siblings.
      2. Pattern-anchored: a <ul> is claimed when its preceding sibling
         mentions specifications, or when more than half of its items look
         like name/value pairs.
    """

    def __init__(self, table_builder: Optional[TableBuilderService] = None, threshold: float = 0.5):
        self.table_builder = table_builder or TableBuilderService()
        self.threshold = threshold

    # -------- Classification --------

    @staticmethod
    def find_anchor_headings(root: ElementNode) -> List[Tuple[ElementNode, int]]:
        """
        Returns (parent, index) of every heading at the first non-empty level
        among h1, h2, h3, in document order.
        """
        by_level: Dict[str, List[Tuple[ElementNode, int]]] = {level: [] for level in ANCHOR_HEADING_LEVELS}
        for parent, index, node in walk_with_parent(root):
            if isinstance(node, ElementNode) and node.tag in by_level:
                by_level[node.tag].append((parent, index))

        for level in ANCHOR_HEADING_LEVELS:
            if by_level[level]:
                return by_level[level]
        return []

    @staticmethod
    def find_list_after_heading(parent: ElementNode, index: int) -> Optional[int]:
        """
        Walks the siblings following the heading at `parent.children[index]`.
        Returns the index of the first <ul>/<ol>, or None when another heading
        or the end of the parent comes first.
        """
        for sibling_index in range(index + 1, len(parent.children)):
            sibling = parent.children[sibling_index]
            if not isinstance(sibling, ElementNode):
                continue
            if sibling.tag in LIST_TAGS:
                return sibling_index
            if sibling.tag in HEADING_TAGS:
                return None
        return None

    @staticmethod
    def previous_sibling(parent: ElementNode, index: int) -> Optional[Node]:
        """The nearest preceding sibling, ignoring whitespace-only text."""
        for sibling_index in range(index - 1, -1, -1):
            sibling = parent.children[sibling_index]
            if isinstance(sibling, TextNode) and sibling.is_blank:
                continue
            return sibling
        return None

    def spec_score(self, list_element: ElementNode) -> Optional[float]:
        """Fraction of direct <li> items that look like specs; None for empty lists."""
        items = list_element.child_elements("li")
        if not items:
            return None
        matches = sum(1 for item in items if looks_like_spec_item(item.text_content))
        return matches / len(items)

    def is_pattern_spec_list(self, parent: ElementNode, index: int) -> bool:
        """Pattern-anchored test for the <ul> at `parent.children[index]`."""
        list_element = parent.children[index]
        if not isinstance(list_element, ElementNode) or not list_element.child_elements("li"):
            return False

        previous = self.previous_sibling(parent, index)
        if previous is not None and has_spec_keyword(_node_text(previous)):
            return True

        score = self.spec_score(list_element)
        return score is not None and score > self.threshold

    # -------- Restructuring --------

    def _replace(self, parent: ElementNode, index: int, detached: List[ElementNode], discarded: Set[int]) -> None:
        old = parent.children[index]
        self.table_builder.replace(parent, index)
        # Holding the detached list keeps its ids from being reused.
        detached.append(old)
        discarded.update(id(node) for node in walk(old))

    def restructure(self, root: ElementNode) -> int:
        """
        Converts every specification list under `root` into a table, in place.

        Returns:
            int: The number of lists converted.
        """
        detached: List[ElementNode] = []
        discarded: Set[int] = set()
        converted = 0

        # --- Heading-anchored ---
        for parent, heading_index in self.find_anchor_headings(root):
            if id(parent) in discarded:
                continue
            heading = parent.children[heading_index]
            if not has_spec_keyword(_node_text(heading)):
                continue
            list_index = self.find_list_after_heading(parent, heading_index)
            if list_index is None:
                logger.debug("Heading '%s' has no list before the next heading.", _node_text(heading).strip())
                continue
            self._replace(parent, list_index, detached, discarded)
            converted += 1

        # --- Pattern-anchored ---
        candidates = [
            (parent, index) for parent, index, node in walk_with_parent(root)
            if isinstance(node, ElementNode) and node.tag == "ul"
        ]
        for parent, index in candidates:
            if id(parent) in discarded:
                continue
            if self.is_pattern_spec_list(parent, index):
                self._replace(parent, index, detached, discarded)
                converted += 1

        logger.debug("Classifier converted %d specification lists.", converted)
        return converted
