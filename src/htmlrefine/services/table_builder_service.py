# src/htmlrefine/services/table_builder_service.py
import logging
from typing import Optional, Tuple

from htmlrefine.dom.core import ElementNode, TextNode

logger = logging.getLogger(__name__)

SPEC_HEADER = "Specification"
VALUE_HEADER = "Value"

# Tried in order; the first one present in the text wins.
SEPARATORS = (":", "-", "–")


def split_item_text(text: str) -> Tuple[str, str]:
    """
    Splits a list item's text into (specification, value) at the first
    occurrence of the highest-priority separator that is present.
    Without any separator the whole text is the specification.
    """
    for separator in SEPARATORS:
        if separator in text:
            name, _, value = text.partition(separator)
            return name.strip(), value.strip()
    return text.strip(), ""


def _cell(tag: str, text: str, label: Optional[str] = None) -> ElementNode:
    cell = ElementNode(tag=tag)
    if label is not None:
        cell.set_attr("data-label", label)
    if text:
        cell.append(TextNode(data=text))
    return cell


class TableBuilderService:
    """Rewrites a specification list into an equivalent two-column table."""

    def convert(self, list_element: ElementNode) -> ElementNode:
        """
        Builds a table with a (Specification, Value) header row and one body
        row per direct <li> of the list. The list itself is left untouched.
        """
        header_row = ElementNode(tag="tr")
        header_row.append(_cell("th", SPEC_HEADER))
        header_row.append(_cell("th", VALUE_HEADER))

        thead = ElementNode(tag="thead")
        thead.append(header_row)

        tbody = ElementNode(tag="tbody")
        for item in list_element.child_elements("li"):
            name, value = split_item_text(item.text_content)
            row = ElementNode(tag="tr")
            row.append(_cell("td", name, SPEC_HEADER))
            row.append(_cell("td", value, VALUE_HEADER))
            tbody.append(row)

        table = ElementNode(tag="table")
        table.append(thead)
        table.append(tbody)
        return table

    def replace(self, parent: ElementNode, index: int) -> ElementNode:
        """
        Converts the list at `parent.children[index]` and puts the table in its
        place. The list is discarded. Returns the new table.
        """
        list_element = parent.children[index]
        if not isinstance(list_element, ElementNode):
            raise TypeError(f"Expected a list element at position {index}, found text")

        table = self.convert(list_element)
        parent.replace_child_at(index, table)
        logger.debug("Converted <%s> with %d rows into a table.", list_element.tag, len(table.children[1].children))
        return table
