# src/htmlrefine/services/stylist_service.py
import logging
from typing import List, Tuple

from htmlrefine.dom.core import ElementNode, iter_elements
from htmlrefine.dom.elements.table import TABLE_SECTION_TAGS
from htmlrefine.dom.registry import DOMRegistry

logger = logging.getLogger(__name__)


class StylistService:
    """
    Applies the fixed visual class vocabulary to a tree, in place, and gives
    every data cell of every table a `data-label` for responsive rendering.
    Running it twice yields the same tree as running it once.
    """

    def __init__(self):
        DOMRegistry.discover()

    def apply_styles(self, root: ElementNode) -> int:
        """
        Overwrites the class of every element that has a registered style and
        labels table cells.

        Returns:
            int: The number of elements that received a class.
        """
        styled = 0
        tables: List[ElementNode] = []

        for element in iter_elements(root):
            style_class = DOMRegistry.get_style_class(element.tag)
            if style_class is not None:
                element.set_attr("class", style_class)
                styled += 1
            if element.tag == "table":
                tables.append(element)

        for table in tables:
            self.label_cells(table)

        logger.debug("Stylist styled %d elements across %d tables.", styled, len(tables))
        return styled

    # -------- Table post-processing --------

    @staticmethod
    def table_rows(table: ElementNode) -> List[Tuple[ElementNode, bool]]:
        """
        Rows that belong to `table` itself (not to nested tables), in document
        order, paired with whether the row sits inside a <thead>.
        """
        rows: List[Tuple[ElementNode, bool]] = []
        for child in table.child_elements():
            if child.tag == "tr":
                rows.append((child, False))
            elif child.tag in TABLE_SECTION_TAGS:
                in_head = child.tag == "thead"
                rows.extend((row, in_head) for row in child.child_elements("tr"))
        return rows

    def header_texts(self, table: ElementNode) -> Tuple[List[str], bool]:
        """
        Resolves the column headers of a table.

        Returns:
            Tuple[List[str], bool]: The header texts and whether the first row
            is a header row. Without a <thead> it always is, even when it only
            holds <td> cells.
        """
        rows = self.table_rows(table)
        head_cells = [cell for row, in_head in rows if in_head for cell in row.child_elements("th")]
        if head_cells:
            return self._cell_texts(head_cells), False

        if not rows:
            return [], True

        first_row = rows[0][0]
        first_th = first_row.child_elements("th")
        if first_th:
            return self._cell_texts(first_th), True

        column_count = len(first_row.child_elements("td"))
        return [f"Column {i + 1}" for i in range(column_count)], True

    @staticmethod
    def _cell_texts(cells: List[ElementNode]) -> List[str]:
        return [cell.text_content.strip() or f"Column {i + 1}" for i, cell in enumerate(cells)]

    def label_cells(self, table: ElementNode) -> int:
        """Sets `data-label` on every data cell by column position."""
        headers, first_row_is_header = self.header_texts(table)
        labelled = 0

        for position, (row, in_head) in enumerate(self.table_rows(table)):
            if in_head or (first_row_is_header and position == 0):
                continue
            for column, cell in enumerate(row.child_elements("td")):
                if column >= len(headers):
                    break
                cell.set_attr("data-label", headers[column])
                labelled += 1
        return labelled
