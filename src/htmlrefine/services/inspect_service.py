# src/htmlrefine/services/inspect_service.py
from typing import List, Tuple, Union

from htmlrefine.dom.core import Node, TextNode
from htmlrefine.dom.models import HTMLDocument

INDENT = "  "


class InspectService:
    """
    Renders a tree as an indented text dump for operators. Read-only.

    Example:
        <h2 attributes: []>
          "Product Specificatio..."
        <ul attributes: [class]>
          <li attributes: []>
    """

    def __init__(self, preview_length: int = 20):
        self.preview_length = preview_length

    def preview(self, text: str) -> str:
        text = text.strip()
        if len(text) > self.preview_length:
            return f'"{text[:self.preview_length]}..."'
        return f'"{text}"'

    def dump(self, node: Union[HTMLDocument, Node]) -> str:
        """Dumps an element (or a document's content) one line per node."""
        top = node.root.children if isinstance(node, HTMLDocument) else [node]
        lines: List[str] = []
        stack: List[Tuple[Node, int]] = [(child, 0) for child in reversed(top)]

        while stack:
            current, depth = stack.pop()
            if isinstance(current, TextNode):
                if not current.is_blank:
                    lines.append(f"{INDENT * depth}{self.preview(current.data)}")
                continue
            names = ", ".join(current.attrs)
            lines.append(f"{INDENT * depth}<{current.tag} attributes: [{names}]>")
            stack.extend((child, depth + 1) for child in reversed(current.children))

        return "\n".join(lines)
