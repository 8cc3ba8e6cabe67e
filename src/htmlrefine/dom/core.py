# src/htmlrefine/dom/core.py
from typing import Annotated, Dict, Iterator, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator


class TextNode(BaseModel):
    """A literal run of character data. Text nodes never have children."""
    kind: Literal["text"] = "text"
    data: str = ""

    @property
    def is_blank(self) -> bool:
        return not self.data.strip()


class ElementNode(BaseModel):
    """
    Data model representing a DOM element in the simplified tree.

    The tree is owned top-down: an element owns its children and no node is
    shared between two parents. There are no parent pointers; traversals that
    need the parent use `walk_with_parent`.
    """
    kind: Literal["element"] = "element"
    tag: str
    attrs: Dict[str, str] = Field(default_factory=dict)
    children: List[Annotated[Union['ElementNode', TextNode], Field(discriminator="kind")]] = Field(
        default_factory=list
    )

    @field_validator("tag")
    @classmethod
    def normalize_tag(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("tag name must not be empty")
        return value

    @field_validator("attrs")
    @classmethod
    def normalize_attrs(cls, value: Dict[str, str]) -> Dict[str, str]:
        normalized: Dict[str, str] = {}
        for name, attr_value in value.items():
            key = name.strip().lower()
            if not key:
                raise ValueError("attribute name must not be empty")
            normalized[key] = "" if attr_value is None else str(attr_value)
        return normalized

    # --- Attribute access ---

    def get_attr(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attrs.get(name.lower(), default)

    def set_attr(self, name: str, value: str) -> None:
        key = name.strip().lower()
        if not key:
            raise ValueError("attribute name must not be empty")
        self.attrs[key] = value

    def remove_attr(self, name: str) -> bool:
        """Removes an attribute. Returns True if it was present."""
        return self.attrs.pop(name.lower(), None) is not None

    # --- Child mutation ---

    def append(self, node: 'Node') -> 'Node':
        self.children.append(node)
        return node

    def replace_child_at(self, index: int, node: 'Node') -> 'Node':
        """Replaces the child at `index` and returns the detached node."""
        old = self.children[index]
        self.children[index] = node
        return old

    def child_elements(self, tag: Optional[str] = None) -> List['ElementNode']:
        """Direct element children, optionally filtered by tag name."""
        return [
            child for child in self.children
            if isinstance(child, ElementNode) and (tag is None or child.tag == tag)
        ]

    # --- Text ---

    @property
    def text_content(self) -> str:
        """Concatenated text of all descendant text nodes, in document order."""
        return "".join(node.data for node in walk(self) if isinstance(node, TextNode))


Node = Union[ElementNode, TextNode]

ElementNode.model_rebuild()


def walk(root: Node) -> Iterator[Node]:
    """
    Pre-order, document-order traversal using an explicit stack.
    The root itself is yielded first.
    """
    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, ElementNode) and node.children:
            stack.extend(reversed(node.children))


def iter_elements(root: Node, tag: Optional[str] = None) -> Iterator[ElementNode]:
    """Pre-order traversal over elements only, optionally filtered by tag."""
    for node in walk(root):
        if isinstance(node, ElementNode) and (tag is None or node.tag == tag):
            yield node


def walk_with_parent(root: ElementNode) -> Iterator[Tuple[ElementNode, int, Node]]:
    """
    Yields (parent, index, node) for every descendant of `root` in document
    order. The root itself is not yielded since it has no parent here.
    """
    stack: List[Tuple[ElementNode, int]] = [(root, 0)]
    while stack:
        parent, index = stack.pop()
        if index >= len(parent.children):
            continue
        node = parent.children[index]
        stack.append((parent, index + 1))
        yield parent, index, node
        if isinstance(node, ElementNode) and node.children:
            stack.append((node, 0))


class ElementDefinition:
    """
    Configuration object binding one or more HTML tags to their presentation
    policy: the fixed style class and, for embeddable content, the attributes
    that must survive sanitization.
    """

    def __init__(
            self,
            tag_names: List[str],
            style_class: Optional[str] = None,
            embeddable: bool = False,
            preserved_attrs: Optional[List[str]] = None
    ):
        self.tag_names = [name.lower() for name in tag_names]
        self.style_class = style_class
        self.embeddable = embeddable
        self.preserved_attrs = frozenset(attr.lower() for attr in (preserved_attrs or []))
