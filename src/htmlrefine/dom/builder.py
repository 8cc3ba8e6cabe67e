# src/htmlrefine/dom/builder.py
import logging
import re
from typing import Iterable, List, Tuple, Union

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag, NavigableString
from bs4.dammit import EntitySubstitution
from bs4.element import Doctype, PageElement, PreformattedString
from bs4.formatter import HTMLFormatter

from .core import ElementNode, Node, TextNode
from .models import HTMLDocument
from ..errors import ParseError

logger = logging.getLogger(__name__)

# Minimal escaping (&, <, >), void elements rendered as <br> rather than <br/>.
FRAGMENT_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None
)

_FULL_DOCUMENT = re.compile(r'^\s*(<!doctype\s+html|<html\b)', re.IGNORECASE)


class DOMBuilder:
    """
    Adapter between markup text and the simplified node tree.

    Parsing and serialization go through BeautifulSoup; nothing outside this
    class touches the parser's objects, so the engine can be swapped without
    changing the pipeline services.
    """

    def __init__(self, features: str = "html.parser"):
        self.features = features

    @staticmethod
    def is_full_document(html: str) -> bool:
        """True when the text starts with a doctype or an <html> root."""
        return bool(_FULL_DOCUMENT.match(html))

    def parse(self, html: str) -> HTMLDocument:
        """
        Parses markup into an HTMLDocument.

        Fragments are parsed unwrapped (html.parser adds no <html>/<body> of
        its own) and hung under a synthetic <body> root that is never serialized.
        Raises ParseError only when the engine cannot produce a tree at all.
        """
        if not isinstance(html, str):
            raise ParseError(f"Expected markup text, got {type(html).__name__}")

        # Basic cleanup of potentially dirty HTML (e.g., BOM)
        clean_html = html.replace('\ufeff', '')
        is_fragment = not self.is_full_document(clean_html)

        try:
            soup = BeautifulSoup(clean_html, self.features, multi_valued_attributes=None)
        except ParserRejectedMarkup as e:
            raise ParseError(f"Markup rejected by parser: {e}") from e
        except Exception as e:
            raise ParseError(f"Parser failed: {e}") from e

        has_doctype = any(isinstance(item, Doctype) for item in soup.contents)
        root_tag_valid = soup.find('html') is not None

        if is_fragment:
            sources = list(soup.contents)
        else:
            container = soup.find('body') or soup.find('html') or soup
            sources = list(container.contents)

        root = self._build_tree(sources)
        logger.debug(
            "Parsed %s into %d top-level nodes.",
            "fragment" if is_fragment else "document", len(root.children)
        )
        return HTMLDocument(
            root=root,
            is_fragment=is_fragment,
            has_doctype=has_doctype,
            root_tag_valid=root_tag_valid
        )

    @staticmethod
    def _build_tree(sources: Iterable[PageElement]) -> ElementNode:
        """
        Builds the node tree from BeautifulSoup elements with an explicit stack.
        Comments, doctypes, declarations and CDATA are not part of the model.
        """
        root = ElementNode(tag='body')
        stack: List[Tuple[ElementNode, PageElement]] = [(root, item) for item in reversed(list(sources))]
        skipped = 0

        while stack:
            parent, item = stack.pop()
            if isinstance(item, Tag):
                element = ElementNode(tag=item.name, attrs=dict(item.attrs))
                parent.children.append(element)
                stack.extend((element, child) for child in reversed(item.contents))
            elif isinstance(item, PreformattedString):
                skipped += 1
            elif isinstance(item, NavigableString):
                parent.children.append(TextNode(data=str(item)))

        if skipped:
            logger.debug("Dropped %d comment/declaration nodes.", skipped)
        return root

    def serialize(self, node: Union[HTMLDocument, Node]) -> str:
        """
        Serializes a document (its content only, never the wrapper), an
        element (outer HTML) or a text node (escaped text).
        """
        nodes = node.root.children if isinstance(node, HTMLDocument) else [node]
        soup = BeautifulSoup("", self.features)
        container = soup.new_tag('body')

        stack: List[Tuple[Tag, Node]] = [(container, child) for child in reversed(nodes)]
        while stack:
            parent, item = stack.pop()
            if isinstance(item, TextNode):
                parent.append(NavigableString(item.data))
                continue
            tag = soup.new_tag(item.tag, attrs=dict(item.attrs))
            parent.append(tag)
            stack.extend((tag, child) for child in reversed(item.children))

        return container.decode_contents(formatter=FRAGMENT_FORMATTER)
