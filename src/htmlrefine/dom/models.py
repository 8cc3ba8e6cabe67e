# src/htmlrefine/dom/models.py
from pydantic import BaseModel

from .core import ElementNode


class HTMLDocument(BaseModel):
    """
    Represents one parsed input.

    `root` is the body container; its children are the content that was
    supplied. For fragments the container is a synthetic wrapper that is
    never serialized, for full documents it is the document's own <body>.
    """
    root: ElementNode
    is_fragment: bool = True
    has_doctype: bool = False
    root_tag_valid: bool = False
