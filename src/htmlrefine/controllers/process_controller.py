# src/htmlrefine/controllers/process_controller.py
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Tuple

from pydantic import BaseModel

from htmlrefine.dom.builder import DOMBuilder
from htmlrefine.dom.core import ElementNode
from htmlrefine.dom.models import HTMLDocument
from htmlrefine.errors import EmptyInputError, EmptyResultError, ParseError
from htmlrefine.services.inspect_service import InspectService
from htmlrefine.services.sanitize_service import SanitizeService
from htmlrefine.services.spec_classifier_service import SpecClassifierService
from htmlrefine.services.stylist_service import StylistService

logger = logging.getLogger(__name__)


def has_content(doc: HTMLDocument) -> bool:
    """True when the parsed root holds an element or non-blank text."""
    return any(isinstance(child, ElementNode) or not child.is_blank for child in doc.root.children)


class ProcessResult(BaseModel):
    """Outcome of one operation. `output` is always safe to hand back to the caller."""
    operation: str
    output: str = ""
    fail_closed: bool = False
    error: Optional[str] = None


class ConversionResult(BaseModel):
    """Both passes of a full conversion: cleaned markup and its styled rendition."""
    cleaned: ProcessResult
    styled: ProcessResult


class ProcessController:
    """
    Orchestrates the refinement pipeline and owns its error boundary.

    Every public operation takes markup text and returns text. Empty input
    short-circuits to an empty result without parsing; any failure after
    that returns the original input unchanged (fail-closed). No exception
    leaves an operation.
    """

    def __init__(
            self,
            builder: Optional[DOMBuilder] = None,
            sanitizer: Optional[SanitizeService] = None,
            classifier: Optional[SpecClassifierService] = None,
            stylist: Optional[StylistService] = None,
            inspector: Optional[InspectService] = None,
    ) -> None:
        self.builder = builder or DOMBuilder()
        self.sanitizer = sanitizer or SanitizeService()
        self.classifier = classifier or SpecClassifierService()
        self.stylist = stylist or StylistService()
        self.inspector = inspector or InspectService()
        self._operations: Dict[str, Callable[[str], Tuple[str, bool]]] = {
            "clean": self._clean,
            "style": self._style,
            "inspect": self._inspect,
        }

    # -------- Pipeline stages --------
    # Each stage returns its output and whether the parsed input had any content.

    def _clean(self, raw: str) -> Tuple[str, bool]:
        doc = self.builder.parse(raw)
        self.sanitizer.sanitize(doc.root)
        self.classifier.restructure(doc.root)
        return self.builder.serialize(doc), has_content(doc)

    def _style(self, raw: str) -> Tuple[str, bool]:
        doc = self.builder.parse(raw)
        self.stylist.apply_styles(doc.root)
        return self.builder.serialize(doc), has_content(doc)

    def _inspect(self, raw: str) -> Tuple[str, bool]:
        doc = self.builder.parse(raw)
        return self.inspector.dump(doc), has_content(doc)

    # -------- Boundary --------

    @staticmethod
    def _require_content(raw: Optional[str]) -> None:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            raise EmptyInputError("Input is empty or whitespace-only.")

    @staticmethod
    def _fail_closed(operation: str, raw: object, error: Exception) -> ProcessResult:
        # Only text can be handed back; anything else was never valid markup.
        output = raw if isinstance(raw, str) else ""
        return ProcessResult(operation=operation, output=output, fail_closed=True, error=str(error))

    def process(self, operation: str, raw: Optional[str]) -> ProcessResult:
        """
        Runs a single operation ('clean', 'style' or 'inspect') behind the
        error boundary.

        Raises:
            ValueError: If the operation name is unknown.
        """
        handler = self._operations.get(operation)
        if handler is None:
            raise ValueError(f"Unknown operation '{operation}'. Expected one of: {', '.join(self._operations)}")

        try:
            self._require_content(raw)
        except EmptyInputError as e:
            logger.debug("Skipping '%s': %s", operation, e)
            return ProcessResult(operation=operation, output="")

        try:
            output, had_content = handler(raw)
            # A document with an empty <body> (or a comment-only fragment) is
            # legitimately empty.
            if had_content and not output.strip():
                raise EmptyResultError(
                    f"'{operation}' produced an empty result from {len(raw)} characters of input"
                )
            return ProcessResult(operation=operation, output=output)
        except EmptyResultError as e:
            logger.error("Pipeline defect: %s. Returning input unchanged.", e)
            return self._fail_closed(operation, raw, e)
        except ParseError as e:
            logger.warning("Could not parse input for '%s': %s. Returning input unchanged.", operation, e)
            return self._fail_closed(operation, raw, e)
        except Exception as e:
            logger.error("Error during '%s': %s", operation, e, exc_info=True)
            return self._fail_closed(operation, raw, e)

    # -------- External operations --------

    def sanitize_and_restructure(self, raw: str) -> str:
        """Strips presentation attributes and converts specification lists to tables."""
        return self.process("clean", raw).output

    def stylize(self, cleaned: str) -> str:
        """Applies the fixed class vocabulary and table cell labels."""
        return self.process("style", cleaned).output

    def inspect(self, raw: str) -> str:
        """Diagnostic tree dump of the parsed input."""
        return self.process("inspect", raw).output

    def convert(self, raw: str) -> ConversionResult:
        """Cleans the input, then styles the cleaned result."""
        cleaned = self.process("clean", raw)
        styled = self.process("style", cleaned.output)
        return ConversionResult(cleaned=cleaned, styled=styled)


# Stateless; shared by the module-level helpers below.
default_controller = ProcessController()


def sanitize_and_restructure(raw: str) -> str:
    return default_controller.sanitize_and_restructure(raw)


def stylize(cleaned: str) -> str:
    return default_controller.stylize(cleaned)


def inspect(raw: str) -> str:
    return default_controller.inspect(raw)


def convert(raw: str) -> ConversionResult:
    return default_controller.convert(raw)
