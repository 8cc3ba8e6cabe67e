# src/htmlrefine/errors.py


class ProcessingError(Exception):
    """Base class for all failures raised inside the refinement pipeline."""


class ParseError(ProcessingError):
    """The markup engine could not produce any tree for the input."""


class EmptyInputError(ProcessingError):
    """The input is empty or contains only whitespace."""


class EmptyResultError(ProcessingError):
    """
    A transformation produced a structurally empty output from non-empty input.
    Signals a pipeline defect; it is logged, never raised past an operation.
    """
