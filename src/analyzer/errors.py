# src/analyzer/errors.py
from parser.errors import ParseError

__all__ = ["AnalyzerError", "DuplicateDefinitionError", "ParseError"]


class AnalyzerError(Exception):
    """Base class for failures raised by the analyzer itself."""


class DuplicateDefinitionError(AnalyzerError):
    """Raised when an element or module name is registered a second time."""

    def __init__(self, kind: str, name: str):
        super().__init__(f"Duplicate {kind} definition: {name}")
        self.kind = kind
        self.name = name
