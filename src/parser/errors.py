# src/parser/errors.py


class ParseError(Exception):
    """Raised when document markup or a script body cannot be parsed."""

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source
